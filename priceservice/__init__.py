"""Pricing service: reconciles overlapping price validity intervals per article."""

__version__ = "1.0.0"
