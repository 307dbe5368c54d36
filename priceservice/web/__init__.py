"""HTTP API for the pricing service."""
