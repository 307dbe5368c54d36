"""Unit tests for pricing service web route modules.

Routes are exercised through FastAPI's TestClient with the service
dependency overridden, so no database is needed.
"""
