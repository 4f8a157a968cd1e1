"""HTTP surface of the Still Grateful API."""

from .app import create_app
from .routes import CORS_HEADERS, PREFLIGHT_HEADERS

__all__ = ["create_app", "CORS_HEADERS", "PREFLIGHT_HEADERS"]
