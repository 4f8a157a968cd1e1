"""Still Grateful API: anonymous gratitude message relay."""

__version__ = "0.1.0"
