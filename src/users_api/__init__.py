"""Users API - in-memory user management service."""

__version__ = "0.1.0"
