"""User registration and login HTTP service with JWT authentication."""

__version__ = "0.1.0"