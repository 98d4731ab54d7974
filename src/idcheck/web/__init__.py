"""Web application module for the idcheck validation service."""

from .api import app

__all__ = ["app"]
