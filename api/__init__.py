"""
Sportiko admin API package.

Provides the FastAPI application for the Sportiko trainer platform.
"""

from .app import app, create_app

__all__ = ["app", "create_app"]
