"""FastAPI application entry point - delegates to app.main."""

from app.main import app

__all__ = ["app"]
