"""API routers package."""

from apps.api.routers import app, auth, files, users

__all__ = ["app", "auth", "files", "users"]
