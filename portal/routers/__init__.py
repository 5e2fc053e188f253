"""API routers."""

from portal.routers import admin, advisory, health, papers, users

__all__ = ["admin", "advisory", "health", "papers", "users"]
