"""Expose the users FastAPI router."""

from .users_router import router

__all__ = ["router"]
