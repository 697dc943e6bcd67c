"""API routers for the developer portal permission service."""

from . import health
from . import permissions

__all__ = [
    "health",
    "permissions",
]
