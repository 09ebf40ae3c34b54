from .pages import pages_router
from .v1 import v1_router

__all__ = ["pages_router", "v1_router"]
