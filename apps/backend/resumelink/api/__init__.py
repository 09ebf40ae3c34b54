from .router import pages_router, v1_router

__all__ = ["pages_router", "v1_router"]
