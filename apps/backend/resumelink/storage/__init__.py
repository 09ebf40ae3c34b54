from .local import LocalBlobStorage

__all__ = ["LocalBlobStorage"]
