import logging
import os
from pathlib import Path
from urllib.parse import quote, unquote

from fastapi.concurrency import run_in_threadpool

from ..exceptions import StorageConflictError, StoreError

logger = logging.getLogger(__name__)


class LocalBlobStorage:
    """Blob bucket kept in a directory and served under ``/files``.

    Paths are bucket-relative, e.g. ``{user_id}/{short_id}-{file_name}``.
    """

    def __init__(self, root: str | os.PathLike, public_base_url: str, prefix: str = "/files") -> None:
        self.root = Path(root).resolve()
        self.public_base_url = public_base_url.rstrip("/")
        self.prefix = "/" + prefix.strip("/")

    def _resolve(self, path: str) -> Path:
        target = (self.root / path).resolve()
        if target == self.root or self.root not in target.parents:
            raise StoreError(f"Blob path escapes storage root: {path!r}")
        return target

    def _write(self, path: str, data: bytes) -> None:
        target = self._resolve(path)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            with target.open("xb") as f:
                f.write(data)
        except FileExistsError as e:
            raise StorageConflictError(f"Blob already exists: {path}") from e
        except OSError as e:
            raise StoreError(f"Blob upload failed for {path}: {e}") from e

    def _unlink(self, path: str) -> None:
        target = self._resolve(path)
        try:
            target.unlink(missing_ok=True)
        except OSError as e:
            raise StoreError(f"Blob removal failed for {path}: {e}") from e

    async def upload(self, path: str, data: bytes) -> None:
        """Store *data* at *path*; an existing blob is never overwritten."""
        await run_in_threadpool(self._write, path, data)
        logger.debug("stored blob %s (%d bytes)", path, len(data))

    async def remove(self, path: str) -> None:
        await run_in_threadpool(self._unlink, path)

    def public_url(self, path: str) -> str:
        return f"{self.public_base_url}{self.prefix}/{quote(path)}"

    def path_from_url(self, url: str) -> str | None:
        """Inverse of :meth:`public_url`; ``None`` for foreign URLs."""
        head = f"{self.public_base_url}{self.prefix}/"
        if not url.startswith(head):
            return None
        return unquote(url[len(head):])
