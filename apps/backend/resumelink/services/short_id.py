import secrets
import string

from ..core.config import settings

# Same 64-symbol URL-safe alphabet nanoid uses.
ALPHABET = string.ascii_letters + string.digits + "_-"


def generate_short_id(length: int | None = None) -> str:
    """Return a random URL-safe token of *length* characters."""
    size = settings.SHORT_ID_LENGTH if length is None else length
    if size < 1:
        raise ValueError("short id length must be positive")
    return "".join(secrets.choice(ALPHABET) for _ in range(size))
