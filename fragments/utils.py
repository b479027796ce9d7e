"""Utility helper functions for the Fragments service."""

import hashlib
import uuid
from datetime import datetime, timezone
from typing import Optional, Tuple


def generate_uuid() -> str:
    """
    Generate a new UUID4 string.

    Returns:
        UUID4 string
    """
    return str(uuid.uuid4())


def utc_now() -> datetime:
    """
    Get the current time as a timezone-aware UTC datetime.
    """
    return datetime.now(timezone.utc)


def to_iso(value: datetime) -> str:
    """
    Format a datetime as ISO-8601 with microsecond precision and a Z suffix.
    """
    return value.astimezone(timezone.utc).isoformat(timespec="microseconds").replace("+00:00", "Z")


def parse_iso(value: str) -> datetime:
    """
    Parse an ISO-8601 timestamp, accepting a trailing Z.

    Naive timestamps are taken to be UTC.
    """
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def hash_owner(username: str) -> str:
    """
    Derive the owner id for an authenticated principal.

    Args:
        username: Authenticated username or email

    Returns:
        SHA-256 hex digest of the username
    """
    return hashlib.sha256(username.encode("utf-8")).hexdigest()


def split_extension(id_with_ext: str) -> Tuple[str, Optional[str]]:
    """
    Split a fragment path segment into id and extension at the last dot.

    A trailing dot is not an extension.

    Args:
        id_with_ext: Path segment such as "abc" or "abc.html"

    Returns:
        (id, extension) where extension is None when absent
    """
    index = id_with_ext.rfind(".")
    if index == -1 or index == len(id_with_ext) - 1:
        return id_with_ext, None
    return id_with_ext[:index], id_with_ext[index + 1:]
