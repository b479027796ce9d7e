"""Supported media types and the legal conversion graph between them."""

import re
from enum import Enum
from typing import Dict, Optional, Tuple

from common.constants import EXTENSION_MEDIA_TYPES
from fragments.exceptions import UnsupportedTypeError


class MediaType(str, Enum):
    TEXT_PLAIN = "text/plain"
    TEXT_MARKDOWN = "text/markdown"
    TEXT_HTML = "text/html"
    APPLICATION_JSON = "application/json"
    IMAGE_PNG = "image/png"
    IMAGE_JPEG = "image/jpeg"
    IMAGE_WEBP = "image/webp"
    IMAGE_GIF = "image/gif"
    IMAGE_AVIF = "image/avif"


IMAGE_TYPES: Tuple[MediaType, ...] = (
    MediaType.IMAGE_PNG,
    MediaType.IMAGE_JPEG,
    MediaType.IMAGE_WEBP,
    MediaType.IMAGE_GIF,
    MediaType.IMAGE_AVIF,
)

# Source type -> legal target types, in preference order
CONVERSIONS: Dict[MediaType, Tuple[MediaType, ...]] = {
    MediaType.TEXT_PLAIN: (MediaType.TEXT_PLAIN,),
    MediaType.TEXT_MARKDOWN: (MediaType.TEXT_MARKDOWN, MediaType.TEXT_HTML, MediaType.TEXT_PLAIN),
    MediaType.TEXT_HTML: (MediaType.TEXT_HTML, MediaType.TEXT_PLAIN),
    MediaType.APPLICATION_JSON: (MediaType.APPLICATION_JSON, MediaType.TEXT_PLAIN),
    **{image_type: IMAGE_TYPES for image_type in IMAGE_TYPES},
}

_TOKEN = r"[!#$%&'*+.^_`|~0-9A-Za-z-]+"
_QUOTED = r'"(?:[^"\\]|\\.)*"'
_TYPE_RE = re.compile(rf"^\s*({_TOKEN})/({_TOKEN})\s*(.*)$")
_PARAM_RE = re.compile(rf"^;\s*({_TOKEN})\s*=\s*({_TOKEN}|{_QUOTED})\s*")


def parse_media_type(value: str) -> Tuple[str, Dict[str, str]]:
    """
    Parse a Content-Type style value into its base type and parameters.

    Args:
        value: Header value such as "text/plain; charset=utf-8"

    Returns:
        (base_type, params) with the base type and parameter names lower-cased

    Raises:
        ValueError: If the value is not a well-formed media type
    """
    if not isinstance(value, str):
        raise ValueError("media type must be a string")

    match = _TYPE_RE.match(value)
    if match is None:
        raise ValueError(f"invalid media type: {value!r}")

    base_type = f"{match.group(1)}/{match.group(2)}".lower()
    rest = match.group(3)
    params: Dict[str, str] = {}

    while rest:
        param = _PARAM_RE.match(rest)
        if param is None:
            raise ValueError(f"invalid media type parameters: {value!r}")
        name, raw = param.group(1).lower(), param.group(2)
        if raw.startswith('"'):
            raw = re.sub(r"\\(.)", r"\1", raw[1:-1])
        params[name] = raw
        rest = rest[param.end():]

    return base_type, params


def is_supported_type(value) -> bool:
    """
    Check whether a media type value names a supported fragment type.

    Parameters such as charset are ignored. Malformed input is unsupported.
    """
    try:
        base_type, _ = parse_media_type(value)
    except ValueError:
        return False
    return base_type in _SUPPORTED


def normalize(value: str) -> MediaType:
    """
    Reduce a media type value to its supported base type.

    Raises:
        UnsupportedTypeError: If the value is malformed or not supported
    """
    try:
        base_type, _ = parse_media_type(value)
    except ValueError as e:
        raise UnsupportedTypeError(f"unsupported fragment type: {value}") from e
    if base_type not in _SUPPORTED:
        raise UnsupportedTypeError(f"unsupported fragment type: {value}")
    return MediaType(base_type)


def is_text(media_type: MediaType) -> bool:
    return media_type.value.startswith("text/") or media_type is MediaType.APPLICATION_JSON


def is_image(media_type: MediaType) -> bool:
    return media_type in IMAGE_TYPES


def type_for_extension(extension: str) -> Optional[MediaType]:
    """
    Map a file extension (without the dot) to its media type, or None.
    """
    media_type = EXTENSION_MEDIA_TYPES.get(extension.lower())
    return MediaType(media_type) if media_type else None


_SUPPORTED = frozenset(media_type.value for media_type in MediaType)
