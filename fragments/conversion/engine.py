"""Dispatch of (source, target) media type pairs to byte transforms."""

from typing import Callable, Dict, Tuple

from common.logging_config import get_logger
from fragments.content_types import MediaType, is_image, is_text
from fragments.conversion.images import convert_image
from fragments.conversion.text import as_text, markdown_to_html, markdown_to_text, strip_tags
from fragments.exceptions import UnsupportedConversionError

logger = get_logger(__name__)

Transform = Callable[[bytes], bytes]

TEXT_TRANSFORMS: Dict[Tuple[MediaType, MediaType], Transform] = {
    (MediaType.TEXT_MARKDOWN, MediaType.TEXT_HTML): markdown_to_html,
    (MediaType.TEXT_MARKDOWN, MediaType.TEXT_PLAIN): markdown_to_text,
    (MediaType.TEXT_HTML, MediaType.TEXT_PLAIN): strip_tags,
}


class ConversionEngine:
    """
    Performs the byte-level transformation between two supported media types.

    Callers are expected to have checked the pair against CONVERSIONS first;
    a pair with no transform raises rather than passing the bytes through.
    """

    def convert(self, data: bytes, source: MediaType, target: MediaType) -> bytes:
        transform = TEXT_TRANSFORMS.get((source, target))
        if transform is not None:
            result = transform(data)
        elif is_text(source) and target is MediaType.TEXT_PLAIN:
            result = as_text(data)
        elif source is target and is_text(source):
            result = bytes(data)
        elif is_image(source) and is_image(target):
            result = convert_image(data, target)
        else:
            logger.warning(f"No conversion from {source.value} to {target.value}")
            raise UnsupportedConversionError(f"Cannot convert {source.value} to {target.value}")

        logger.debug(f"Converted {source.value} -> {target.value} ({len(data)} -> {len(result)} bytes)")
        return result
