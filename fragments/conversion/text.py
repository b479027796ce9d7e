"""Text transforms: Markdown rendering and tag stripping."""

import re

import markdown

TAG_RE = re.compile(r"<[^>]*>")


def markdown_to_html(data: bytes) -> bytes:
    html = markdown.markdown(data.decode("utf-8", errors="replace"))
    return html.encode("utf-8")


def strip_tags(data: bytes) -> bytes:
    """
    Remove markup tags without parsing the document.

    Whitespace left behind by removed tags is kept as-is.
    """
    text = TAG_RE.sub("", data.decode("utf-8", errors="replace"))
    return text.encode("utf-8")


def markdown_to_text(data: bytes) -> bytes:
    return strip_tags(markdown_to_html(data))


def as_text(data: bytes) -> bytes:
    return bytes(data)
