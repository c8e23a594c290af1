"""Text extraction from fetched pages."""

from .text import (
    MAX_TEXT_CHARS,
    MIN_TEXT_CHARS,
    decode_entities,
    extract_visible_text,
    html_to_text,
)

__all__ = [
    "MAX_TEXT_CHARS",
    "MIN_TEXT_CHARS",
    "decode_entities",
    "extract_visible_text",
    "html_to_text",
]
