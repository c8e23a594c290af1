"""
Visible-text extraction from HTML.

Regex based: pages are only scanned for keywords, so no DOM is built.
"""

from __future__ import annotations

import re

MAX_TEXT_CHARS = 100_000
MIN_TEXT_CHARS = 50

_HIDDEN_ELEMENTS = [
    re.compile(rf"<{tag}[^>]*>[\s\S]*?</{tag}>", re.IGNORECASE)
    for tag in ("script", "style", "noscript")
]
_TAG = re.compile(r"<[^>]+>")
_NUMERIC_ENTITY = re.compile(r"&#(\d+);")
_WHITESPACE = re.compile(r"\s+")
_SURROGATE = re.compile(r"[\ud800-\udfff]")

_NAMED_ENTITIES = (
    ("&nbsp;", " "),
    ("&amp;", "&"),
    ("&lt;", "<"),
    ("&gt;", ">"),
    ("&quot;", '"'),
    ("&#39;", "'"),
)


def _decode_numeric(match: re.Match[str]) -> str:
    try:
        return chr(int(match.group(1)))
    except (ValueError, OverflowError):
        return match.group(0)


def _join_surrogates(text: str) -> str:
    # Pairs such as &#55357;&#56832; become one code point; strays become U+FFFD.
    return text.encode("utf-16-le", "surrogatepass").decode("utf-16-le", "replace")


def decode_entities(text: str) -> str:
    """Decode the small set of entities that commonly appear in page text."""
    for entity, replacement in _NAMED_ENTITIES:
        text = text.replace(entity, replacement)
    text = _NUMERIC_ENTITY.sub(_decode_numeric, text)
    if _SURROGATE.search(text):
        text = _join_surrogates(text)
    return text


def html_to_text(html: str, max_chars: int = MAX_TEXT_CHARS) -> str:
    """Strip an HTML document down to its visible text.

    Removes script/style/noscript blocks with their content, replaces the
    remaining tags with spaces, decodes entities, collapses whitespace and
    truncates to max_chars.
    """
    text = html
    for pattern in _HIDDEN_ELEMENTS:
        text = pattern.sub("", text)

    text = _TAG.sub(" ", text)
    text = decode_entities(text)
    text = _WHITESPACE.sub(" ", text).strip()

    if len(text) > max_chars:
        text = text[:max_chars]

    return text


def extract_visible_text(
    html: str,
    max_chars: int = MAX_TEXT_CHARS,
    min_chars: int = MIN_TEXT_CHARS,
) -> str | None:
    """Extract visible text, or None when there is no meaningful content.

    Args:
        html: Page body
        max_chars: Hard cap on the returned text
        min_chars: Results shorter than this are discarded

    Returns:
        Cleaned text, or None if shorter than min_chars
    """
    text = html_to_text(html, max_chars=max_chars)
    if len(text) < min_chars:
        return None
    return text
