"""Snippet extraction around a matched keyword."""

from __future__ import annotations

ELLIPSIS = "..."


def extract_snippet(text: str, keyword: str, context_chars: int = 150) -> str:
    """Return the text surrounding the first occurrence of keyword.

    Up to context_chars characters are kept on each side; an ellipsis marks
    each side that was cut. When the keyword cannot be found the first
    2 * context_chars characters are returned instead.
    """
    index = text.lower().find(keyword.lower())
    if index == -1:
        return text[: context_chars * 2]

    start = max(0, index - context_chars)
    end = min(len(text), index + len(keyword) + context_chars)

    snippet = text[start:end]
    if start > 0:
        snippet = ELLIPSIS + snippet
    if end < len(text):
        snippet = snippet + ELLIPSIS
    return snippet
