"""
Content fingerprinting for change detection.

The hash only gates the "content unchanged" skip in the crawl loop, so a
cheap non-cryptographic hash is enough. It is the classic 32-bit
``h * 31 + c`` string hash over UTF-16 code units, rendered as signed hex,
which keeps fingerprints stable with rows written by earlier deployments.
"""

from __future__ import annotations

_INT32_MASK = 0xFFFFFFFF


def _to_int32(value: int) -> int:
    value &= _INT32_MASK
    return value - 0x1_0000_0000 if value & 0x8000_0000 else value


def _utf16_code_units(text: str):
    data = text.encode("utf-16-le", errors="surrogatepass")
    for i in range(0, len(data), 2):
        yield data[i] | (data[i + 1] << 8)


def content_hash(text: str) -> str:
    """Compute the fingerprint of extracted text.

    Examples:
        >>> content_hash("")
        '0'
        >>> content_hash("a")
        '61'
    """
    h = 0
    for unit in _utf16_code_units(text):
        h = _to_int32((h << 5) - h + unit)

    if h < 0:
        return f"-{-h:x}"
    return f"{h:x}"
