"""Byte-to-text decoding for documentation sources."""

from __future__ import annotations

from charset_normalizer import from_bytes


def decode_document(raw: bytes) -> str:
    """Decode raw document bytes, preferring UTF-8 and falling back to detection."""

    try:
        return raw.decode("utf-8-sig")
    except UnicodeDecodeError:
        pass

    best = from_bytes(raw).best()
    if best and best.encoding:
        return raw.decode(best.encoding, errors="replace")
    return raw.decode("utf-8", errors="replace")


def as_text(source: bytes | str) -> str:
    if isinstance(source, str):
        return source
    return decode_document(source)
