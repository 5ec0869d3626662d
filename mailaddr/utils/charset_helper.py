"""Decoding of byte strings handed over with a declared message charset."""

from __future__ import annotations

import codecs
import logging

from charset_normalizer import from_bytes

logger = logging.getLogger(__name__)

UTF8 = "utf-8"


def canonical_charset(charset: str | None) -> str:
    """Return the codec name Python uses for ``charset`` (``""`` if unknown)."""

    if not charset:
        return ""
    try:
        return codecs.lookup(charset.strip()).name
    except LookupError:
        return ""


def is_utf8(charset: str | None) -> bool:
    return canonical_charset(charset) == UTF8


def decode_text(data: bytes | str, charset: str | None = None) -> str:
    """Decode ``data`` using ``charset`` with a best-effort fallback.

    ``str`` input is returned untouched. Bytes that do not decode with the
    declared charset are handed to charset-normalizer; if detection also
    fails the UTF-8 decode with replacement characters is returned.
    """

    if isinstance(data, str):
        return data
    if not data:
        return ""
    codec = canonical_charset(charset)
    if codec:
        try:
            return data.decode(codec)
        except UnicodeDecodeError:
            logger.debug("bytes not valid %s, detecting charset", codec)
    best = from_bytes(data).best()
    if best is not None:
        return str(best)
    return data.decode(UTF8, "replace")


__all__ = ["UTF8", "canonical_charset", "decode_text", "is_utf8"]
