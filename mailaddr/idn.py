"""Conversion of internationalised domains to their ASCII-compatible form."""

from __future__ import annotations

import logging
import unicodedata

import idna

from .config import _bool
from .utils.charset_helper import decode_text

logger = logging.getLogger(__name__)


def idn_supported() -> bool:
    """Return ``True`` unless ``$MAILADDR_IDN_ENABLE`` switches the backend off."""

    return _bool("MAILADDR_IDN_ENABLE", True)


def has_8bit_chars(text: str) -> bool:
    return any(ord(ch) > 0x7F for ch in text)


def encode_domain(domain: str, *, enabled: bool = True) -> str:
    """Return ``domain`` in ASCII-compatible encoding.

    ASCII input is returned unchanged, including already encoded ``xn--``
    labels. Unicode input is NFC-normalised, UTS #46 mapped (which folds
    case) and IDNA2008 encoded label by label. With ``enabled=False`` or
    when a label cannot be encoded the domain is returned as given.
    """

    if not has_8bit_chars(domain) or not enabled:
        return domain
    try:
        return idna.encode(unicodedata.normalize("NFC", domain), uts46=True).decode("ascii")
    except UnicodeError as exc:
        logger.debug("idna encoding failed for %r: %s", domain, exc)
        return domain


def punyencode_address(
    address: str | bytes, charset: str | None = None, *, enabled: bool = True
) -> str:
    """Encode the domain part of ``address``; the local part is kept as is.

    ``bytes`` input is first decoded with ``charset``. The split happens at
    the last ``@``.
    """

    text = decode_text(address, charset)
    local, at, domain = text.rpartition("@")
    if not at:
        return text
    return f"{local}@{encode_domain(domain, enabled=enabled)}"


__all__ = [
    "encode_domain",
    "has_8bit_chars",
    "idn_supported",
    "punyencode_address",
]
