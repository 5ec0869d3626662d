"""Splitting header-style address strings and rendering them back."""

from __future__ import annotations

import logging
from email.header import decode_header, make_header
from email.headerregistry import Address
from email.utils import formataddr, getaddresses
from typing import Iterable, List, Tuple

from .idn import has_8bit_chars
from .utils.charset_helper import UTF8
from .validators import Pattern, validate

logger = logging.getLogger(__name__)


def _decode_name(name: str) -> str:
    if "=?" not in name:
        return name.strip()
    try:
        return str(make_header(decode_header(name))).strip()
    except (LookupError, UnicodeDecodeError):
        logger.debug("undecodable display name %r", name)
        return name.strip()


def parse_addresses(text: str, *, validator: Pattern = None) -> List[Tuple[str, str]]:
    """Return ``(address, name)`` pairs found in ``text``.

    ``text`` is a header value such as ``"Joe <joe@example.com>, ann@example.com"``.
    RFC 2047 encoded display names are decoded. Entries that fail validation
    are skipped.
    """

    pairs: List[Tuple[str, str]] = []
    for name, address in getaddresses([text or ""]):
        address = address.strip()
        if not address:
            continue
        if not validate(address, validator):
            logger.debug("skipping invalid address %r", address)
            continue
        pairs.append((address, _decode_name(name)))
    return pairs


def format_address(address: str, name: str = "", charset: str | None = None) -> str:
    """Render one address for a header, encoding a non-ASCII name.

    The name is RFC 2047 encoded with ``charset``, falling back to UTF-8 when
    the charset cannot represent it. An address that still has a Unicode
    domain (SMTPUTF8 transports) is rendered without encoding.
    """

    if not name:
        return address
    if has_8bit_chars(address):
        return str(Address(display_name=name, addr_spec=address))
    label = (charset or UTF8).strip().lower()
    try:
        return formataddr((name, address), charset=label)
    except (UnicodeEncodeError, LookupError):
        return formataddr((name, address), charset=UTF8)


def format_address_list(pairs: Iterable[Tuple[str, str]], charset: str | None = None) -> str:
    return ", ".join(format_address(address, name, charset) for address, name in pairs)


__all__ = ["format_address", "format_address_list", "parse_addresses"]
