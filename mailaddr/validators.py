"""Syntax validation for e-mail addresses."""

from __future__ import annotations

import logging
import re
from typing import Callable, Union

from email_validator import EmailNotValidError, validate_email

from .config import DEFAULT_VALIDATOR

logger = logging.getLogger(__name__)

# WHATWG ``input[type=email]`` grammar; domain labels may carry non-ASCII
# characters because ASCII conversion happens later, in :mod:`mailaddr.idn`.
_LABEL = r"[a-zA-Z0-9\u0080-\U0010ffff](?:[a-zA-Z0-9\u0080-\U0010ffff-]{0,61}[a-zA-Z0-9\u0080-\U0010ffff])?"
HTML5_RE = re.compile(
    r"^[a-zA-Z0-9.!#$%&'*+/=?^_`{|}~-]+@" + _LABEL + r"(?:\." + _LABEL + r")*$"
)

Validator = Callable[[str], bool]
Pattern = Union[str, Validator, None]


def _check_email_validator(address: str) -> bool:
    try:
        validate_email(address, check_deliverability=False)
    except EmailNotValidError as exc:
        logger.debug("email-validator rejected %r: %s", address, exc)
        return False
    return True


def _check_html5(address: str) -> bool:
    return bool(HTML5_RE.match(address))


def _check_noregex(address: str) -> bool:
    at = address.find("@")
    return len(address) >= 3 and 1 <= at < len(address) - 1


VALIDATORS: dict[str, Validator] = {
    "email_validator": _check_email_validator,
    "html5": _check_html5,
    "noregex": _check_noregex,
}


def _dots_ok(local: str, domain: str) -> bool:
    if local.endswith("."):
        return False
    if domain.startswith(".") or domain.endswith("."):
        return False
    return ".." not in domain


def resolve_validator(pattern: Pattern = None) -> Validator:
    """Return the checker registered for ``pattern``.

    Callables are used as-is; unknown names fall back to the default.
    """

    if callable(pattern):
        return pattern
    name = (pattern or DEFAULT_VALIDATOR).strip().lower()
    checker = VALIDATORS.get(name)
    if checker is None:
        logger.debug("unknown validator %r, using %s", pattern, DEFAULT_VALIDATOR)
        checker = VALIDATORS[DEFAULT_VALIDATOR]
    return checker


def validate(address: str, pattern: Pattern = None) -> bool:
    """Return ``True`` if ``address`` is a syntactically valid e-mail address.

    Surrounding whitespace is ignored. Exactly one ``@`` is required, the
    local part must be non-empty, and the domain may not contain empty
    labels (``a@example..com``, ``a@.example.com``, ``a.@example.com``).
    Internationalised domains are accepted as they are.
    """

    if not isinstance(address, str):
        return False
    address = address.strip()
    if address.count("@") != 1:
        return False
    local, _, domain = address.partition("@")
    if not local or not domain:
        return False
    if not _dots_ok(local, domain):
        return False
    return resolve_validator(pattern)(address)


__all__ = ["HTML5_RE", "VALIDATORS", "resolve_validator", "validate"]
