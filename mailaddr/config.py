"""Environment driven settings for the mailer session."""

from __future__ import annotations

import os
from dataclasses import dataclass

CHARSET_ISO88591 = "iso-8859-1"
CHARSET_UTF8 = "utf-8"

DEFAULT_CHARSET = CHARSET_ISO88591
DEFAULT_VALIDATOR = "email_validator"


def _int(name: str, default: int) -> int:
    """Read integer environment variables with graceful fallback."""

    raw = os.getenv(name, "")
    try:
        return int(raw.strip() or default)
    except ValueError:
        return default


def _bool(name: str, default: bool) -> bool:
    return _int(name, 1 if default else 0) == 1


def _str(name: str, default: str) -> str:
    """Read string environment variables with stripping."""

    raw = os.getenv(name)
    if raw is None:
        return default
    raw = raw.strip()
    return raw if raw else default


@dataclass(slots=True)
class MailerConfig:
    """Settings consulted when a :class:`~mailaddr.mailer.Mailer` is built.

    charset:
        Initial message charset. Addresses given as ``bytes`` are decoded
        with the charset active at finalize time.
    smtputf8:
        The transport accepts UTF-8 envelope addresses, so internationalised
        domains need no ASCII conversion when the charset is UTF-8.
    idn_enable:
        Use the ``idna`` encoder. When off, domains stay in Unicode form.
    validator:
        Name of the address validator pattern.
    allow_cross_role:
        Permit the same address in more than one of To/Cc/Bcc.
    log_dir:
        When set, the session writes its log records to
        ``<log_dir>/mailaddr.log``.
    log_level:
        Level name for that file, ``INFO`` by default.
    """

    charset: str = DEFAULT_CHARSET
    smtputf8: bool = False
    idn_enable: bool = True
    validator: str = DEFAULT_VALIDATOR
    allow_cross_role: bool = False
    log_dir: str = ""
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "MailerConfig":
        return cls(
            charset=_str("MAILADDR_CHARSET", DEFAULT_CHARSET),
            smtputf8=_bool("MAILADDR_SMTPUTF8", False),
            idn_enable=_bool("MAILADDR_IDN_ENABLE", True),
            validator=_str("MAILADDR_VALIDATOR", DEFAULT_VALIDATOR),
            allow_cross_role=_bool("MAILADDR_ALLOW_CROSS_ROLE", False),
            log_dir=_str("MAILADDR_LOG_DIR", ""),
            log_level=_str("MAILADDR_LOG_LEVEL", "INFO"),
        )


__all__ = [
    "CHARSET_ISO88591",
    "CHARSET_UTF8",
    "DEFAULT_CHARSET",
    "DEFAULT_VALIDATOR",
    "MailerConfig",
]
