"""Mailer session: the address side of composing and sending one message."""

from __future__ import annotations

import logging
from typing import Callable, Dict, List, Optional

from .config import MailerConfig
from .idn import idn_supported
from .models import LABELS, RECIPIENT_KINDS
from .parsing import format_address_list, parse_addresses
from .registry import AddressRegistry
from .utils.charset_helper import is_utf8
from .utils.errors import MailerError
from .utils.logging_setup import configure_logging
from .validators import validate

logger = logging.getLogger(__name__)

NO_RECIPIENTS = "You must provide at least one recipient email address."

Transport = Callable[[str, List[str], Dict[str, str]], None]


def requires_deferred_encoding(charset: str, smtputf8: bool = False) -> bool:
    """Return ``True`` when IDN domains must be ASCII-encoded before sending.

    Only a UTF-8 message handed to a transport that speaks SMTPUTF8 can carry
    Unicode domains unchanged.
    """

    return not (smtputf8 and is_utf8(charset))


class Mailer:
    """Owns the address registry and the aggregated error text of a message."""

    def __init__(self, config: Optional[MailerConfig] = None, *, exceptions: bool = False) -> None:
        config = config or MailerConfig.from_env()
        if config.log_dir:
            configure_logging(config.log_dir, config.log_level)
        self.smtputf8 = config.smtputf8
        self.exceptions = exceptions
        self.error_info = ""
        self.error_count = 0
        self._recipient_keys: set[str] = set()
        self.registry = AddressRegistry(
            all_recipients=self._recipient_keys,
            defer_encoding=self._needs_deferred_encoding,
            charset=config.charset,
            validator=config.validator,
            idn_enabled=config.idn_enable and idn_supported(),
            allow_cross_role=config.allow_cross_role,
        )

    @property
    def charset(self) -> str:
        return self.registry.charset

    @charset.setter
    def charset(self, value: str) -> None:
        self.registry.charset = value

    def _needs_deferred_encoding(self) -> bool:
        return requires_deferred_encoding(self.charset, self.smtputf8)

    def _set_error(self, message: str) -> None:
        self.error_count += 1
        self.error_info = f"{self.error_info}\n{message}" if self.error_info else message

    def _collect_errors(self) -> None:
        for message in self.registry.pop_errors():
            self._set_error(message)

    def _add(self, kind: str, address: str | bytes, name: str | bytes) -> bool:
        ok = self.registry.add(kind, address, name)
        if not ok:
            self._collect_errors()
        return ok

    # -- adding ------------------------------------------------------------
    def add_address(self, address: str | bytes, name: str | bytes = "") -> bool:
        return self._add("to", address, name)

    def add_cc(self, address: str | bytes, name: str | bytes = "") -> bool:
        return self._add("cc", address, name)

    def add_bcc(self, address: str | bytes, name: str | bytes = "") -> bool:
        return self._add("bcc", address, name)

    def add_reply_to(self, address: str | bytes, name: str | bytes = "") -> bool:
        return self._add("reply_to", address, name)

    def add_addresses(self, text: str, kind: str = "to") -> int:
        """Add every address of a header-style string; return how many were taken."""

        added = 0
        for address, name in parse_addresses(text, validator=self.registry.validator):
            if self._add(kind, address, name):
                added += 1
        return added

    def set_from(self, address: str | bytes, name: str | bytes = "", auto: bool = True) -> bool:
        ok = self.registry.set_from(address, name, auto)
        if not ok:
            self._collect_errors()
        return ok

    # -- reading -----------------------------------------------------------
    def get_to_addresses(self) -> Dict[str, tuple[str, str]]:
        return self.registry.get("to")

    def get_cc_addresses(self) -> Dict[str, tuple[str, str]]:
        return self.registry.get("cc")

    def get_bcc_addresses(self) -> Dict[str, tuple[str, str]]:
        return self.registry.get("bcc")

    def get_reply_to_addresses(self) -> Dict[str, tuple[str, str]]:
        return self.registry.get("reply_to")

    def all_recipients(self) -> List[str]:
        """Envelope recipients in To, Cc, Bcc order."""

        return [
            entry.address for kind in RECIPIENT_KINDS for entry in self.registry.entries(kind)
        ]

    def address_header(self, kind: str) -> str:
        pairs = [entry.as_pair() for entry in self.registry.entries(kind)]
        return format_address_list(pairs, self.charset)

    def headers(self) -> Dict[str, str]:
        """Address headers for the message. Bcc is never included."""

        result: Dict[str, str] = {}
        if self.registry.from_address:
            result["From"] = format_address_list(
                [(self.registry.from_address, self.registry.from_name)], self.charset
            )
        for kind in ("to", "cc", "reply_to"):
            value = self.address_header(kind)
            if value:
                result[LABELS[kind]] = value
        return result

    # -- clearing ----------------------------------------------------------
    def clear_addresses(self) -> None:
        self.registry.clear("to")

    def clear_ccs(self) -> None:
        self.registry.clear("cc")

    def clear_bccs(self) -> None:
        self.registry.clear("bcc")

    def clear_reply_tos(self) -> None:
        self.registry.clear("reply_to")

    def clear_all_recipients(self) -> None:
        for kind in RECIPIENT_KINDS:
            self.registry.clear(kind)

    # -- sending -----------------------------------------------------------
    def pre_send(self) -> bool:
        """Resolve queued addresses and check the message can be addressed."""

        self.error_count = 0
        self.registry.finalize()
        self._collect_errors()
        if not self.all_recipients():
            self._set_error(NO_RECIPIENTS)
            return False
        for label, address in (("From", self.registry.from_address), ("Sender", self.registry.sender)):
            if address and not validate(address, self.registry.validator):
                self._set_error(f"Invalid address: ({label}): {address}")
                return False
        return True

    def send(self, transport: Transport) -> bool:
        """Run :meth:`pre_send` and hand the envelope to ``transport``.

        ``transport`` receives ``(sender, recipients, headers)``. When
        :meth:`pre_send` fails, ``False`` is returned, or :class:`MailerError`
        raised if the session was built with ``exceptions=True``.
        """

        if not self.pre_send():
            logger.info("message not sent: %s", self.error_info)
            if self.exceptions:
                raise MailerError(self.error_info)
            return False
        sender = self.registry.sender or self.registry.from_address
        transport(sender, self.all_recipients(), self.headers())
        return True


__all__ = ["Mailer", "NO_RECIPIENTS", "Transport", "requires_deferred_encoding"]
