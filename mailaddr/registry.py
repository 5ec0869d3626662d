"""Per-role address collections with deferred IDN resolution.

Addresses are added per role (``to``, ``cc``, ``bcc``, ``reply_to``) and are
either resolved immediately or parked in a pending queue. An address goes to
the queue when its domain holds non-ASCII characters, the IDN encoder is
available and the injected ``defer_encoding`` predicate says the charset in
use cannot carry the domain as-is. :meth:`AddressRegistry.finalize` drains the
queue right before transport: it decodes, punycode-encodes, re-validates and
merges each entry into the resolved maps.

Uniqueness is by normalised key (trimmed, lower-cased address). Keys are
compared after domain encoding, so ``user@FRANÇOIS.CH`` and
``user@xn--franois-xxa.ch`` collide. To, Cc and Bcc also share one
``all_recipients`` set owned by the mailer session, so an address is an
envelope recipient at most once unless ``allow_cross_role`` is set.

Nothing here raises for bad input. Rejections return ``False`` and leave a
human-readable line in :attr:`AddressRegistry.errors`.
"""

from __future__ import annotations

import logging
import re
from typing import Callable, Dict, Iterable, List, Optional

from .idn import has_8bit_chars, idn_supported, punyencode_address
from .models import KINDS, LABELS, RECIPIENT_KINDS, AddressEntry, PendingAddress
from .utils.charset_helper import decode_text
from .utils.errors import UnknownRoleError
from .validators import Pattern, validate

logger = logging.getLogger(__name__)

_NAME_BREAKS_RE = re.compile(r"[\r\n\t]+")


def clean_name(name: str | bytes | None, charset: str | None = None) -> str:
    """Drop line breaks and tabs from a display name and trim its ends."""

    if not name:
        return ""
    return _NAME_BREAKS_RE.sub("", decode_text(name, charset)).strip()


def _always() -> bool:
    return True


class AddressRegistry:
    """Address collections of one mailer session."""

    def __init__(
        self,
        *,
        all_recipients: Optional[set[str]] = None,
        defer_encoding: Callable[[], bool] = _always,
        charset: str = "utf-8",
        validator: Pattern = None,
        idn_enabled: Optional[bool] = None,
        allow_cross_role: bool = False,
    ) -> None:
        self.all_recipients: set[str] = all_recipients if all_recipients is not None else set()
        self.defer_encoding = defer_encoding
        self.charset = charset
        self.validator = validator
        self.idn_enabled = idn_supported() if idn_enabled is None else idn_enabled
        self.allow_cross_role = allow_cross_role
        self.from_address = ""
        self.from_name = ""
        self.sender = ""
        self.errors: List[str] = []
        self._resolved: Dict[str, Dict[str, AddressEntry]] = {kind: {} for kind in KINDS}
        # encoded key -> resolved key, per role
        self._encoded: Dict[str, Dict[str, str]] = {kind: {} for kind in KINDS}
        self._pending: List[PendingAddress] = []
        self._degraded_logged = False

    # -- helpers -----------------------------------------------------------
    @staticmethod
    def _kind(kind: str) -> str:
        normalized = (kind or "").strip().lower().replace("-", "_")
        if normalized not in KINDS:
            raise UnknownRoleError(f"unknown address kind: {kind!r}")
        return normalized

    def _reject(self, reason: str, kind: str, address: str) -> bool:
        message = f"{reason}: ({LABELS.get(kind, kind)}): {address}"
        logger.debug("address rejected: %s", message)
        self.errors.append(message)
        return False

    def _encoded_key(self, address: str | bytes) -> str:
        return punyencode_address(address, self.charset, enabled=self.idn_enabled).strip().lower()

    def _candidate_keys(self, address: str) -> set[str]:
        return {address.lower(), self._encoded_key(address)}

    def _is_duplicate(self, kind: str, keys: Iterable[str]) -> bool:
        keys = set(keys)
        if any(key in self._resolved[kind] or key in self._encoded[kind] for key in keys):
            return True
        cross = kind in RECIPIENT_KINDS and not self.allow_cross_role
        if cross and keys & self.all_recipients:
            return True
        for item in self._pending:
            if item.key not in keys:
                continue
            if item.kind == kind or (cross and item.kind in RECIPIENT_KINDS):
                return True
        return False

    def _store(self, kind: str, address: str, name: str) -> None:
        entry = AddressEntry(address, name)
        encoded = self._encoded_key(address)
        self._resolved[kind][entry.key] = entry
        self._encoded[kind][encoded] = entry.key
        if kind in RECIPIENT_KINDS:
            self.all_recipients.update((entry.key, encoded))

    def _note_degraded(self, address: str) -> None:
        if self._degraded_logged:
            return
        self._degraded_logged = True
        logger.warning(
            "IDN encoding unavailable, keeping %s in Unicode form", address
        )

    # -- per-role API ------------------------------------------------------
    def add(self, kind: str, address: str | bytes, name: str | bytes = "") -> bool:
        """Add ``address`` to the ``kind`` role.

        Returns ``True`` when the address was stored or queued, ``False``
        when it is invalid or a duplicate. Queued addresses become visible in
        :meth:`get` only after :meth:`finalize`.
        """

        kind = self._kind(kind)
        if isinstance(address, bytes):
            address = address.strip()
        text = decode_text(address or "", self.charset).strip()
        if not validate(text, self.validator):
            return self._reject("Invalid address", kind, text)
        keys = self._candidate_keys(text)
        if self._is_duplicate(kind, keys):
            return self._reject("Duplicate address", kind, text)

        domain = text.rpartition("@")[2]
        if has_8bit_chars(domain):
            if self.idn_enabled and self.defer_encoding():
                self._pending.append(
                    PendingAddress(kind, address, name or "", self._encoded_key(text))
                )
                logger.debug("queued %s address %s until finalize", kind, text)
                return True
            if not self.idn_enabled:
                self._note_degraded(text)

        self._store(kind, text, clean_name(name, self.charset))
        return True

    def get(self, kind: str) -> Dict[str, tuple[str, str]]:
        """Return ``{key: (address, name)}`` for resolved entries of ``kind``."""

        kind = self._kind(kind)
        return {key: entry.as_pair() for key, entry in self._resolved[kind].items()}

    def entries(self, kind: str) -> List[AddressEntry]:
        return list(self._resolved[self._kind(kind)].values())

    def pending(self, kind: Optional[str] = None) -> tuple[PendingAddress, ...]:
        if kind is None:
            return tuple(self._pending)
        kind = self._kind(kind)
        return tuple(item for item in self._pending if item.kind == kind)

    def clear(self, kind: str) -> None:
        """Forget resolved and queued addresses of ``kind``."""

        kind = self._kind(kind)
        removed = set(self._resolved[kind]) | set(self._encoded[kind])
        self._resolved[kind] = {}
        self._encoded[kind] = {}
        self._pending = [item for item in self._pending if item.kind != kind]
        if kind not in RECIPIENT_KINDS:
            return
        still_used = set()
        for other in RECIPIENT_KINDS:
            still_used.update(self._resolved[other])
            still_used.update(self._encoded[other])
        for key in removed:
            if key not in still_used:
                self.all_recipients.discard(key)

    # -- From / Sender -----------------------------------------------------
    def set_from(self, address: str | bytes, name: str | bytes = "", auto: bool = True) -> bool:
        """Set the From address; with ``auto`` also the empty envelope Sender."""

        text = decode_text(address or "", self.charset).strip()
        if not validate(text, self.validator):
            return self._reject("Invalid address", "from", text)
        self.from_address = text
        self.from_name = clean_name(name, self.charset)
        if auto and not self.sender:
            self.sender = text
        return True

    # -- lifecycle ---------------------------------------------------------
    def finalize(self) -> int:
        """Resolve queued addresses in insertion order.

        Returns the number of entries promoted to the resolved maps. Entries
        that fail re-validation or turn out to be duplicates once encoded are
        dropped and reported in :attr:`errors`. From and Sender are encoded
        too. With an empty queue nothing changes and ``0`` is returned.
        """

        queue, self._pending = self._pending, []
        promoted = 0
        for item in queue:
            address = punyencode_address(
                item.address, self.charset, enabled=self.idn_enabled
            ).strip()
            if not validate(address, self.validator):
                self._reject("Invalid address", item.kind, address)
                continue
            if self._is_duplicate(item.kind, self._candidate_keys(address)):
                self._reject("Duplicate address", item.kind, address)
                continue
            self._store(item.kind, address, clean_name(item.name, self.charset))
            promoted += 1
        if self.from_address:
            self.from_address = punyencode_address(
                self.from_address, enabled=self.idn_enabled
            )
        if self.sender:
            self.sender = punyencode_address(self.sender, enabled=self.idn_enabled)
        if promoted:
            logger.debug("finalize promoted %d queued address(es)", promoted)
        return promoted

    def pop_errors(self) -> List[str]:
        errors, self.errors = self.errors, []
        return errors


__all__ = ["AddressRegistry", "clean_name"]
