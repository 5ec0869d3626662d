"""Data models shared by the address registry and the mailer session."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

RECIPIENT_KINDS: Tuple[str, ...] = ("to", "cc", "bcc")
KINDS: Tuple[str, ...] = (*RECIPIENT_KINDS, "reply_to")

LABELS = {"to": "To", "cc": "Cc", "bcc": "Bcc", "reply_to": "Reply-To", "from": "From"}


@dataclass(slots=True, frozen=True)
class AddressEntry:
    """A resolved address as it will appear in headers.

    Parameters
    ----------
    address:
        The address with its original casing, surrounding whitespace removed.
    name:
        Display name with line breaks and tabs stripped.
    """

    address: str
    name: str = ""

    @property
    def key(self) -> str:
        """Normalised form used for uniqueness and lookup."""

        return self.address.strip().lower()

    def as_pair(self) -> tuple[str, str]:
        return (self.address, self.name)


@dataclass(slots=True, frozen=True)
class PendingAddress:
    """An internationalised address waiting for :meth:`AddressRegistry.finalize`.

    ``address`` and ``name`` are kept as submitted (``bytes`` included) so
    that they are decoded with the charset active at finalize time. ``key``
    is the provisional normalised key, computed after domain encoding, used
    for duplicate detection while the entry is queued.
    """

    kind: str
    address: str | bytes
    name: str | bytes
    key: str


__all__ = [
    "AddressEntry",
    "KINDS",
    "LABELS",
    "PendingAddress",
    "RECIPIENT_KINDS",
]
