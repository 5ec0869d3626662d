"""Address handling for outgoing e-mail: validation, deduplication and IDN."""

from .config import MailerConfig
from .idn import encode_domain, punyencode_address
from .mailer import Mailer, requires_deferred_encoding
from .models import AddressEntry, PendingAddress
from .parsing import format_address, parse_addresses
from .registry import AddressRegistry
from .utils import load_env
from .utils.errors import MailerError, UnknownRoleError
from .validators import validate

__all__ = [
    "AddressEntry",
    "AddressRegistry",
    "Mailer",
    "MailerConfig",
    "MailerError",
    "PendingAddress",
    "UnknownRoleError",
    "encode_domain",
    "format_address",
    "load_env",
    "parse_addresses",
    "punyencode_address",
    "requires_deferred_encoding",
    "validate",
]
