"""Exception types for the mailer session."""


class MailerError(Exception):
    """Raised by :meth:`mailaddr.mailer.Mailer.send` when the message cannot go out.

    Address-level problems never raise; they are reported through the boolean
    results of the ``add_*`` verbs and the aggregated ``error_info`` text.
    """


class UnknownRoleError(ValueError):
    """An address role other than to/cc/bcc/reply_to was requested."""
