import pytest

from mailaddr.config import MailerConfig
from mailaddr.mailer import NO_RECIPIENTS, Mailer, requires_deferred_encoding
from mailaddr.utils.errors import MailerError


class DummyTransport:
    def __init__(self):
        self.calls = []

    def __call__(self, sender, recipients, headers):
        self.calls.append((sender, recipients, headers))


@pytest.mark.parametrize(
    "charset, smtputf8, expected",
    [
        ("iso-8859-1", False, True),
        ("iso-8859-1", True, True),
        ("utf-8", False, True),
        ("UTF8", True, False),
        ("utf-8", True, False),
    ],
)
def test_requires_deferred_encoding(charset, smtputf8, expected):
    assert requires_deferred_encoding(charset, smtputf8) is expected


def test_smtputf8_transport_keeps_unicode_domain():
    mail = Mailer(MailerConfig(charset="utf-8", smtputf8=True))
    assert mail.add_address("user@françois.ch") is True
    assert mail.get_to_addresses() == {"user@françois.ch": ("user@françois.ch", "")}


def test_smtputf8_unicode_address_blocks_encoded_form():
    mail = Mailer(MailerConfig(charset="utf-8", smtputf8=True))
    assert mail.add_address("user@françois.ch") is True
    assert mail.add_bcc("USER@XN--FRANOIS-XXA.CH") is False
    assert mail.add_address("user@xn--franois-xxa.ch") is False
    assert mail.pre_send() is True
    assert mail.all_recipients() == ["user@françois.ch"]


def test_queued_address_encoded_even_if_charset_changes():
    mail = Mailer(MailerConfig(charset="utf-8", smtputf8=True))
    mail.charset = "iso-8859-1"
    assert mail.add_cc("user@françois.ch") is True
    assert mail.get_cc_addresses() == {}
    mail.charset = "utf-8"
    mail.add_address("to@example.com")
    assert mail.pre_send() is True
    assert list(mail.get_cc_addresses()) == ["user@xn--franois-xxa.ch"]


def test_errors_accumulate(mail):
    assert mail.add_address("example.com") is False
    assert mail.add_address("a@example.com") is True
    assert mail.add_cc("A@example.com") is False
    assert mail.error_count == 2
    assert mail.error_info.splitlines() == [
        "Invalid address: (To): example.com",
        "Duplicate address: (Cc): A@example.com",
    ]


def test_pre_send_requires_a_recipient(mail):
    mail.add_reply_to("a@example.com")
    assert mail.pre_send() is False
    assert mail.error_info == NO_RECIPIENTS


def test_pre_send_counts_queued_recipients(mail):
    mail.add_bcc("user@françois.ch")
    assert mail.get_bcc_addresses() == {}
    assert mail.pre_send() is True
    assert mail.all_recipients() == ["user@xn--franois-xxa.ch"]


def test_add_addresses_bulk(mail):
    added = mail.add_addresses("Joe <joe@example.com>, example.com, ann@example.com, JOE@example.com")
    assert added == 2
    assert mail.get_to_addresses() == {
        "joe@example.com": ("joe@example.com", "Joe"),
        "ann@example.com": ("ann@example.com", ""),
    }
    assert mail.error_info == "Duplicate address: (To): JOE@example.com"


def test_clear_all_recipients(mail):
    mail.add_address("a@example.com")
    mail.add_cc("b@example.com")
    mail.add_bcc("c@françois.ch")
    mail.add_reply_to("d@example.com")
    mail.clear_all_recipients()
    assert mail.all_recipients() == []
    assert mail.registry.pending() == ()
    assert list(mail.get_reply_to_addresses()) == ["d@example.com"]
    assert mail.add_bcc("a@example.com") is True


def test_clear_single_roles(mail):
    mail.add_address("a@example.com")
    mail.add_cc("b@example.com")
    mail.add_bcc("c@example.com")
    mail.clear_addresses()
    mail.clear_ccs()
    assert mail.all_recipients() == ["c@example.com"]
    mail.clear_bccs()
    assert mail.all_recipients() == []


def test_send_hands_envelope_to_transport(mail):
    transport = DummyTransport()
    mail.set_from("from@example.com", "Sender")
    mail.add_address("to@example.com", "To Person")
    mail.add_cc("cc@françois.ch")
    mail.add_bcc("hidden@example.com")

    assert mail.send(transport) is True

    sender, recipients, headers = transport.calls[0]
    assert sender == "from@example.com"
    assert recipients == ["to@example.com", "cc@xn--franois-xxa.ch", "hidden@example.com"]
    assert headers["From"] == "Sender <from@example.com>"
    assert headers["To"] == "To Person <to@example.com>"
    assert headers["Cc"] == "cc@xn--franois-xxa.ch"
    assert "Bcc" not in headers


def test_send_without_recipients_returns_false(mail):
    transport = DummyTransport()
    assert mail.send(transport) is False
    assert transport.calls == []


def test_send_raises_when_exceptions_enabled():
    mail = Mailer(MailerConfig(), exceptions=True)
    with pytest.raises(MailerError, match="at least one recipient"):
        mail.send(DummyTransport())


def test_invalid_from_after_encoding_fails_pre_send():
    mail = Mailer(MailerConfig(validator="noregex"))
    mail.registry.validator = lambda a: "xn--" not in a
    mail.add_address("to@example.com")
    assert mail.set_from("me@françois.ch") is True
    assert mail.pre_send() is False
    assert mail.error_info == "Invalid address: (From): me@xn--franois-xxa.ch"


def test_non_ascii_name_encoded_with_charset(mail):
    mail.add_address("f@example.com", "François")
    header = mail.address_header("to")
    assert header.startswith("=?iso-8859-1?")
    assert header.endswith(" <f@example.com>")


def test_config_from_env_drives_session(monkeypatch):
    monkeypatch.setenv("MAILADDR_ALLOW_CROSS_ROLE", "1")
    monkeypatch.setenv("MAILADDR_CHARSET", "utf-8")
    mail = Mailer()
    assert mail.charset == "utf-8"
    assert mail.add_address("a@example.com") is True
    assert mail.add_cc("a@example.com") is True
