import pytest

from mailaddr.validators import resolve_validator, validate


@pytest.mark.parametrize(
    "address",
    [
        "a@example.com",
        " \tMiXeD@Example.Com  \r\n",
        "test+replyto@françois.ch",
        "test+replyto@xn--franois-xxa.ch",
        "first.last@sub.example.org",
    ],
)
def test_valid_addresses(address):
    assert validate(address) is True


@pytest.mark.parametrize(
    "address",
    [
        "a@example..com",
        "example.com",
        "a@@example.com",
        "a@b@example.com",
        "@example.com",
        "a@",
        "a@.example.com",
        "a@example.com.",
        "a.@example.com",
        "",
        "   ",
    ],
)
def test_invalid_addresses(address):
    assert validate(address) is False


@pytest.mark.parametrize("pattern", ["email_validator", "html5", "noregex"])
def test_every_pattern_applies_dot_rules(pattern):
    assert validate("a@example.com", pattern) is True
    assert validate("a@example..com", pattern) is False
    assert validate("example.com", pattern) is False


def test_html5_accepts_unicode_domain():
    assert validate("user@françois.ch", "html5") is True
    assert validate("user@-bad.com", "html5") is False


def test_callable_pattern_is_used():
    seen = []

    def only_example(address):
        seen.append(address)
        return address.endswith("@example.com")

    assert validate("  a@example.com ", only_example) is True
    assert validate("a@example.org", only_example) is False
    assert seen == ["a@example.com", "a@example.org"]


def test_unknown_pattern_falls_back_to_default():
    assert resolve_validator("nope") is resolve_validator(None)


def test_non_string_input_is_rejected():
    assert validate(None) is False  # type: ignore[arg-type]
