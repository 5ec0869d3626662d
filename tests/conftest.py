"""Test configuration and shared fixtures."""

import sys
from pathlib import Path

sys.path.append(str(Path(__file__).resolve().parents[1]))

import pytest

from mailaddr.config import MailerConfig
from mailaddr.mailer import Mailer

MAILADDR_VARS = (
    "MAILADDR_CHARSET",
    "MAILADDR_SMTPUTF8",
    "MAILADDR_IDN_ENABLE",
    "MAILADDR_VALIDATOR",
    "MAILADDR_ALLOW_CROSS_ROLE",
    "MAILADDR_LOG_DIR",
    "MAILADDR_LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch):
    # setenv first so that monkeypatch restores the variable even when a
    # test (load_env) writes it back
    for name in MAILADDR_VARS:
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    yield


@pytest.fixture
def mail():
    return Mailer(MailerConfig())
