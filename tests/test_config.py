import io
import logging
from pathlib import Path

import pytest

from forecash import config
from forecash.logging_setup import configure_logging, get_logger


def test_account_path_precedence(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    assert config.resolve_account_path() == Path.home() / ".config" / "forecash" / "account.json"

    monkeypatch.setenv(config.ACCOUNT_ENV, str(tmp_path / "env.json"))
    assert config.resolve_account_path() == tmp_path / "env.json"

    assert config.resolve_account_path(tmp_path / "flag.json") == tmp_path / "flag.json"


@pytest.mark.parametrize(("raw", "expected"), [(None, 4), ("6", 6), ("0", 4), ("-2", 4), ("soon", 4)])
def test_horizon_months(monkeypatch: pytest.MonkeyPatch, raw, expected):
    if raw is not None:
        monkeypatch.setenv(config.HORIZON_ENV, raw)
    assert config.resolve_horizon_months() == expected


def test_configure_logging_once_with_env_level(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("FORECASH_LOG_LEVEL", "debug")
    stream = io.StringIO()

    configure_logging(stream=stream)
    configure_logging(level="ERROR", stream=io.StringIO())  # ignored: already configured
    get_logger("forecash.test").debug("hello %s", "there")

    assert logging.getLogger("forecash").level == logging.DEBUG
    assert "DEBUG forecash.test: hello there" in stream.getvalue()


@pytest.mark.parametrize(("value", "expected"), [("info", logging.INFO), ("15", 15), ("loud", logging.WARNING)])
def test_log_level_names_numbers_and_unknown_values(value: str, expected: int):
    stream = io.StringIO()

    configure_logging(level=value, stream=stream)

    assert logging.getLogger("forecash").level == expected
