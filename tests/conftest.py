"""Pytest configuration for test isolation.

The CLI resolves its account file and horizon from the environment (optionally
seeded from a ``.env`` in the working directory) and configures the package
logger once per process. Tests must not see a developer's real settings or
inherit handlers bound to a previous test's captured streams, so every test
runs with a clean environment, inside its own temporary working directory,
and with logging configuration reset afterwards.
"""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from forecash import logging_setup


@pytest.fixture(autouse=True)
def _isolate_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("FORECASH_ACCOUNT", "FORECASH_HORIZON_MONTHS", "FORECASH_LOG_LEVEL"):
        # setenv first so teardown also removes values written by load_dotenv
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    monkeypatch.chdir(tmp_path)


@pytest.fixture(autouse=True)
def _reset_logging(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setattr(logging_setup, "_CONFIGURED", False)
    yield
    logger = logging.getLogger("forecash")
    for h in list(logger.handlers):
        logger.removeHandler(h)
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
