"""Settings resolution from the environment.

Values come from environment variables; the CLI seeds them from a ``.env`` in
the working directory (without overriding variables that are already set)
before calling into this module.

- ``FORECASH_ACCOUNT``: path of the account file. Default:
  ``~/.config/forecash/account.json``.
- ``FORECASH_HORIZON_MONTHS``: how many calendar months ahead to project.
  Default: 4.
"""

from __future__ import annotations

import os
from pathlib import Path

from .logging_setup import get_logger
from .projection import DEFAULT_HORIZON_MONTHS

ACCOUNT_ENV = "FORECASH_ACCOUNT"
HORIZON_ENV = "FORECASH_HORIZON_MONTHS"

_logger = get_logger("forecash.config")


def default_account_path() -> Path:
    return Path.home() / ".config" / "forecash" / "account.json"


def resolve_account_path(override: str | os.PathLike[str] | None = None) -> Path:
    """Return the account file path.

    Precedence: explicit ``override`` (the ``--config`` option), then
    ``FORECASH_ACCOUNT``, then :func:`default_account_path`.
    """

    if override is not None and os.fspath(override).strip():
        return Path(override).expanduser()
    env_val = os.getenv(ACCOUNT_ENV)
    if env_val and env_val.strip():
        return Path(env_val.strip()).expanduser()
    return default_account_path()


def resolve_horizon_months() -> int:
    """Projection horizon in months; malformed or non-positive values use the default."""

    env_val = os.getenv(HORIZON_ENV)
    if not env_val:
        return DEFAULT_HORIZON_MONTHS
    try:
        months = int(env_val)
    except ValueError:
        months = 0
    if months <= 0:
        _logger.warning("ignoring %s=%r; using %d", HORIZON_ENV, env_val, DEFAULT_HORIZON_MONTHS)
        return DEFAULT_HORIZON_MONTHS
    return months


__all__ = [
    "ACCOUNT_ENV",
    "HORIZON_ENV",
    "default_account_path",
    "resolve_account_path",
    "resolve_horizon_months",
]
