"""Load/save of the account snapshot file.

The file holds the whole account as one JSON object::

    {"Balance": 100.00,
     "Events": [{"Date": "2024-01-01", "Description": "Rent",
                 "Amount": -50.00, "Frequency": 4}]}

Reads go through the pydantic DTOs in :mod:`forecash.models`; JSON numbers are
parsed straight into ``Decimal`` and written back from it, rounded to cents
without a detour through binary floats. Writes target ``<path>.tmp`` first
and then ``os.replace`` into place, so a failed save never leaves a half-written file.

Any read, parse or write failure raises :class:`SnapshotError`. There is no
recovery here: callers report the error and stop.
"""

from __future__ import annotations

import contextlib
import json
import os
from datetime import date
from decimal import ROUND_HALF_UP, Decimal, localcontext
from pathlib import Path
from typing import Any

from .account import Account
from .logging_setup import get_logger
from .models import AccountSnapshot, EventRecord

_logger = get_logger("forecash.persistence")

_CENTS = Decimal("0.01")
_INDENT = "  "


class SnapshotError(RuntimeError):
    """The account file could not be read, parsed or written."""


def _decimal_literal(value: Decimal) -> str:
    # Rendered from the Decimal itself: a float would drop cents past ~15 digits
    if not value.is_finite():
        raise ValueError(f"cannot write non-finite amount {value}")
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, value.adjusted() + 4)
        cents = value.quantize(_CENTS, rounding=ROUND_HALF_UP)
    return format(cents, "f")


def _render(value: Any, depth: int = 0) -> str:
    """Serialize the dumped snapshot as indented JSON with exact decimal numbers."""

    if isinstance(value, Decimal):
        return _decimal_literal(value)
    if isinstance(value, date):
        return json.dumps(value.isoformat())
    if isinstance(value, (dict, list)):
        if not value:
            return "{}" if isinstance(value, dict) else "[]"
        pad = _INDENT * (depth + 1)
        if isinstance(value, dict):
            parts = [
                f"{pad}{json.dumps(str(k), ensure_ascii=False)}: {_render(v, depth + 1)}" for k, v in value.items()
            ]
            opening, closing = "{", "}"
        else:
            parts = [f"{pad}{_render(v, depth + 1)}" for v in value]
            opening, closing = "[", "]"
        return opening + "\n" + ",\n".join(parts) + "\n" + _INDENT * depth + closing
    if value is None or isinstance(value, (str, bool)):
        return json.dumps(value, ensure_ascii=False)
    if isinstance(value, int):
        # Frequency is an IntEnum; write the bare integer
        return str(int(value))
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def load(path: str | os.PathLike[str]) -> Account:
    """Parse the file at ``path`` into a fresh :class:`Account`."""

    p = Path(path)
    try:
        text = p.read_text(encoding="utf-8")
        snapshot = AccountSnapshot.model_validate(json.loads(text, parse_float=Decimal))
    except (OSError, UnicodeDecodeError, ValueError) as e:
        # json.JSONDecodeError and pydantic.ValidationError are ValueErrors
        raise SnapshotError(f"failed to load account from '{p}': {e}") from e

    account = Account(
        balance=snapshot.balance,
        events=(record.to_event() for record in snapshot.events),
    )
    _logger.info("loaded account path=%s events=%d balance=%s", os.fspath(p), len(account), account.balance)
    return account


def save(account: Account, path: str | os.PathLike[str]) -> None:
    """Overwrite ``path`` with the full state of ``account``."""

    p = Path(path)
    tmp = p.with_suffix(p.suffix + ".tmp")

    try:
        snapshot = AccountSnapshot(
            balance=account.balance,
            events=[EventRecord.from_event(e) for e in account.events.values()],
        )
        text = _render(snapshot.model_dump(by_alias=True))
    except (ArithmeticError, TypeError, ValueError) as e:
        # pydantic.ValidationError is a ValueError
        raise SnapshotError(f"failed to encode account for '{p}': {e}") from e

    try:
        p.parent.mkdir(parents=True, exist_ok=True)
        tmp.write_text(text + "\n", encoding="utf-8")
        os.replace(tmp, p)
    except OSError as e:
        with contextlib.suppress(OSError):
            tmp.unlink()
        raise SnapshotError(f"failed to save account to '{p}': {e}") from e

    _logger.info("saved account path=%s events=%d balance=%s", os.fspath(p), len(account), account.balance)


def reload(account: Account, path: str | os.PathLike[str]) -> Account:
    """Replace ``account``'s state with the file contents, dropping unsaved changes.

    The file is parsed completely before anything is replaced; on failure the
    in-memory account is left as it was.
    """

    fresh = load(path)
    account.replace_with(fresh)
    return account


__all__ = ["SnapshotError", "load", "reload", "save"]
