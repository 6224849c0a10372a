"""Public interface for the ``forecash`` package.

Symbol re-exports only; there is no runtime logic here.
"""

from .account import Account
from .models import (
    AccountSnapshot,
    Event,
    EventId,
    EventRecord,
    ForecastRow,
    Frequency,
    Transaction,
)
from .persistence import SnapshotError, load, reload, save
from .projection import default_horizon, predict, with_running_balance
from .recurrence import next_occurrence, repeats

__all__ = [
    # Engine
    "Account",
    "default_horizon",
    "next_occurrence",
    "predict",
    "repeats",
    "with_running_balance",
    # Persistence
    "SnapshotError",
    "load",
    "reload",
    "save",
    # Models / types
    "AccountSnapshot",
    "Event",
    "EventId",
    "EventRecord",
    "ForecastRow",
    "Frequency",
    "Transaction",
]
