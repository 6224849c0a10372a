"""Data models for ``forecash``.

Runtime types are plain dataclasses:

- :class:`Frequency`: closed enumeration of repeat intervals.
- :class:`Event`: a one-off or recurring obligation owned by an ``Account``.
- :class:`Transaction`: a derived occurrence of an event on a given date.
- :class:`ForecastRow`: a transaction paired with the projected balance.

The on-disk snapshot is described by pydantic DTOs (:class:`EventRecord`,
:class:`AccountSnapshot`) whose aliases match the capitalized JSON keys of the
account file.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from enum import IntEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Key under which an Account stores an Event. Issued by the Account, never reused.
type EventId = int


class Frequency(IntEnum):
    """How often an event repeats.

    Integer values are the persisted representation (``Once=0 … Yearly=5``).
    """

    ONCE = 0
    DAILY = 1
    WEEKLY = 2
    BIWEEKLY = 3
    MONTHLY = 4
    YEARLY = 5

    @property
    def label(self) -> str:
        return self.name.capitalize()

    @classmethod
    def from_name(cls, name: str) -> Frequency:
        """Parse a case-insensitive frequency name (``"weekly"``, ``"Once"``)."""

        try:
            return cls[name.strip().upper()]
        except KeyError:
            choices = ", ".join(f.label for f in cls)
            raise ValueError(f"unknown frequency {name!r}; expected one of: {choices}") from None


@dataclass(slots=True)
class Event:
    """A financial obligation.

    ``anchor_date`` is the date of the next pending occurrence, not the date
    the event was created; it moves forward as occurrences are resolved.
    ``amount`` is signed: positive for income, negative for expenses.
    """

    anchor_date: date
    description: str
    amount: Decimal
    frequency: Frequency = Frequency.ONCE

    @property
    def repeats(self) -> bool:
        return self.frequency != Frequency.ONCE


@dataclass(frozen=True, slots=True)
class Transaction:
    """One projected occurrence of an event.

    Carries the handle of its source event rather than the event itself; the
    description/amount/frequency fields are snapshots taken at projection time
    for display. Transactions are rebuilt on every projection and go stale as
    soon as the account is mutated.
    """

    occurrence_date: date
    event_id: EventId
    description: str
    amount: Decimal
    frequency: Frequency

    @property
    def repeats(self) -> bool:
        return self.frequency != Frequency.ONCE


@dataclass(frozen=True, slots=True)
class ForecastRow:
    transaction: Transaction
    # Account balance after this transaction is applied
    balance: Decimal


# ---------------------------------------------------------------------------
# DTOs for the persisted account snapshot
# ---------------------------------------------------------------------------


def _coerce_calendar_date(v: Any) -> Any:
    """Reduce timestamps to their calendar date.

    Older account files carry RFC 3339 timestamps such as
    ``2024-01-01T00:00:00-05:00``; only the local date part is meaningful.
    """

    if isinstance(v, datetime):
        return v.date()
    if isinstance(v, str) and "T" in v:
        return v.split("T", 1)[0]
    return v


class EventRecord(BaseModel):
    """Typed model of one entry of the ``Events`` array."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    anchor_date: date = Field(alias="Date")
    description: str = Field(alias="Description")
    amount: Decimal = Field(alias="Amount")
    frequency: Frequency = Field(default=Frequency.ONCE, alias="Frequency")

    @field_validator("anchor_date", mode="before")
    @classmethod
    def _date_only(cls, v: Any) -> Any:
        return _coerce_calendar_date(v)

    @classmethod
    def from_event(cls, event: Event) -> EventRecord:
        return cls(
            anchor_date=event.anchor_date,
            description=event.description,
            amount=event.amount,
            frequency=event.frequency,
        )

    def to_event(self) -> Event:
        return Event(
            anchor_date=self.anchor_date,
            description=self.description,
            amount=self.amount,
            frequency=self.frequency,
        )


class AccountSnapshot(BaseModel):
    """Top-level schema for the account file."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    balance: Decimal = Field(alias="Balance")
    events: list[EventRecord] = Field(default_factory=list, alias="Events")

    @field_validator("events", mode="before")
    @classmethod
    def _null_events(cls, v: Any) -> Any:
        # An account with no events may be written as ``"Events": null``.
        return [] if v is None else v


__all__ = [
    "AccountSnapshot",
    "Event",
    "EventId",
    "EventRecord",
    "ForecastRow",
    "Frequency",
    "Transaction",
]
