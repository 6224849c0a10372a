"""Account aggregate: balance, event store and the actions that mutate them.

Events live in a handle-addressed store (``dict[EventId, Event]``). A
``Transaction`` produced by :meth:`Account.predict` carries the handle of its
source event, so actions re-locate the exact event instance even when two
events have identical fields. Handles are issued from a counter that only
moves forward, so a transaction left over from before a removal or a reload
can never resolve to a different event.

Scheduling actions follow the first-occurrence rule: they apply only to a
transaction dated on its event's anchor, or to a one-off event. Anything else
(and any transaction whose event is gone) is ignored and the action returns
``False``.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Iterable, Mapping
from datetime import date, timedelta
from decimal import Decimal
from types import MappingProxyType

from .logging_setup import get_logger
from .models import Event, EventId, ForecastRow, Frequency, Transaction
from .projection import predict as _predict
from .projection import with_running_balance
from .recurrence import next_occurrence

_logger = get_logger("forecash.account")


class Account:
    """A balance plus the events that will change it."""

    def __init__(self, balance: Decimal | int | str = Decimal("0"), events: Iterable[Event] = ()) -> None:
        self.balance = Decimal(balance)
        self._events: dict[EventId, Event] = {}
        self._next_id: EventId = 0
        for event in events:
            self.add_event(event)

    def __len__(self) -> int:
        return len(self._events)

    def __repr__(self) -> str:  # pragma: no cover - trivial repr
        return f"Account(balance={self.balance!r}, events={len(self._events)})"

    # ------------------------------------------------------------------
    # Store access
    # ------------------------------------------------------------------

    @property
    def events(self) -> Mapping[EventId, Event]:
        """Read-only view of the event store. Iteration order carries no meaning."""

        return MappingProxyType(self._events)

    def get_event(self, event_id: EventId) -> Event | None:
        return self._events.get(event_id)

    def add_event(self, event: Event) -> EventId:
        """Store a copy of ``event`` and return its handle."""

        event_id = self._next_id
        self._next_id += 1
        stored = dataclasses.replace(
            event, amount=Decimal(event.amount), frequency=Frequency(event.frequency)
        )
        self._events[event_id] = stored
        _logger.debug(
            "add_event id=%d date=%s frequency=%s amount=%s",
            event_id,
            stored.anchor_date,
            stored.frequency.label,
            stored.amount,
        )
        return event_id

    def set_balance(self, value: Decimal | int | str) -> None:
        self.balance = Decimal(value)
        _logger.debug("set_balance balance=%s", self.balance)

    def update_event(
        self,
        event_id: EventId,
        *,
        anchor_date: date | None = None,
        description: str | None = None,
        amount: Decimal | None = None,
        frequency: Frequency | None = None,
    ) -> Event:
        """Overwrite the given fields of an existing event in place.

        Fields left as ``None`` keep their current value. Raises ``KeyError``
        when ``event_id`` is not in the store.
        """

        event = self._events[event_id]
        if anchor_date is not None:
            event.anchor_date = anchor_date
        if description is not None:
            event.description = description
        if amount is not None:
            event.amount = Decimal(amount)
        if frequency is not None:
            event.frequency = Frequency(frequency)
        _logger.debug("update_event id=%d", event_id)
        return event

    def replace_with(self, other: Account) -> None:
        """Take over the balance and events of ``other``.

        Incoming events receive fresh handles from this account's counter, so
        transactions projected before the swap no longer resolve.
        """

        self.balance = other.balance
        self._events = {}
        for event in other._events.values():
            self.add_event(event)

    # ------------------------------------------------------------------
    # Projection
    # ------------------------------------------------------------------

    def predict(self, until: date) -> list[Transaction]:
        return _predict(self._events, until)

    def forecast(self, until: date) -> list[ForecastRow]:
        """Projected transactions before ``until`` with the running balance."""

        return with_running_balance(self.balance, self.predict(until))

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    def _locate(self, tx: Transaction) -> Event | None:
        event = self._events.get(tx.event_id)
        if event is None:
            _logger.debug("stale transaction ignored event_id=%d date=%s", tx.event_id, tx.occurrence_date)
        return event

    def _first_pending(self, tx: Transaction, event: Event) -> bool:
        if not event.repeats or tx.occurrence_date == event.anchor_date:
            return True
        _logger.debug(
            "not the first pending occurrence; ignored event_id=%d date=%s anchor=%s",
            tx.event_id,
            tx.occurrence_date,
            event.anchor_date,
        )
        return False

    def _advance(self, event: Event) -> None:
        following = next_occurrence(event.anchor_date, event.frequency)
        if following is None:
            raise ValueError(f"a {event.frequency.label} event has no next occurrence to advance to")
        event.anchor_date = following

    def resolve(self, tx: Transaction, *, apply_balance: bool) -> bool:
        """Mark ``tx`` done (``apply_balance=True``) or drop it (``False``).

        One-off events are removed from the store; repeating events move their
        anchor to the next occurrence. Returns ``True`` when the account changed.
        """

        event = self._locate(tx)
        if event is None or not self._first_pending(tx, event):
            return False

        if apply_balance:
            self.balance += event.amount

        if event.repeats:
            self._advance(event)
        else:
            del self._events[tx.event_id]
        _logger.debug(
            "resolve event_id=%d date=%s applied=%s balance=%s",
            tx.event_id,
            tx.occurrence_date,
            apply_balance,
            self.balance,
        )
        return True

    def complete(self, tx: Transaction) -> bool:
        return self.resolve(tx, apply_balance=True)

    def delete(self, tx: Transaction) -> bool:
        return self.resolve(tx, apply_balance=False)

    def shift_date(self, tx: Transaction, delta_days: int) -> bool:
        """Move a one-off event by a single day (``delta_days`` is ``+1``/``-1``).

        Repeating events are left alone: their anchors only move through
        :meth:`resolve` and :meth:`pull_forward`.
        """

        if delta_days not in (-1, 1):
            raise ValueError(f"delta_days must be +1 or -1, got {delta_days!r}")

        event = self._locate(tx)
        if event is None:
            return False
        if event.repeats:
            _logger.debug("shift_date ignored for repeating event_id=%d", tx.event_id)
            return False

        event.anchor_date += timedelta(days=delta_days)
        _logger.debug("shift_date event_id=%d anchor=%s", tx.event_id, event.anchor_date)
        return True

    def pull_forward(self, tx: Transaction, today: date) -> bool:
        """Schedule the occurrence ``tx`` for ``today``.

        A one-off event simply moves. For a repeating event the occurrence is
        split off as a new one-off event dated ``today`` and the series
        advances from its original anchor, keeping its cadence.
        """

        event = self._locate(tx)
        if event is None or not self._first_pending(tx, event):
            return False

        if not event.repeats:
            event.anchor_date = today
            _logger.debug("pull_forward moved event_id=%d to %s", tx.event_id, today)
            return True

        split_id = self.add_event(
            Event(
                anchor_date=today,
                description=event.description,
                amount=event.amount,
                frequency=Frequency.ONCE,
            )
        )
        self._advance(event)
        _logger.debug(
            "pull_forward split event_id=%d into %d; series anchor=%s",
            tx.event_id,
            split_id,
            event.anchor_date,
        )
        return True


__all__ = ["Account"]
