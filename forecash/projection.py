"""Projection of events into a dated transaction timeline.

Pure functions over the event store; nothing here mutates an event.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from datetime import date
from decimal import Decimal

from dateutil.relativedelta import relativedelta

from .models import Event, EventId, ForecastRow, Transaction
from .recurrence import next_occurrence

# The forecast view looks this many calendar months past today.
DEFAULT_HORIZON_MONTHS = 4


def _occurrences(event_id: EventId, event: Event, until: date) -> Iterator[Transaction]:
    current: date | None = event.anchor_date
    while current is not None and current < until:
        yield Transaction(
            occurrence_date=current,
            event_id=event_id,
            description=event.description,
            amount=event.amount,
            frequency=event.frequency,
        )
        current = next_occurrence(current, event.frequency)


def predict(events: Mapping[EventId, Event], until: date) -> list[Transaction]:
    """Expand every event into its occurrences strictly before ``until``.

    Results are sorted by date; transactions sharing a date are ordered by
    event handle so the output is deterministic.
    """

    transactions: list[Transaction] = []
    for event_id, event in events.items():
        transactions.extend(_occurrences(event_id, event, until))
    transactions.sort(key=lambda t: (t.occurrence_date, t.event_id))
    return transactions


def with_running_balance(
    balance: Decimal, transactions: Iterable[Transaction]
) -> list[ForecastRow]:
    """Pair each transaction with the balance after it is applied."""

    rows: list[ForecastRow] = []
    running = Decimal(balance)
    for tx in transactions:
        running += tx.amount
        rows.append(ForecastRow(transaction=tx, balance=running))
    return rows


def default_horizon(today: date, months: int = DEFAULT_HORIZON_MONTHS) -> date:
    return today + relativedelta(months=months)


__all__ = [
    "DEFAULT_HORIZON_MONTHS",
    "default_horizon",
    "predict",
    "with_running_balance",
]
