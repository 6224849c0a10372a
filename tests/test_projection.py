from datetime import date, timedelta
from decimal import Decimal

from dateutil.relativedelta import relativedelta

from forecash import Event, Frequency, default_horizon, predict, with_running_balance


def _event(anchor: date, amount: str = "-10.00", frequency: Frequency = Frequency.ONCE, description: str = "x"):
    return Event(anchor_date=anchor, description=description, amount=Decimal(amount), frequency=frequency)


def test_monthly_event_until_horizon():
    # balance 100.00, monthly -50.00 from 2024-01-01, horizon 2024-04-01
    events = {0: _event(date(2024, 1, 1), "-50.00", Frequency.MONTHLY)}

    txs = predict(events, date(2024, 4, 1))

    assert [t.occurrence_date for t in txs] == [date(2024, 1, 1), date(2024, 2, 1), date(2024, 3, 1)]
    assert all(t.amount == Decimal("-50.00") for t in txs)
    assert all(t.event_id == 0 for t in txs)


def test_month_end_series_overflows_then_follows_new_day():
    events = {0: _event(date(2024, 1, 31), "-50.00", Frequency.MONTHLY)}

    txs = predict(events, date(2024, 5, 3))

    # Each step starts from the previous occurrence, so the series settles on the 2nd
    assert [t.occurrence_date for t in txs] == [
        date(2024, 1, 31),
        date(2024, 3, 2),
        date(2024, 4, 2),
        date(2024, 5, 2),
    ]


def test_once_event_emits_only_before_until():
    events = {0: _event(date(2024, 6, 1))}

    assert len(predict(events, date(2024, 6, 2))) == 1
    # `until` is exclusive
    assert predict(events, date(2024, 6, 1)) == []
    assert predict(events, date(2024, 5, 1)) == []


def test_repeating_event_progression_and_stop():
    events = {7: _event(date(2024, 1, 1), frequency=Frequency.WEEKLY)}

    dates = [t.occurrence_date for t in predict(events, date(2024, 1, 29))]

    assert dates == [date(2024, 1, 1), date(2024, 1, 8), date(2024, 1, 15), date(2024, 1, 22)]
    assert all(b - a == timedelta(days=7) for a, b in zip(dates, dates[1:]))


def test_repeating_event_anchored_after_until_is_empty():
    events = {0: _event(date(2024, 5, 1), frequency=Frequency.DAILY)}
    assert predict(events, date(2024, 4, 1)) == []


def test_merged_timeline_is_sorted_with_handle_tie_break():
    events = {
        3: _event(date(2024, 1, 15), description="once"),
        1: _event(date(2024, 1, 1), frequency=Frequency.BIWEEKLY, description="biweekly"),
        2: _event(date(2024, 1, 8), frequency=Frequency.WEEKLY, description="weekly"),
    }

    txs = predict(events, date(2024, 1, 30))

    assert [(t.occurrence_date, t.description) for t in txs] == [
        (date(2024, 1, 1), "biweekly"),
        (date(2024, 1, 8), "weekly"),
        (date(2024, 1, 15), "biweekly"),
        (date(2024, 1, 15), "weekly"),
        (date(2024, 1, 15), "once"),
        (date(2024, 1, 22), "weekly"),
        (date(2024, 1, 29), "biweekly"),
        (date(2024, 1, 29), "weekly"),
    ]


def test_predict_does_not_mutate_events():
    event = _event(date(2024, 1, 1), frequency=Frequency.DAILY)
    predict({0: event}, date(2024, 2, 1))
    assert event.anchor_date == date(2024, 1, 1)


def test_running_balance_accumulates():
    events = {
        0: _event(date(2024, 1, 5), "1000.00", description="salary"),
        1: _event(date(2024, 1, 1), "-250.50", Frequency.WEEKLY, description="groceries"),
    }

    rows = with_running_balance(Decimal("100.00"), predict(events, date(2024, 1, 10)))

    assert [(r.transaction.description, r.balance) for r in rows] == [
        ("groceries", Decimal("-150.50")),
        ("salary", Decimal("849.50")),
        ("groceries", Decimal("599.00")),
    ]


def test_default_horizon_is_four_months():
    assert default_horizon(date(2024, 1, 31)) == date(2024, 1, 31) + relativedelta(months=4)
    assert default_horizon(date(2024, 1, 15), 1) == date(2024, 2, 15)
