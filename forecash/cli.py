"""CLI for the ``forecash`` package.

A Typer console interface over :class:`forecash.account.Account`. Every
invocation loads the account file, projects the timeline, applies at most one
action to the row picked by index, and saves. Rows are numbered as printed by
``forecast``; the numbering is only valid until the next mutating command.

Environment variables are loaded from a local ``.env`` (without overriding
already-set values) before settings are resolved.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from pathlib import Path

import typer
from dotenv import load_dotenv
from typer.models import ArgumentInfo, OptionInfo

from .account import Account
from .config import resolve_account_path, resolve_horizon_months
from .logging_setup import configure_logging
from .models import Event, ForecastRow, Frequency, Transaction
from .persistence import SnapshotError, load, save
from .projection import default_horizon

_DATE_FORMATS = ["%Y-%m-%d"]

# Module-level option objects keep calls out of parameter defaults (ruff B008).
CONFIG_OPTION: OptionInfo = typer.Option(
    None,
    "--config",
    help="Account file (falls back to FORECASH_ACCOUNT, then ~/.config/forecash/account.json).",
    dir_okay=False,
)
UNTIL_OPTION: OptionInfo = typer.Option(
    None,
    "--until",
    formats=_DATE_FORMATS,
    help="Project occurrences strictly before this date (default: FORECASH_HORIZON_MONTHS after today).",
)
TODAY_OPTION: OptionInfo = typer.Option(
    None, "--today", formats=_DATE_FORMATS, help="Override today's date."
)
INDEX_ARGUMENT: ArgumentInfo = typer.Argument(
    ..., min=0, help="Row number as printed by the forecast command."
)


# ---- Small module-level helpers used by CLI commands -------------------------


def _parse_amount(value: str, *, param_hint: str) -> Decimal:
    try:
        amount = Decimal(value.strip().replace(",", ""))
    except InvalidOperation:
        raise typer.BadParameter(f"not a number: {value!r}", param_hint=param_hint) from None
    if not amount.is_finite():
        raise typer.BadParameter(f"not a finite number: {value!r}", param_hint=param_hint)
    return amount


def _parse_frequency(value: str) -> Frequency:
    try:
        return Frequency.from_name(value)
    except ValueError as e:
        raise typer.BadParameter(str(e), param_hint="'--frequency'") from None


def _resolve_today(today: datetime | None) -> date:
    return today.date() if today is not None else date.today()


def _resolve_until(until: datetime | None, today: date) -> date:
    if until is not None:
        return until.date()
    return default_horizon(today, resolve_horizon_months())


def _load_or_exit(path: Path) -> Account:
    try:
        return load(path)
    except SnapshotError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1) from e


def _save_or_exit(account: Account, path: Path) -> None:
    try:
        save(account, path)
    except SnapshotError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1) from e


def _select(account: Account, index: int, until: date) -> Transaction:
    transactions = account.predict(until)
    if index >= len(transactions):
        typer.echo(
            f"Error: no row {index}; the forecast until {until.isoformat()} has "
            f"{len(transactions)} rows.",
            err=True,
        )
        raise typer.Exit(1)
    return transactions[index]


def _format_row(index: int, row: ForecastRow) -> str:
    tx = row.transaction
    return (
        f"{index}\t{tx.occurrence_date.isoformat()}\t{tx.description}\t"
        f"{tx.frequency.label}\t{tx.amount:.2f}\t{row.balance:.2f}"
    )


def _apply(
    ctx: typer.Context,
    index: int,
    until: datetime | None,
    today: datetime | None,
    action: Callable[[Account, Transaction, date], bool],
) -> None:
    """Load, pick row ``index``, run ``action`` and save when it changed anything."""

    path: Path = ctx.obj
    account = _load_or_exit(path)
    day = _resolve_today(today)
    tx = _select(account, index, _resolve_until(until, day))

    if not action(account, tx, day):
        typer.echo(
            f"No change: '{tx.description}' on {tx.occurrence_date.isoformat()} "
            "cannot be changed this way.",
            err=True,
        )
        return

    _save_or_exit(account, path)
    typer.echo(f"Updated '{tx.description}'. Balance: {account.balance:.2f}")


# ---- Typer-based console interface -------------------------------------------


app = typer.Typer(
    no_args_is_help=True,
    add_completion=False,
    help="Forecast an account balance from one-off and recurring events.",
)


@app.callback()
def _root(ctx: typer.Context, config: Path | None = CONFIG_OPTION) -> None:
    """Root command.

    Loads ``.env`` from the current working directory (override=False),
    configures logging and resolves the account file for subcommands.
    """

    load_dotenv(dotenv_path=Path.cwd() / ".env", override=False)
    configure_logging()
    ctx.obj = resolve_account_path(config)


@app.command("forecast")
def forecast_cmd(
    ctx: typer.Context,
    until: datetime | None = UNTIL_OPTION,
    today: datetime | None = TODAY_OPTION,
) -> None:
    """Print the projected transactions with the running balance."""

    account = _load_or_exit(ctx.obj)
    day = _resolve_today(today)
    typer.echo(f"Balance\t{account.balance:.2f}")
    for i, row in enumerate(account.forecast(_resolve_until(until, day))):
        typer.echo(_format_row(i, row))


@app.command("done")
def done_cmd(
    ctx: typer.Context,
    index: int = INDEX_ARGUMENT,
    until: datetime | None = UNTIL_OPTION,
    today: datetime | None = TODAY_OPTION,
) -> None:
    """Mark a transaction as paid and apply it to the balance."""

    _apply(ctx, index, until, today, lambda account, tx, _day: account.complete(tx))


@app.command("delete")
def delete_cmd(
    ctx: typer.Context,
    index: int = INDEX_ARGUMENT,
    until: datetime | None = UNTIL_OPTION,
    today: datetime | None = TODAY_OPTION,
) -> None:
    """Drop a transaction without touching the balance."""

    _apply(ctx, index, until, today, lambda account, tx, _day: account.delete(tx))


@app.command("today")
def today_cmd(
    ctx: typer.Context,
    index: int = INDEX_ARGUMENT,
    until: datetime | None = UNTIL_OPTION,
    today: datetime | None = TODAY_OPTION,
) -> None:
    """Move a transaction to today (splits it off a repeating series)."""

    _apply(ctx, index, until, today, lambda account, tx, day: account.pull_forward(tx, day))


@app.command("prev")
def prev_cmd(
    ctx: typer.Context,
    index: int = INDEX_ARGUMENT,
    until: datetime | None = UNTIL_OPTION,
    today: datetime | None = TODAY_OPTION,
) -> None:
    """Move a one-off transaction to the previous day."""

    _apply(ctx, index, until, today, lambda account, tx, _day: account.shift_date(tx, -1))


@app.command("next")
def next_cmd(
    ctx: typer.Context,
    index: int = INDEX_ARGUMENT,
    until: datetime | None = UNTIL_OPTION,
    today: datetime | None = TODAY_OPTION,
) -> None:
    """Move a one-off transaction to the next day."""

    _apply(ctx, index, until, today, lambda account, tx, _day: account.shift_date(tx, 1))


@app.command("add")
def add_cmd(
    ctx: typer.Context,
    on: datetime = typer.Option(..., "--date", formats=_DATE_FORMATS, help="First occurrence."),
    description: str = typer.Option(..., "--description", help="What the money is for."),
    amount: str = typer.Option(..., "--amount", help="Signed amount; negative for expenses."),
    frequency: str = typer.Option("once", "--frequency", help="Once, Daily, Weekly, Biweekly, Monthly or Yearly."),
) -> None:
    """Add a one-off or recurring event."""

    event = Event(
        anchor_date=on.date(),
        description=description,
        amount=_parse_amount(amount, param_hint="'--amount'"),
        frequency=_parse_frequency(frequency),
    )
    path: Path = ctx.obj
    account = _load_or_exit(path)
    account.add_event(event)
    _save_or_exit(account, path)
    typer.echo(f"Added '{event.description}' ({event.frequency.label}) from {event.anchor_date.isoformat()}.")


@app.command("edit")
def edit_cmd(
    ctx: typer.Context,
    index: int = INDEX_ARGUMENT,
    on: datetime | None = typer.Option(None, "--date", formats=_DATE_FORMATS, help="New anchor date."),
    description: str | None = typer.Option(None, "--description", help="New description."),
    amount: str | None = typer.Option(None, "--amount", help="New signed amount."),
    frequency: str | None = typer.Option(None, "--frequency", help="New frequency."),
    until: datetime | None = UNTIL_OPTION,
    today: datetime | None = TODAY_OPTION,
) -> None:
    """Edit the event behind a transaction."""

    new_amount = _parse_amount(amount, param_hint="'--amount'") if amount is not None else None
    new_frequency = _parse_frequency(frequency) if frequency is not None else None

    def _edit(account: Account, tx: Transaction, _day: date) -> bool:
        account.update_event(
            tx.event_id,
            anchor_date=on.date() if on is not None else None,
            description=description,
            amount=new_amount,
            frequency=new_frequency,
        )
        return True

    _apply(ctx, index, until, today, _edit)


@app.command("balance")
def balance_cmd(
    ctx: typer.Context,
    value: str = typer.Argument(..., help="The current account balance."),
) -> None:
    """Correct the current balance."""

    new_balance = _parse_amount(value, param_hint="'VALUE'")
    path: Path = ctx.obj
    account = _load_or_exit(path)
    account.set_balance(new_balance)
    _save_or_exit(account, path)
    typer.echo(f"Balance: {account.balance:.2f}")


if __name__ == "__main__":  # pragma: no cover - exercised via the console script
    app()
