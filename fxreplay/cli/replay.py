"""Scripted backtest replay for fxreplay CLI.

A replay script is a TOML file describing one session and an ordered list
of steps run against its virtual clock::

    [session]
    name = "London breakout"
    instrument = "EUR/USD"
    starting_balance = 10000
    start = "2026-09-01T07:00:00Z"

    [[steps]]
    action = "open"
    label = "long1"
    direction = "BUY"
    size = 0.5
    stop_loss = 1.0800

    [[steps]]
    action = "advance"
    minutes = 240

    [[steps]]
    action = "close"
    label = "long1"

Actions: ``open``, ``close``, ``advance``, ``set_time``, ``note``. Opens
and closes without an explicit ``price`` fill at the session price.
"""

from pathlib import Path
from typing import Any, Optional

import click
import toml
from pydantic import BaseModel, Field
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from fxreplay.cli.market import build_simulator
from fxreplay.engine.simulator import BacktestSimulator
from fxreplay.exceptions import FxReplayError
from fxreplay.market.instruments import is_supported, normalize_symbol
from fxreplay.models import JournalEntry, Session, SessionStats, Trade
from fxreplay.timeutils import parse_instant

console = Console()

VALID_ACTIONS = ("open", "close", "advance", "set_time", "note")


class ScriptError(ValueError):
    """Raised when a replay script is malformed."""


class ReplayResult(BaseModel):
    """Outcome of running a replay script."""

    session: Session = Field(..., description="Session after the last step")
    trades: list[Trade] = Field(default_factory=list, description="Trades in open order")
    journal: list[JournalEntry] = Field(default_factory=list, description="Journal entries")
    stats: SessionStats = Field(..., description="Final session statistics")
    events: list[str] = Field(default_factory=list, description="Human-readable step log")


def _require(step: dict, key: str, index: int) -> Any:
    if key not in step:
        raise ScriptError(f"Step {index}: missing '{key}'")
    return step[key]


def _optional_float(value: Any) -> Optional[float]:
    return None if value is None else float(value)


def execute_script(simulator: BacktestSimulator, script: dict) -> ReplayResult:
    """Run a parsed replay script against a simulator.

    Args:
        simulator: Simulator with price series for the pairs used.
        script: Parsed script with a ``session`` table and ``steps`` list.

    Returns:
        ReplayResult with the final session, trades and statistics.

    Raises:
        ScriptError: If the script is malformed.
        TradeAlreadyClosedError: If a trade is closed twice.
    """
    session_cfg = script.get("session", {})
    instrument = normalize_symbol(session_cfg.get("instrument", "EUR/USD"))
    if not is_supported(instrument):
        raise ScriptError(f"Unsupported pair: {instrument}")

    username = session_cfg.get("user", "replay")
    user = simulator.store.get_user_by_username(username) or simulator.create_user(username, "")
    start = parse_instant(session_cfg["start"]) if "start" in session_cfg else None

    session = simulator.create_session(
        user_id=user.id,
        name=session_cfg.get("name", "Replay"),
        instrument=instrument,
        starting_balance=_optional_float(session_cfg.get("starting_balance")),
        current_time=start,
    )

    labels: dict[str, int] = {}
    events: list[str] = []

    for index, step in enumerate(script.get("steps", []), start=1):
        action = _require(step, "action", index)
        if action not in VALID_ACTIONS:
            raise ScriptError(f"Step {index}: unknown action '{action}'")

        if action == "advance":
            minutes = int(_require(step, "minutes", index))
            updated = simulator.advance_session_time(session.id, minutes)
            if updated is None:
                raise ScriptError(f"Step {index}: session clock is not set")
            events.append(f"{updated.current_time:%Y-%m-%d %H:%M} advanced {minutes:+d} min")

        elif action == "set_time":
            updated = simulator.set_session_time(
                session.id, parse_instant(_require(step, "at", index))
            )
            events.append(f"{updated.current_time:%Y-%m-%d %H:%M} clock set")

        elif action == "open":
            pair = normalize_symbol(step.get("instrument", instrument))
            if not is_supported(pair):
                raise ScriptError(f"Step {index}: unsupported pair {pair}")
            trade = simulator.open_trade(
                session.id,
                pair,
                str(_require(step, "direction", index)).upper(),
                float(_require(step, "size", index)),
                entry_price=_optional_float(step.get("price")),
                stop_loss=_optional_float(step.get("stop_loss")),
                take_profit=_optional_float(step.get("take_profit")),
                notes=step.get("notes"),
            )
            if trade is None:
                raise ScriptError(f"Step {index}: no price available for {pair}")
            labels[step.get("label", f"#{trade.id}")] = trade.id
            events.append(
                f"{trade.opened_at:%Y-%m-%d %H:%M} OPEN {trade.direction} {pair} "
                f"x{trade.position_size:g} @ {trade.entry_price:.5f}"
            )

        elif action == "close":
            label = _require(step, "label", index)
            if label not in labels:
                raise ScriptError(f"Step {index}: unknown trade label '{label}'")
            trade = simulator.close_trade(
                labels[label], exit_price=_optional_float(step.get("price"))
            )
            if trade is None:
                raise ScriptError(f"Step {index}: no price available to close '{label}'")
            events.append(
                f"{trade.closed_at:%Y-%m-%d %H:%M} CLOSE {label} @ {trade.exit_price:.5f} "
                f"P&L {trade.pnl:+.2f}"
            )

        else:
            label = step.get("label")
            if label is not None and label not in labels:
                raise ScriptError(f"Step {index}: unknown trade label '{label}'")
            simulator.add_journal_entry(
                session.id,
                step.get("title", "Note"),
                step.get("content", ""),
                trade_id=labels.get(label) if label else None,
            )

    return ReplayResult(
        session=simulator.get_session(session.id),
        trades=simulator.get_trades(session.id),
        journal=simulator.get_journal(session.id),
        stats=simulator.get_session_stats(session.id),
        events=events,
    )


def load_script(path: Path) -> dict:
    """Parse a replay script file.

    Raises:
        ScriptError: If the file is not valid TOML.
    """
    try:
        return toml.load(path)
    except toml.TomlDecodeError as e:
        raise ScriptError(f"Invalid TOML in {path}: {e}") from e


def _money(value: float) -> str:
    color = "green" if value >= 0 else "red"
    sign = "+" if value >= 0 else ""
    return f"[{color}]{sign}{value:,.2f}[/{color}]"


def _display_result(result: ReplayResult) -> None:
    session = result.session

    for line in result.events:
        console.print(f"[dim]{line}[/dim]")

    if result.trades:
        console.print()
        table = Table(title="Trades", show_header=True, header_style="bold")
        table.add_column("#", justify="right")
        table.add_column("Pair", style="bold")
        table.add_column("Side", justify="center")
        table.add_column("Size", justify="right")
        table.add_column("Entry", justify="right")
        table.add_column("Exit", justify="right")
        table.add_column("P&L", justify="right")
        table.add_column("Status", justify="center")

        for trade in result.trades:
            table.add_row(
                str(trade.id),
                trade.instrument,
                trade.direction,
                f"{trade.position_size:g}",
                f"{trade.entry_price:.5f}",
                f"{trade.exit_price:.5f}" if trade.exit_price is not None else "-",
                _money(trade.pnl) if trade.pnl is not None else "-",
                trade.status,
            )
        console.print(table)

    stats = result.stats
    console.print(Panel(
        f"Starting Balance:  {session.starting_balance:,.2f}\n"
        f"Current Balance:   {session.current_balance:,.2f}\n"
        f"{'─' * 35}\n"
        f"Total P&L:         {_money(stats.total_pnl)}\n"
        f"Closed Trades:     {stats.total_trades} "
        f"({stats.winning_trades}W / {stats.losing_trades}L)\n"
        f"Win Rate:          {stats.win_rate:.1f}%\n"
        f"Average Trade:     {_money(stats.avg_trade)}\n"
        f"Max Drawdown:      [red]{stats.max_drawdown:,.2f}[/red]",
        title=f"[bold]{session.name}[/bold] [dim]({session.instrument})[/dim]",
        border_style="cyan",
    ))


@click.command()
@click.argument("script", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--seed", default=None, type=int, help="Seed for reproducible prices")
@click.pass_context
def replay(ctx: click.Context, script: Path, seed: Optional[int]) -> None:
    """Run a scripted backtest session and report its statistics.

    SCRIPT is a TOML file with a [session] table and [[steps]] entries.

    \b
    Examples:
      fxreplay replay london_breakout.toml
      fxreplay replay london_breakout.toml --seed 7
    """
    simulator = build_simulator(ctx.obj["config"], seed=seed)
    try:
        result = execute_script(simulator, load_script(script))
    except (ValueError, FxReplayError) as e:
        console.print(Panel(
            f"[red]{e}[/red]",
            title="[bold red]Replay Failed[/bold red]",
            border_style="red",
        ))
        raise SystemExit(1)

    _display_result(result)
