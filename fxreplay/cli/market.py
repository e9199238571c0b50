"""Market data commands for fxreplay CLI.

Lists supported pairs and displays generated candles and prices.
"""

from datetime import datetime, timedelta
from typing import Optional

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from fxreplay.config import SimulatorConfig
from fxreplay.db.memory import MemoryStore
from fxreplay.engine.simulator import BacktestSimulator
from fxreplay.market.instruments import (
    INSTRUMENTS,
    is_supported,
    normalize_symbol,
    pip_value,
    price_change,
)
from fxreplay.timeutils import parse_instant

console = Console()


def build_simulator(
    config: SimulatorConfig,
    seed: Optional[int] = None,
    pairs: Optional[list[str]] = None,
) -> BacktestSimulator:
    """Create an in-memory simulator with series for ``pairs`` (default: all).

    Args:
        config: Loaded configuration.
        seed: Overrides the configured market seed.
        pairs: Pairs to generate up front.
    """
    if seed is not None:
        market = config.market.model_copy(update={"seed": seed})
        config = config.model_copy(update={"market": market})

    if pairs is None:
        return BacktestSimulator.from_config(config)

    store = MemoryStore(backtest_offset=timedelta(days=config.session.backtest_offset_days))
    simulator = BacktestSimulator(store, config=config)
    for pair in pairs:
        simulator.generate_price_series(pair)
    return simulator


def _error(message: str) -> None:
    console.print(Panel(
        f"[red]{message}[/red]",
        title="[bold red]Error[/bold red]",
        border_style="red",
    ))
    raise SystemExit(1)


def _resolve_pair(symbol: str) -> str:
    pair = normalize_symbol(symbol)
    if not is_supported(pair):
        _error(
            f"Unsupported pair: {symbol}\n\n"
            f"Run [cyan]fxreplay pairs[/cyan] to see supported pairs."
        )
    return pair


def _parse_time_option(value: Optional[str], name: str) -> Optional[datetime]:
    if value is None:
        return None
    try:
        return parse_instant(value)
    except ValueError:
        _error(f"Invalid {name} timestamp: {value}")


@click.command()
def pairs() -> None:
    """List supported currency pairs.

    \b
    Examples:
      fxreplay pairs
    """
    table = Table(title="Currency Pairs", show_header=True, header_style="bold cyan")
    table.add_column("Pair", style="bold")
    table.add_column("Base Price", justify="right")
    table.add_column("Volatility", justify="right")
    table.add_column("Pip", justify="right")
    table.add_column("Pip Value / Lot", justify="right")

    for inst in INSTRUMENTS.values():
        table.add_row(
            inst.symbol,
            f"{inst.base_price:.5f}",
            f"{inst.base_volatility * 100:.2f}%",
            f"{inst.pip_size:g}",
            f"{pip_value(inst.symbol):.2f}",
        )

    console.print(table)


@click.command()
@click.argument("symbol")
@click.option("--start", default=None, help="Earliest candle time (ISO-8601, UTC)")
@click.option("--end", default=None, help="Latest candle time (ISO-8601, UTC)")
@click.option(
    "-n", "--limit",
    default=24,
    type=int,
    help="Show only the last N matching candles (default: 24, 0 for all)",
)
@click.option("--seed", default=None, type=int, help="Seed for reproducible prices")
@click.pass_context
def prices(
    ctx: click.Context,
    symbol: str,
    start: Optional[str],
    end: Optional[str],
    limit: int,
    seed: Optional[int],
) -> None:
    """Display generated hourly candles for a pair.

    SYMBOL is the currency pair (e.g., EUR/USD, eurusd).

    \b
    Examples:
      fxreplay prices EUR/USD                        # Last 24 candles
      fxreplay prices GBPUSD -n 0 --start 2026-09-01 # Everything since Sep 1
    """
    pair = _resolve_pair(symbol)
    start_time = _parse_time_option(start, "start")
    end_time = _parse_time_option(end, "end")

    simulator = build_simulator(ctx.obj["config"], seed=seed, pairs=[pair])
    candles = simulator.get_prices(pair, start_time, end_time) or []
    if limit > 0:
        candles = candles[-limit:]

    if not candles:
        console.print(Panel(
            "[dim]No candles in the requested range[/dim]",
            title=f"[bold]{pair}[/bold]",
            border_style="dim",
        ))
        return

    table = Table(title=f"{pair} (1h)", show_header=True, header_style="bold cyan")
    table.add_column("Time (UTC)", style="bold")
    table.add_column("Open", justify="right")
    table.add_column("High", justify="right")
    table.add_column("Low", justify="right")
    table.add_column("Close", justify="right")
    table.add_column("Volume", justify="right")

    for candle in candles:
        color = "green" if candle.close >= candle.open else "red"
        table.add_row(
            candle.timestamp.strftime("%Y-%m-%d %H:%M"),
            f"{candle.open:.5f}",
            f"{candle.high:.5f}",
            f"{candle.low:.5f}",
            f"[{color}]{candle.close:.5f}[/{color}]",
            f"{candle.volume:,}",
        )

    console.print(table)


@click.command()
@click.argument("symbol")
@click.option("--at", "at_time", default=None, help="Price nearest to this time (ISO-8601, UTC)")
@click.option("--seed", default=None, type=int, help="Seed for reproducible prices")
@click.pass_context
def quote(ctx: click.Context, symbol: str, at_time: Optional[str], seed: Optional[int]) -> None:
    """Show the latest price for a pair, or the price at a past time.

    \b
    Examples:
      fxreplay quote EUR/USD
      fxreplay quote USDJPY --at 2026-09-15T14:30:00Z
    """
    pair = _resolve_pair(symbol)
    instant = _parse_time_option(at_time, "--at")

    simulator = build_simulator(ctx.obj["config"], seed=seed, pairs=[pair])
    if instant is None:
        price = simulator.get_current_price(pair)
        label = "latest"
        series = simulator.store.get_series(pair)
        reference_time = series.latest().timestamp if series and len(series) else None
    else:
        price = simulator.get_historical_price(pair, instant)
        label = instant.strftime("%Y-%m-%d %H:%M UTC")
        reference_time = instant

    if price is None:
        _error(f"No price available for {pair}")

    lines = [f"[bold]{price:.5f}[/bold]"]
    previous = simulator.get_historical_price(pair, reference_time - timedelta(days=1))
    if previous is not None:
        change, percentage = price_change(price, previous)
        color = "green" if change >= 0 else "red"
        lines.append(f"[{color}]24h: {change:+.5f} ({percentage:+.2f}%)[/{color}]")

    console.print(Panel(
        "\n".join(lines),
        title=f"[bold cyan]{pair}[/bold cyan] [dim]({label})[/dim]",
        border_style="cyan",
    ))
