"""CLI commands for fxreplay.

This package provides the command-line interface for fxreplay,
including price data, quotes and scripted backtest replays.
"""

from fxreplay.cli.main import cli, main

__all__ = ["cli", "main"]
