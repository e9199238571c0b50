"""fxreplay - synthetic forex backtesting simulator."""

__version__ = "0.1.0"
