"""Exception types raised by fxreplay.

Missing sessions, trades and journal entries are reported as ``None``
results rather than exceptions; these types cover the remaining failures.
"""


class FxReplayError(Exception):
    """Base class for fxreplay errors."""


class UnsupportedInstrumentError(FxReplayError, ValueError):
    """Raised when an instrument outside the supported universe is required."""

    def __init__(self, instrument: str):
        super().__init__(f"Unsupported instrument: {instrument}")
        self.instrument = instrument


class TradeAlreadyClosedError(FxReplayError):
    """Raised when closing a trade that is already closed."""

    def __init__(self, trade_id: int):
        super().__init__(f"Trade {trade_id} is already closed")
        self.trade_id = trade_id


class ImmutableFieldError(FxReplayError, ValueError):
    """Raised when a patch tries to change a field fixed at creation."""

    def __init__(self, fields: list[str]):
        super().__init__(f"Cannot update immutable field(s): {', '.join(sorted(fields))}")
        self.fields = fields
