"""Configuration loading for fxreplay.

Settings live in ``~/.config/fxreplay/config.toml``. Every key is optional;
a missing or unreadable file yields the defaults.

Example::

    [market]
    seed = 42
    lookback_hours = 4380

    [session]
    starting_balance = 10000.0
    backtest_offset_days = 30

    [ledger]
    lot_multiplier = 100000
"""

import logging
from pathlib import Path
from typing import Optional

import toml
from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

CONFIG_DIR = Path.home() / ".config" / "fxreplay"
CONFIG_PATH = CONFIG_DIR / "config.toml"


class MarketConfig(BaseModel):
    """Price generation settings."""

    seed: Optional[int] = Field(default=None, description="Seed for reproducible series")
    lookback_hours: int = Field(default=4380, gt=0, description="Candles per series")
    interval_minutes: int = Field(default=60, gt=0, description="Candle spacing")


class SessionConfig(BaseModel):
    """Defaults for new sessions."""

    starting_balance: float = Field(default=10000.0, gt=0, description="Initial balance")
    backtest_offset_days: int = Field(
        default=30, ge=0, description="Days before creation the virtual clock starts"
    )
    time_speed: int = Field(default=1, ge=1, description="Replay speed multiplier")


class LedgerConfig(BaseModel):
    """Trade accounting settings."""

    lot_multiplier: float = Field(default=100000, gt=0, description="Units per standard lot")


class SimulatorConfig(BaseModel):
    """Top-level fxreplay configuration."""

    market: MarketConfig = Field(default_factory=MarketConfig)
    session: SessionConfig = Field(default_factory=SessionConfig)
    ledger: LedgerConfig = Field(default_factory=LedgerConfig)


def load_config(path: Optional[Path] = None) -> SimulatorConfig:
    """Load configuration from a TOML file.

    Args:
        path: Config file; defaults to ``CONFIG_PATH``.

    Returns:
        Parsed configuration, or defaults if the file is missing or cannot
        be parsed.

    Raises:
        pydantic.ValidationError: If the file parses but holds invalid values.
    """
    config_path = path or CONFIG_PATH
    if not config_path.exists():
        return SimulatorConfig()

    try:
        data = toml.load(config_path)
    except (toml.TomlDecodeError, OSError) as e:
        logger.warning("Ignoring unreadable config %s: %s", config_path, e)
        return SimulatorConfig()

    return SimulatorConfig.model_validate(data)


def write_template_config(path: Optional[Path] = None) -> Path:
    """Write a config file populated with the defaults.

    Returns:
        Path of the written file.
    """
    config_path = path or CONFIG_PATH
    config_path.parent.mkdir(parents=True, exist_ok=True)

    template = SimulatorConfig().model_dump(exclude_none=True)
    with open(config_path, "w") as f:
        toml.dump(template, f)
    return config_path
