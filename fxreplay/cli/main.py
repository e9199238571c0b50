"""Main CLI entry point for fxreplay.

This module provides the main click group and lazy loading
of subcommand modules.
"""

from pathlib import Path

import click
from rich.console import Console

console = Console()


class LazyGroup(click.Group):
    """A click Group that imports subcommand modules on first use."""

    def __init__(self, *args, lazy_subcommands: dict[str, str] | None = None, **kwargs):
        """Initialize the lazy group.

        Args:
            lazy_subcommands: Mapping of command names to module paths.
        """
        super().__init__(*args, **kwargs)
        self._lazy_subcommands = lazy_subcommands or {}

    def list_commands(self, ctx: click.Context) -> list[str]:
        """List all available commands."""
        base = super().list_commands(ctx)
        lazy = list(self._lazy_subcommands.keys())
        return sorted(set(base + lazy))

    def get_command(self, ctx: click.Context, cmd_name: str) -> click.Command | None:
        """Get a command by name, lazily loading if needed."""
        if cmd_name in self.commands:
            return self.commands[cmd_name]

        if cmd_name in self._lazy_subcommands:
            return self._lazy_load(cmd_name)

        return None

    def _lazy_load(self, cmd_name: str) -> click.Command:
        """Load a command from its module path."""
        import importlib

        module_path = self._lazy_subcommands[cmd_name]
        module = importlib.import_module(module_path)

        cmd = getattr(module, cmd_name, None)
        if not isinstance(cmd, click.Command):
            raise click.ClickException(f"Could not find command '{cmd_name}' in {module_path}")

        self.add_command(cmd)
        return cmd


LAZY_SUBCOMMANDS = {
    "pairs": "fxreplay.cli.market",
    "prices": "fxreplay.cli.market",
    "quote": "fxreplay.cli.market",
    "replay": "fxreplay.cli.replay",
    "init": "fxreplay.cli.settings",
}


CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}


@click.group(cls=LazyGroup, lazy_subcommands=LAZY_SUBCOMMANDS, context_settings=CONTEXT_SETTINGS)
@click.version_option(package_name="fxreplay")
@click.option(
    "--log-level",
    default="WARNING",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    help="Console log level (default: WARNING)",
)
@click.option(
    "--log-file",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Also write DEBUG logs to this file.",
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Config file (default: ~/.config/fxreplay/config.toml)",
)
@click.pass_context
def cli(ctx: click.Context, log_level: str, log_file: Path | None, config_path: Path | None) -> None:
    """fxreplay - forex backtesting on synthetic price history.

    Generate hourly price series for eight major pairs, step a virtual
    clock through them, place simulated trades and review the results.

    \b
    Quick Start:
      fxreplay pairs                   # Supported currency pairs
      fxreplay quote EUR/USD           # Latest generated price
      fxreplay replay session.toml     # Run a scripted backtest
    """
    from fxreplay.config import load_config
    from fxreplay.logging_setup import setup_logging

    setup_logging(log_level, log_file)
    ctx.ensure_object(dict)
    ctx.obj["config"] = load_config(config_path)
    ctx.obj["config_path"] = config_path


def main() -> None:
    """Main entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
