"""Configuration commands for fxreplay CLI."""

import click
from rich.console import Console
from rich.panel import Panel

from fxreplay.config import CONFIG_PATH, write_template_config

console = Console()


@click.command()
@click.option("--force", is_flag=True, help="Overwrite an existing config file.")
@click.pass_context
def init(ctx: click.Context, force: bool) -> None:
    """Create a config file populated with default settings.

    \b
    Examples:
      fxreplay init
      fxreplay --config ./fxreplay.toml init --force
    """
    path = ctx.obj.get("config_path") or CONFIG_PATH

    if path.exists() and not force:
        console.print(Panel(
            f"[yellow]Config already exists:[/yellow] {path}\n\n"
            "Use [cyan]--force[/cyan] to overwrite it.",
            title="[bold yellow]Skipped[/bold yellow]",
            border_style="yellow",
        ))
        return

    written = write_template_config(path)
    console.print(Panel(
        f"[green]Config written to[/green] {written}",
        title="[bold green]Done[/bold green]",
        border_style="green",
    ))
