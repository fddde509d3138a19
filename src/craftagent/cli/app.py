"""
Main Typer application for the craftagent CLI.

This module defines the root CLI application and registers all command groups.
"""

from pathlib import Path
from typing import Annotated, Optional

import typer

from craftagent import __version__
from craftagent.cli.commands import chat, memory, tools
from craftagent.cli.output import print_error, print_info, setup_logging
from craftagent.config import load_config
from craftagent.exceptions import ConfigurationError

LOG_LEVELS = ("debug", "info", "warning", "error")

# Create the main Typer app
app = typer.Typer(
    name="craftagent",
    help="LLM tool-calling agent for Minecraft bots.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    pretty_exceptions_show_locals=False,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        print_info(f"craftagent version [green]{__version__}[/green]")
        raise typer.Exit()


# noinspection PyUnusedLocal
@app.callback()
def main_callback(
    ctx: typer.Context,
    version: Annotated[
        Optional[bool],
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
    config_path: Annotated[
        Optional[Path],
        typer.Option(
            "--config",
            "-c",
            help="Config file merged over ~/.craftagent/config.yaml.",
        ),
    ] = None,
    log_level: Annotated[
        Optional[str],
        typer.Option(
            "--log-level",
            "-l",
            help="Log level: debug, info, warning or error.",
        ),
    ] = None,
) -> None:
    """
    [bold blue]craftagent[/bold blue] - tool-calling agent for Minecraft bots

    Inspect the tools offered to the model, chat with the agent from the
    terminal, and manage saved conversations.
    """
    try:
        config = load_config(config_path)
    except ConfigurationError as e:
        print_error(str(e))
        raise typer.Exit(1) from e

    level = (log_level or config.logging.level).lower()
    if level not in LOG_LEVELS:
        print_error(f"Unknown log level: {level}")
        raise typer.Exit(1)

    setup_logging(level)
    ctx.obj = {"config": config}


# Register command groups
app.add_typer(tools.app, name="tools")
app.add_typer(memory.app, name="memory")
app.command("chat")(chat.chat)


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
