"""
craftagent memory - Inspect and delete saved conversations.

Usage:
    craftagent memory show <bot-name>
    craftagent memory clear <bot-name>
"""

from typing import Annotated

import typer
from rich.markup import escape
from rich.table import Table

from craftagent.cli.output import console, print_info, print_success, print_warning
from craftagent.config import Config
from craftagent.memory import JsonMemoryStore

app = typer.Typer(
    name="memory",
    help="Inspect and delete saved conversations.",
)


def open_store(config: Config, name: str) -> JsonMemoryStore:
    """Memory store for a bot at the configured location."""
    return JsonMemoryStore(name, base_path=config.memory.path)


@app.command("show")
def show_memory(
    ctx: typer.Context,
    name: Annotated[
        str,
        typer.Argument(help="Bot name"),
    ],
    limit: Annotated[
        int,
        typer.Option(
            "--limit",
            "-n",
            help="Show only the last N messages (0 = all).",
        ),
    ] = 0,
) -> None:
    """Show a bot's saved conversation."""
    store = open_store(ctx.obj["config"], name)
    messages = store.load()
    if not messages:
        print_info(f"No saved conversation for {name}")
        return

    shown = messages[-limit:] if limit > 0 else messages

    table = Table(title=f"Memory of {name}")
    table.add_column("#", style="dim", justify="right")
    table.add_column("Role", style="cyan", no_wrap=True)
    table.add_column("Content")

    offset = len(messages) - len(shown)
    for i, message in enumerate(shown, start=offset):
        content = "" if message.content is None else escape(str(message.content))
        if message.tool_calls:
            calls = escape(", ".join(str(call) for call in message.tool_calls))
            content = f"{content}\n[magenta]-> {calls}[/magenta]" if content else f"[magenta]-> {calls}[/magenta]"
        elif message.tool_name:
            content = f"[magenta]{message.tool_name}:[/magenta] {content}"
        table.add_row(str(i), message.role, content)

    console.print(table)
    console.print(f"\n[dim]Total: {len(messages)} message(s) in {store.path}[/dim]")


@app.command("clear")
def clear_memory(
    ctx: typer.Context,
    name: Annotated[
        str,
        typer.Argument(help="Bot name"),
    ],
    yes: Annotated[
        bool,
        typer.Option(
            "--yes",
            "-y",
            help="Do not ask for confirmation.",
        ),
    ] = False,
) -> None:
    """Delete a bot's saved conversation."""
    store = open_store(ctx.obj["config"], name)
    if not store.path.exists():
        print_warning(f"No saved conversation for {name}")
        return

    if not yes:
        typer.confirm(f"Delete {store.path}?", abort=True)

    store.clear()
    print_success(f"Cleared memory of {name}")
