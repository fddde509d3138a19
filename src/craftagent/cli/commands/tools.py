"""
craftagent tools - Inspect the tools offered to the model.

Usage:
    craftagent tools list
    craftagent tools list --mode creative --group combat
    craftagent tools schema <tool-name>
"""

from typing import Annotated, Optional

import typer
from rich.table import Table

from craftagent.cli.output import console, print_error
from craftagent.config import Config
from craftagent.functions import FunctionRegistry, GameMode
from craftagent.functions.builtin import register_builtin_functions

app = typer.Typer(
    name="tools",
    help="Inspect the tools offered to the model.",
)


def build_registry() -> FunctionRegistry:
    """Registry with every built-in function."""
    registry = FunctionRegistry()
    register_builtin_functions(registry)
    return registry


@app.command("list")
def list_tools(
    ctx: typer.Context,
    mode: Annotated[
        Optional[GameMode],
        typer.Option(
            "--mode",
            "-m",
            help="Game mode to list tools for (default: from config).",
        ),
    ] = None,
    groups: Annotated[
        Optional[list[str]],
        typer.Option(
            "--group",
            "-g",
            help="Enabled capability group; repeat for several (default: from config).",
        ),
    ] = None,
) -> None:
    """List tools visible to the model for a game mode and group set."""
    config: Config = ctx.obj["config"]
    game_mode = mode or config.agent.game_mode
    enabled = groups if groups is not None else config.agent.groups

    tools = build_registry().list_tools(groups=enabled, game_mode=game_mode)
    if not tools:
        console.print("[yellow]No tools available.[/yellow]")
        return

    table = Table(title=f"Tools ({game_mode.value})")
    table.add_column("Name", style="cyan", no_wrap=True)
    table.add_column("Group", style="magenta")
    table.add_column("Mode", style="green")
    table.add_column("Description")

    for tool in tools:
        desc = tool.description[:80] + "..." if len(tool.description) > 80 else tool.description
        table.add_row(
            tool.name,
            tool.group or "-",
            tool.game_mode.value if tool.game_mode else "any",
            desc,
        )

    console.print(table)
    console.print(f"\n[dim]Total: {len(tools)} tool(s)[/dim]")


@app.command("schema")
def tool_schema(
    tool_name: Annotated[
        str,
        typer.Argument(help="Tool name"),
    ],
) -> None:
    """Print the schema the model receives for a tool."""
    definition = build_registry().get(tool_name)
    if definition is None:
        print_error(f"Tool not found: {tool_name}")
        raise typer.Exit(1)

    schema = FunctionRegistry.describe(definition)
    console.print_json(data=schema)
