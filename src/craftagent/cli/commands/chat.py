"""
craftagent chat - Talk to the agent from the terminal.

Runs the conversation loop with the task and utility tools and no game
world attached. Lines starting with "/" are REPL commands:

    /tasks   show the task list
    /tidy    drop stale tool results from memory
    /reset   forget the conversation
    /exit    quit
"""

import asyncio
from typing import Annotated, Optional

import typer
from rich.markup import escape

from craftagent.agent import Agent
from craftagent.cli.output import console, print_info, print_table
from craftagent.config import Config
from craftagent.functions import FunctionRegistry
from craftagent.functions.builtin import register_builtin_functions
from craftagent.memory import JsonMemoryStore
from craftagent.providers import ChatClient


def build_agent(config: Config, name: str) -> Agent:
    """Agent for a terminal session: no world, memory as configured."""
    registry = FunctionRegistry()
    register_builtin_functions(registry, include_world=False)

    client = ChatClient(
        model=config.llm.model,
        temperature=config.llm.temperature,
        api_base=config.llm.api_base,
        api_key=config.llm.api_key,
        timeout=config.llm.timeout,
    )

    memory = None
    if config.memory.enable:
        memory = JsonMemoryStore(name, base_path=config.memory.path)

    return Agent.from_config(config, client, registry, memory=memory, name=name)


def chat(
    ctx: typer.Context,
    name: Annotated[
        Optional[str],
        typer.Option(
            "--name",
            "-n",
            help="Bot name; selects the saved conversation (default: from config).",
        ),
    ] = None,
    user: Annotated[
        str,
        typer.Option(
            "--user",
            "-u",
            help="Your username as the bot sees it.",
        ),
    ] = "Player",
) -> None:
    """Chat with the agent in the terminal."""
    config: Config = ctx.obj["config"]
    agent = build_agent(config, name or config.agent.name)
    asyncio.run(_session(agent, user))


async def _session(agent: Agent, user: str) -> None:
    model = getattr(agent.loop.client, "model", "the model")
    print_info(f"Chatting with [cyan]{agent.name}[/cyan] using {model}. /exit to quit.")

    while True:
        try:
            line = console.input("[bold cyan]you>[/bold cyan] ").strip()
        except (EOFError, KeyboardInterrupt):
            break

        if not line:
            continue
        if line in ("/exit", "/quit"):
            break

        if line == "/tasks":
            tasks = agent.context.tasks.get()
            if not tasks:
                print_info("Task list is empty")
            else:
                print_table(
                    ["#", "Title", "Priority", "Done"],
                    [[i, escape(t.title), t.priority, "yes" if t.completed else ""] for i, t in enumerate(tasks)],
                    title="Tasks",
                )
            continue
        if line == "/tidy":
            removed = agent.loop.tidy_memory()
            print_info(f"Removed {removed} message(s)")
            continue
        if line == "/reset":
            agent.loop.reset()
            agent.context.tasks.clear()
            print_info("Conversation forgotten")
            continue

        reply = await agent.respond(Agent.chat_input(user, line))
        console.print(f"[bold green]{escape(agent.name)}>[/bold green] {escape(reply)}")
