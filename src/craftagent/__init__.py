"""
CraftAgent - LLM tool-calling agent for game bots

Turns chat input into a bounded sequence of in-game actions by asking a
language model what to do next and dispatching its tool calls.
"""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("craftagent")
except PackageNotFoundError:
    __version__ = "0.1.0"

__all__ = [
    "__version__",
]
