"""Command-line interface."""

from craftagent.cli.app import app, main

__all__ = ["app", "main"]
