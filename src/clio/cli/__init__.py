"""CLI layer for clio.

Built on Typer with Rich formatting.

Usage:
    clio add ls-dir "ls -la {{ .dir }}" -d "list a directory"
    clio search ls
    clio run <id> --arg dir=/tmp
"""

from clio.cli.app import app, main
from clio.cli.context import AppContext, create_context, create_source

__all__ = [
    # App
    "app",
    "main",
    # Context
    "AppContext",
    "create_context",
    "create_source",
]
