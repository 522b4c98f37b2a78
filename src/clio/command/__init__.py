"""Command templates and their lifecycle.

Usage:
    from clio.command import Argument, Command

    cmd = Command.new("echo", "simple echo", "echo '{{.text}}'")
    cmd.compile([Argument("text", "hello")])  # "echo 'hello'"
"""

from clio.command.model import (
    Argument,
    Command,
    History,
    Parameter,
    Usage,
    new_id,
)
from clio.command.template import parse_parameters, placeholder_names, render

__all__ = [
    # Model
    "Argument",
    "Command",
    "History",
    "Parameter",
    "Usage",
    "new_id",
    # Template engine
    "parse_parameters",
    "placeholder_names",
    "render",
]
