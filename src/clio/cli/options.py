"""Shared CLI options for clio commands."""

from typing import Annotated

import typer

IdArgument = Annotated[str, typer.Argument(help="Command id.")]

DefaultOption = Annotated[
    list[str] | None,
    typer.Option(
        "--default",
        help="Default value for a parameter, as NAME=VALUE. Repeatable.",
    ),
]

DescribeOption = Annotated[
    list[str] | None,
    typer.Option(
        "--describe",
        help="Description for a parameter, as NAME=TEXT. Repeatable.",
    ),
]

ArgOption = Annotated[
    list[str] | None,
    typer.Option(
        "--arg",
        "-a",
        help="Argument value, as NAME=VALUE. Repeatable.",
    ),
]


def parse_pairs(values: list[str] | None, option: str) -> dict[str, str]:
    """Parse repeated ``NAME=VALUE`` options into a dict.

    The value may be empty and may itself contain ``=``; the last
    occurrence of a name wins.

    Raises:
        typer.BadParameter: If an item has no ``=`` or an empty name.
    """
    pairs: dict[str, str] = {}
    for item in values or []:
        name, sep, value = item.partition("=")
        name = name.strip()
        if not sep or not name:
            raise typer.BadParameter(
                f"Expected NAME=VALUE, got '{item}'", param_hint=option
            )
        pairs[name] = value
    return pairs
