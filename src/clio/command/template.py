"""Placeholder parsing and rendering for command templates.

A placeholder is ``{{`` followed by an optional space or tab, a dot, an
identifier, an optional space or tab and ``}}``, e.g. ``{{ .name }}``.
Anything else is literal text and is copied to the output unchanged.
"""

import re
from collections.abc import Mapping
from typing import TYPE_CHECKING

from clio.exceptions import InvalidTemplateError

if TYPE_CHECKING:
    from clio.command.model import Parameter

PLACEHOLDER_PATTERN = re.compile(r"\{\{[ \t]?\.([A-Za-z_][A-Za-z0-9_]*)[ \t]?\}\}")


def _check(template: str) -> str:
    if not isinstance(template, str):
        raise InvalidTemplateError(
            f"template must be a string, got {type(template).__name__}"
        )
    return template


def find_placeholders(template: str) -> list[str]:
    """Return every placeholder name in source order, duplicates included."""
    return [m.group(1) for m in PLACEHOLDER_PATTERN.finditer(_check(template))]


def placeholder_names(template: str) -> list[str]:
    """Return distinct placeholder names in order of first appearance."""
    return list(dict.fromkeys(find_placeholders(template)))


def parse_parameters(template: str) -> list["Parameter"]:
    """Create one parameter per placeholder match, in source order.

    Every parameter gets a freshly allocated id. Repeated names are kept
    here; they collapse when the owning command is built.

    Args:
        template: Raw command template.

    Returns:
        List of new parameters.
    """
    from clio.command.model import Parameter, new_id

    return [Parameter(id=new_id(), name=name) for name in find_placeholders(template)]


def render(template: str, values: Mapping[str, str]) -> str:
    """Substitute every placeholder with the value keyed by its name.

    Missing names render as the empty string.

    Args:
        template: Raw command template.
        values: Mapping from placeholder name to replacement text.

    Returns:
        The rendered string.
    """
    return PLACEHOLDER_PATTERN.sub(
        lambda m: str(values.get(m.group(1), "")), _check(template)
    )
