"""Command, parameter and usage types."""

from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID

from uuid6 import uuid7

from clio.command import template as engine
from clio.exceptions import (
    ArityMismatchError,
    FieldTooLongError,
    ParameterNotInTemplateError,
    UnknownArgumentError,
)

MAX_NAME_LENGTH = 64
MAX_TEXT_LENGTH = 255


def new_id() -> UUID:
    """Return a new time-ordered (version 7) UUID."""
    return UUID(int=uuid7().int)


@dataclass
class Parameter:
    """Metadata attached to a placeholder name.

    Attributes:
        id: Parameter identity, stable while the name stays in the template.
        name: Placeholder name.
        description: Free text shown when asking for a value.
        default_value: Value offered when none is supplied.
    """

    id: UUID
    name: str
    description: str = ""
    default_value: str = ""


@dataclass(frozen=True)
class Argument:
    """A value supplied for a parameter at compile time."""

    name: str
    value: str


@dataclass(frozen=True)
class Usage:
    """A compiled command that was injected into the terminal."""

    command: str
    timestamp: datetime


@dataclass
class History:
    """Usages of one command, most recent first."""

    command_id: UUID
    usages: list[Usage] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.usages)


@dataclass
class Command:
    """A named, parameterized shell command.

    A command is a draft until ``build`` runs; changing the template turns
    it back into a draft. ``compile`` always builds first.

    Attributes:
        name: Short label.
        description: What the command does.
        template: Command text with ``{{ .name }}`` placeholders.
        parameters: Parameters in order of first placeholder appearance.
        id: Command identity, ``None`` until built.
    """

    name: str
    description: str
    template: str
    parameters: list[Parameter] = field(default_factory=list)
    id: UUID | None = None

    @classmethod
    def new(
        cls,
        name: str,
        description: str,
        template: str,
        *,
        parameters: list[Parameter] | None = None,
    ) -> "Command":
        """Create a built command.

        Args:
            name: Short label.
            description: What the command does.
            template: Command text with placeholders.
            parameters: Seed parameters whose metadata should be kept.
                Every name must appear as a placeholder in the template.

        Returns:
            The new command.

        Raises:
            ParameterNotInTemplateError: If a seed name is not in the template.
            FieldTooLongError: If a field exceeds its length limit.
        """
        names = set(engine.find_placeholders(template))
        for param in parameters or []:
            if param.name not in names:
                raise ParameterNotInTemplateError(param.name)

        cmd = cls(
            name=name,
            description=description,
            template=template,
            parameters=list(parameters or []),
        )
        cmd.validate()
        cmd.build()
        return cmd

    def validate(self) -> "Command":
        """Check field lengths (name 64, description and template 255).

        Raises:
            FieldTooLongError: If a field is over its limit.
        """
        for field_name, value, limit in (
            ("name", self.name, MAX_NAME_LENGTH),
            ("description", self.description, MAX_TEXT_LENGTH),
            ("template", self.template, MAX_TEXT_LENGTH),
        ):
            if len(value) > limit:
                raise FieldTooLongError(field_name, limit, len(value))
        return self

    @property
    def is_built(self) -> bool:
        """Whether the parameters reflect the current template."""
        return self.id is not None and [p.name for p in self.parameters] == (
            engine.placeholder_names(self.template)
        )

    def build(self) -> "Command":
        """Normalize the command.

        Mints an id when missing and rebuilds the parameter list from the
        template. Parameters whose name is still present keep their id,
        description and default value; new names get fresh parameters.
        Calling it again is a no-op.

        Returns:
            The command itself.
        """
        if self.id is None:
            self.id = new_id()

        current: dict[str, Parameter] = {}
        for param in self.parameters:
            current.setdefault(param.name, param)

        self.parameters = [
            current.get(name) or Parameter(id=new_id(), name=name)
            for name in engine.placeholder_names(self.template)
        ]
        return self

    def compile(self, arguments: list[Argument]) -> str:
        """Render the template with the given arguments.

        Args:
            arguments: One argument per parameter.

        Returns:
            The compiled command string.

        Raises:
            ArityMismatchError: If the arguments do not cover each parameter
                exactly once.
            UnknownArgumentError: If an argument names no parameter.
        """
        self.build()

        if len(arguments) != len(self.parameters):
            raise ArityMismatchError(
                f"expected {len(self.parameters)} arguments, got {len(arguments)}"
            )

        known = {p.name for p in self.parameters}
        values: dict[str, str] = {}
        for arg in arguments:
            if arg.name not in known:
                raise UnknownArgumentError(arg.name)
            if arg.name in values:
                raise ArityMismatchError(f"argument '{arg.name}' given more than once")
            values[arg.name] = arg.value

        return engine.render(self.template, values)

    def defaults(self) -> list[Argument]:
        """Arguments pre-filled with each parameter's default value."""
        self.build()
        return [Argument(p.name, p.default_value or "") for p in self.parameters]

    def copy(self, name: str | None = None) -> "Command":
        """Return a draft copy with fresh identities.

        Descriptions and default values are kept.
        """
        return Command(
            name=name if name is not None else self.name,
            description=self.description,
            template=self.template,
            parameters=[
                Parameter(
                    id=new_id(),
                    name=p.name,
                    description=p.description,
                    default_value=p.default_value,
                )
                for p in self.parameters
            ],
        )
