"""Unit tests for the command model."""

import pytest

from clio.command.model import (
    MAX_NAME_LENGTH,
    MAX_TEXT_LENGTH,
    Argument,
    Command,
    Parameter,
    new_id,
)
from clio.exceptions import (
    ArityMismatchError,
    CommandError,
    FieldTooLongError,
    ParameterNotInTemplateError,
    UnknownArgumentError,
)


class TestNewId:
    def test_version_7(self) -> None:
        assert new_id().version == 7

    def test_unique(self) -> None:
        assert len({new_id() for _ in range(100)}) == 100


class TestCommandNew:
    """Tests for Command.new."""

    def test_builds_parameters(self) -> None:
        cmd = Command.new("cp", "copy", "cp {{.src}} {{.dst}} {{.src}}")
        assert cmd.id is not None
        assert cmd.is_built
        assert [p.name for p in cmd.parameters] == ["src", "dst"]

    def test_keeps_seed_metadata(self) -> None:
        seed = Parameter(id=new_id(), name="dst", description="target", default_value="/tmp")
        cmd = Command.new("cp", "copy", "cp {{.src}} {{.dst}}", parameters=[seed])

        dst = cmd.parameters[1]
        assert dst.id == seed.id
        assert dst.description == "target"
        assert dst.default_value == "/tmp"

    def test_seed_not_in_template(self) -> None:
        """A seed name absent from the template is rejected."""
        seed = Parameter(id=new_id(), name="missing")
        with pytest.raises(ParameterNotInTemplateError) as exc_info:
            Command.new("echo", "", "echo {{.text}}", parameters=[seed])
        assert exc_info.value.name == "missing"
        assert "missing" in str(exc_info.value)

    def test_no_placeholders(self) -> None:
        cmd = Command.new("ls", "", "ls -la")
        assert cmd.parameters == []
        assert cmd.compile([]) == "ls -la"


class TestBuild:
    """Tests for Command.build."""

    def test_draft_gets_id(self) -> None:
        cmd = Command(name="x", description="", template="echo {{.a}}")
        assert cmd.id is None
        assert not cmd.is_built
        cmd.build()
        assert cmd.id is not None
        assert cmd.is_built

    def test_idempotent(self) -> None:
        cmd = Command.new("cp", "", "cp {{.a}} {{.b}}")
        before = ([p.id for p in cmd.parameters], cmd.id)
        cmd.build()
        cmd.build()
        assert ([p.id for p in cmd.parameters], cmd.id) == before

    def test_template_edit_keeps_surviving_names(self) -> None:
        cmd = Command.new("x", "", "run {{.a}} {{.b}}")
        a = cmd.parameters[0]
        a.default_value = "keep"

        cmd.template = "run {{.c}} {{.a}}"
        assert not cmd.is_built
        cmd.build()

        assert [p.name for p in cmd.parameters] == ["c", "a"]
        assert cmd.parameters[1] is a
        assert cmd.parameters[1].default_value == "keep"

    def test_rename_is_drop_and_create(self) -> None:
        cmd = Command.new("x", "", "run {{.old}}")
        old_id = cmd.parameters[0].id
        cmd.template = "run {{.new}}"
        cmd.build()
        assert cmd.parameters[0].name == "new"
        assert cmd.parameters[0].id != old_id


class TestCompile:
    """Tests for Command.compile."""

    def test_basic(self, echo_command: Command) -> None:
        assert echo_command.compile([Argument("text", "hello")]) == "echo 'hello'"

    def test_argument_order_does_not_matter(self) -> None:
        cmd = Command.new("cp", "", "cp {{.src}} {{.dst}}")
        out = cmd.compile([Argument("dst", "b"), Argument("src", "a")])
        assert out == "cp a b"

    def test_repeated_placeholder_single_argument(self) -> None:
        cmd = Command.new("bak", "", "cp {{.f}} {{.f}}.bak")
        assert cmd.compile([Argument("f", "x")]) == "cp x x.bak"

    def test_empty_value(self, echo_command: Command) -> None:
        assert echo_command.compile([Argument("text", "")]) == "echo ''"

    def test_too_few_arguments(self) -> None:
        cmd = Command.new("cp", "", "cp {{.src}} {{.dst}}")
        with pytest.raises(ArityMismatchError):
            cmd.compile([Argument("src", "a")])

    def test_too_many_arguments(self, echo_command: Command) -> None:
        with pytest.raises(ArityMismatchError):
            echo_command.compile([Argument("text", "a"), Argument("text", "b")])

    def test_duplicate_argument(self) -> None:
        cmd = Command.new("cp", "", "cp {{.src}} {{.dst}}")
        with pytest.raises(ArityMismatchError):
            cmd.compile([Argument("src", "a"), Argument("src", "b")])

    def test_unknown_argument(self, echo_command: Command) -> None:
        with pytest.raises(UnknownArgumentError) as exc_info:
            echo_command.compile([Argument("other", "x")])
        assert exc_info.value.name == "other"

    def test_errors_are_command_errors(self, echo_command: Command) -> None:
        with pytest.raises(CommandError):
            echo_command.compile([])

    def test_compiles_draft(self) -> None:
        """compile builds a draft first."""
        cmd = Command(name="x", description="", template="echo {{.a}}")
        assert cmd.compile([Argument("a", "1")]) == "echo 1"
        assert cmd.id is not None


class TestDefaultsAndCopy:
    def test_defaults(self) -> None:
        seed = Parameter(id=new_id(), name="n", default_value="10")
        cmd = Command.new("head", "", "head -n {{.n}} {{.file}}", parameters=[seed])
        assert cmd.defaults() == [Argument("n", "10"), Argument("file", "")]

    def test_copy(self) -> None:
        seed = Parameter(id=new_id(), name="n", description="lines", default_value="10")
        cmd = Command.new("head", "first lines", "head -n {{.n}}", parameters=[seed])

        copy = cmd.copy(name="head2")

        assert copy.id is None
        assert copy.name == "head2"
        assert copy.description == "first lines"
        assert copy.template == cmd.template
        assert copy.parameters[0].id != seed.id
        assert copy.parameters[0].description == "lines"
        assert copy.parameters[0].default_value == "10"

    def test_copy_keeps_name_by_default(self, echo_command: Command) -> None:
        assert echo_command.copy().name == "echo"


class TestFieldLimits:
    """Tests for name, description and template lengths."""

    def test_at_limit(self) -> None:
        cmd = Command.new(
            "n" * MAX_NAME_LENGTH, "d" * MAX_TEXT_LENGTH, "t" * MAX_TEXT_LENGTH
        )
        assert len(cmd.name) == 64
        assert len(cmd.template) == 255

    @pytest.mark.parametrize(
        ("field", "args"),
        [
            ("name", ("n" * 65, "", "echo")),
            ("description", ("n", "d" * 256, "echo")),
            ("template", ("n", "", "t" * 256)),
        ],
    )
    def test_one_over_limit(self, field: str, args: tuple[str, str, str]) -> None:
        with pytest.raises(FieldTooLongError) as exc_info:
            Command.new(*args)

        assert exc_info.value.field == field
        assert isinstance(exc_info.value, CommandError)

    def test_limit_counts_characters(self) -> None:
        assert len(Command.new("é" * 64, "", "echo").name) == 64

    def test_validate_after_edit(self) -> None:
        cmd = Command.new("ok", "", "echo")
        cmd.template = "x" * 256

        with pytest.raises(FieldTooLongError):
            cmd.validate()
