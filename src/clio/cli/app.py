"""Main CLI application for clio."""

from collections.abc import Iterator
from contextlib import contextmanager

import typer
from rich.console import Console
from rich.markdown import Markdown
from rich.markup import escape
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from clio import __version__
from clio.activity import ActivityFailed, Activities, ExplanationReady
from clio.cli.context import AppContext, create_context
from clio.cli.options import (
    ArgOption,
    DefaultOption,
    DescribeOption,
    IdArgument,
    parse_pairs,
)
from clio.command.model import Argument, Command, Parameter, new_id
from clio.config import get_config, write_default_config
from clio.config.defaults import PROMPT_TIMEOUT, get_config_path
from clio.exceptions import (
    ClioError,
    OperationTimeoutError,
    ParameterNotInTemplateError,
    SourceNotConfiguredError,
    UnknownArgumentError,
)

# Create Typer app
app = typer.Typer(
    name="clio",
    help="Personal library of parameterized shell commands",
    add_completion=True,
    no_args_is_help=True,
)

# Rich console for output
console = Console()
err_console = Console(stderr=True)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"clio version {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
) -> None:
    """Personal library of parameterized shell commands."""
    pass


@contextmanager
def _session() -> Iterator[AppContext]:
    """Open the app context and turn clio errors into exit codes."""
    try:
        with create_context() as ctx:
            yield ctx
    except ClioError as e:
        err_console.print(
            f"[red]Error:[/red] {escape(e.user_message)} ({escape(str(e))})",
            soft_wrap=True,
        )
        raise typer.Exit(e.exit_code) from None


def _commands_table(commands: list[Command], title: str | None = None) -> Table:
    table = Table(title=title, show_lines=False)
    table.add_column("ID", style="dim", no_wrap=True)
    table.add_column("Name", style="cyan")
    table.add_column("Description")
    for cmd in commands:
        table.add_row(str(cmd.id), escape(cmd.name), escape(cmd.description))
    return table


def _apply_metadata(
    command: Command, defaults: dict[str, str], describes: dict[str, str]
) -> None:
    """Set parameter defaults and descriptions on a built command."""
    params = {p.name: p for p in command.parameters}
    for name in list(defaults) + list(describes):
        if name not in params:
            raise ParameterNotInTemplateError(name)
    for name, value in defaults.items():
        params[name].default_value = value
    for name, text in describes.items():
        params[name].description = text


# -----------------------------------------------------------------------------
# Browsing
# -----------------------------------------------------------------------------


@app.command("list")
def list_cmd() -> None:
    """List all stored commands."""
    with _session() as ctx:
        commands = ctx.manager.get_all()

    if not commands:
        console.print("[dim]No commands stored[/dim]")
        return
    console.print(_commands_table(commands))


@app.command()
def search(term: str = typer.Argument(..., help="Search term.")) -> None:
    """Search commands by name, template and description."""
    with _session() as ctx:
        commands = ctx.manager.search(term)

    if not commands:
        console.print(f"[dim]No commands match '{escape(term)}'[/dim]")
        return
    console.print(_commands_table(commands, title=f"Results for '{escape(term)}'"))


@app.command()
def show(command_id: IdArgument) -> None:
    """Show a command and its parameters."""
    with _session() as ctx:
        cmd = ctx.manager.get_one(command_id)

    console.print(f"[bold cyan]{escape(cmd.name)}[/bold cyan]  [dim]{cmd.id}[/dim]")
    if cmd.description:
        console.print(escape(cmd.description))
    console.print(Panel(escape(cmd.template), title="template", expand=False))

    if cmd.parameters:
        table = Table(title="Parameters")
        table.add_column("Name", style="cyan")
        table.add_column("Default")
        table.add_column("Description")
        for param in cmd.parameters:
            table.add_row(
                escape(param.name),
                escape(param.default_value),
                escape(param.description),
            )
        console.print(table)


@app.command()
def history(command_id: IdArgument) -> None:
    """Show the most recent usages of a command."""
    with _session() as ctx:
        cmd = ctx.manager.get_one(command_id)
        hist = ctx.manager.get_history(cmd.id)

    if not len(hist):
        console.print(f"[dim]No usages recorded for {escape(cmd.name)}[/dim]")
        return

    table = Table(title=f"History of {escape(cmd.name)}")
    table.add_column("When", style="dim", no_wrap=True)
    table.add_column("Command")
    for usage in hist.usages:
        table.add_row(
            usage.timestamp.isoformat(sep=" ", timespec="seconds"),
            escape(usage.command),
        )
    console.print(table)


# -----------------------------------------------------------------------------
# Editing
# -----------------------------------------------------------------------------


@app.command()
def add(
    name: str = typer.Argument(..., help="Short label for the command."),
    template: str = typer.Argument(..., help="Command text with {{ .name }} placeholders."),
    description: str = typer.Option("", "--description", "-d", help="What it does."),
    default: DefaultOption = None,
    describe: DescribeOption = None,
) -> None:
    """Store a new command."""
    defaults = parse_pairs(default, "--default")
    describes = parse_pairs(describe, "--describe")

    seeds = [
        Parameter(
            id=new_id(),
            name=pname,
            description=describes.get(pname, ""),
            default_value=defaults.get(pname, ""),
        )
        for pname in dict.fromkeys(list(defaults) + list(describes))
    ]

    with _session() as ctx:
        cmd = ctx.manager.add(
            Command.new(name, description, template, parameters=seeds)
        )

    console.print(f"[green]Added[/green] {escape(cmd.name)} [dim]{cmd.id}[/dim]")


@app.command()
def edit(
    command_id: IdArgument,
    name: str | None = typer.Option(None, "--name", "-n", help="New name."),
    description: str | None = typer.Option(
        None, "--description", "-d", help="New description."
    ),
    template: str | None = typer.Option(None, "--template", "-t", help="New template."),
    default: DefaultOption = None,
    describe: DescribeOption = None,
) -> None:
    """Change a stored command."""
    defaults = parse_pairs(default, "--default")
    describes = parse_pairs(describe, "--describe")

    with _session() as ctx:
        cmd = ctx.manager.get_one(command_id)
        if name is not None:
            cmd.name = name
        if description is not None:
            cmd.description = description
        if template is not None:
            cmd.template = template
        cmd.build()
        _apply_metadata(cmd, defaults, describes)
        ctx.manager.update_command(cmd)

    console.print(f"[green]Updated[/green] {escape(cmd.name)} [dim]{cmd.id}[/dim]")


@app.command()
def clone(
    command_id: IdArgument,
    name: str | None = typer.Option(None, "--name", "-n", help="Name of the copy."),
) -> None:
    """Store a copy of a command under a new id."""
    with _session() as ctx:
        cmd = ctx.manager.clone(command_id, name=name)

    console.print(f"[green]Cloned[/green] into {escape(cmd.name)} [dim]{cmd.id}[/dim]")


@app.command()
def delete(
    command_id: IdArgument,
    force: bool = typer.Option(False, "--force", "-f", help="Skip confirmation."),
) -> None:
    """Delete a command with its explanation and history."""
    with _session() as ctx:
        cmd = ctx.manager.get_one(command_id)
        if not force and not typer.confirm(f"Delete '{cmd.name}'?"):
            console.print("[dim]Cancelled[/dim]")
            return
        ctx.manager.delete_command(cmd.id)

    console.print(f"[green]Deleted[/green] {escape(cmd.name)}")


# -----------------------------------------------------------------------------
# Using
# -----------------------------------------------------------------------------


@app.command()
def run(
    command_id: IdArgument,
    arg: ArgOption = None,
    print_only: bool = typer.Option(
        False, "--print", "-p", help="Print the command instead of typing it."
    ),
) -> None:
    """Fill in a command and type it into the terminal.

    Values not given with --arg are asked for, with the parameter default
    pre-filled.
    """
    given = parse_pairs(arg, "--arg")

    with _session() as ctx:
        cmd = ctx.manager.get_one(command_id)

        names = {p.name for p in cmd.parameters}
        for unknown in given:
            if unknown not in names:
                raise UnknownArgumentError(unknown)

        prefill = {a.name: a.value for a in cmd.defaults()}
        arguments = []
        for param in cmd.parameters:
            if param.name in given:
                value = given[param.name]
            else:
                label = param.name
                if param.description:
                    label = f"{param.name} ({param.description})"
                value = typer.prompt(label, default=prefill[param.name])
            arguments.append(Argument(param.name, value))

        if print_only:
            console.print(cmd.compile(arguments), markup=False, highlight=False)
            return

        ctx.manager.run(cmd, arguments, ctx.injector)


@app.command()
def explain(
    command_id: IdArgument,
    refresh: bool = typer.Option(
        False, "--refresh", "-r", help="Ask again instead of using the stored explanation."
    ),
) -> None:
    """Explain what a command does."""
    with _session() as ctx:
        cmd = ctx.manager.get_one(command_id)
        if not ctx.manager.can_explain:
            raise SourceNotConfiguredError(
                "enable [professor] in the configuration file"
            )

        with Activities(ctx.manager) as activities:
            activities.request_explanation(cmd, refresh=refresh)

            # Show spinner while waiting for the explanation
            with Progress(
                SpinnerColumn(),
                TextColumn("[progress.description]{task.description}"),
                console=console,
                transient=True,
            ) as progress:
                progress.add_task(description=f"Explaining {escape(cmd.name)}...", total=None)
                message = activities.next_message(timeout=PROMPT_TIMEOUT * 4)

        if message is None:
            raise OperationTimeoutError("no explanation received")
        if isinstance(message, ActivityFailed):
            raise message.error
        if isinstance(message, ExplanationReady):
            console.print(Markdown(message.text))


# -----------------------------------------------------------------------------
# Configuration
# -----------------------------------------------------------------------------


@app.command("config")
def config_cmd(
    show_path: bool = typer.Option(
        False,
        "--path",
        "-p",
        help="Show config file path.",
    ),
    init: bool = typer.Option(
        False, "--init", help="Write a default config file if none exists."
    ),
) -> None:
    """Show current configuration."""
    path = get_config_path()

    if show_path:
        console.print(str(path))
        return

    if init:
        if path.exists():
            console.print(f"[dim]Config file already exists: {path}[/dim]")
        else:
            try:
                write_default_config(path)
            except ClioError as e:
                err_console.print(f"[red]Error:[/red] {e}")
                raise typer.Exit(e.exit_code) from None
            console.print(f"[green]Created[/green] {path}")
        return

    try:
        config = get_config()
    except ClioError as e:
        err_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(e.exit_code) from None

    professor = config.professor
    console.print("[bold]clio configuration[/bold]\n")
    console.print(f"Config file: {path}")
    console.print(f"Data directory: {config.data_dir}")
    console.print(f"Debug: {config.debug}")
    console.print("\n[bold]Explanations:[/bold]")
    console.print(f"  Enabled: {professor.enabled}")
    console.print(f"  Source: {professor.type}")
    console.print(f"  Model: {professor.openai.model}")
    console.print(f"  API key: {'set' if professor.openai.key else 'not set'}")
    if professor.openai.url:
        console.print(f"  URL: {professor.openai.url}")


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
