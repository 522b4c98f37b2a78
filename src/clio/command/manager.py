"""Command manager: orchestrates the store, the explanation cache and history."""

import base64
import binascii
import gzip
import logging
import zlib
from typing import Protocol
from uuid import UUID

from clio.command.model import Argument, Command, History, new_id
from clio.exceptions import (
    ElementNotFoundError,
    InvalidIDError,
    NotFoundError,
    OperationTimeoutError,
    SourceNotConfiguredError,
    StoreError,
)
from clio.professor.base import ExplanationSource
from clio.store.base import Store
from clio.utils.logging import get_logger, log_with_context


class Producer(Protocol):
    """Anything that can push text to the user's terminal."""

    def produce(self, text: str) -> None: ...


def parse_id(id_string: str | UUID) -> UUID:
    """Parse a command id.

    Raises:
        InvalidIDError: If the string is not a UUID.
    """
    if isinstance(id_string, UUID):
        return id_string
    try:
        return UUID(str(id_string).strip())
    except ValueError as e:
        raise InvalidIDError(f"invalid id '{id_string}'") from e


def compress(text: str) -> str:
    """Gzip ``text`` at maximum compression and encode it as standard Base64."""
    return base64.b64encode(gzip.compress(text.encode("utf-8"), compresslevel=9)).decode(
        "ascii"
    )


def decompress(blob: str) -> str:
    """Inverse of ``compress``."""
    return gzip.decompress(base64.b64decode(blob, validate=True)).decode("utf-8")


class CommandManager:
    """Single entry point for the user-facing operations.

    Example:
        manager = CommandManager(SQLiteStore(data_dir), source)
        cmd = manager.add(Command.new("ls", "list files", "ls -la {{.dir}}"))
        manager.run(cmd, [Argument("dir", "/tmp")], TerminalInjector())
    """

    def __init__(
        self,
        store: Store,
        source: ExplanationSource | None = None,
        *,
        logger: logging.Logger | None = None,
    ) -> None:
        if store is None:
            raise ValueError("store is required")
        self._store = store
        self._source = source
        self._logger = logger or get_logger(__name__)

    @property
    def store(self) -> Store:
        return self._store

    @property
    def source(self) -> ExplanationSource | None:
        return self._source

    @property
    def can_explain(self) -> bool:
        """Whether an explanation source is configured."""
        return self._source is not None

    # -------------------------------------------------------------------------
    # Commands
    # -------------------------------------------------------------------------

    def add(self, command: Command) -> Command:
        """Build ``command``, give it a fresh id and store it."""
        command.build()
        command.id = new_id()
        self._store.save(command)
        log_with_context(
            self._logger,
            logging.INFO,
            "command added",
            command_id=str(command.id),
            name=command.name,
        )
        return command

    def get_one(self, id_string: str | UUID) -> Command:
        """Fetch one command with its parameters.

        Raises:
            InvalidIDError: If the id cannot be parsed.
            ElementNotFoundError: If no such command exists.
        """
        command_id = parse_id(id_string)
        try:
            return self._store.get_command_by_id(command_id)
        except ElementNotFoundError:
            raise
        except NotFoundError as e:
            raise ElementNotFoundError(str(e)) from e

    def search(self, term: str) -> list[Command]:
        return self._store.search_command(term)

    def get_all(self) -> list[Command]:
        return self._store.list_commands()

    def delete_command(self, id_string: str | UUID) -> None:
        """Delete a command together with its parameters, notes and history."""
        command_id = parse_id(id_string)
        try:
            self._store.delete_command(command_id)
        except ElementNotFoundError:
            raise
        except NotFoundError as e:
            raise ElementNotFoundError(str(e)) from e
        log_with_context(
            self._logger, logging.INFO, "command deleted", command_id=str(command_id)
        )

    def update_command(self, command: Command) -> Command:
        """Persist an edited command.

        Parameters are matched by name against the stored version: survivors
        keep their stored id, names no longer in the template are deleted.
        Both happen in a single store transaction.

        Raises:
            ElementNotFoundError: If the command was never stored.
            FieldTooLongError: If a field exceeds its length limit.
        """
        if command.id is None:
            raise ElementNotFoundError("command has no id")

        old = self.get_one(command.id)
        command.build()

        stored_ids = {p.name: p.id for p in old.parameters}
        for param in command.parameters:
            if param.name in stored_ids:
                param.id = stored_ids[param.name]

        kept = {p.name for p in command.parameters}
        orphaned = [p.id for p in old.parameters if p.name not in kept]

        self._store.update(command, orphaned)
        log_with_context(
            self._logger,
            logging.INFO,
            "command updated",
            command_id=str(command.id),
            orphaned=len(orphaned),
        )
        return command

    def clone(self, id_string: str | UUID, name: str | None = None) -> Command:
        """Store a copy of a command under a new id."""
        original = self.get_one(id_string)
        return self.add(original.copy(name=name))

    # -------------------------------------------------------------------------
    # Explanations
    # -------------------------------------------------------------------------

    def write_explanation(self, command_id: UUID, text: str) -> None:
        """Compress and store an explanation."""
        self._store.write_explanation(command_id, compress(text))

    def read_explanation(self, command_id: UUID) -> str:
        """Load a stored explanation.

        Raises:
            ElementNotFoundError: If nothing is stored for the command.
            StoreError: If the stored blob cannot be decoded.
        """
        try:
            blob = self._store.read_explanation(command_id)
        except NotFoundError as e:
            raise ElementNotFoundError(str(e)) from e

        try:
            return decompress(blob)
        except (binascii.Error, OSError, EOFError, zlib.error, UnicodeDecodeError) as e:
            raise StoreError(f"error decoding explanation: {e}") from e

    def delete_explanation(self, command_id: UUID) -> None:
        """Drop a stored explanation, if any."""
        try:
            self._store.delete_explanation(command_id)
        except NotFoundError:
            self._logger.debug("no explanation to delete for %s", command_id)

    def explain(self, command: Command, *, refresh: bool = False) -> str:
        """Return the explanation of a command, asking the source on a miss.

        Fresh answers are written through to the store.

        Raises:
            SourceNotConfiguredError: If no source is configured.
        """
        if self._source is None:
            raise SourceNotConfiguredError("explanations are disabled")
        if command.id is None:
            raise ElementNotFoundError("command has no id")

        if not refresh:
            try:
                return self.read_explanation(command.id)
            except ElementNotFoundError:
                self._logger.debug("explanation cache miss for %s", command.id)

        text = self._source.prompt(command.template)
        self.write_explanation(command.id, text)
        return text

    # -------------------------------------------------------------------------
    # History
    # -------------------------------------------------------------------------

    def insert_usage(self, command_id: UUID, compiled: str) -> None:
        self._store.insert_usage(command_id, compiled)

    def get_history(self, command_id: UUID) -> History:
        try:
            return self._store.get_history(command_id)
        except NotFoundError as e:
            raise ElementNotFoundError(str(e)) from e

    def run(
        self, command: Command, arguments: list[Argument], injector: Producer
    ) -> str:
        """Compile ``command``, inject it and record the usage.

        A failed usage insert is logged; the injection already happened.

        Returns:
            The compiled command string.
        """
        compiled = command.compile(arguments)
        injector.produce(compiled)

        if command.id is not None:
            try:
                self.insert_usage(command.id, compiled)
            except (StoreError, OperationTimeoutError) as e:
                log_with_context(
                    self._logger,
                    logging.WARNING,
                    "error recording usage",
                    command_id=str(command.id),
                    error=str(e),
                )
        return compiled
