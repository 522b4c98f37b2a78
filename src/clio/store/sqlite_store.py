"""SQLite-based command store with FTS5 search."""

import logging
import sqlite3
import threading
import time
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Any
from uuid import UUID

from clio.command.model import Command, History, Parameter, Usage
from clio.config.defaults import (
    CACHE_TIMEOUT,
    DEFAULT_DB_FILENAME,
    FETCH_TIMEOUT,
    HISTORY_LIMIT,
    HISTORY_TIMEOUT,
    LIST_TIMEOUT,
    WRITE_TIMEOUT,
)
from clio.exceptions import (
    ClioError,
    NotFoundError,
    OperationTimeoutError,
    StoreError,
    StoreIntegrityError,
    StoreUnavailableError,
)
from clio.store import schema
from clio.store.base import Store
from clio.utils.logging import get_logger, log_with_context

# Number of SQLite VM instructions between deadline checks
_PROGRESS_STEPS = 1000

# Shortest term the trigram index can match
MIN_MATCH_LENGTH = 3


class SQLiteStore(Store):
    """Command store backed by a single SQLite database file.

    The connection is shared between threads and serialized with a lock.
    Every operation accepts a ``timeout`` in seconds; a statement still
    running when it expires is interrupted and ``OperationTimeoutError`` is
    raised. ``None`` falls back to the operation default.

    Attributes:
        db_path: Path to the database file, ``None`` for in-memory.
    """

    def __init__(
        self,
        db_path: Path | str | None = None,
        *,
        logger: logging.Logger | None = None,
    ) -> None:
        """Open the database and install the schema.

        Args:
            db_path: Database file, or a directory to hold ``clio.db``.
                If None, uses an in-memory database.
            logger: Logger to report on. Defaults to the module logger.

        Raises:
            StoreUnavailableError: If the database cannot be opened or
                initialized.
        """
        path = Path(db_path) if db_path else None
        if path is not None and path.is_dir():
            path = path / DEFAULT_DB_FILENAME
        self.db_path = path
        self._logger = logger or get_logger(__name__)
        self._lock = threading.RLock()
        self._conn: sqlite3.Connection | None = None

        self._init_db()

    def _init_db(self) -> None:
        """Open the connection and run the DDL sequence in one transaction."""
        try:
            conn = sqlite3.connect(
                str(self.db_path) if self.db_path else ":memory:",
                check_same_thread=False,
                isolation_level=None,
            )
        except sqlite3.Error as e:
            raise StoreUnavailableError(f"error opening sqlite db: {e}") from e

        try:
            conn.execute("PRAGMA foreign_keys = ON")
            with self._transaction(conn):
                for query in schema.ALL_DDL:
                    conn.execute(query)
                    self._logger.debug("query executed successfully")
        except sqlite3.Error as e:
            conn.close()
            raise StoreUnavailableError(
                f"error initializing sqlite db: {e}"
            ) from e

        self._conn = conn
        log_with_context(
            self._logger,
            logging.DEBUG,
            "sqlite store initiated successfully",
            path=str(self.db_path) if self.db_path else ":memory:",
        )

    def _ensure_connection(self) -> sqlite3.Connection:
        if self._conn is None:
            raise StoreUnavailableError("database connection not available")
        return self._conn

    @contextmanager
    def _transaction(self, conn: sqlite3.Connection) -> Iterator[None]:
        """Run the block in a transaction, rolling back on any error."""
        conn.execute("BEGIN")
        try:
            yield
            conn.execute("COMMIT")
        except BaseException:
            conn.set_progress_handler(None, 0)
            try:
                conn.execute("ROLLBACK")
            except sqlite3.Error as rollback_err:
                self._logger.warning(
                    "error rolling back transaction: %s", rollback_err
                )
            raise

    @contextmanager
    def _session(self, action: str, timeout: float) -> Iterator[sqlite3.Connection]:
        """Serialize access, enforce the deadline and map driver errors."""
        with self._lock:
            conn = self._ensure_connection()
            expires = time.monotonic() + timeout
            conn.set_progress_handler(
                lambda: time.monotonic() > expires, _PROGRESS_STEPS
            )
            try:
                yield conn
            except ClioError:
                raise
            except sqlite3.IntegrityError as e:
                raise StoreIntegrityError(f"error {action}: {e}") from e
            except sqlite3.OperationalError as e:
                if "interrupted" in str(e).lower():
                    raise OperationTimeoutError(
                        f"{action} exceeded {timeout:.3f}s"
                    ) from e
                raise StoreError(f"error {action}: {e}") from e
            except sqlite3.Error as e:
                raise StoreError(f"error {action}: {e}") from e
            finally:
                conn.set_progress_handler(None, 0)

    # -------------------------------------------------------------------------
    # Commands
    # -------------------------------------------------------------------------

    def save(self, command: Command, *, timeout: float | None = None) -> None:
        """Upsert a command and its parameters in one transaction."""
        self.update(command, [], timeout=timeout)

    def update(
        self,
        command: Command,
        orphaned: list[UUID],
        *,
        timeout: float | None = None,
    ) -> None:
        """Upsert a command and delete orphaned parameters in one transaction.

        Args:
            command: Built command to store.
            orphaned: Ids of parameters to remove.
            timeout: Deadline in seconds.

        Raises:
            StoreError: If the command has no id or any statement fails.
            FieldTooLongError: If a field exceeds its length limit.
        """
        if command.id is None:
            raise StoreError("cannot store a command without id")
        command.validate()

        with self._session("storing command", timeout or WRITE_TIMEOUT) as conn:
            with self._transaction(conn):
                conn.execute(
                    schema.UPSERT_COMMAND,
                    (
                        str(command.id),
                        command.name,
                        command.description,
                        command.template,
                    ),
                )

                if command.parameters:
                    values = ", ".join(["(?, ?, ?, ?, ?, ?)"] * len(command.parameters))
                    args: list[Any] = []
                    for position, param in enumerate(command.parameters):
                        args.extend(
                            [
                                str(param.id),
                                str(command.id),
                                param.name,
                                param.description,
                                param.default_value or "",
                                position,
                            ]
                        )
                    conn.execute(
                        schema.UPSERT_PARAMETERS_PARTIAL.format(values=values), args
                    )

                if orphaned:
                    self._delete_parameters(conn, orphaned)

        log_with_context(
            self._logger,
            logging.DEBUG,
            "command stored successfully",
            command_id=str(command.id),
            parameters=len(command.parameters),
            orphaned=len(orphaned),
        )

    def get_command_by_id(
        self, command_id: UUID, *, timeout: float | None = None
    ) -> Command:
        """Fetch a command and its parameters in template order.

        Raises:
            NotFoundError: If the command does not exist.
        """
        with self._session("getting command", timeout or FETCH_TIMEOUT) as conn:
            row = conn.execute(schema.SELECT_COMMAND_BY_ID, (str(command_id),)).fetchone()
            if row is None:
                raise NotFoundError(f"command {command_id} not found")

            cmd = self._row_to_command(row)
            cmd.parameters = [
                Parameter(
                    id=UUID(p[0]),
                    name=p[1],
                    description=p[2] or "",
                    default_value=p[3] or "",
                )
                for p in conn.execute(
                    schema.SELECT_PARAMETERS_BY_COMMAND, (str(command_id),)
                ).fetchall()
            ]
            return cmd

    def list_commands(self, *, timeout: float | None = None) -> list[Command]:
        """Return every command, parameters not loaded."""
        with self._session("listing commands", timeout or LIST_TIMEOUT) as conn:
            rows = conn.execute(schema.SELECT_ALL_COMMANDS).fetchall()
        return [self._row_to_command(row) for row in rows]

    def search_command(
        self, term: str, *, timeout: float | None = None
    ) -> list[Command]:
        """Case-insensitive substring search over name, template and description.

        Matches in the name rank above template matches, which rank above
        description matches. Terms shorter than three characters are matched
        with LIKE. A blank term lists every command.
        """
        term = term.strip()
        if not term:
            return self.list_commands(timeout=timeout)

        with self._session("searching commands", timeout or LIST_TIMEOUT) as conn:
            if len(term) < MIN_MATCH_LENGTH:
                rows = conn.execute(
                    schema.SEARCH_COMMANDS_SHORT, {"pattern": to_like_pattern(term)}
                ).fetchall()
            else:
                rows = conn.execute(
                    schema.SEARCH_COMMANDS, (to_match_query(term),)
                ).fetchall()
        return [self._row_to_command(row) for row in rows]

    def delete_command(self, command_id: UUID, *, timeout: float | None = None) -> None:
        """Delete a command; parameters, explanation and history cascade.

        Raises:
            NotFoundError: If the command does not exist.
        """
        with self._session("deleting command", timeout or WRITE_TIMEOUT) as conn:
            cursor = conn.execute(schema.DELETE_COMMAND, (str(command_id),))
            if cursor.rowcount == 0:
                raise NotFoundError(f"command {command_id} not found")

        log_with_context(
            self._logger,
            logging.DEBUG,
            "command deleted",
            command_id=str(command_id),
        )

    def delete_parameters(
        self, parameter_ids: list[UUID], *, timeout: float | None = None
    ) -> None:
        """Delete parameters by id."""
        if not parameter_ids:
            return

        with self._session("deleting parameters", timeout or WRITE_TIMEOUT) as conn:
            self._delete_parameters(conn, parameter_ids)

    def _delete_parameters(
        self, conn: sqlite3.Connection, parameter_ids: list[UUID]
    ) -> None:
        placeholders = ", ".join(["?"] * len(parameter_ids))
        conn.execute(
            schema.DELETE_PARAMETERS_PARTIAL.format(placeholders=placeholders),
            [str(pid) for pid in parameter_ids],
        )

    # -------------------------------------------------------------------------
    # Notebook
    # -------------------------------------------------------------------------

    def write_explanation(
        self, command_id: UUID, explanation: str, *, timeout: float | None = None
    ) -> None:
        """Upsert the notebook entry of a command."""
        with self._session("writing explanation", timeout or CACHE_TIMEOUT) as conn:
            conn.execute(schema.UPSERT_EXPLANATION, (str(command_id), explanation))

    def read_explanation(
        self, command_id: UUID, *, timeout: float | None = None
    ) -> str:
        """Read the notebook entry of a command.

        Raises:
            NotFoundError: If there is no entry.
        """
        with self._session("reading explanation", timeout or FETCH_TIMEOUT) as conn:
            row = conn.execute(schema.SELECT_EXPLANATION, (str(command_id),)).fetchone()
        if row is None:
            raise NotFoundError(f"explanation for {command_id} not found")
        return row[0]

    def delete_explanation(
        self, command_id: UUID, *, timeout: float | None = None
    ) -> None:
        """Delete the notebook entry of a command.

        Raises:
            NotFoundError: If there is no entry.
        """
        with self._session("deleting explanation", timeout or CACHE_TIMEOUT) as conn:
            cursor = conn.execute(schema.DELETE_EXPLANATION, (str(command_id),))
            if cursor.rowcount == 0:
                raise NotFoundError(f"explanation for {command_id} not found")

    # -------------------------------------------------------------------------
    # History
    # -------------------------------------------------------------------------

    def insert_usage(
        self, command_id: UUID, usage: str, *, timeout: float | None = None
    ) -> None:
        """Append a usage stamped with the current UTC time."""
        now = datetime.now(timezone.utc).isoformat(timespec="microseconds")
        with self._session("inserting usage", timeout or WRITE_TIMEOUT) as conn:
            conn.execute(schema.INSERT_USAGE, (str(command_id), usage, now))

    def get_history(
        self, command_id: UUID, *, timeout: float | None = None
    ) -> History:
        """Return up to ``HISTORY_LIMIT`` usages, newest first.

        Raises:
            NotFoundError: If the command does not exist.
        """
        with self._session("getting history", timeout or HISTORY_TIMEOUT) as conn:
            rows = conn.execute(
                schema.SELECT_HISTORY, (str(command_id), HISTORY_LIMIT)
            ).fetchall()
            if not rows:
                found = conn.execute(
                    schema.SELECT_COMMAND_BY_ID, (str(command_id),)
                ).fetchone()
                if found is None:
                    raise NotFoundError(f"command {command_id} not found")

        return History(
            command_id=command_id,
            usages=[
                Usage(command=row[0], timestamp=datetime.fromisoformat(row[1]))
                for row in rows
            ],
        )

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _row_to_command(self, row: tuple[Any, ...]) -> Command:
        """Convert a (id, name, description, template) row to a Command."""
        return Command(
            id=UUID(row[0]),
            name=row[1],
            description=row[2] or "",
            template=row[3],
        )

    def close(self) -> None:
        """Close the database connection."""
        with self._lock:
            if self._conn:
                self._conn.close()
                self._conn = None

    def __repr__(self) -> str:
        """String representation of the store."""
        path = str(self.db_path) if self.db_path else ":memory:"
        return f"SQLiteStore(path={path!r})"


def to_match_query(term: str) -> str:
    """Build an FTS5 query matching the term as a literal substring.

    The term becomes one quoted phrase, so FTS5 operators typed by the
    user are not interpreted.

    Example:
        to_match_query('log')  # '"log"'
    """
    return '"' + term.strip().replace('"', '""') + '"'


def to_like_pattern(term: str) -> str:
    """Build a LIKE pattern matching the term anywhere, wildcards escaped."""
    escaped = term.strip()
    for char in ("\\", "%", "_"):
        escaped = escaped.replace(char, "\\" + char)
    return f"%{escaped}%"
