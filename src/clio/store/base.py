"""Store protocol for commands and their attached data."""

from abc import ABC, abstractmethod
from uuid import UUID

from clio.command.model import Command, History


class Store(ABC):
    """Abstract base class for command stores.

    The store owns commands and their parameters, the explanation notebook
    and the usage history. Notebook and history rows are keyed by command
    id and go away with the command.
    """

    @abstractmethod
    def save(self, command: Command, *, timeout: float | None = None) -> None:
        """Upsert a command and its parameters in one transaction.

        Parameters missing from ``command`` are not removed.
        """
        ...

    @abstractmethod
    def update(
        self,
        command: Command,
        orphaned: list[UUID],
        *,
        timeout: float | None = None,
    ) -> None:
        """Upsert a command and delete its orphaned parameters atomically."""
        ...

    @abstractmethod
    def get_command_by_id(
        self, command_id: UUID, *, timeout: float | None = None
    ) -> Command:
        """Fetch a command with its parameters.

        Raises:
            NotFoundError: If the command does not exist.
        """
        ...

    @abstractmethod
    def list_commands(self, *, timeout: float | None = None) -> list[Command]:
        """Return all commands without their parameters."""
        ...

    @abstractmethod
    def search_command(
        self, term: str, *, timeout: float | None = None
    ) -> list[Command]:
        """Return commands containing the term, best match first."""
        ...

    @abstractmethod
    def delete_command(self, command_id: UUID, *, timeout: float | None = None) -> None:
        """Delete a command; parameters, explanation and history cascade."""
        ...

    @abstractmethod
    def delete_parameters(
        self, parameter_ids: list[UUID], *, timeout: float | None = None
    ) -> None:
        """Delete parameters by id."""
        ...

    @abstractmethod
    def write_explanation(
        self, command_id: UUID, explanation: str, *, timeout: float | None = None
    ) -> None:
        """Upsert the notebook entry of a command."""
        ...

    @abstractmethod
    def read_explanation(
        self, command_id: UUID, *, timeout: float | None = None
    ) -> str:
        """Read the notebook entry of a command.

        Raises:
            NotFoundError: If there is no entry.
        """
        ...

    @abstractmethod
    def delete_explanation(
        self, command_id: UUID, *, timeout: float | None = None
    ) -> None:
        """Delete the notebook entry of a command."""
        ...

    @abstractmethod
    def insert_usage(
        self, command_id: UUID, usage: str, *, timeout: float | None = None
    ) -> None:
        """Append a usage with the current UTC time."""
        ...

    @abstractmethod
    def get_history(
        self, command_id: UUID, *, timeout: float | None = None
    ) -> History:
        """Return the most recent usages of a command, newest first."""
        ...

    @abstractmethod
    def close(self) -> None:
        """Release the underlying handle."""
        ...

    def __enter__(self) -> "Store":
        """Context manager entry."""
        return self

    def __exit__(self, exc_type: object, exc_val: object, exc_tb: object) -> None:
        """Context manager exit."""
        self.close()
