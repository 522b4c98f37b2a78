"""Background activities for explanations.

Three activities run off the UI thread: fetching an explanation, caching
one, and evicting one. Workers report back through a bounded FIFO channel
that only the UI reads.

Usage:
    with Activities(manager) as activities:
        activities.request_explanation(command)
        message = activities.next_message(timeout=60)
"""

import logging
import queue
from collections.abc import Callable
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from uuid import UUID

from clio.command.manager import CommandManager
from clio.command.model import Command
from clio.exceptions import ClioError
from clio.utils.logging import get_logger, log_with_context

MAX_WORKERS = 3
CHANNEL_CAPACITY = 16
PUT_TIMEOUT = 5.0


@dataclass(frozen=True)
class ExplanationReady:
    command_id: UUID
    text: str


@dataclass(frozen=True)
class ExplanationCached:
    command_id: UUID


@dataclass(frozen=True)
class ExplanationEvicted:
    command_id: UUID


@dataclass(frozen=True)
class ActivityFailed:
    """An activity raised; ``error`` is the original exception."""

    activity: str
    command_id: UUID | None
    error: ClioError


Message = ExplanationReady | ExplanationCached | ExplanationEvicted | ActivityFailed


class Activities:
    """Worker pool plus message channel."""

    def __init__(
        self,
        manager: CommandManager,
        *,
        max_workers: int = MAX_WORKERS,
        capacity: int = CHANNEL_CAPACITY,
        logger: logging.Logger | None = None,
    ) -> None:
        self._manager = manager
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="clio-activity"
        )
        self._channel: queue.Queue[Message] = queue.Queue(maxsize=capacity)
        self._logger = logger or get_logger(__name__)

    def request_explanation(
        self, command: Command, *, refresh: bool = False
    ) -> Future[None]:
        """Fetch an explanation (cache first unless ``refresh``)."""

        def fetch() -> Message:
            text = self._manager.explain(command, refresh=refresh)
            return ExplanationReady(command_id=command.id, text=text)

        return self._submit("fetch explanation", command.id, fetch)

    def cache_explanation(self, command_id: UUID, text: str) -> Future[None]:
        def cache() -> Message:
            self._manager.write_explanation(command_id, text)
            return ExplanationCached(command_id=command_id)

        return self._submit("cache explanation", command_id, cache)

    def evict_explanation(self, command_id: UUID) -> Future[None]:
        def evict() -> Message:
            self._manager.delete_explanation(command_id)
            return ExplanationEvicted(command_id=command_id)

        return self._submit("evict explanation", command_id, evict)

    def next_message(self, timeout: float | None = None) -> Message | None:
        """Take the oldest message, or ``None`` if none arrives in time."""
        try:
            return self._channel.get(timeout=timeout)
        except queue.Empty:
            return None

    def _submit(
        self,
        activity: str,
        command_id: UUID | None,
        work: Callable[[], Message],
    ) -> Future[None]:
        def run() -> None:
            try:
                message = work()
            except ClioError as e:
                message = self._failed(activity, command_id, e)
            except Exception as e:
                self._logger.exception("unexpected error in %s", activity)
                error = ClioError(f"{activity} failed: {e}")
                error.__cause__ = e
                message = self._failed(activity, command_id, error)
            self._post(message)

        return self._executor.submit(run)

    def _failed(
        self, activity: str, command_id: UUID | None, error: ClioError
    ) -> ActivityFailed:
        log_with_context(
            self._logger,
            logging.ERROR,
            f"{activity} failed",
            command_id=str(command_id),
            error=str(error),
        )
        return ActivityFailed(activity=activity, command_id=command_id, error=error)

    def _post(self, message: Message) -> None:
        try:
            self._channel.put(message, timeout=PUT_TIMEOUT)
        except queue.Full:
            self._logger.warning("activity channel full, dropping %r", message)

    def shutdown(self, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)

    def __enter__(self) -> "Activities":
        return self

    def __exit__(self, exc_type: object, exc_val: object, exc_tb: object) -> None:
        self.shutdown()
