"""Push text into the controlling terminal's input queue."""

import logging
import os

from clio.exceptions import InjectionFailedError, UnsupportedPlatformError
from clio.utils.logging import get_logger

try:
    import fcntl
    import termios

    TIOCSTI: int | None = getattr(termios, "TIOCSTI", None)
except ImportError:
    fcntl = None  # type: ignore[assignment]
    TIOCSTI = None

DEFAULT_TTY = "/dev/tty"


class TerminalInjector:
    """Types text into the terminal as if the user had entered it.

    Each UTF-8 byte is pushed with one ``TIOCSTI`` ioctl, so the shell sees
    the command on its prompt line ready to edit or run. Nothing is
    executed. Kernels with ``dev.tty.legacy_tiocsti = 0`` refuse the ioctl;
    ``produce`` then raises ``InjectionFailedError``.
    """

    def __init__(
        self, tty_path: str = DEFAULT_TTY, *, logger: logging.Logger | None = None
    ) -> None:
        self.tty_path = tty_path
        self._logger = logger or get_logger(__name__)

    @staticmethod
    def is_supported() -> bool:
        """Whether the platform exposes ``TIOCSTI``."""
        return fcntl is not None and TIOCSTI is not None

    def produce(self, text: str) -> None:
        """Inject ``text`` byte by byte.

        Raises:
            UnsupportedPlatformError: If ``TIOCSTI`` is unavailable.
            InjectionFailedError: If the terminal cannot be opened or a byte
                is rejected.
        """
        if not self.is_supported():
            raise UnsupportedPlatformError("TIOCSTI is not available")

        try:
            fd = os.open(self.tty_path, os.O_RDWR)
        except OSError as e:
            raise InjectionFailedError(f"error opening {self.tty_path}: {e}") from e

        try:
            for byte in text.encode("utf-8"):
                try:
                    fcntl.ioctl(fd, TIOCSTI, bytes([byte]))
                except OSError as e:
                    raise InjectionFailedError(f"error injecting char: {e}") from e
        finally:
            os.close(fd)

        self._logger.debug("injected %d bytes into %s", len(text.encode("utf-8")), self.tty_path)
