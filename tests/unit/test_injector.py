"""Unit tests for terminal injection."""

import pytest

from clio import injector as injector_module
from clio.exceptions import InjectionFailedError, UnsupportedPlatformError
from clio.injector import TerminalInjector

pytestmark = pytest.mark.skipif(
    not TerminalInjector.is_supported(), reason="TIOCSTI not available"
)


class FakeTTY:
    """Stands in for os.open/os.close and fcntl.ioctl."""

    def __init__(self, fail_at: int | None = None) -> None:
        self.fail_at = fail_at
        self.opened: list[str] = []
        self.closed: list[int] = []
        self.pushed: list[bytes] = []

    def open(self, path: str, flags: int) -> int:
        self.opened.append(path)
        return 42

    def close(self, fd: int) -> None:
        self.closed.append(fd)

    def ioctl(self, fd: int, request: int, arg: bytes) -> bytes:
        assert fd == 42
        assert request == injector_module.TIOCSTI
        if self.fail_at is not None and len(self.pushed) == self.fail_at:
            raise OSError(5, "Input/output error")
        self.pushed.append(arg)
        return arg


@pytest.fixture
def tty(monkeypatch: pytest.MonkeyPatch) -> FakeTTY:
    fake = FakeTTY()
    monkeypatch.setattr(injector_module.os, "open", fake.open)
    monkeypatch.setattr(injector_module.os, "close", fake.close)
    monkeypatch.setattr(injector_module.fcntl, "ioctl", fake.ioctl)
    return fake


class TestTerminalInjector:
    """Tests for TerminalInjector.produce."""

    def test_one_ioctl_per_byte(self, tty: FakeTTY) -> None:
        TerminalInjector().produce("ls -la")

        assert tty.opened == ["/dev/tty"]
        assert b"".join(tty.pushed) == b"ls -la"
        assert all(len(b) == 1 for b in tty.pushed)
        assert tty.closed == [42]

    def test_utf8_bytes(self, tty: FakeTTY) -> None:
        TerminalInjector().produce("echo é")
        assert b"".join(tty.pushed) == "echo é".encode("utf-8")
        assert len(tty.pushed) == len("echo é".encode("utf-8"))

    def test_empty(self, tty: FakeTTY) -> None:
        TerminalInjector().produce("")
        assert tty.pushed == []
        assert tty.closed == [42]

    def test_custom_tty(self, tty: FakeTTY) -> None:
        TerminalInjector("/dev/pts/9").produce("x")
        assert tty.opened == ["/dev/pts/9"]

    def test_ioctl_failure_closes(self, tty: FakeTTY) -> None:
        tty.fail_at = 2
        with pytest.raises(InjectionFailedError):
            TerminalInjector().produce("abcdef")
        assert b"".join(tty.pushed) == b"ab"
        assert tty.closed == [42]

    def test_open_failure(self, monkeypatch: pytest.MonkeyPatch) -> None:
        def fail(path: str, flags: int) -> int:
            raise OSError(6, "No such device or address")

        monkeypatch.setattr(injector_module.os, "open", fail)
        with pytest.raises(InjectionFailedError):
            TerminalInjector().produce("ls")

    def test_unsupported(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(injector_module, "TIOCSTI", None)
        assert TerminalInjector.is_supported() is False
        with pytest.raises(UnsupportedPlatformError):
            TerminalInjector().produce("ls")
