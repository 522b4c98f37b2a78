"""Pytest fixtures for clio tests."""

import tempfile
from collections.abc import Generator
from pathlib import Path

import pytest

from clio.command.manager import CommandManager
from clio.command.model import Command
from clio.config import reset_config
from clio.config.schema import ClioConfig
from clio.professor import MockSource
from clio.store import SQLiteStore


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def store() -> Generator[SQLiteStore, None, None]:
    """In-memory store."""
    with SQLiteStore() as s:
        yield s


@pytest.fixture
def source() -> MockSource:
    return MockSource()


@pytest.fixture
def manager(store: SQLiteStore, source: MockSource) -> CommandManager:
    """Manager over the in-memory store with a mock explanation source."""
    return CommandManager(store, source)


@pytest.fixture
def echo_command() -> Command:
    return Command.new("echo", "simple echo", "echo '{{.text}}'")


class FakeInjector:
    """Records what would have been typed into the terminal."""

    def __init__(self) -> None:
        self.produced: list[str] = []

    def produce(self, text: str) -> None:
        self.produced.append(text)


@pytest.fixture
def injector() -> FakeInjector:
    return FakeInjector()


@pytest.fixture
def default_config() -> ClioConfig:
    """Get default configuration."""
    return ClioConfig()


@pytest.fixture(autouse=True)
def reset_config_fixture(
    monkeypatch: pytest.MonkeyPatch,
) -> Generator[None, None, None]:
    """Reset config singleton and clio env vars between tests."""
    for var in ("CLIO_CONFIG_PATH", "CLIO_DEBUG", "OPENAI_API_KEY"):
        monkeypatch.delenv(var, raising=False)
    reset_config()
    yield
    reset_config()


@pytest.fixture
def config_file(temp_dir: Path) -> Path:
    """Create a test config file pointing the data directory at temp_dir."""
    config_path = temp_dir / "config.toml"
    config_path.write_text(f"""
pathOverride = "{temp_dir.as_posix()}"
debug = true

[professor]
enabled = true
type = "mock"

[professor.openai]
model = "gpt-4o-mini"
customPrompt = "Explain briefly:"
""")
    return config_path
