"""Tests for configuration system."""

import stat
from pathlib import Path

import pytest

from clio.config import ensure_data_dir, get_config, load_config, write_default_config
from clio.config.defaults import get_config_path
from clio.config.schema import ClioConfig, ProfessorType
from clio.exceptions import ConfigError, ConfigValidationError


class TestClioConfig:
    """Tests for ClioConfig schema."""

    def test_default_config(self, default_config: ClioConfig) -> None:
        """Test default configuration values."""
        assert default_config.path_override is None
        assert default_config.debug is False
        assert default_config.professor.enabled is False
        assert default_config.professor.type == ProfessorType.OPENAI
        assert default_config.professor.openai.model == "gpt-4o"
        assert default_config.professor.openai.key is None
        assert default_config.data_dir == Path.home() / ".clio"

    def test_config_from_dict(self) -> None:
        """Test creating config from dictionary with camelCase keys."""
        data = {
            "pathOverride": "/srv/data",
            "professor": {
                "enabled": True,
                "openai": {"key": "sk-test", "customPrompt": "Explain:"},
            },
        }
        config = ClioConfig.model_validate(data)

        assert config.data_dir == Path("/srv/data/.clio")
        assert config.professor.enabled is True
        assert config.professor.openai.key == "sk-test"
        assert config.professor.openai.custom_prompt == "Explain:"

    def test_invalid_type(self) -> None:
        with pytest.raises(ValueError):
            ClioConfig.model_validate({"professor": {"type": "ollama"}})


class TestConfigLoader:
    """Tests for configuration loader."""

    def test_load_config_creates_default(self, temp_dir: Path) -> None:
        """Test that load_config creates default config file."""
        config_path = temp_dir / "clio" / "config.toml"
        config = load_config(config_path, create_if_missing=True)

        assert config_path.exists()
        assert config.professor.enabled is False

    def test_load_config_from_file(self, config_file: Path, temp_dir: Path) -> None:
        """Test loading config from existing file."""
        config = load_config(config_file)

        assert config.path_override == temp_dir
        assert config.debug is True
        assert config.professor.type == ProfessorType.MOCK
        assert config.professor.openai.model == "gpt-4o-mini"
        assert config.professor.openai.custom_prompt == "Explain briefly:"

    def test_load_config_without_file(self, temp_dir: Path) -> None:
        """Test loading config without creating file."""
        config_path = temp_dir / "nonexistent.toml"
        config = load_config(config_path)

        assert not config_path.exists()
        assert config.debug is False

    def test_malformed_toml(self, temp_dir: Path) -> None:
        config_path = temp_dir / "config.toml"
        config_path.write_text("debug = [unclosed")
        with pytest.raises(ConfigError):
            load_config(config_path)

    def test_invalid_values(self, temp_dir: Path) -> None:
        config_path = temp_dir / "config.toml"
        config_path.write_text('debug = "sometimes"')
        with pytest.raises(ConfigValidationError):
            load_config(config_path)

    def test_default_file_is_valid(self, temp_dir: Path) -> None:
        path = write_default_config(temp_dir / "config.toml")
        assert load_config(path) == load_config(temp_dir / "missing.toml")


class TestEnvironment:
    """Tests for environment overrides."""

    def test_config_path_env(self, monkeypatch: pytest.MonkeyPatch, config_file: Path) -> None:
        monkeypatch.setenv("CLIO_CONFIG_PATH", str(config_file))
        assert get_config_path() == config_file
        assert get_config().professor.type == ProfessorType.MOCK

    def test_xdg_config_home(self, monkeypatch: pytest.MonkeyPatch, temp_dir: Path) -> None:
        monkeypatch.setenv("XDG_CONFIG_HOME", str(temp_dir))
        assert get_config_path() == temp_dir / "clio" / "config.toml"

    def test_debug_env(self, monkeypatch: pytest.MonkeyPatch, temp_dir: Path) -> None:
        monkeypatch.setenv("CLIO_DEBUG", "true")
        assert load_config(temp_dir / "missing.toml").debug is True

    def test_openai_key_env_fills_missing_key(
        self, monkeypatch: pytest.MonkeyPatch, temp_dir: Path
    ) -> None:
        monkeypatch.setenv("OPENAI_API_KEY", "sk-env")
        assert load_config(temp_dir / "missing.toml").professor.openai.key == "sk-env"

    def test_file_key_wins(self, monkeypatch: pytest.MonkeyPatch, temp_dir: Path) -> None:
        config_path = temp_dir / "config.toml"
        config_path.write_text('[professor.openai]\nkey = "sk-file"\n')
        monkeypatch.setenv("OPENAI_API_KEY", "sk-env")
        assert load_config(config_path).professor.openai.key == "sk-file"

    def test_get_config_is_cached(self, monkeypatch: pytest.MonkeyPatch, temp_dir: Path) -> None:
        monkeypatch.setenv("CLIO_CONFIG_PATH", str(temp_dir / "missing.toml"))
        assert get_config() is get_config()


class TestDataDir:
    def test_created_with_mode(self, temp_dir: Path) -> None:
        config = ClioConfig(path_override=temp_dir)
        path = ensure_data_dir(config)

        assert path == temp_dir / ".clio"
        assert path.is_dir()
        # umask may only remove bits
        assert stat.S_IMODE(path.stat().st_mode) & ~0o750 == 0

    def test_existing_is_fine(self, temp_dir: Path) -> None:
        (temp_dir / ".clio").mkdir()
        assert ensure_data_dir(ClioConfig(path_override=temp_dir)).is_dir()

    def test_unusable_parent(self, temp_dir: Path) -> None:
        blocker = temp_dir / "file"
        blocker.write_text("")
        with pytest.raises(ConfigError):
            ensure_data_dir(ClioConfig(path_override=blocker))
