"""Default configuration values and paths."""

import os
from pathlib import Path
from typing import Final

# Data directory
DATA_DIR_NAME: Final[str] = ".clio"
DATA_DIR_MODE: Final[int] = 0o750
DEFAULT_DB_FILENAME: Final[str] = "clio.db"
DEFAULT_LOG_FILENAME: Final[str] = "clio.log"

# Environment variable names
ENV_CONFIG_PATH: Final[str] = "CLIO_CONFIG_PATH"
ENV_DEBUG: Final[str] = "CLIO_DEBUG"
ENV_OPENAI_API_KEY: Final[str] = "OPENAI_API_KEY"

# Deadlines in seconds
LIST_TIMEOUT: Final[float] = 0.3
FETCH_TIMEOUT: Final[float] = 0.2
WRITE_TIMEOUT: Final[float] = 0.2
HISTORY_TIMEOUT: Final[float] = 0.5
CACHE_TIMEOUT: Final[float] = 0.4
PROMPT_TIMEOUT: Final[float] = 60.0

# Usages returned by a history read
HISTORY_LIMIT: Final[int] = 100

DEFAULT_OPENAI_MODEL: Final[str] = "gpt-4o"

DEFAULT_PROMPT: Final[str] = (
    "Explain the given command and give me your answer using markdown; "
    "this explanation should contain the following sections, summary, "
    "breakdown, example of use and cautions; these sections encode them as "
    "markdown headings. The command can contain parameters of the form "
    "{{.name}} where name is the name of the parameter, which are meant to "
    "be replaced. When formatting the code in the explanation, use fish as "
    "the format. Don't mention how to replace the parameters. "
    "Here is the command:"
)

# Default config content (TOML)
DEFAULT_CONFIG_TOML: Final[str] = """\
# clio configuration

# Parent directory of the .clio data directory (defaults to your home)
# pathOverride = "/path/to/dir"

debug = false

[professor]
enabled = false
type = "openai"

[professor.openai]
# key = ""  # Or use the OPENAI_API_KEY env var
# url = "https://api.openai.com/v1"
model = "gpt-4o"
# customPrompt = ""
"""


def get_config_path() -> Path:
    """Get the configuration file path."""
    env_path = os.environ.get(ENV_CONFIG_PATH)
    if env_path:
        return Path(env_path)

    config_home = os.environ.get("XDG_CONFIG_HOME")
    base = Path(config_home) if config_home else Path.home() / ".config"
    return base / "clio" / "config.toml"
