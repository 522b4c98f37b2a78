"""Pydantic models for clio configuration."""

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, Field

from clio.config.defaults import (
    DATA_DIR_NAME,
    DEFAULT_OPENAI_MODEL,
    PROMPT_TIMEOUT,
)


class ProfessorType(str, Enum):
    """Supported explanation sources."""

    OPENAI = "openai"
    MOCK = "mock"


class OpenAIConfig(BaseModel):
    """OpenAI explanation source configuration."""

    key: str | None = None  # Use OPENAI_API_KEY env var
    url: str | None = None
    model: str = DEFAULT_OPENAI_MODEL
    custom_prompt: str | None = Field(default=None, alias="customPrompt")
    timeout: float = PROMPT_TIMEOUT

    class Config:
        """Pydantic config."""

        populate_by_name = True


class ProfessorConfig(BaseModel):
    """Configuration for command explanations."""

    enabled: bool = False
    type: ProfessorType = ProfessorType.OPENAI
    openai: OpenAIConfig = Field(default_factory=OpenAIConfig)

    class Config:
        """Pydantic config."""

        use_enum_values = True


class ClioConfig(BaseModel):
    """Root configuration for clio."""

    path_override: Path | None = Field(default=None, alias="pathOverride")
    debug: bool = False
    professor: ProfessorConfig = Field(default_factory=ProfessorConfig)

    class Config:
        """Pydantic config."""

        populate_by_name = True

    @property
    def data_dir(self) -> Path:
        """Directory holding the database and the log file."""
        parent = self.path_override.expanduser() if self.path_override else Path.home()
        return parent / DATA_DIR_NAME
