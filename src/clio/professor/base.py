"""Explanation source abstraction."""

from abc import ABC, abstractmethod

from clio.config.defaults import DEFAULT_PROMPT


class ExplanationSource(ABC):
    """Abstract base class for explanation sources.

    A source receives a command template and answers with a Markdown
    explanation of what it does.
    """

    def __init__(self, instructions: str | None = None) -> None:
        """Initialize the source.

        Args:
            instructions: Preamble sent before the command. Defaults to the
                built-in prompt.
        """
        self._instructions = instructions or DEFAULT_PROMPT

    @property
    def instructions(self) -> str:
        """The instruction preamble."""
        return self._instructions

    @abstractmethod
    def prompt(self, prompt: str) -> str:
        """Send the instructions and ``prompt``; return the first answer.

        Raises:
            NoResponseError: If the provider returns no completion.
            ProfessorError: If the request fails.
        """
        ...

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"
