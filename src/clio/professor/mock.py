"""Mock explanation source for testing."""

import hashlib
from typing import Any

from clio.exceptions import NoResponseError
from clio.professor.base import ExplanationSource


class MockSource(ExplanationSource):
    """Deterministic explanation source.

    Answers with a configured response when a key is contained in the
    prompt, otherwise with a short Markdown document derived from the
    prompt hash.
    """

    def __init__(
        self,
        responses: dict[str, str] | None = None,
        instructions: str | None = None,
        empty: bool = False,
    ) -> None:
        """Initialize mock source.

        Args:
            responses: Dict mapping prompt substrings to responses.
            instructions: Custom instruction preamble.
            empty: Behave like a provider returning no completion.
        """
        super().__init__(instructions)
        self._responses = responses or {}
        self._empty = empty
        self._call_history: list[dict[str, Any]] = []

    @property
    def call_history(self) -> list[dict[str, Any]]:
        """Get history of all calls made to this source."""
        return self._call_history

    @property
    def call_count(self) -> int:
        """Get the number of calls made to this source."""
        return len(self._call_history)

    def prompt(self, prompt: str) -> str:
        """Answer deterministically."""
        self._call_history.append(
            {"instructions": self.instructions, "prompt": prompt}
        )

        if self._empty:
            raise NoResponseError("no response")

        for key, response in self._responses.items():
            if key.lower() in prompt.lower():
                return response

        prompt_hash = hashlib.sha256(prompt.encode()).hexdigest()[:8]
        return f"# Summary\n\nMock explanation ({prompt_hash}) for `{prompt}`.\n"
