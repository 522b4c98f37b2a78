"""OpenAI explanation source using LangChain."""

import logging
from typing import Any

from clio.config.defaults import DEFAULT_OPENAI_MODEL, PROMPT_TIMEOUT
from clio.exceptions import (
    NoResponseError,
    ProfessorError,
    ProviderAuthError,
    ProviderRateLimitError,
    ProviderTimeoutError,
)
from clio.professor.base import ExplanationSource
from clio.utils.logging import get_logger
from clio.utils.retry import llm_retry


class OpenAISource(ExplanationSource):
    """Explanation source backed by an OpenAI-compatible chat endpoint.

    The instruction preamble and the command go out as two user messages;
    the first completion is returned.
    """

    def __init__(
        self,
        api_key: str,
        model: str = DEFAULT_OPENAI_MODEL,
        base_url: str | None = None,
        instructions: str | None = None,
        timeout: float = PROMPT_TIMEOUT,
        logger: logging.Logger | None = None,
        **kwargs: Any,
    ) -> None:
        """Initialize the OpenAI source.

        Args:
            api_key: OpenAI API key.
            model: Chat model name.
            base_url: Alternative endpoint for OpenAI-compatible servers.
            instructions: Custom instruction preamble.
            timeout: Request timeout in seconds.
            logger: Logger to report on.
            **kwargs: Additional arguments passed to ChatOpenAI.
        """
        super().__init__(instructions)
        if not api_key:
            raise ProviderAuthError("missing openai api key")

        self._api_key = api_key
        self._model = model
        self._base_url = base_url
        self._timeout = timeout
        self._extra_kwargs = kwargs
        self._logger = logger or get_logger(__name__)

        # Lazy initialization
        self._chat_model: Any = None

    @property
    def model_name(self) -> str:
        """Get the model name."""
        return self._model

    def _get_chat_model(self) -> Any:
        """Lazily initialize and return the chat model."""
        if self._chat_model is None:
            try:
                from langchain_openai import ChatOpenAI
            except ImportError as e:
                raise ProfessorError(
                    "langchain-openai not installed. "
                    "Install with: pip install langchain-openai"
                ) from e

            kwargs = dict(self._extra_kwargs)
            if self._base_url:
                kwargs["base_url"] = self._base_url

            self._chat_model = ChatOpenAI(
                model=self._model,
                api_key=self._api_key,
                timeout=self._timeout,
                **kwargs,
            )
        return self._chat_model

    def _handle_error(self, e: Exception) -> None:
        """Convert exceptions to appropriate professor errors."""
        error_str = str(e).lower()

        if "authentication" in error_str or "invalid api key" in error_str:
            raise ProviderAuthError(
                "OpenAI authentication failed. Check your API key."
            ) from e

        if "rate limit" in error_str or "429" in error_str:
            raise ProviderRateLimitError(
                "OpenAI rate limit exceeded. Try again later."
            ) from e

        if "timeout" in error_str or "timed out" in error_str:
            raise ProviderTimeoutError(
                f"OpenAI request timed out after {self._timeout}s"
            ) from e

        raise ProfessorError(f"error prompting: {e}") from e

    @llm_retry
    def prompt(self, prompt: str) -> str:
        """Ask the model to explain ``prompt``."""
        from langchain_core.messages import HumanMessage

        chat = self._get_chat_model()
        try:
            response = chat.invoke(
                [
                    HumanMessage(content=self.instructions),
                    HumanMessage(content=prompt),
                ]
            )
        except Exception as e:
            self._handle_error(e)
            raise

        content = _content_text(getattr(response, "content", None))
        if not content:
            raise NoResponseError("no response")

        self._logger.debug("explanation received from %s", self._model)
        return content

    def __repr__(self) -> str:
        return f"OpenAISource(model={self._model})"


def _content_text(content: Any) -> str:
    """Flatten LangChain message content into plain text."""
    if content is None:
        return ""
    if isinstance(content, str):
        return content
    parts = []
    for part in content:
        if isinstance(part, str):
            parts.append(part)
        elif isinstance(part, dict) and part.get("type") == "text":
            parts.append(part.get("text", ""))
    return "".join(parts)
