"""Retry policy for explanation requests, built on tenacity."""

import logging
from collections.abc import Callable
from typing import Any, TypeVar

from tenacity import (
    before_sleep_log,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from clio.exceptions import ProviderRateLimitError, ProviderTimeoutError

F = TypeVar("F", bound=Callable[..., Any])

# Failures worth another attempt; bad keys and empty answers are not
TRANSIENT_ERRORS: tuple[type[Exception], ...] = (
    ProviderRateLimitError,
    ProviderTimeoutError,
    ConnectionError,
)

_logger = logging.getLogger("clio.retry")


def with_retry(
    max_attempts: int = 3,
    min_wait: float = 1.0,
    max_wait: float = 10.0,
    retry_on: tuple[type[Exception], ...] = TRANSIENT_ERRORS,
) -> Callable[[F], F]:
    """Build a decorator retrying ``retry_on`` errors with exponential backoff.

    Each retry is logged at WARNING; once attempts run out the last error is
    re-raised unchanged.

    Usage:
        @with_retry(max_attempts=2)
        def ask(prompt: str) -> str:
            return source.prompt(prompt)
    """
    return retry(
        stop=stop_after_attempt(max_attempts),
        wait=wait_exponential(multiplier=1, min=min_wait, max=max_wait),
        retry=retry_if_exception_type(retry_on),
        before_sleep=before_sleep_log(_logger, logging.WARNING),
        reraise=True,
    )


# 3 attempts, waiting 1s then 2s
llm_retry = with_retry()
