"""Unit tests for retry utilities."""

from unittest.mock import Mock

import pytest

from clio.exceptions import (
    NoResponseError,
    ProviderAuthError,
    ProviderRateLimitError,
    ProviderTimeoutError,
)
from clio.utils.retry import with_retry

# No waiting between attempts in tests
fast_retry = with_retry(min_wait=0, max_wait=0)


class TestWithRetry:
    """Tests for the with_retry decorator."""

    def test_success_no_retry(self) -> None:
        """Test that successful calls don't retry."""
        mock_func = Mock(return_value="success")

        assert fast_retry(mock_func)() == "success"
        assert mock_func.call_count == 1

    @pytest.mark.parametrize(
        "error",
        [
            ProviderRateLimitError("Rate limited"),
            ProviderTimeoutError("Timeout"),
            ConnectionError("Connection failed"),
        ],
    )
    def test_retries_transient_errors(self, error: Exception) -> None:
        mock_func = Mock(side_effect=[error, "success"])

        assert fast_retry(mock_func)() == "success"
        assert mock_func.call_count == 2

    def test_max_attempts_exceeded(self) -> None:
        """The last error is re-raised after the final attempt."""
        mock_func = Mock(side_effect=ProviderRateLimitError("Rate limited"))

        with pytest.raises(ProviderRateLimitError):
            with_retry(max_attempts=2, min_wait=0, max_wait=0)(mock_func)()
        assert mock_func.call_count == 2

    @pytest.mark.parametrize(
        "error", [ProviderAuthError("bad key"), NoResponseError("no response")]
    )
    def test_no_retry_on_permanent_errors(self, error: Exception) -> None:
        mock_func = Mock(side_effect=error)

        with pytest.raises(type(error)):
            fast_retry(mock_func)()
        assert mock_func.call_count == 1

    def test_custom_exception_types(self) -> None:
        mock_func = Mock(side_effect=[ValueError("boom"), "ok"])
        decorated = with_retry(min_wait=0, max_wait=0, retry_on=(ValueError,))(mock_func)

        assert decorated() == "ok"
