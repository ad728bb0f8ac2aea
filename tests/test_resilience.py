"""
Tests for retry logic.
"""

from typing import List

import pytest

from simrun.core.exceptions import BridgeError, ValidationError
from simrun.core.resilience import RetryConfig, retry_with_backoff


class Flaky:
    """Fails a fixed number of times, then succeeds."""

    def __init__(self, failures: int, error: Exception) -> None:
        self.failures = failures
        self.error = error
        self.calls = 0

    def __call__(self) -> str:
        self.calls += 1
        if self.calls <= self.failures:
            raise self.error
        return "ok"


class TestRetryConfig:
    """Test retry delay computation."""

    def test_defaults_to_single_attempt(self) -> None:
        assert RetryConfig().max_attempts == 1

    def test_rejects_zero_attempts(self) -> None:
        with pytest.raises(ValueError):
            RetryConfig(max_attempts=0)

    def test_exponential_delay_is_capped(self) -> None:
        config = RetryConfig(max_attempts=5, base_delay=1.0, max_delay=3.0)
        assert [config.delay_for(i) for i in range(4)] == [1.0, 2.0, 3.0, 3.0]

    def test_constant_delay(self) -> None:
        config = RetryConfig(base_delay=2.0, exponential_backoff=False)
        assert config.delay_for(3) == 2.0

    def test_jitter_stays_within_bounds(self) -> None:
        config = RetryConfig(base_delay=4.0, exponential_backoff=False, jitter=True)
        for _ in range(20):
            assert 2.0 <= config.delay_for(0) <= 4.0


class TestRetryWithBackoff:
    """Test the retry wrapper."""

    def test_success_first_try(self) -> None:
        func = Flaky(0, BridgeError("boom"))
        assert retry_with_backoff(func, RetryConfig(max_attempts=3)) == "ok"
        assert func.calls == 1

    def test_retries_then_succeeds(self) -> None:
        sleeps: List[float] = []
        func = Flaky(2, BridgeError("boom"))
        result = retry_with_backoff(
            func,
            RetryConfig(max_attempts=3, base_delay=0.5),
            (BridgeError,),
            sleep=sleeps.append,
        )
        assert result == "ok"
        assert func.calls == 3
        assert sleeps == [0.5, 1.0]

    def test_raises_after_last_attempt(self) -> None:
        func = Flaky(5, BridgeError("boom"))
        with pytest.raises(BridgeError):
            retry_with_backoff(
                func, RetryConfig(max_attempts=2), (BridgeError,), sleep=lambda _: None
            )
        assert func.calls == 2

    def test_unexpected_exceptions_are_not_retried(self) -> None:
        func = Flaky(1, ValidationError("bad path"))
        with pytest.raises(ValidationError):
            retry_with_backoff(
                func, RetryConfig(max_attempts=3), (BridgeError,), sleep=lambda _: None
            )
        assert func.calls == 1
