"""
Tests for retry logic.
"""

import pytest
from catalysthr.retry import RetryError, call_with_backoff


@pytest.fixture(autouse=True)
def no_sleep(monkeypatch):
    """Retries should not slow the suite down."""
    monkeypatch.setattr("catalysthr.retry.time.sleep", lambda s: None)


class TestCallWithBackoff:
    """Test exponential backoff helper."""

    def test_success_on_first_try(self):
        """Function that succeeds immediately should not retry."""
        call_count = [0]

        def succeeds():
            call_count[0] += 1
            return "success"

        assert call_with_backoff(succeeds, max_retries=3) == "success"
        assert call_count[0] == 1

    def test_retry_then_succeed(self):
        """Function that fails then succeeds should retry."""
        call_count = [0]

        def fails_twice():
            call_count[0] += 1
            if call_count[0] < 3:
                raise ConnectionError("Temporary failure")
            return "success"

        assert call_with_backoff(fails_twice, max_retries=3, base_delay=0.01) == "success"
        assert call_count[0] == 3

    def test_all_retries_exhausted(self):
        """Should raise RetryError after all attempts fail."""
        call_count = [0]

        def always_fails():
            call_count[0] += 1
            raise ValueError("Always fails")

        with pytest.raises(RetryError) as exc:
            call_with_backoff(always_fails, max_retries=2)

        assert call_count[0] == 3  # Initial + 2 retries
        assert isinstance(exc.value.__cause__, ValueError)

    def test_zero_retries(self):
        """max_retries=0 means a single attempt."""
        call_count = [0]

        def always_fails():
            call_count[0] += 1
            raise ConnectionError("down")

        with pytest.raises(RetryError):
            call_with_backoff(always_fails, max_retries=0)
        assert call_count[0] == 1

    def test_only_catches_specified_exceptions(self):
        """Should only retry on specified exception types."""
        call_count = [0]

        def raises_value_error():
            call_count[0] += 1
            raise ValueError("Not retryable")

        with pytest.raises(ValueError):
            call_with_backoff(raises_value_error, max_retries=3, exceptions=(ConnectionError,))

        assert call_count[0] == 1  # No retries

    def test_exponential_delay(self):
        """Delay should increase exponentially."""
        delays = []

        def always_fails():
            raise ConnectionError("Test")

        with pytest.raises(RetryError):
            call_with_backoff(
                always_fails,
                max_retries=3,
                base_delay=0.01,
                exponential_base=2.0,
                on_retry=lambda attempt, exc, delay: delays.append(delay),
            )

        assert delays == [0.01, 0.02, 0.04]

    def test_max_delay_cap(self):
        """Delay should not exceed max_delay."""
        delays = []

        def always_fails():
            raise ConnectionError("Test")

        with pytest.raises(RetryError):
            call_with_backoff(
                always_fails,
                max_retries=4,
                base_delay=1.0,
                max_delay=2.0,
                on_retry=lambda attempt, exc, delay: delays.append(delay),
            )

        assert max(delays) == 2.0
