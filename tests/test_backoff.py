"""Tests for the backoff policy."""

import random

import pytest

from geminiengine.models.config import BackoffMode, RetryConfig
from geminiengine.services.backoff import MAX_EXPONENT, BackoffPolicy


def exponential(initial_delay: float = 0.5, jitter: bool = False, **kwargs) -> BackoffPolicy:
    config = RetryConfig(
        initial_delay=initial_delay,
        backoff_mode=BackoffMode.EXPONENTIAL,
        jitter_enabled=jitter,
        **kwargs,
    )
    return BackoffPolicy(config, rng=random.Random(1234))


def test_fixed_delay_is_constant():
    """Fixed mode returns initial_delay for every retry."""
    policy = BackoffPolicy(RetryConfig(initial_delay=1.5, backoff_mode=BackoffMode.FIXED, jitter_enabled=False))

    assert [policy.delay_for(i) for i in range(5)] == [1.5] * 5


@pytest.mark.parametrize("attempt_index", [0, 1, 2, 5, 10])
def test_exponential_delay_doubles(attempt_index):
    """Without jitter, delay_for(i) == initial_delay * 2**i."""
    policy = exponential(initial_delay=0.5)

    assert policy.delay_for(attempt_index) == 0.5 * 2 ** attempt_index


def test_first_retry_uses_initial_delay():
    """The first retry (index 0) waits exactly initial_delay."""
    assert exponential(initial_delay=2.0).delay_for(0) == 2.0


def test_jitter_stays_within_ceiling():
    """With jitter, 0 <= delay_for(i) <= initial_delay * 2**i."""
    policy = exponential(initial_delay=0.25, jitter=True)

    for attempt_index in range(12):
        ceiling = 0.25 * 2 ** attempt_index
        for _ in range(50):
            delay = policy.delay_for(attempt_index)
            assert 0.0 <= delay <= ceiling


def test_jitter_randomizes_delays():
    """Jittered delays are not all equal to the ceiling."""
    policy = exponential(initial_delay=1.0, jitter=True)

    delays = {policy.delay_for(3) for _ in range(20)}

    assert len(delays) > 1


def test_fixed_mode_jitter_within_initial_delay():
    policy = BackoffPolicy(
        RetryConfig(initial_delay=0.8, backoff_mode=BackoffMode.FIXED, jitter_enabled=True),
        rng=random.Random(7),
    )

    assert all(0.0 <= policy.delay_for(i) <= 0.8 for i in range(20))


def test_large_attempt_index_does_not_overflow():
    """Exponent growth is clamped so huge indices still give a finite delay."""
    policy = exponential(initial_delay=1.0)

    delay = policy.delay_for(10_000)

    assert delay == 2.0 ** MAX_EXPONENT
    assert delay == policy.delay_for(MAX_EXPONENT)


def test_max_delay_caps_growth():
    policy = exponential(initial_delay=1.0, max_delay=5.0)

    assert [policy.delay_for(i) for i in range(5)] == [1.0, 2.0, 4.0, 5.0, 5.0]


def test_negative_attempt_index_rejected():
    with pytest.raises(ValueError):
        exponential().delay_for(-1)


def test_should_continue_until_max_attempts():
    policy = BackoffPolicy(RetryConfig(max_attempts=3))

    assert policy.should_continue(0) is True
    assert policy.should_continue(2) is True
    assert policy.should_continue(3) is False
    assert policy.should_continue(4) is False


def test_zero_max_attempts_means_no_retries():
    """max_attempts=0 allows a single attempt only."""
    policy = BackoffPolicy(RetryConfig(max_attempts=0))

    assert policy.should_continue(0) is False


def test_should_continue_explicit_limit_overrides_config():
    policy = BackoffPolicy(RetryConfig(max_attempts=0))

    assert policy.should_continue(1, max_attempts=5) is True
    assert policy.should_continue(5, max_attempts=5) is False
