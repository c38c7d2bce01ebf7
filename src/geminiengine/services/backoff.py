"""Backoff policy: how long to wait between attempts and when to stop."""

import random

from geminiengine.models.config import BackoffMode, RetryConfig

# 2**32 * initial_delay is already far beyond any useful wait; larger
# exponents only risk float overflow.
MAX_EXPONENT = 32


class BackoffPolicy:
    """
    Computes retry delays from a RetryConfig.

    ``attempt_index`` is zero-based for the first retry: with exponential
    backoff the first retry waits ``initial_delay * 2**0``.
    """

    def __init__(self, config: RetryConfig, rng: random.Random | None = None):
        """
        Args:
            config: Retry policy to apply
            rng: Random source for jitter (defaults to a private Random instance)
        """
        self.config = config
        self._rng = rng or random.Random()

    @property
    def max_attempts(self) -> int:
        return self.config.max_attempts

    def ceiling_for(self, attempt_index: int) -> float:
        """Delay before jitter is applied."""
        if attempt_index < 0:
            raise ValueError(f"attempt_index must be non-negative, got {attempt_index}")

        if self.config.backoff_mode == BackoffMode.FIXED:
            delay = self.config.initial_delay
        else:
            exponent = min(attempt_index, MAX_EXPONENT)
            delay = self.config.initial_delay * (2 ** exponent)

        if self.config.max_delay is not None:
            delay = min(delay, self.config.max_delay)
        return delay

    def delay_for(self, attempt_index: int) -> float:
        """Delay in seconds before retry number ``attempt_index``."""
        ceiling = self.ceiling_for(attempt_index)
        if not self.config.jitter_enabled:
            return ceiling
        # Full jitter: uniform in [0, ceiling], never above it, never negative
        return min(max(self._rng.uniform(0.0, ceiling), 0.0), ceiling)

    def should_continue(self, attempt_index: int, max_attempts: int | None = None) -> bool:
        """Whether retry number ``attempt_index`` is still allowed."""
        limit = self.config.max_attempts if max_attempts is None else max_attempts
        return attempt_index < limit
