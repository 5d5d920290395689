"""
Retry policy with exponential backoff.

The policy is small: a fixed exponential schedule without
jitter, and a retry decision driven by the error taxonomy.
"""

from __future__ import annotations

from dataclasses import dataclass

from gemini_kit.errors import GeminiError


def backoff_delay(attempt: int, base_delay: float = 1.0, exponential_base: float = 2.0) -> float:
    """Delay in seconds before the attempt following failed ``attempt``.

    Args:
        attempt: Zero-based index of the attempt that just failed

    Returns:
        ``base_delay * exponential_base ** attempt`` (1, 2, 4, ... by default)
    """
    return base_delay * (exponential_base**attempt)


@dataclass(frozen=True)
class RetryPolicy:
    """Retry policy for single-response requests.

    Attributes:
        max_attempts: Total number of attempts, including the first
        base_delay: Delay after the first failed attempt, in seconds
        exponential_base: Growth factor between consecutive delays

    Example:
        >>> policy = RetryPolicy(max_attempts=3)
        >>> [policy.delay_for(i) for i in range(2)]
        [1.0, 2.0]
    """

    max_attempts: int = 3
    base_delay: float = 1.0
    exponential_base: float = 2.0

    def delay_for(self, attempt: int) -> float:
        return backoff_delay(attempt, self.base_delay, self.exponential_base)

    def has_attempts_left(self, attempt: int) -> bool:
        """Whether another attempt follows failed attempt ``attempt`` (0-based)."""
        return attempt + 1 < self.max_attempts

    @staticmethod
    def is_terminal(error: GeminiError) -> bool:
        """Whether an error must be raised without further attempts.

        Only errors that declare themselves retryable (unclassified 5xx
        API errors, network failures and timeouts) get another attempt.
        """
        return not error.retryable
