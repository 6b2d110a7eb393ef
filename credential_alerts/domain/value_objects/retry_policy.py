"""Retry policy value object."""

from dataclasses import dataclass

from ..exceptions import InvalidRetryPolicyError


@dataclass(frozen=True, slots=True)
class RetryPolicy:
    """Exponential backoff limits for throttled remote calls."""

    max_retries: int = 3
    base_delay_ms: int = 1000
    cap_delay_ms: int = 8000

    def __post_init__(self) -> None:
        """Validate limits."""
        if self.max_retries < 1:
            msg = f"max_retries must be at least 1, got {self.max_retries}"
            raise InvalidRetryPolicyError(msg)
        if not (0 <= self.base_delay_ms <= self.cap_delay_ms):
            msg = (
                f"Delays must be: 0 <= base({self.base_delay_ms}) "
                f"<= cap({self.cap_delay_ms})"
            )
            raise InvalidRetryPolicyError(msg)

    def delay_for(self, attempt: int) -> float:
        """Seconds to wait after the given zero-based failed attempt."""
        return min(2**attempt * self.base_delay_ms, self.cap_delay_ms) / 1000
