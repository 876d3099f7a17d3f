"""Circuit breaker guarding the clinic backend.

States:
- CLOSED: Normal operation, requests pass through
- OPEN: Backend failing, requests fail immediately
- HALF_OPEN: Cooldown elapsed, one trial request allowed

Only infrastructure failures count against the threshold; a 401 or a
business rejection says nothing about backend health.
"""
import time
from enum import Enum
from typing import Any, Callable, Optional, Tuple, Type

from neurodent_scheduling.errors import TransientFailure
from neurodent_scheduling.logging_config import get_logger

logger = get_logger(__name__)


class CircuitState(Enum):
    """Circuit breaker states."""
    CLOSED = "closed"
    OPEN = "open"
    HALF_OPEN = "half_open"


class CircuitBreakerOpen(TransientFailure):
    """Raised when the circuit is open (fail fast, retry later)."""

    def __init__(self, retry_after: float):
        self.retry_after = retry_after
        super().__init__(
            f"Booking service is temporarily unavailable. Retry after {retry_after:.1f}s"
        )


class CircuitBreaker:
    """Circuit breaker for backend calls."""

    def __init__(
        self,
        failure_threshold: int = 5,
        timeout: float = 60,
        counted_exceptions: Tuple[Type[BaseException], ...] = (TransientFailure,),
        clock: Optional[Callable[[], float]] = None
    ):
        """
        Initialize circuit breaker.

        Args:
            failure_threshold: Consecutive counted failures before opening
            timeout: Seconds to wait before a half-open trial
            counted_exceptions: Exception types that count as failures
            clock: Monotonic time source (injectable for tests)
        """
        self.failure_threshold = failure_threshold
        self.timeout = timeout
        self.counted_exceptions = counted_exceptions
        self._clock = clock or time.monotonic
        self.failure_count = 0
        self.last_failure_time: Optional[float] = None
        self._state = CircuitState.CLOSED

    @property
    def state(self) -> str:
        """Current state as string."""
        return self._state.value

    def call(self, func: Callable, *args, **kwargs) -> Any:
        """
        Execute function with circuit breaker protection.

        Raises:
            CircuitBreakerOpen: If circuit is open
            Exception: Whatever func raises
        """
        if self._state == CircuitState.OPEN:
            if self._time_until_retry() <= 0:
                self._state = CircuitState.HALF_OPEN
                logger.info("circuit_half_open")
            else:
                raise CircuitBreakerOpen(self._time_until_retry())

        try:
            result = func(*args, **kwargs)
        except self.counted_exceptions:
            self._on_failure()
            raise
        except Exception:
            # Not a health signal; a half-open trial still proved the backend answers
            self._on_success()
            raise

        self._on_success()
        return result

    def reset(self):
        self.failure_count = 0
        self.last_failure_time = None
        self._state = CircuitState.CLOSED

    def _time_until_retry(self) -> float:
        if self.last_failure_time is None:
            return 0
        elapsed = self._clock() - self.last_failure_time
        return max(0.0, self.timeout - elapsed)

    def _on_success(self):
        self.failure_count = 0
        if self._state == CircuitState.HALF_OPEN:
            self._state = CircuitState.CLOSED
            logger.info("circuit_closed")

    def _on_failure(self):
        self.failure_count += 1
        self.last_failure_time = self._clock()

        if self._state == CircuitState.HALF_OPEN:
            self._state = CircuitState.OPEN
            logger.warning("circuit_reopened", timeout=self.timeout)
        elif self.failure_count >= self.failure_threshold:
            self._state = CircuitState.OPEN
            logger.error(
                "circuit_opened",
                failures=self.failure_count,
                timeout=self.timeout
            )
