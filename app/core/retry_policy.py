"""Retry with exponential backoff for Tour API calls."""
import asyncio
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, TypeVar

from app.config import settings
from app.exceptions import TourApiError

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class RetryPolicy:
    """Exponential backoff policy.

    ``max_attempts`` counts the first call. The delay before retry ``n``
    (0-based) is ``initial_delay * 2 ** n`` capped at ``max_delay``.
    """
    max_attempts: int = 3
    initial_delay: float = 1.0
    max_delay: float = 4.0

    def __post_init__(self):
        if self.max_attempts < 1:
            raise ValueError(f"max_attempts must be at least 1, got {self.max_attempts}")
        if self.initial_delay < 0 or self.max_delay < 0:
            raise ValueError("Retry delays cannot be negative")

    @classmethod
    def from_settings(cls) -> "RetryPolicy":
        return cls(
            max_attempts=settings.RETRY_MAX_ATTEMPTS,
            initial_delay=settings.RETRY_INITIAL_DELAY_SECONDS,
            max_delay=settings.RETRY_MAX_DELAY_SECONDS,
        )

    def backoff_delay(self, attempt: int) -> float:
        return min(self.initial_delay * (2 ** attempt), self.max_delay)

    def should_retry(self, error: BaseException) -> bool:
        return isinstance(error, TourApiError) and error.is_retryable

    async def run(
        self,
        fn: Callable[[], Awaitable[T]],
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> T:
        """Call ``fn`` until it succeeds, fails permanently, or attempts run out."""
        for attempt in range(self.max_attempts):
            try:
                return await fn()
            except TourApiError as e:
                is_last = attempt == self.max_attempts - 1
                if is_last or not self.should_retry(e):
                    raise

                delay = self.backoff_delay(attempt)
                logger.warning(
                    f"Tour API call failed ({e.category.value}, status={e.status_code}), "
                    f"retrying in {delay:.1f}s (attempt {attempt + 1}/{self.max_attempts})"
                )
                await sleep(delay)

        # Unreachable: the loop either returns or raises
        raise RuntimeError("RetryPolicy.run exhausted without result")
