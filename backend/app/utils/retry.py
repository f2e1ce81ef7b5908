"""Bounded retry policy for calls to external services."""
import asyncio
from dataclasses import dataclass, field
from typing import Awaitable, Callable, Generic, Optional, TypeVar

from app.utils.logger import logger

T = TypeVar("T")


def exponential_backoff(base: float = 0.5, factor: float = 2.0, maximum: float = 8.0) -> Callable[[int], float]:
    """Return a delay function: base * factor ** (attempt - 1), capped at maximum."""
    def delay(attempt: int) -> float:
        return min(base * (factor ** (attempt - 1)), maximum)
    return delay


@dataclass
class RetryOutcome(Generic[T]):
    """Result of running a retry policy."""
    value: Optional[T] = None
    accepted: bool = False
    attempts: int = 0
    errors: list = field(default_factory=list)


@dataclass
class RetryPolicy(Generic[T]):
    """
    Run an async operation up to max_attempts times.

    An attempt succeeds when the operation returns without raising and the
    accept predicate holds for its result. Between attempts the policy
    sleeps for backoff(attempt) seconds.
    """
    max_attempts: int = 3
    backoff: Callable[[int], float] = field(default_factory=exponential_backoff)
    accept: Callable[[T], bool] = lambda value: True
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep
    name: str = "operation"

    async def run(self, operation: Callable[[], Awaitable[T]]) -> RetryOutcome[T]:
        outcome: RetryOutcome[T] = RetryOutcome()

        for attempt in range(1, self.max_attempts + 1):
            outcome.attempts = attempt
            try:
                value = await operation()
            except Exception as e:
                logger.warning(f"[RETRY] {self.name} attempt {attempt}/{self.max_attempts} failed: {e}")
                outcome.errors.append(e)
            else:
                if self.accept(value):
                    outcome.value = value
                    outcome.accepted = True
                    return outcome
                logger.debug(f"[RETRY] {self.name} attempt {attempt}/{self.max_attempts} rejected")

            if attempt < self.max_attempts:
                await self.sleep(self.backoff(attempt))

        return outcome
