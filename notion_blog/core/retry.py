"""Bounded retry for single Notion requests."""

from __future__ import annotations

import asyncio
import random
from dataclasses import dataclass
from typing import Awaitable, Callable, TypeVar

from notion_blog.core.config import settings
from notion_blog.core.errors import TransportError
from notion_blog.core.logging import get_logger

log = get_logger("retry")

T = TypeVar("T")


@dataclass(frozen=True)
class RetryConfig:
    """Configuration for retry behavior.

    ``retries`` counts attempts after the first one, so ``retries=2`` means at
    most three calls.
    """

    retries: int = 2
    base_delay: float = 0.5
    max_delay: float = 8.0
    exponential_base: float = 2.0
    jitter: bool = True

    @classmethod
    def from_settings(cls) -> "RetryConfig":
        return cls(
            retries=settings.NUMBER_OF_RETRIES,
            base_delay=settings.RETRY_BASE_DELAY_SECONDS,
        )


def _calculate_delay(attempt: int, config: RetryConfig) -> float:
    """Calculate delay before the attempt following ``attempt``."""
    delay = config.base_delay * (config.exponential_base ** (attempt - 1))
    delay = min(delay, config.max_delay)

    if config.jitter:
        jitter_amount = delay * 0.1  # 10% jitter
        delay += random.uniform(-jitter_amount, jitter_amount)

    return max(0.0, delay)


async def retry_async(
    operation: Callable[[], Awaitable[T]],
    config: RetryConfig,
    *,
    description: str = "request",
) -> T:
    """Run ``operation``, retrying on retryable :class:`TransportError`.

    The last error is re-raised once the retries are spent. Non-retryable
    transport errors (e.g. 401, 404) and any other exception propagate at once.
    """
    max_attempts = config.retries + 1
    for attempt in range(1, max_attempts + 1):
        try:
            return await operation()
        except TransportError as exc:
            if not exc.retryable or attempt == max_attempts:
                log.error(f"{description} failed after {attempt} attempt(s): {exc.message}")
                raise

            delay = _calculate_delay(attempt, config)
            log.warning(
                f"{description} failed (attempt {attempt}/{max_attempts}): {exc.message}; retrying in {delay:.2f}s"
            )
            await asyncio.sleep(delay)

    raise AssertionError("unreachable")  # pragma: no cover
