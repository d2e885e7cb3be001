"""Fill-once, process-lifetime cache slots."""

from __future__ import annotations

import asyncio
from typing import Awaitable, Callable, Generic, Optional, TypeVar

from notion_blog.core.logging import get_logger

log = get_logger("cache")

T = TypeVar("T")


class CacheSlot(Generic[T]):
    """Holds one lazily loaded value for the lifetime of its owner.

    Loads are single-flight: concurrent callers wait on the same lock and the
    ones arriving after a successful load read the stored value. The value is
    stored only once the loader returns, so a failing loader leaves the slot
    empty and the next call runs the whole load again. There is no
    invalidation.
    """

    def __init__(self, name: str):
        self.name = name
        self._value: Optional[T] = None
        self._filled = False
        self._lock = asyncio.Lock()

    @property
    def is_filled(self) -> bool:
        return self._filled

    async def get(self, loader: Callable[[], Awaitable[T]]) -> T:
        if self._filled:
            return self._value  # type: ignore[return-value]

        async with self._lock:
            # Another task may have filled the slot while we waited
            if self._filled:
                return self._value  # type: ignore[return-value]

            log.debug(f"Cache miss for {self.name}; loading")
            value = await loader()
            self._value = value
            self._filled = True
            log.info(f"Cached {self.name}")
            return value
