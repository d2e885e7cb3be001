"""Abstract query interface for paginated content sources."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, List, Optional


@dataclass(frozen=True)
class PageResult:
    """One page of a cursor-paginated listing.

    ``next_cursor`` is meaningless when ``has_more`` is false.
    """

    items: List[Dict[str, Any]] = field(default_factory=list)
    has_more: bool = False
    next_cursor: Optional[str] = None


# Called with ``None`` on the first page only.
PageFetcher = Callable[[Optional[str]], Awaitable[PageResult]]


class BaseQuerySource(ABC):
    """Remote content source: one call is one round-trip.

    Failures surface as :class:`~notion_blog.core.errors.TransportError`.
    """

    name: str

    @abstractmethod
    async def retrieve_database(self) -> Dict[str, Any]:
        """Fetch the raw database object (title, description, icon, cover)."""

    @abstractmethod
    async def query_database(self, cursor: Optional[str] = None) -> PageResult:
        """Fetch one page of published entries, newest first."""

    @abstractmethod
    async def list_block_children(self, block_id: str, cursor: Optional[str] = None) -> PageResult:
        """Fetch one page of a block's (or page's) children, in remote order."""

    @abstractmethod
    async def retrieve_block(self, block_id: str) -> Dict[str, Any]:
        """Fetch a single raw block object."""

    async def aclose(self) -> None:
        """Release transport resources."""
