"""Cursor pagination drain."""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Set

from notion_blog.core.errors import TransportError
from notion_blog.core.logging import get_logger
from .base import PageFetcher

log = get_logger("ingestion.paginator")


async def drain_all(fetch_page: PageFetcher, *, description: str = "listing") -> List[Dict[str, Any]]:
    """Fetch every page sequentially and return the concatenated items.

    Pages are requested one after another since each cursor comes from the
    previous response. Any error aborts the drain; the accumulator is local,
    so a failed drain leaves nothing behind.
    """
    results: List[Dict[str, Any]] = []
    seen_cursors: Set[str] = set()
    cursor: Optional[str] = None
    pages = 0

    while True:
        page = await fetch_page(cursor)
        pages += 1
        results.extend(page.items)
        log.debug(f"{description}: page {pages} returned {len(page.items)} items (has_more={page.has_more})")

        if not page.has_more:
            break

        if not page.next_cursor:
            raise TransportError(
                "Response has more results but no next_cursor",
                details={"listing": description, "page": pages},
                retryable=False,
            )
        if page.next_cursor in seen_cursors:
            raise TransportError(
                "Pagination cursor repeated",
                details={"listing": description, "cursor": page.next_cursor},
                retryable=False,
            )
        seen_cursors.add(page.next_cursor)
        cursor = page.next_cursor

    log.info(f"Drained {description}: pages={pages} records={len(results)}")
    return results
