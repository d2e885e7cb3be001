"""Shared fixtures: an in-memory query source and raw Notion record builders."""

from typing import Any, Dict, List, Optional, Sequence, Set

import pytest

from notion_blog.core.errors import TransportError
from notion_blog.ingestion.base import BaseQuerySource, PageResult


def rich_text(text: str) -> List[Dict[str, Any]]:
    return [{"type": "text", "plain_text": text, "href": None}]


def make_page(
    page_id: str,
    *,
    title: str = "",
    slug: str = "",
    tags: Optional[Sequence[str]] = None,
    rank: Optional[float] = None,
    date: Optional[str] = None,
) -> Dict[str, Any]:
    """A raw page as returned by databases.query, with a multi-select Category."""
    properties: Dict[str, Any] = {
        "Page": {"type": "title", "title": rich_text(title)},
        "Slug": {"type": "rich_text", "rich_text": rich_text(slug)},
        "Category": {
            "type": "multi_select",
            "multi_select": [{"id": f"id-{name}", "name": name, "color": "blue"} for name in tags or []],
        },
        "Rank": {"type": "number", "number": rank},
        "Published": {"type": "checkbox", "checkbox": True},
    }
    if date is not None:
        properties["Date"] = {"type": "date", "date": {"start": date, "end": None}}
    return {"object": "page", "id": page_id, "properties": properties}


class FakeSource(BaseQuerySource):
    """Serves pre-split pages; cursors are the index of the next page."""

    name = "fake"

    def __init__(
        self,
        pages: Optional[List[List[Dict[str, Any]]]] = None,
        *,
        database: Optional[Dict[str, Any]] = None,
        children: Optional[Dict[str, List[List[Dict[str, Any]]]]] = None,
        blocks: Optional[Dict[str, Dict[str, Any]]] = None,
    ):
        self.pages = pages if pages is not None else [[]]
        self.database = database or {"object": "database", "title": rich_text("Blog")}
        self.children = children or {}
        self.blocks = blocks or {}
        self.failing_pages: Set[int] = set()
        self.query_calls: List[Optional[str]] = []
        self.database_calls = 0
        self.closed = False

    @staticmethod
    def _page(pages: List[List[Dict[str, Any]]], cursor: Optional[str]) -> PageResult:
        index = 0 if cursor is None else int(cursor)
        has_more = index + 1 < len(pages)
        return PageResult(
            items=list(pages[index]),
            has_more=has_more,
            next_cursor=str(index + 1) if has_more else None,
        )

    async def retrieve_database(self) -> Dict[str, Any]:
        self.database_calls += 1
        return self.database

    async def query_database(self, cursor: Optional[str] = None) -> PageResult:
        self.query_calls.append(cursor)
        index = 0 if cursor is None else int(cursor)
        if index in self.failing_pages:
            raise TransportError(f"Simulated failure on page {index}")
        return self._page(self.pages, cursor)

    async def list_block_children(self, block_id: str, cursor: Optional[str] = None) -> PageResult:
        return self._page(self.children.get(block_id, [[]]), cursor)

    async def retrieve_block(self, block_id: str) -> Dict[str, Any]:
        return self.blocks[block_id]

    async def aclose(self) -> None:
        self.closed = True


@pytest.fixture
def fake_source():
    """Three pages of posts, five posts in total."""
    return FakeSource(
        [
            [
                make_page("p1", title="One", slug="one", tags=["Tech", "Python"], date="2024-05-01"),
                make_page("p2", title="Two", slug="hello-world", tags=["Life"], rank=5),
            ],
            [
                make_page("p3", title="Three", slug="three", tags=["Tech"], rank=5),
                make_page("p4", title="Four", slug="four", rank=3),
            ],
            [make_page("p5", title="Five", slug="five", tags=["Art", "tech"])],
        ]
    )
