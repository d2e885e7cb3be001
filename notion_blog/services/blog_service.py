"""Blog Service - cached read access to the Notion blog database.

Every listing operation works on one fully drained, normalized collection that
is fetched once per client and kept for the client's lifetime.

Usage:
    async with NotionBlogClient() as client:
        posts = await client.get_posts()
        post = await client.get_post_by_slug("hello-world")
        blocks = await client.get_all_blocks_by_block_id(post.page_id)
"""

from __future__ import annotations

import math
import unicodedata
from typing import Any, List, Optional, Tuple

from notion_blog.core.config import settings
from notion_blog.core.logging import get_logger
from notion_blog.ingestion.base import BaseQuerySource
from notion_blog.ingestion.notion_source import NotionSource
from notion_blog.ingestion.paginator import drain_all
from notion_blog.schemas.normalized import AnyBlock, Database, Post, SelectProperty
from notion_blog.services.cache import CacheSlot
from notion_blog.services.normalizer import build_block, build_blocks, build_database, build_posts

log = get_logger("blog_service")


def _collation_key(name: str) -> Tuple[str, str]:
    """Accent- and case-insensitive first, then the exact name to break ties."""
    decomposed = unicodedata.normalize("NFKD", name)
    folded = "".join(ch for ch in decomposed if not unicodedata.combining(ch)).casefold()
    return folded, name


class NotionBlogClient:
    """Read-through cache over a :class:`BaseQuerySource`.

    Holds two independent slots, database metadata and published posts. Slots
    are never refreshed; build a new client to see new content.
    """

    def __init__(self, source: Optional[BaseQuerySource] = None, *, posts_per_page: Optional[int] = None):
        self.source = source if source is not None else NotionSource()
        self.posts_per_page = posts_per_page or settings.NUMBER_OF_POSTS_PER_PAGE
        self._database_cache: CacheSlot[Database] = CacheSlot("database")
        self._posts_cache: CacheSlot[Tuple[Post, ...]] = CacheSlot("posts")

    async def __aenter__(self) -> "NotionBlogClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self.source.aclose()

    # -------------------------------------------------------------------------
    # Loaders
    # -------------------------------------------------------------------------
    async def _load_database(self) -> Database:
        raw = await self.source.retrieve_database()
        return build_database(raw)

    async def _load_posts(self) -> Tuple[Post, ...]:
        raws = await drain_all(self.source.query_database, description="databases.query")
        posts = tuple(build_posts(raws))
        log.info(f"Loaded {len(posts)} published posts")
        return posts

    async def _posts(self) -> Tuple[Post, ...]:
        return await self._posts_cache.get(self._load_posts)

    def _limit(self, page_size: Optional[int]) -> int:
        # 0 is a real size and yields nothing
        return self.posts_per_page if page_size is None else page_size

    # -------------------------------------------------------------------------
    # Database
    # -------------------------------------------------------------------------
    async def get_database(self) -> Database:
        return await self._database_cache.get(self._load_database)

    # -------------------------------------------------------------------------
    # Posts
    # -------------------------------------------------------------------------
    async def get_all_posts(self) -> List[Post]:
        """All published posts, newest first."""
        return list(await self._posts())

    async def get_posts(self, page_size: Optional[int] = None) -> List[Post]:
        posts = await self._posts()
        return list(posts[: self._limit(page_size)])

    async def get_post_by_slug(self, slug: str) -> Optional[Post]:
        """First post with ``slug`` in cache order, or ``None``."""
        posts = await self._posts()
        return next((post for post in posts if post.slug == slug), None)

    async def get_posts_by_tag(self, tag_name: str, page_size: Optional[int] = None) -> List[Post]:
        posts = await self._posts()
        tagged = [post for post in posts if any(tag.name == tag_name for tag in post.tags)]
        return tagged[: self._limit(page_size)]

    async def get_ranked_posts(self, page_size: Optional[int] = None) -> List[Post]:
        """Posts with a non-zero rank, highest first; equal ranks keep cache order."""
        posts = await self._posts()
        ranked = sorted((post for post in posts if post.rank), key=lambda post: post.rank, reverse=True)
        return ranked[: self._limit(page_size)]

    async def get_posts_by_page(self, page: int) -> List[Post]:
        """1-based page of ``posts_per_page`` posts; out-of-range pages are empty."""
        if page < 1:
            return []
        posts = await self._posts()
        start = (page - 1) * self.posts_per_page
        return list(posts[start : start + self.posts_per_page])

    async def get_posts_by_page_by_tag(self, tag_name: str, page: int) -> List[Post]:
        if page < 1:
            return []
        posts = await self._posts()
        tagged = [post for post in posts if any(tag.name == tag_name for tag in post.tags)]
        start = (page - 1) * self.posts_per_page
        return tagged[start : start + self.posts_per_page]

    async def get_number_of_pages(self) -> int:
        posts = await self._posts()
        return math.ceil(len(posts) / self.posts_per_page)

    async def get_number_of_pages_by_tag(self, tag_name: str) -> int:
        posts = await self._posts()
        count = sum(1 for post in posts if any(tag.name == tag_name for tag in post.tags))
        return math.ceil(count / self.posts_per_page)

    async def get_all_tags(self) -> List[SelectProperty]:
        """Distinct tags by name (first occurrence wins), sorted by name."""
        posts = await self._posts()
        seen = set()
        tags: List[SelectProperty] = []
        for post in posts:
            for tag in post.tags:
                if tag.name not in seen:
                    seen.add(tag.name)
                    tags.append(tag)
        return sorted(tags, key=lambda tag: _collation_key(tag.name))

    # -------------------------------------------------------------------------
    # Blocks (not cached)
    # -------------------------------------------------------------------------
    async def get_all_blocks_by_block_id(self, block_id: str) -> List[AnyBlock]:
        """All direct children of a page or block, in Notion's order."""
        raws = await drain_all(
            lambda cursor: self.source.list_block_children(block_id, cursor),
            description=f"blocks.children.list({block_id})",
        )
        return build_blocks(raws)

    async def get_block(self, block_id: str) -> AnyBlock:
        raw = await self.source.retrieve_block(block_id)
        return build_block(raw)


# Global instance holder for the process-wide client
_client: Optional[NotionBlogClient] = None


def init_client(source: Optional[BaseQuerySource] = None) -> NotionBlogClient:
    """Create the process-wide client. Later calls return the existing one."""
    global _client
    if _client is None:
        _client = NotionBlogClient(source)
        log.info("Initialized process-wide Notion blog client")
    return _client


def get_client() -> NotionBlogClient:
    """Get the process-wide client, creating it from settings on first use."""
    return _client if _client is not None else init_client()


async def shutdown_client() -> None:
    """Close the process-wide client's transport and drop it."""
    global _client
    if _client is not None:
        await _client.aclose()
        _client = None
