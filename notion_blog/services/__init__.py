# Services package
from notion_blog.services.blog_service import (
    NotionBlogClient,
    init_client,
    get_client,
    shutdown_client,
)
from notion_blog.services.cache import CacheSlot

__all__ = [
    "NotionBlogClient",
    "init_client",
    "get_client",
    "shutdown_client",
    "CacheSlot",
]
