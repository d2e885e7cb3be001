"""Cached Notion client for static blog builds."""

from notion_blog.services import (
    NotionBlogClient,
    get_client,
    init_client,
    shutdown_client,
)

__version__ = "1.0.0"

__all__ = [
    "NotionBlogClient",
    "get_client",
    "init_client",
    "shutdown_client",
]
