from notion_blog.ingestion.base import BaseQuerySource, PageFetcher, PageResult
from notion_blog.ingestion.notion_source import NotionSource
from notion_blog.ingestion.paginator import drain_all

__all__ = [
    "BaseQuerySource",
    "PageFetcher",
    "PageResult",
    "NotionSource",
    "drain_all",
]
