"""Notion REST API source implementation."""

from __future__ import annotations

from typing import Any, Dict, Optional

import httpx
from pydantic import ValidationError

from notion_blog.core.config import settings
from notion_blog.core.errors import ConfigurationError, TransportError
from notion_blog.core.logging import get_logger
from notion_blog.core.retry import RetryConfig, retry_async
from notion_blog.schemas.raw import RawListResponse
from .base import BaseQuerySource, PageResult

log = get_logger("ingestion.notion")

# Conflict and rate limiting are transient; other 4xx are not.
RETRYABLE_CLIENT_STATUSES = {409, 429}

PUBLISHED_FILTER: Dict[str, Any] = {
    "property": "Published",
    "checkbox": {"equals": True},
}
DATE_DESCENDING: list = [{"property": "Date", "direction": "descending"}]


class NotionSource(BaseQuerySource):
    """Talks to the Notion API over a single pooled ``httpx.AsyncClient``."""

    name = "notion"

    def __init__(
        self,
        api_secret: Optional[str] = None,
        database_id: Optional[str] = None,
        *,
        base_url: Optional[str] = None,
        notion_version: Optional[str] = None,
        timeout: Optional[float] = None,
        page_size: Optional[int] = None,
        retry_config: Optional[RetryConfig] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        api_secret = api_secret if api_secret is not None else settings.NOTION_API_SECRET
        database_id = database_id if database_id is not None else settings.DATABASE_ID
        if not api_secret:
            raise ConfigurationError("NOTION_API_SECRET is not set")
        if not database_id:
            raise ConfigurationError("DATABASE_ID is not set")

        self.database_id = database_id
        self.page_size = page_size or settings.QUERY_PAGE_SIZE
        self.retry_config = retry_config or RetryConfig.from_settings()
        self._client = httpx.AsyncClient(
            base_url=base_url or settings.NOTION_API_BASE_URL,
            headers={
                "Authorization": f"Bearer {api_secret}",
                "Notion-Version": notion_version or settings.NOTION_VERSION,
            },
            timeout=timeout if timeout is not None else settings.request_timeout_seconds,
            transport=transport,
        )

    async def __aenter__(self) -> "NotionSource":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    # -------------------------------------------------------------------------
    # Query operations
    # -------------------------------------------------------------------------
    async def retrieve_database(self) -> Dict[str, Any]:
        return await self._request("GET", f"/databases/{self.database_id}", description="databases.retrieve")

    async def query_database(self, cursor: Optional[str] = None) -> PageResult:
        body: Dict[str, Any] = {
            "filter": PUBLISHED_FILTER,
            "sorts": DATE_DESCENDING,
            "page_size": self.page_size,
        }
        if cursor:
            body["start_cursor"] = cursor
        return await self._request_page(
            "POST",
            f"/databases/{self.database_id}/query",
            json=body,
            description="databases.query",
        )

    async def list_block_children(self, block_id: str, cursor: Optional[str] = None) -> PageResult:
        params: Dict[str, Any] = {"page_size": self.page_size}
        if cursor:
            params["start_cursor"] = cursor
        return await self._request_page(
            "GET",
            f"/blocks/{block_id}/children",
            params=params,
            description=f"blocks.children.list({block_id})",
        )

    async def retrieve_block(self, block_id: str) -> Dict[str, Any]:
        return await self._request("GET", f"/blocks/{block_id}", description=f"blocks.retrieve({block_id})")

    # -------------------------------------------------------------------------
    # HTTP plumbing
    # -------------------------------------------------------------------------
    async def _request(self, method: str, path: str, *, description: str, **kwargs: Any) -> Dict[str, Any]:
        return await retry_async(
            lambda: self._send(method, path, **kwargs),
            self.retry_config,
            description=description,
        )

    async def _request_page(self, method: str, path: str, *, description: str, **kwargs: Any) -> PageResult:
        async def attempt() -> PageResult:
            data = await self._send(method, path, **kwargs)
            try:
                envelope = RawListResponse.model_validate(data)
            except ValidationError as exc:
                raise TransportError(
                    "Malformed list response",
                    details={"path": path, "errors": exc.errors(include_url=False)},
                ) from exc
            return PageResult(
                items=envelope.results,
                has_more=envelope.has_more,
                next_cursor=envelope.next_cursor,
            )

        return await retry_async(attempt, self.retry_config, description=description)

    async def _send(self, method: str, path: str, **kwargs: Any) -> Dict[str, Any]:
        """One HTTP round-trip; every failure becomes a TransportError."""
        try:
            resp = await self._client.request(method, path, **kwargs)
        except httpx.TimeoutException as exc:
            raise TransportError(f"Request timed out: {method} {path}", details={"path": path}) from exc
        except httpx.HTTPError as exc:
            raise TransportError(f"Request failed: {method} {path}: {exc}", details={"path": path}) from exc

        if resp.status_code >= 400:
            status = resp.status_code
            raise TransportError(
                f"Notion returned HTTP {status} for {method} {path}",
                details={"path": path, "body": resp.text[:500]},
                status_code=status,
                retryable=status >= 500 or status in RETRYABLE_CLIENT_STATUSES,
            )

        try:
            data = resp.json()
        except ValueError as exc:
            raise TransportError(f"Response is not valid JSON: {method} {path}", details={"path": path}) from exc
        if not isinstance(data, dict):
            raise TransportError(f"Unexpected response shape: {method} {path}", details={"path": path})
        return data
