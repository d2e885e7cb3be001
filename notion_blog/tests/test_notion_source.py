"""Notion transport tests (httpx.MockTransport, no network)"""

import json

import httpx
import pytest

from notion_blog.core.errors import ConfigurationError, TransportError
from notion_blog.core.retry import RetryConfig
from notion_blog.ingestion.notion_source import NotionSource
from notion_blog.services.blog_service import NotionBlogClient
from notion_blog.tests.conftest import make_page

NO_WAIT = RetryConfig(retries=2, base_delay=0.0, jitter=False)


def make_source(handler, retry_config=NO_WAIT):
    return NotionSource(
        "secret-token",
        "db-123",
        base_url="https://api.test/v1",
        retry_config=retry_config,
        transport=httpx.MockTransport(handler),
    )


class TestNotionSource:
    """Test request shape and response parsing"""

    @pytest.mark.asyncio
    async def test_query_sends_published_filter_and_date_sort(self):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"results": [make_page("p1")], "has_more": True, "next_cursor": "c2"})

        async with make_source(handler) as source:
            page = await source.query_database()

        request = seen[0]
        body = json.loads(request.content)
        assert request.method == "POST"
        assert request.url.path == "/v1/databases/db-123/query"
        assert request.headers["Authorization"] == "Bearer secret-token"
        assert "Notion-Version" in request.headers
        assert body["filter"] == {"property": "Published", "checkbox": {"equals": True}}
        assert body["sorts"] == [{"property": "Date", "direction": "descending"}]
        assert body["page_size"] == 100
        assert "start_cursor" not in body
        assert page.has_more is True
        assert page.next_cursor == "c2"
        assert page.items[0]["id"] == "p1"

    @pytest.mark.asyncio
    async def test_query_passes_cursor(self):
        bodies = []

        def handler(request: httpx.Request) -> httpx.Response:
            bodies.append(json.loads(request.content))
            return httpx.Response(200, json={"results": [], "has_more": False, "next_cursor": None})

        async with make_source(handler) as source:
            await source.query_database("abc")

        assert bodies[0]["start_cursor"] == "abc"

    @pytest.mark.asyncio
    async def test_block_children_request(self):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"results": [], "has_more": False})

        async with make_source(handler) as source:
            await source.list_block_children("blk", "cur")

        request = seen[0]
        assert request.method == "GET"
        assert request.url.path == "/v1/blocks/blk/children"
        assert request.url.params["start_cursor"] == "cur"
        assert request.url.params["page_size"] == "100"

    def test_missing_secret_is_configuration_error(self):
        with pytest.raises(ConfigurationError):
            NotionSource("", "db")

    def test_missing_database_id_is_configuration_error(self):
        with pytest.raises(ConfigurationError):
            NotionSource("secret", "")


class TestNotionSourceErrors:
    """Test transport error mapping and retry"""

    @pytest.mark.asyncio
    async def test_server_error_retried_then_succeeds(self):
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            if len(calls) < 3:
                return httpx.Response(503, text="unavailable")
            return httpx.Response(200, json={"results": [], "has_more": False})

        async with make_source(handler) as source:
            page = await source.query_database()

        assert len(calls) == 3
        assert page.items == []

    @pytest.mark.asyncio
    async def test_retries_are_bounded(self):
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return httpx.Response(500)

        async with make_source(handler) as source:
            with pytest.raises(TransportError) as exc_info:
                await source.query_database()

        assert len(calls) == 3
        assert exc_info.value.status_code == 500

    @pytest.mark.asyncio
    async def test_unauthorized_not_retried(self):
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return httpx.Response(401, json={"code": "unauthorized"})

        async with make_source(handler) as source:
            with pytest.raises(TransportError):
                await source.retrieve_database()

        assert len(calls) == 1

    @pytest.mark.asyncio
    async def test_timeout_becomes_transport_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("too slow", request=request)

        async with make_source(handler) as source:
            with pytest.raises(TransportError, match="timed out"):
                await source.retrieve_block("b")

    @pytest.mark.asyncio
    async def test_malformed_envelope_becomes_transport_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"has_more": False})

        async with make_source(handler) as source:
            with pytest.raises(TransportError, match="Malformed"):
                await source.query_database()

    @pytest.mark.asyncio
    async def test_invalid_json_becomes_transport_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, text="<html>")

        async with make_source(handler) as source:
            with pytest.raises(TransportError):
                await source.retrieve_database()


class TestClientOverHttp:
    """Test cache failure isolation through the real transport"""

    @pytest.mark.asyncio
    async def test_page_two_failure_then_full_restart(self):
        failing = {"on": True}
        cursors = []
        pages = {
            None: {"results": [make_page("p1")], "has_more": True, "next_cursor": "c2"},
            "c2": {"results": [make_page("p2")], "has_more": True, "next_cursor": "c3"},
            "c3": {"results": [make_page("p3")], "has_more": False, "next_cursor": None},
        }

        def handler(request: httpx.Request) -> httpx.Response:
            cursor = json.loads(request.content).get("start_cursor")
            cursors.append(cursor)
            if cursor == "c2" and failing["on"]:
                return httpx.Response(502)
            return httpx.Response(200, json=pages[cursor])

        async with NotionBlogClient(make_source(handler)) as client:
            with pytest.raises(TransportError):
                await client.get_all_posts()
            # first page once, second page three times
            assert cursors == [None, "c2", "c2", "c2"]

            failing["on"] = False
            posts = await client.get_all_posts()
            await client.get_all_posts()

        assert [post.page_id for post in posts] == ["p1", "p2", "p3"]
        assert cursors[4:] == [None, "c2", "c3"]
