"""Cache slot tests"""

import asyncio

import pytest

from notion_blog.core.errors import TransportError
from notion_blog.services.cache import CacheSlot


class TestCacheSlot:
    """Test fill-once semantics"""

    @pytest.mark.asyncio
    async def test_loader_runs_once(self):
        slot = CacheSlot("numbers")
        calls = []

        async def loader():
            calls.append(1)
            return (1, 2, 3)

        first = await slot.get(loader)
        second = await slot.get(loader)

        assert first == second == (1, 2, 3)
        assert len(calls) == 1
        assert slot.is_filled

    @pytest.mark.asyncio
    async def test_failed_load_leaves_slot_empty(self):
        slot = CacheSlot("numbers")
        attempts = []

        async def loader():
            attempts.append(1)
            if len(attempts) == 1:
                raise TransportError("first load fails")
            return "ok"

        with pytest.raises(TransportError):
            await slot.get(loader)
        assert not slot.is_filled

        assert await slot.get(loader) == "ok"
        assert len(attempts) == 2

    @pytest.mark.asyncio
    async def test_concurrent_callers_share_one_load(self):
        slot = CacheSlot("numbers")
        calls = []

        async def loader():
            calls.append(1)
            await asyncio.sleep(0.01)
            return "value"

        results = await asyncio.gather(*(slot.get(loader) for _ in range(5)))

        assert results == ["value"] * 5
        assert len(calls) == 1

    @pytest.mark.asyncio
    async def test_falsy_values_are_cached(self):
        slot = CacheSlot("empty")
        calls = []

        async def loader():
            calls.append(1)
            return ()

        await slot.get(loader)
        await slot.get(loader)
        assert len(calls) == 1
