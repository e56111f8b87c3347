"""Tests for the cached node manifest."""

import asyncio
from unittest.mock import patch

import pytest

from nodeflow import NodeCatalog
from tests.conftest import make_descriptor


@pytest.fixture
def populated(catalog):
    catalog.register(make_descriptor("webhook", "trigger"))
    catalog.register(make_descriptor("http", "action"))
    return catalog


@pytest.mark.asyncio
async def test_cached_manifest_is_served_without_rescan(populated):
    with patch.object(populated, "get_manifest", wraps=populated.get_manifest) as scan:
        first = await populated.get_cached_manifest()
        second = await populated.get_cached_manifest()

    assert first == second
    assert [entry["id"] for entry in first] == ["webhook", "http"]
    assert scan.call_count == 1


@pytest.mark.asyncio
async def test_clear_cache_forces_recompute(populated):
    with patch.object(populated, "get_manifest", wraps=populated.get_manifest) as scan:
        await populated.get_cached_manifest()
        await populated.clear_cache()
        await populated.get_cached_manifest()

    assert scan.call_count == 2


@pytest.mark.asyncio
async def test_manifest_stays_stale_without_invalidation(populated):
    await populated.get_cached_manifest()
    populated.register(make_descriptor("slack", "action"))

    cached = await populated.get_cached_manifest()
    assert [entry["id"] for entry in cached] == ["webhook", "http"]

    await populated.clear_cache()
    fresh = await populated.get_cached_manifest()
    assert [entry["id"] for entry in fresh] == ["webhook", "http", "slack"]


@pytest.mark.asyncio
async def test_auto_invalidate_drops_cache_on_mutation(cache):
    catalog = NodeCatalog(cache, auto_invalidate=True)
    catalog.register(make_descriptor("webhook", "trigger"))
    await catalog.get_cached_manifest()

    catalog.register(make_descriptor("http", "action"))
    assert [e["id"] for e in await catalog.get_cached_manifest()] == ["webhook", "http"]

    catalog.unregister("webhook")
    assert [e["id"] for e in await catalog.get_cached_manifest()] == ["http"]


@pytest.mark.asyncio
async def test_concurrent_misses_regenerate_once(populated):
    calls = 0
    real_manifest = populated.get_manifest

    async def slow_manifest():
        nonlocal calls
        calls += 1
        await asyncio.sleep(0.01)
        return real_manifest()

    with patch.object(populated, "get_manifest", slow_manifest):
        results = await asyncio.gather(*(populated.get_cached_manifest() for _ in range(10)))

    assert calls == 1
    assert all(result == results[0] for result in results)


@pytest.mark.asyncio
async def test_custom_cache_key_and_ttl(cache):
    catalog = NodeCatalog(cache, manifest_cache_key="manifest:v2", manifest_cache_ttl=120)
    catalog.register(make_descriptor("http"))

    await catalog.get_cached_manifest()

    assert await cache.exists("manifest:v2")
    assert not await cache.exists("node_manifest")


@pytest.mark.asyncio
async def test_caller_edits_do_not_reach_cached_manifest(populated):
    first = await populated.get_cached_manifest()
    first[0]["name"] = "changed"
    first.append({"id": "ghost"})

    second = await populated.get_cached_manifest()

    assert [entry["id"] for entry in second] == ["webhook", "http"]
    assert second[0]["name"] != "changed"


@pytest.mark.asyncio
async def test_reader_during_invalidation_sees_fresh_manifest(cache):
    catalog = NodeCatalog(cache, auto_invalidate=True)
    catalog.register(make_descriptor("webhook", "trigger"))
    await catalog.get_cached_manifest()
    catalog.register(make_descriptor("http", "action"))

    real_delete = cache.delete

    async def slow_delete(key):
        await asyncio.sleep(0.01)
        return await real_delete(key)

    with patch.object(cache, "delete", slow_delete):
        results = await asyncio.gather(catalog.get_cached_manifest(),
                                       catalog.get_cached_manifest())

    for result in results:
        assert [entry["id"] for entry in result] == ["webhook", "http"]
    assert catalog._manifest_stale is False
