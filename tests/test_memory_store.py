import asyncio

import pytest

from dextract.datastore.base import CacheEntry
from dextract.datastore.memory import MemoryStore
from dextract.utils.common import now_ms


@pytest.mark.asyncio
async def test_set_get_delete():
    store = MemoryStore()
    assert await store.set("k", {"a": 1}, namespace="ns")
    assert await store.get("k", namespace="ns") == {"a": 1}
    assert await store.has("k", namespace="ns")

    assert await store.delete("k", namespace="ns")
    assert await store.get("k", namespace="ns") is None
    assert not await store.delete("k", namespace="ns")


@pytest.mark.asyncio
async def test_keys_are_namespaced():
    store = MemoryStore()
    await store.set("k", 1, namespace="a")
    await store.set("k", 2, namespace="b")
    await store.set("k", 3)

    assert await store.get("k", namespace="a") == 1
    assert await store.get("k", namespace="b") == 2
    assert await store.get("k") == 3
    assert await store.cache.exists("default:k")


@pytest.mark.asyncio
async def test_expired_entry_is_a_miss_and_removed():
    store = MemoryStore()
    await store.cache.set("ns:old", CacheEntry(value="stale", expires_at=now_ms() - 1))

    assert await store.get("old", namespace="ns") is None
    assert not await store.has("old", namespace="ns")
    assert not await store.cache.exists("ns:old")


@pytest.mark.asyncio
async def test_ttl_semantics():
    store = MemoryStore(default_ttl=60)
    await store.set("default", 1)
    await store.set("forever", 1, ttl=None)
    await store.set("short", 1, ttl=5)

    default_entry = await store.cache.get("default:default")
    assert default_entry.expires_at == pytest.approx(now_ms() + 60_000, abs=2_000)
    assert (await store.cache.get("default:forever")).expires_at is None
    assert (await store.cache.get("default:short")).expires_at == pytest.approx(now_ms() + 5_000, abs=2_000)


@pytest.mark.asyncio
async def test_clear_only_touches_one_namespace():
    store = MemoryStore()
    await store.set("x", "a-value", namespace="A")
    await store.set("y", "a-value", namespace="A")
    await store.set("x", "b-value", namespace="B")
    await store.set("x", "default-value")

    assert await store.clear(namespace="A")

    assert await store.get("x", namespace="A") is None
    assert await store.get("y", namespace="A") is None
    assert await store.get("x", namespace="B") == "b-value"
    assert await store.get("x") == "default-value"


@pytest.mark.asyncio
async def test_clear_without_namespace_clears_default_only():
    store = MemoryStore()
    await store.set("x", 1)
    await store.set("x", 2, namespace="other")

    await store.clear()

    assert await store.get("x") is None
    assert await store.get("x", namespace="other") == 2


@pytest.mark.asyncio
async def test_namespace_prefix_does_not_leak():
    store = MemoryStore()
    await store.set("x", 1, namespace="price")
    await store.set("x", 2, namespace="prices")

    await store.clear(namespace="price")

    assert await store.get("x", namespace="prices") == 2


@pytest.mark.asyncio
async def test_zero_ttl_expires_immediately():
    store = MemoryStore()
    await store.set("k", 1, ttl=0)

    entry = await store.cache.get("default:k")
    assert entry.expires_at == pytest.approx(now_ms(), abs=2_000)

    await asyncio.sleep(0.01)
    assert await store.get("k") is None


@pytest.mark.asyncio
async def test_values_are_isolated_from_callers():
    store = MemoryStore()
    value = {"tokens": ["a"]}
    await store.set("k", value)

    value["tokens"].append("b")
    first = await store.get("k")
    first["tokens"].append("c")

    assert await store.get("k") == {"tokens": ["a"]}
