"""Tests for InMemoryIncidentStore."""

from __future__ import annotations

from safealert.core.types import Incident
from safealert.incidents.store import InMemoryIncidentStore


def _incident(incident_id: str = "inc-1", **kw: object) -> Incident:
    defaults: dict[str, object] = {
        "id": incident_id,
        "device_id": 1,
        "timestamp": 100,
        "emergency_contacts": ("111",),
    }
    defaults.update(kw)
    return Incident(**defaults)  # type: ignore[arg-type]


class TestInMemoryIncidentStore:
    async def test_put_and_get(self) -> None:
        store = InMemoryIncidentStore()
        await store.put(_incident())
        got = await store.get("inc-1")
        assert got is not None
        assert got.device_id == 1
        assert await store.contains("inc-1")
        assert len(store) == 1

    async def test_get_missing(self) -> None:
        store = InMemoryIncidentStore()
        assert await store.get("nope") is None
        assert not await store.contains("nope")

    async def test_put_replaces(self) -> None:
        store = InMemoryIncidentStore()
        await store.put(_incident(device_id=1))
        await store.put(_incident(device_id=2))
        got = await store.get("inc-1")
        assert got is not None
        assert got.device_id == 2
        assert len(store) == 1

    async def test_values_in_insertion_order(self) -> None:
        store = InMemoryIncidentStore()
        for i in ("c", "a", "b"):
            await store.put(_incident(i))
        assert [i.id for i in await store.values()] == ["c", "a", "b"]

    async def test_caller_mutation_does_not_leak(self) -> None:
        store = InMemoryIncidentStore()
        original = _incident()
        await store.put(original)
        original.metadata["x"] = 1

        got = await store.get("inc-1")
        assert got is not None
        assert got.metadata == {}

        got.metadata["y"] = 2
        again = await store.get("inc-1")
        assert again is not None
        assert again.metadata == {}
