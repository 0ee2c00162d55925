"""Incident record storage — abstract interface plus the in-memory default."""

from __future__ import annotations

import abc

from safealert.core.types import Incident


class IncidentStore(abc.ABC):
    """Key-value store of incidents keyed by id.

    Implementations must iterate in insertion order so equal-timestamp
    incidents keep a stable order in listings.
    """

    @abc.abstractmethod
    async def get(self, incident_id: str) -> Incident | None:
        """Return the stored incident or None."""

    @abc.abstractmethod
    async def put(self, incident: Incident) -> None:
        """Insert or replace an incident."""

    @abc.abstractmethod
    async def contains(self, incident_id: str) -> bool:
        """Whether an incident with this id exists."""

    @abc.abstractmethod
    async def values(self) -> list[Incident]:
        """All incidents in insertion order."""


class InMemoryIncidentStore(IncidentStore):
    """Dict-backed store. Stores and returns copies so records are never shared."""

    def __init__(self) -> None:
        self._incidents: dict[str, Incident] = {}

    def __len__(self) -> int:
        return len(self._incidents)

    async def get(self, incident_id: str) -> Incident | None:
        incident = self._incidents.get(incident_id)
        return incident.model_copy(deep=True) if incident is not None else None

    async def put(self, incident: Incident) -> None:
        self._incidents[incident.id] = incident.model_copy(deep=True)

    async def contains(self, incident_id: str) -> bool:
        return incident_id in self._incidents

    async def values(self) -> list[Incident]:
        return [i.model_copy(deep=True) for i in self._incidents.values()]
