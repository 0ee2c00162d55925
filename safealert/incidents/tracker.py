"""IncidentTracker — sole owner and mutator of incident records."""

from __future__ import annotations

import asyncio
import math
import re
import time
import uuid
from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any

import pydantic
import structlog

from safealert.core.types import EmergencyRequest, Incident, IncidentStats, IncidentStatus
from safealert.incidents.exceptions import (
    InvalidTransitionError,
    NotFoundError,
    ValidationError,
)
from safealert.incidents.store import IncidentStore, InMemoryIncidentStore

logger = structlog.get_logger(__name__)

RESPONSE_TIME_KEY = "responseTime"

_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")


def _snake(name: str) -> str:
    return _CAMEL_BOUNDARY.sub("_", name).lower()


def _iso(ts: float) -> str:
    return datetime.fromtimestamp(ts, tz=timezone.utc).isoformat()


def _lookup(payload: Mapping[str, Any], field: str) -> Any:
    camel = re.sub(r"_([a-z])", lambda m: m.group(1).upper(), field)
    if field in payload:
        return payload[field]
    return payload.get(camel)


def _parse_status(status: IncidentStatus | str) -> IncidentStatus:
    try:
        return IncidentStatus(status)
    except ValueError as exc:
        raise ValidationError("status", f"Unknown status: {status}") from exc


def parse_request(payload: EmergencyRequest | Mapping[str, Any]) -> EmergencyRequest:
    """Validate an inbound payload (snake_case or camelCase keys).

    Raises:
        ValidationError: naming the first offending field.
    """
    if isinstance(payload, EmergencyRequest):
        request = payload
    else:
        if _lookup(payload, "device_id") is None:
            raise ValidationError("device_id", "Device ID is required")
        if not _lookup(payload, "emergency_contacts"):
            raise ValidationError(
                "emergency_contacts", "At least one emergency contact required"
            )
        try:
            request = EmergencyRequest.model_validate(dict(payload))
        except pydantic.ValidationError as exc:
            first = exc.errors()[0]
            field = _snake(str(first["loc"][0])) if first["loc"] else "payload"
            raise ValidationError(field, f"{field}: {first['msg']}") from exc

    if not any(c and c.strip() for c in request.emergency_contacts):
        raise ValidationError(
            "emergency_contacts", "At least one emergency contact required"
        )
    return request


class IncidentTracker:
    """Creates incidents and applies forward-only status transitions.

    All writes go through one ``asyncio.Lock``; reads return copies, so
    callers can never mutate stored state.
    """

    def __init__(self, store: IncidentStore | None = None) -> None:
        self._store = store if store is not None else InMemoryIncidentStore()
        self._lock = asyncio.Lock()

    @property
    def store(self) -> IncidentStore:
        return self._store

    # ── Mutations ───────────────────────────────────────────────

    async def create(self, payload: EmergencyRequest | Mapping[str, Any]) -> Incident:
        """Record a new ``triggered`` incident from an inbound request."""
        request = parse_request(payload)
        now = time.time()
        now_iso = _iso(now)

        incident = Incident(
            id=str(uuid.uuid4()),
            device_id=request.device_id,
            latitude=request.latitude or 0.0,
            longitude=request.longitude or 0.0,
            battery_level=100 if request.battery_level is None else request.battery_level,
            sequence_number=request.sequence_number or 0,
            timestamp=request.timestamp if request.timestamp is not None else int(now * 1000),
            emergency_contacts=tuple(request.emergency_contacts),
            status=IncidentStatus.TRIGGERED,
            created_at=now_iso,
            updated_at=now_iso,
        )

        async with self._lock:
            await self._store.put(incident)

        logger.info(
            "incident_created",
            incident_id=incident.id,
            device=f"0x{incident.device_id:04x}",
            contacts=len(incident.emergency_contacts),
            battery_level=incident.battery_level,
        )
        return incident

    async def update_status(
        self,
        incident_id: str,
        status: IncidentStatus | str,
        metadata_patch: Mapping[str, Any] | None = None,
    ) -> Incident:
        """Move an incident forward and merge *metadata_patch* into its metadata.

        Raises:
            NotFoundError: unknown id; nothing is written.
            InvalidTransitionError: backwards move, or the incident is resolved.
        """
        new_status = _parse_status(status)

        async with self._lock:
            incident = await self._store.get(incident_id)
            if incident is None:
                raise NotFoundError(incident_id)

            current = incident.status
            if current == IncidentStatus.RESOLVED or new_status.rank < current.rank:
                raise InvalidTransitionError(incident_id, current.value, new_status.value)

            updated = incident.model_copy(
                update={
                    "status": new_status,
                    "metadata": {**incident.metadata, **dict(metadata_patch or {})},
                    "updated_at": _iso(time.time()),
                }
            )
            await self._store.put(updated)

        logger.info(
            "incident_status_updated",
            incident_id=incident_id,
            previous=current.value,
            status=new_status.value,
        )
        return updated

    async def resolve(
        self,
        incident_id: str,
        metadata: Mapping[str, Any] | None = None,
    ) -> Incident:
        """Close an incident; no further transitions are accepted afterwards."""
        patch = {"resolvedAt": _iso(time.time()), **dict(metadata or {})}
        return await self.update_status(incident_id, IncidentStatus.RESOLVED, patch)

    # ── Queries ─────────────────────────────────────────────────

    async def get(self, incident_id: str) -> Incident | None:
        return await self._store.get(incident_id)

    async def list_by_device(self, device_id: int) -> list[Incident]:
        """Incidents for one device, newest event first."""
        return await self.list_all(device_id=device_id)

    async def list_all(
        self,
        *,
        status: IncidentStatus | str | None = None,
        device_id: int | None = None,
        start_date: int | None = None,
        end_date: int | None = None,
    ) -> list[Incident]:
        """Incidents matching every given filter, newest event first.

        ``start_date`` / ``end_date`` are inclusive epoch-millisecond bounds on
        the event timestamp. Equal timestamps keep insertion order.

        Raises:
            ValidationError: unknown status filter.
        """
        incidents = await self._store.values()

        if status is not None:
            wanted = _parse_status(status)
            incidents = [i for i in incidents if i.status == wanted]
        if device_id is not None:
            incidents = [i for i in incidents if i.device_id == device_id]
        if start_date is not None:
            incidents = [i for i in incidents if i.timestamp >= start_date]
        if end_date is not None:
            incidents = [i for i in incidents if i.timestamp <= end_date]

        return sorted(incidents, key=lambda i: i.timestamp, reverse=True)

    async def stats(self) -> IncidentStats:
        """Counts by status and device plus the mean recorded response time."""
        incidents = await self._store.values()

        by_status: dict[str, int] = {}
        by_device: dict[int, int] = {}
        response_times: list[float] = []

        for incident in incidents:
            by_status[incident.status.value] = by_status.get(incident.status.value, 0) + 1
            by_device[incident.device_id] = by_device.get(incident.device_id, 0) + 1

            value = incident.metadata.get(RESPONSE_TIME_KEY)
            if (
                isinstance(value, (int, float))
                and not isinstance(value, bool)
                and math.isfinite(value)
            ):
                response_times.append(value)

        avg = 0
        if response_times:
            avg = math.floor(sum(response_times) / len(response_times) + 0.5)

        return IncidentStats(
            total=len(incidents),
            by_status=by_status,
            by_device=by_device,
            avg_response_time=avg,
        )
