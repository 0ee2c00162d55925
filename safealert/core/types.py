"""Domain types for incidents and alert dispatch."""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

MAPS_URL_TEMPLATE = "https://maps.google.com/?q={lat},{lon}"

# 9999-12-31T23:59:59.999Z, the last instant datetime can render.
MAX_TIMESTAMP_MS = 253_402_300_799_999


class _CamelModel(BaseModel):
    """Accepts snake_case or camelCase input; dumps camelCase via ``by_alias``."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ── Incidents ────────────────────────────────────────────────────


class IncidentStatus(StrEnum):
    """Incident lifecycle status."""

    TRIGGERED = "triggered"
    ALERTS_SENT = "alerts_sent"
    ALERT_FAILED = "alert_failed"
    RESOLVED = "resolved"

    @property
    def rank(self) -> int:
        """Position in the forward-only lifecycle."""
        return _STATUS_RANK[self]


_STATUS_RANK: dict[IncidentStatus, int] = {
    IncidentStatus.TRIGGERED: 0,
    IncidentStatus.ALERTS_SENT: 1,
    IncidentStatus.ALERT_FAILED: 1,
    IncidentStatus.RESOLVED: 2,
}


class EmergencyRequest(_CamelModel):
    """Normalised inbound panic request, as produced by the intake layer."""

    device_id: int
    latitude: float | None = None
    longitude: float | None = None
    battery_level: int | None = Field(default=None, ge=0, le=100)
    sequence_number: int | None = None
    timestamp: int | None = Field(default=None, ge=0, le=MAX_TIMESTAMP_MS)
    emergency_contacts: list[str] = Field(min_length=1)


class Incident(_CamelModel):
    """One emergency-trigger event and its alerting lifecycle."""

    id: str
    device_id: int
    latitude: float = 0.0
    longitude: float = 0.0
    battery_level: int = Field(default=100, ge=0, le=100)
    sequence_number: int = 0
    timestamp: int
    emergency_contacts: tuple[str, ...] = ()
    status: IncidentStatus = IncidentStatus.TRIGGERED
    metadata: dict[str, Any] = Field(default_factory=dict)
    created_at: str = ""
    updated_at: str = ""

    @property
    def has_location(self) -> bool:
        return bool(self.latitude) and bool(self.longitude)

    @property
    def location_url(self) -> str | None:
        """Google Maps link, or None when either coordinate is zero."""
        if not self.has_location:
            return None
        return MAPS_URL_TEMPLATE.format(lat=self.latitude, lon=self.longitude)

    def to_dict(self) -> dict[str, Any]:
        """JSON-ready camelCase dict including the derived ``locationUrl``."""
        data = self.model_dump(mode="json", by_alias=True)
        url = self.location_url
        if url is not None:
            data["locationUrl"] = url
        return data


class IncidentStats(_CamelModel):
    """Aggregate view over the current incident snapshot."""

    total: int = 0
    by_status: dict[str, int] = Field(default_factory=dict)
    by_device: dict[int, int] = Field(default_factory=dict)
    avg_response_time: int = 0

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


# ── Dispatch ─────────────────────────────────────────────────────


class Channel(StrEnum):
    """Outbound notification channel."""

    SMS = "sms"
    VOICE = "voice"


class ProviderResponse(BaseModel):
    """Uniform result of a single vendor SMS / voice call."""

    success: bool = True
    provider: str
    status: str = ""
    message_id: str | None = None
    call_id: str | None = None
    simulated: bool = False
    raw: dict[str, Any] = Field(default_factory=dict)

    @property
    def reference(self) -> str | None:
        """Vendor identifier for the send, whichever channel produced it."""
        return self.message_id or self.call_id


class DispatchResult(_CamelModel):
    """Outcome of one contact on one channel."""

    contact: str
    channel: Channel
    success: bool
    provider: str | None = None
    provider_message_id: str | None = None
    provider_status: str | None = None
    simulated: bool = False
    error_message: str | None = None
    attempts: int = 1


class AlertOutcome(_CamelModel):
    """Aggregated per-contact results of one dispatch invocation."""

    sms: list[DispatchResult] = Field(default_factory=list)
    calls: list[DispatchResult] = Field(default_factory=list)

    @property
    def results(self) -> list[DispatchResult]:
        return [*self.sms, *self.calls]

    @property
    def success_count(self) -> int:
        return sum(1 for r in self.results if r.success)

    @property
    def failure_count(self) -> int:
        return sum(1 for r in self.results if not r.success)

    @property
    def any_success(self) -> bool:
        return any(r.success for r in self.results)

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
