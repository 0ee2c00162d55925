"""Shared fixtures for dispatch tests."""

from __future__ import annotations

from collections.abc import Callable

import pytest

from safealert.core.types import Incident, IncidentStatus, ProviderResponse
from safealert.providers.base import NotificationProvider
from safealert.providers.exceptions import ProviderError


class FakeProvider(NotificationProvider):
    """Scripted provider: numbers listed in ``fail_sms`` / ``fail_voice`` raise."""

    name = "fake"

    def __init__(
        self,
        fail_sms: set[str] | None = None,
        fail_voice: set[str] | None = None,
        voice_simulated: bool = False,
    ) -> None:
        self.fail_sms = fail_sms or set()
        self.fail_voice = fail_voice or set()
        self.voice_simulated = voice_simulated
        self.sms_calls: list[tuple[str, str]] = []
        self.voice_calls: list[tuple[str, str]] = []
        self.closed = False
        super().__init__()

    def validate_config(self) -> None:
        pass

    async def send_sms(self, number: str, message: str) -> ProviderResponse:
        self.sms_calls.append((number, message))
        if number in self.fail_sms:
            raise ProviderError(self.name, f"sms rejected for {number}")
        return ProviderResponse(provider=self.name, status="sent", message_id=f"sms-{number}")

    async def make_voice_call(self, number: str, message: str) -> ProviderResponse:
        self.voice_calls.append((number, message))
        if number in self.fail_voice:
            raise ProviderError(self.name, f"call rejected for {number}")
        if self.voice_simulated:
            return ProviderResponse(
                provider=self.name,
                status="simulated",
                call_id=f"voice-sim-{number}",
                simulated=True,
            )
        return ProviderResponse(provider=self.name, status="initiated", call_id=f"call-{number}")

    async def close(self) -> None:
        self.closed = True


@pytest.fixture()
def make_incident() -> Callable[..., Incident]:
    def _make(**kw: object) -> Incident:
        defaults: dict[str, object] = {
            "id": "inc-1",
            "device_id": 4096,
            "latitude": 12.9716,
            "longitude": 77.5946,
            "battery_level": 85,
            "timestamp": 1_700_000_000_000,
            "emergency_contacts": ("9876543210", "9123456789"),
            "status": IncidentStatus.TRIGGERED,
        }
        defaults.update(kw)
        return Incident(**defaults)  # type: ignore[arg-type]

    return _make


@pytest.fixture()
def fake_provider() -> Callable[..., FakeProvider]:
    return FakeProvider
