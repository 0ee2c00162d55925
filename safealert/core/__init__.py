"""Core module — config, types, logging."""

from safealert.core.config import Settings, get_settings, load_settings, reset_settings
from safealert.core.logging import incident_context, setup_logging
from safealert.core.types import (
    AlertOutcome,
    Channel,
    DispatchResult,
    EmergencyRequest,
    Incident,
    IncidentStats,
    IncidentStatus,
    ProviderResponse,
)

__all__ = [
    "AlertOutcome",
    "Channel",
    "DispatchResult",
    "EmergencyRequest",
    "Incident",
    "IncidentStats",
    "IncidentStatus",
    "ProviderResponse",
    "Settings",
    "get_settings",
    "incident_context",
    "load_settings",
    "reset_settings",
    "setup_logging",
]
