"""Incident tracking exceptions."""

from __future__ import annotations


class IncidentError(Exception):
    """Base exception for incident tracking errors."""


class ValidationError(IncidentError):
    """A required inbound field is missing or malformed."""

    def __init__(self, field: str, message: str = "") -> None:
        self.field = field
        super().__init__(message or f"{field} is required")


class NotFoundError(IncidentError):
    """No incident exists with the given identifier."""

    def __init__(self, incident_id: str) -> None:
        self.incident_id = incident_id
        super().__init__(f"Incident {incident_id} not found")


class InvalidTransitionError(IncidentError):
    """A status update would move an incident backwards or out of ``resolved``."""

    def __init__(self, incident_id: str, current: str, requested: str) -> None:
        self.incident_id = incident_id
        self.current = current
        self.requested = requested
        super().__init__(
            f"Incident {incident_id}: cannot move from {current} to {requested}"
        )
