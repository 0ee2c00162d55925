"""Dispatch-layer exceptions."""

from __future__ import annotations


class DispatchError(Exception):
    """Base exception for dispatch errors."""


class NoContactsError(DispatchError):
    """Raised before any send when an incident has no usable contact."""

    def __init__(self, incident_id: str) -> None:
        self.incident_id = incident_id
        super().__init__(f"Incident {incident_id} has no emergency contacts")
