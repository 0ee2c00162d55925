"""Incident state tracking — records, lifecycle transitions, queries."""

from safealert.incidents.exceptions import (
    IncidentError,
    InvalidTransitionError,
    NotFoundError,
    ValidationError,
)
from safealert.incidents.store import IncidentStore, InMemoryIncidentStore
from safealert.incidents.tracker import IncidentTracker, parse_request

__all__ = [
    "InMemoryIncidentStore",
    "IncidentError",
    "IncidentStore",
    "IncidentTracker",
    "InvalidTransitionError",
    "NotFoundError",
    "ValidationError",
    "parse_request",
]
