"""Pure functions that build SMS bodies and voice transcripts from an Incident."""

from __future__ import annotations

from datetime import datetime, timezone

from safealert.core.types import Incident

_CORE_SENTENCE = "Emergency Alert! This is an automated safety alert."


def format_event_time(timestamp_ms: int) -> str:
    """Human-readable UTC time for an epoch-millisecond timestamp.

    Falls back to the raw millisecond value when the platform cannot
    represent the instant, so a message can always be built.
    """
    try:
        dt = datetime.fromtimestamp(timestamp_ms / 1000, tz=timezone.utc)
    except (OverflowError, OSError, ValueError):
        return f"{timestamp_ms} ms since epoch"
    return dt.strftime("%d %b %Y, %H:%M:%S UTC")


def build_sms_body(incident: Incident) -> str:
    """SMS text: device, time, maps link, battery."""
    url = incident.location_url
    location = f"Location: {url}" if url else "Location: Not available"
    return (
        "\U0001F6A8 EMERGENCY ALERT \U0001F6A8\n\n"
        "A safety alert has been triggered!\n\n"
        f"Device: {incident.device_id}\n"
        f"Time: {format_event_time(incident.timestamp)}\n"
        f"{location}\n"
        f"Battery: {incident.battery_level}%\n\n"
        "This is an automated emergency alert. Please respond immediately."
    )


def build_voice_message(incident: Incident) -> str:
    """Text-to-speech transcript. The core sentence is spoken twice."""
    if incident.has_location:
        location = f"Latitude {incident.latitude}, Longitude {incident.longitude}"
    else:
        location = "Location not available"
    return (
        f"{_CORE_SENTENCE} "
        f"An emergency has been triggered from device {incident.device_id}. "
        f"{location}. "
        f"Battery level is {incident.battery_level} percent. "
        "Please respond immediately. "
        "This message will repeat. "
        f"{_CORE_SENTENCE} "
        "An emergency has been triggered. "
        "Please respond immediately."
    )
