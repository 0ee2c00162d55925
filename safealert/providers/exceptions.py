"""Exception hierarchy for CPaaS notification providers."""

from __future__ import annotations


class NotificationError(Exception):
    """Base exception for all provider errors."""


class ConfigError(NotificationError):
    """A required vendor credential is missing."""

    def __init__(self, vendor: str, field: str) -> None:
        self.vendor = vendor
        self.field = field
        super().__init__(f"{vendor}: {field} is required")


class UnknownProviderError(NotificationError):
    """The configured provider name matches no registered vendor."""

    def __init__(self, name: str, supported: list[str]) -> None:
        self.name = name
        self.supported = supported
        super().__init__(
            f"Unknown CPaaS provider: {name}. "
            f"Supported providers: {', '.join(supported)}"
        )


class ProviderError(NotificationError):
    """A vendor API call failed (non-2xx, malformed body, transport error)."""

    def __init__(self, vendor: str, cause: str) -> None:
        self.vendor = vendor
        self.cause = cause
        super().__init__(f"{vendor}: {cause}")
