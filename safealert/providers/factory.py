"""Provider selector — maps the configured vendor name to one provider instance."""

from __future__ import annotations

from typing import Any, Callable

from safealert.core.config import CpaasConfig
from safealert.providers.base import NotificationProvider
from safealert.providers.exceptions import UnknownProviderError
from safealert.providers.exotel import ExotelProvider
from safealert.providers.gupshup import GupshupProvider
from safealert.providers.msg91 import Msg91Provider

DEFAULT_PROVIDER = Msg91Provider.name

ProviderBuilder = Callable[[CpaasConfig, int], NotificationProvider]


def _common(config: CpaasConfig) -> dict[str, Any]:
    return {
        "timeout_secs": config.timeout_secs,
        "calling_code": config.home_calling_code,
        "national_length": config.national_number_length,
    }


def _build_msg91(config: CpaasConfig, call_duration_secs: int) -> NotificationProvider:
    return Msg91Provider(config.msg91, **_common(config))


def _build_exotel(config: CpaasConfig, call_duration_secs: int) -> NotificationProvider:
    return ExotelProvider(
        config.exotel,
        call_duration_secs=call_duration_secs,
        **_common(config),
    )


def _build_gupshup(config: CpaasConfig, call_duration_secs: int) -> NotificationProvider:
    return GupshupProvider(config.gupshup, **_common(config))


_REGISTRY: dict[str, ProviderBuilder] = {
    Msg91Provider.name: _build_msg91,
    ExotelProvider.name: _build_exotel,
    GupshupProvider.name: _build_gupshup,
}


def supported_providers() -> frozenset[str]:
    """Vendor names accepted by ``select_provider``."""
    return frozenset(_REGISTRY)


def select_provider(
    config: CpaasConfig,
    call_duration_secs: int = 30,
) -> NotificationProvider:
    """Build the provider named by ``config.provider`` (case-insensitive).

    Holds no selection state; callers cache the returned instance.

    Raises:
        UnknownProviderError: the name matches no registered vendor.
        ConfigError: the selected vendor is missing a required credential.
    """
    name = (config.provider or DEFAULT_PROVIDER).strip().lower()
    builder = _REGISTRY.get(name)
    if builder is None:
        raise UnknownProviderError(name, sorted(_REGISTRY))
    return builder(config, call_duration_secs)
