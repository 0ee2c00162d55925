"""CPaaS notification providers and the vendor selector."""

from safealert.providers.base import NotificationProvider
from safealert.providers.exceptions import (
    ConfigError,
    NotificationError,
    ProviderError,
    UnknownProviderError,
)
from safealert.providers.exotel import ExotelProvider
from safealert.providers.factory import select_provider, supported_providers
from safealert.providers.gupshup import GupshupProvider
from safealert.providers.msg91 import Msg91Provider
from safealert.providers.phone import normalize_phone

__all__ = [
    "ConfigError",
    "ExotelProvider",
    "GupshupProvider",
    "Msg91Provider",
    "NotificationError",
    "NotificationProvider",
    "ProviderError",
    "UnknownProviderError",
    "normalize_phone",
    "select_provider",
    "supported_providers",
]
