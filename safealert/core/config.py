"""Pydantic settings loaded from YAML configuration."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, SecretStr

_settings: Settings | None = None

_DEFAULT_CONFIG_PATH = Path("config/settings.yaml")


class Msg91Config(BaseModel):
    """MSG91 transactional SMS / voice credentials."""

    auth_key: SecretStr = SecretStr("")
    sender_id: str = ""
    template_id: str = ""
    country: str = "91"
    base_url: str = "https://control.msg91.com/api/v5"
    voice_url: str = "https://control.msg91.com/api/v2"


class ExotelConfig(BaseModel):
    """Exotel SMS / voice credentials."""

    account_sid: str = ""
    api_key: str = ""
    api_token: SecretStr = SecretStr("")
    exo_phone: str = ""
    flow_url: str = ""
    base_url: str = "https://api.in.exotel.com/v1/Accounts"


class GupshupConfig(BaseModel):
    """Gupshup enterprise SMS gateway credentials."""

    user_id: str = ""
    password: SecretStr = SecretStr("")
    source: str = "GSDSMS"
    base_url: str = "https://enterprise.smsgupshup.com/GatewayAPI/rest"


class CpaasConfig(BaseModel):
    """Provider selection plus one credential block per vendor."""

    provider: str = "msg91"
    timeout_secs: float = 10.0
    home_calling_code: str = "91"
    national_number_length: int = 10
    msg91: Msg91Config = Msg91Config()
    exotel: ExotelConfig = ExotelConfig()
    gupshup: GupshupConfig = GupshupConfig()


class AlertsConfig(BaseModel):
    """Dispatch behaviour: retry budget and per-call bounds."""

    max_retries: int = 3
    retry_delay_ms: int = 2000
    retry_max_delay_ms: int = 30000
    call_duration_secs: int = 30
    send_timeout_secs: float = 30.0


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = "INFO"
    format: str = "json"


class Settings(BaseModel):
    """Root settings container."""

    cpaas: CpaasConfig = CpaasConfig()
    alerts: AlertsConfig = AlertsConfig()
    logging: LoggingConfig = LoggingConfig()


def load_settings(path: str | Path | None = None) -> Settings:
    """Load settings from a YAML file and cache globally.

    Args:
        path: Path to YAML config. Defaults to config/settings.yaml.

    Returns:
        Parsed Settings instance.
    """
    global _settings  # noqa: PLW0603

    config_path = Path(path) if path else _DEFAULT_CONFIG_PATH

    data: dict[str, Any] = {}
    if config_path.exists():
        with open(config_path) as f:
            raw = yaml.safe_load(f)
            if isinstance(raw, dict):
                data = raw

    _settings = Settings(**data)
    return _settings


def get_settings() -> Settings:
    """Return the cached settings, loading defaults if not yet loaded."""
    global _settings  # noqa: PLW0603
    if _settings is None:
        _settings = load_settings()
    return _settings


def reset_settings() -> None:
    """Reset the cached settings (useful for testing)."""
    global _settings  # noqa: PLW0603
    _settings = None
