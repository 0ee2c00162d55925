"""Gupshup provider — SMS only; voice calls are simulated."""

from __future__ import annotations

import time
from typing import Any

import structlog

from safealert.core.config import GupshupConfig
from safealert.core.types import ProviderResponse
from safealert.providers.base import SMS_MAX_CHARS, NotificationProvider
from safealert.providers.exceptions import ProviderError

logger = structlog.get_logger(__name__)


class GupshupProvider(NotificationProvider):
    """Enterprise SMS gateway. Requires ``user_id`` and ``password``."""

    name = "gupshup"

    def __init__(self, config: GupshupConfig, **kwargs: Any) -> None:
        self._config = config
        super().__init__(**kwargs)

    def validate_config(self) -> None:
        self._require(user_id=self._config.user_id, password=self._config.password)

    async def send_sms(self, number: str, message: str) -> ProviderResponse:
        to = self.format_number(number)
        params = {
            "method": "SendMessage",
            "send_to": to,
            "msg": message[:SMS_MAX_CHARS],
            "userid": self._config.user_id,
            "password": self._config.password.get_secret_value(),
            "v": "1.1",
            "format": "json",
            "msg_type": "TEXT",
            "auth_scheme": "plain",
        }
        if self._config.source:
            params["source"] = self._config.source

        body = await self._request("GET", self._config.base_url, params=params)

        # Gupshup reports failures inside a 200 response.
        inner = body.get("response")
        inner = inner if isinstance(inner, dict) else {}
        status = inner.get("status") or body.get("status")
        if status == "error" or (status != "success" and body.get("error")):
            detail = inner.get("details") or body.get("error") or "SMS sending failed"
            raise ProviderError(self.name, str(detail))

        message_id = inner.get("id") or body.get("id") or f"gupshup-{int(time.time() * 1000)}"
        logger.info("gupshup_sms_sent", to=to, message_id=message_id)
        return ProviderResponse(
            provider=self.name,
            status="sent",
            message_id=str(message_id),
            raw=body,
        )

    async def make_voice_call(self, number: str, message: str) -> ProviderResponse:
        to = self.format_number(number)
        logger.warning("gupshup_voice_unsupported", to=to)
        return ProviderResponse(
            provider=self.name,
            status="simulated",
            call_id=f"gupshup-voice-simulated-{int(time.time() * 1000)}",
            simulated=True,
        )
