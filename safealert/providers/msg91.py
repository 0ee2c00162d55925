"""MSG91 provider — transactional SMS (flow API v5) and voice (API v2)."""

from __future__ import annotations

from typing import Any

import structlog

from safealert.core.config import Msg91Config
from safealert.core.types import ProviderResponse
from safealert.providers.base import SMS_MAX_CHARS, VOICE_MAX_CHARS, NotificationProvider

logger = structlog.get_logger(__name__)

_TRANSACTIONAL_ROUTE = "4"


class Msg91Provider(NotificationProvider):
    """Primary vendor. Requires ``auth_key`` and ``sender_id``."""

    name = "msg91"

    def __init__(self, config: Msg91Config, **kwargs: Any) -> None:
        self._config = config
        super().__init__(**kwargs)
        self._auth_key = config.auth_key.get_secret_value()

    def validate_config(self) -> None:
        self._require(auth_key=self._config.auth_key, sender_id=self._config.sender_id)
        if not self._config.template_id:
            self._warn_degraded("template_id", "using basic SMS without a flow template")

    async def send_sms(self, number: str, message: str) -> ProviderResponse:
        to = self.format_number(number).lstrip("+")
        payload: dict[str, Any] = {
            "sender": self._config.sender_id,
            "route": _TRANSACTIONAL_ROUTE,
            "country": self._config.country,
            "sms": [{"message": message[:SMS_MAX_CHARS], "to": [to]}],
        }
        if self._config.template_id:
            payload["template_id"] = self._config.template_id

        body = await self._request(
            "POST",
            f"{self._config.base_url}/flow/",
            json=payload,
            headers={"authkey": self._auth_key},
        )
        logger.info("msg91_sms_sent", to=to, request_id=body.get("request_id"))
        return ProviderResponse(
            provider=self.name,
            status="sent",
            message_id=_str_or_none(body.get("request_id") or body.get("message_id")),
            raw=body,
        )

    async def make_voice_call(self, number: str, message: str) -> ProviderResponse:
        to = self.format_number(number).lstrip("+")
        params = {
            "authkey": self._auth_key,
            "mobiles": to,
            "voice_message": message[:VOICE_MAX_CHARS],
            "country": self._config.country,
        }
        body = await self._request(
            "POST",
            f"{self._config.voice_url}/voice/call.php",
            params=params,
        )
        logger.info("msg91_call_initiated", to=to, request_id=body.get("request_id"))
        return ProviderResponse(
            provider=self.name,
            status="initiated",
            call_id=_str_or_none(body.get("request_id") or body.get("message")),
            raw=body,
        )


def _str_or_none(value: object) -> str | None:
    return str(value) if value else None
