"""Exotel provider — SMS and outbound calls via the v1 Accounts API."""

from __future__ import annotations

from typing import Any

import httpx
import structlog

from safealert.core.config import ExotelConfig
from safealert.core.types import ProviderResponse
from safealert.providers.base import SMS_MAX_CHARS, NotificationProvider

logger = structlog.get_logger(__name__)


class ExotelProvider(NotificationProvider):
    """Basic-auth, form-encoded vendor.

    Voice calls need a flow URL configured in the Exotel dashboard to speak
    the transcript; without one the call connects as a transactional call.
    """

    name = "exotel"

    def __init__(
        self,
        config: ExotelConfig,
        *,
        call_duration_secs: int = 30,
        **kwargs: Any,
    ) -> None:
        self._config = config
        super().__init__(**kwargs)
        self._call_duration_secs = call_duration_secs
        self._account_url = f"{config.base_url.rstrip('/')}/{config.account_sid}"
        self._auth = httpx.BasicAuth(config.api_key, config.api_token.get_secret_value())

    def validate_config(self) -> None:
        self._require(
            account_sid=self._config.account_sid,
            api_key=self._config.api_key,
            api_token=self._config.api_token,
            exo_phone=self._config.exo_phone,
        )
        if not self._config.flow_url:
            self._warn_degraded("flow_url", "voice calls may fail without a pre-configured flow")

    async def send_sms(self, number: str, message: str) -> ProviderResponse:
        to = self.format_number(number)
        body = await self._request(
            "POST",
            f"{self._account_url}/Sms/send.json",
            data={
                "From": self._config.exo_phone,
                "To": to,
                "Body": message[:SMS_MAX_CHARS],
            },
            auth=self._auth,
        )
        sms = body.get("SMSMessage") or {}
        logger.info("exotel_sms_sent", to=to, sid=sms.get("Sid"))
        return ProviderResponse(
            provider=self.name,
            status=sms.get("Status") or "sent",
            message_id=sms.get("Sid"),
            raw=body,
        )

    async def make_voice_call(self, number: str, message: str) -> ProviderResponse:
        # Exotel speaks from the flow, not from free text; message is unused.
        to = self.format_number(number)
        form = {
            "From": self._config.exo_phone,
            "To": to,
            "CallerId": self._config.exo_phone,
            "TimeLimit": str(self._call_duration_secs),
        }
        if self._config.flow_url:
            form["Url"] = self._config.flow_url
        else:
            form["CallType"] = "trans"

        body = await self._request(
            "POST",
            f"{self._account_url}/Calls/connect.json",
            data=form,
            auth=self._auth,
        )
        call = body.get("Call") or {}
        logger.info("exotel_call_initiated", to=to, sid=call.get("Sid"))
        return ProviderResponse(
            provider=self.name,
            status=call.get("Status") or "initiated",
            call_id=call.get("Sid"),
            raw=body,
        )
