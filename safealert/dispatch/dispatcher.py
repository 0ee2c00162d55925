"""Alert dispatcher — fans an incident out to every contact over SMS and voice."""

from __future__ import annotations

import asyncio
import uuid
from collections.abc import Awaitable, Callable, Sequence

import structlog

from safealert.core.types import (
    AlertOutcome,
    Channel,
    DispatchResult,
    Incident,
    ProviderResponse,
)
from safealert.dispatch.exceptions import NoContactsError
from safealert.dispatch.messages import build_sms_body, build_voice_message
from safealert.dispatch.retry import RetryExhaustedError, RetryPolicy
from safealert.providers.base import NotificationProvider

logger = structlog.get_logger(__name__)

SIMULATED_PROVIDER = "simulation"


class AlertDispatcher:
    """Sends one SMS and one voice call per contact, all concurrently.

    - Every send owns its failure: an exception becomes a failed
      ``DispatchResult``, never a raise, so siblings always report.
    - ``dispatch_alert`` returns only once all 2×N sends have settled.
    - With no provider (simulation mode) sends succeed locally, flagged
      ``simulated``, without network I/O.
    - Each send is wrapped in the ``RetryPolicy``.
    """

    def __init__(
        self,
        provider: NotificationProvider | None = None,
        retry_policy: RetryPolicy | None = None,
    ) -> None:
        self._provider = provider
        self._retry = retry_policy or RetryPolicy(max_retries=0)

    @property
    def provider(self) -> NotificationProvider | None:
        return self._provider

    @property
    def simulated(self) -> bool:
        return self._provider is None

    @property
    def provider_name(self) -> str:
        return self._provider.provider_name() if self._provider else SIMULATED_PROVIDER

    async def dispatch_alert(
        self,
        incident: Incident,
        contacts: Sequence[str] | None = None,
    ) -> AlertOutcome:
        """Notify every non-blank contact on both channels.

        Raises:
            NoContactsError: no usable contact; nothing is sent.
        """
        targets = [
            c for c in (incident.emergency_contacts if contacts is None else contacts)
            if c and c.strip()
        ]
        if not targets:
            raise NoContactsError(incident.id)

        sms_body = build_sms_body(incident)
        voice_message = build_voice_message(incident)

        logger.info(
            "dispatch_started",
            incident_id=incident.id,
            contacts=len(targets),
            provider=self.provider_name,
            simulated=self.simulated,
        )

        sms_ops = [self._send(incident.id, c, Channel.SMS, sms_body) for c in targets]
        call_ops = [self._send(incident.id, c, Channel.VOICE, voice_message) for c in targets]
        settled = await asyncio.gather(*sms_ops, *call_ops)

        outcome = AlertOutcome(
            sms=list(settled[: len(targets)]),
            calls=list(settled[len(targets):]),
        )
        logger.info(
            "dispatch_completed",
            incident_id=incident.id,
            succeeded=outcome.success_count,
            failed=outcome.failure_count,
        )
        return outcome

    async def _send(
        self,
        incident_id: str,
        contact: str,
        channel: Channel,
        message: str,
    ) -> DispatchResult:
        if self._provider is None:
            return self._simulate(incident_id, contact, channel)

        operation = self._operation(self._provider, channel)
        try:
            attempted = await self._retry.run(
                lambda: operation(contact, message),
                label=f"{channel.value}:{contact}",
            )
        except RetryExhaustedError as exc:
            logger.warning(
                "send_failed",
                incident_id=incident_id,
                contact=contact,
                channel=channel.value,
                provider=self.provider_name,
                attempts=exc.attempts,
                error=str(exc),
            )
            return DispatchResult(
                contact=contact,
                channel=channel,
                success=False,
                provider=self.provider_name,
                error_message=str(exc),
                attempts=exc.attempts,
            )
        except Exception as exc:
            logger.exception(
                "send_error",
                incident_id=incident_id,
                contact=contact,
                channel=channel.value,
                provider=self.provider_name,
            )
            return DispatchResult(
                contact=contact,
                channel=channel,
                success=False,
                provider=self.provider_name,
                error_message=str(exc) or type(exc).__name__,
            )

        response: ProviderResponse = attempted.value
        logger.info(
            "send_succeeded",
            incident_id=incident_id,
            contact=contact,
            channel=channel.value,
            provider=response.provider,
            reference=response.reference,
            simulated=response.simulated,
            attempts=attempted.attempts,
        )
        return DispatchResult(
            contact=contact,
            channel=channel,
            success=response.success,
            provider=response.provider,
            provider_message_id=response.reference,
            provider_status=response.status or None,
            simulated=response.simulated,
            attempts=attempted.attempts,
        )

    @staticmethod
    def _operation(
        provider: NotificationProvider,
        channel: Channel,
    ) -> Callable[[str, str], Awaitable[ProviderResponse]]:
        if channel == Channel.SMS:
            return provider.send_sms
        return provider.make_voice_call

    @staticmethod
    def _simulate(incident_id: str, contact: str, channel: Channel) -> DispatchResult:
        reference = f"sim-{channel.value}-{uuid.uuid4().hex[:12]}"
        logger.info(
            "send_simulated",
            incident_id=incident_id,
            contact=contact,
            channel=channel.value,
            reference=reference,
        )
        return DispatchResult(
            contact=contact,
            channel=channel,
            success=True,
            provider=SIMULATED_PROVIDER,
            provider_message_id=reference,
            provider_status="simulated",
            simulated=True,
        )

    # ── Lifecycle ───────────────────────────────────────────────

    async def close(self) -> None:
        if self._provider is None:
            return
        try:
            await self._provider.close()
        except Exception:
            logger.exception("provider_close_error", provider=self.provider_name)
