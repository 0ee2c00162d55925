"""AlertPipeline — accepts an emergency and hands dispatch to a background task."""

from __future__ import annotations

import asyncio
import time
from collections.abc import Mapping
from typing import Any

import structlog

from safealert.core.logging import incident_context
from safealert.core.types import EmergencyRequest, Incident, IncidentStatus
from safealert.dispatch.dispatcher import AlertDispatcher
from safealert.incidents.tracker import RESPONSE_TIME_KEY, IncidentTracker

logger = structlog.get_logger(__name__)

ALERT_RESULTS_KEY = "alertResults"
ERROR_KEY = "error"


class AlertPipeline:
    """Process-wide context owning the tracker and the dispatcher.

    ``submit()`` returns the ``triggered`` incident immediately; dispatch runs
    in a detached task whose only visible effect is exactly one
    ``update_status`` once every send has settled.

    Usage::

        pipeline = create_alert_pipeline(settings)
        incident = await pipeline.submit({"deviceId": 4096, "emergencyContacts": [...]})
        ...
        await pipeline.close()
    """

    def __init__(self, tracker: IncidentTracker, dispatcher: AlertDispatcher) -> None:
        self._tracker = tracker
        self._dispatcher = dispatcher
        # Strong references; the event loop only keeps weak ones to tasks.
        self._tasks: set[asyncio.Task[None]] = set()

    @property
    def tracker(self) -> IncidentTracker:
        return self._tracker

    @property
    def dispatcher(self) -> AlertDispatcher:
        return self._dispatcher

    @property
    def pending(self) -> int:
        """Number of dispatches still in flight."""
        return len(self._tasks)

    async def submit(self, payload: EmergencyRequest | Mapping[str, Any]) -> Incident:
        """Create the incident and start dispatch without waiting for it.

        Raises:
            ValidationError: malformed request; nothing is created or sent.
        """
        incident = await self._tracker.create(payload)

        task = asyncio.create_task(
            self._run_dispatch(incident),
            name=f"dispatch-{incident.id}",
        )
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

        logger.info("emergency_accepted", incident_id=incident.id)
        return incident

    async def _run_dispatch(self, incident: Incident) -> None:
        with incident_context(incident.id):
            await self._dispatch_and_record(incident)

    async def _dispatch_and_record(self, incident: Incident) -> None:
        try:
            outcome = await self._dispatcher.dispatch_alert(incident)
        except Exception as exc:
            logger.exception("dispatch_aborted", incident_id=incident.id)
            await self._record(
                incident.id,
                IncidentStatus.ALERT_FAILED,
                {ERROR_KEY: str(exc) or type(exc).__name__},
            )
            return

        status = (
            IncidentStatus.ALERTS_SENT if outcome.any_success else IncidentStatus.ALERT_FAILED
        )
        await self._record(
            incident.id,
            status,
            {
                ALERT_RESULTS_KEY: outcome.to_dict(),
                RESPONSE_TIME_KEY: int(time.time() * 1000) - incident.timestamp,
            },
        )

    async def _record(
        self,
        incident_id: str,
        status: IncidentStatus,
        metadata: dict[str, Any],
    ) -> None:
        try:
            await self._tracker.update_status(incident_id, status, metadata)
        except Exception:
            logger.exception(
                "incident_update_failed",
                incident_id=incident_id,
                status=status.value,
            )

    # ── Lifecycle ───────────────────────────────────────────────

    async def drain(self) -> None:
        """Wait for every in-flight dispatch to finish."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks))

    async def close(self) -> None:
        await self.drain()
        await self._dispatcher.close()
