"""Convenience factory for wiring the alert pipeline."""

from __future__ import annotations

import structlog

from safealert.core.config import Settings
from safealert.dispatch.dispatcher import AlertDispatcher
from safealert.dispatch.pipeline import AlertPipeline
from safealert.dispatch.retry import RetryPolicy
from safealert.incidents.store import IncidentStore
from safealert.incidents.tracker import IncidentTracker
from safealert.providers.base import NotificationProvider
from safealert.providers.exceptions import ConfigError
from safealert.providers.factory import select_provider

logger = structlog.get_logger(__name__)


def create_alert_pipeline(
    settings: Settings,
    store: IncidentStore | None = None,
) -> AlertPipeline:
    """Build tracker + dispatcher + pipeline from settings.

    A vendor missing credentials puts the whole service in simulation mode.
    An unknown vendor name is fatal and propagates.
    """
    provider: NotificationProvider | None
    try:
        provider = select_provider(
            settings.cpaas,
            call_duration_secs=settings.alerts.call_duration_secs,
        )
    except ConfigError as exc:
        logger.warning(
            "provider_unavailable_simulation_mode",
            provider=settings.cpaas.provider,
            vendor=exc.vendor,
            missing_field=exc.field,
        )
        provider = None
    else:
        logger.info("provider_initialized", provider=provider.provider_name())

    retry_policy = RetryPolicy(
        max_retries=settings.alerts.max_retries,
        delay_ms=settings.alerts.retry_delay_ms,
        max_delay_ms=settings.alerts.retry_max_delay_ms,
        attempt_timeout_secs=settings.alerts.send_timeout_secs,
    )
    dispatcher = AlertDispatcher(provider=provider, retry_policy=retry_policy)
    tracker = IncidentTracker(store=store)
    return AlertPipeline(tracker=tracker, dispatcher=dispatcher)
