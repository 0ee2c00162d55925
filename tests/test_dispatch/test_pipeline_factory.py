"""Tests for create_alert_pipeline wiring."""

from __future__ import annotations

import pytest
from pydantic import SecretStr

from safealert.core.config import AlertsConfig, CpaasConfig, Msg91Config, Settings
from safealert.dispatch.factory import create_alert_pipeline
from safealert.incidents.store import InMemoryIncidentStore
from safealert.providers.exceptions import UnknownProviderError
from safealert.providers.msg91 import Msg91Provider


def _settings(**cpaas: object) -> Settings:
    return Settings(
        cpaas=CpaasConfig(**cpaas),  # type: ignore[arg-type]
        alerts=AlertsConfig(
            max_retries=2,
            retry_delay_ms=500,
            retry_max_delay_ms=4000,
            call_duration_secs=40,
            send_timeout_secs=5.0,
        ),
    )


class TestCreateAlertPipeline:
    async def test_configured_provider(self) -> None:
        settings = _settings(
            msg91=Msg91Config(auth_key=SecretStr("k"), sender_id="S", template_id="t")
        )
        pipeline = create_alert_pipeline(settings)
        try:
            assert isinstance(pipeline.dispatcher.provider, Msg91Provider)
            assert pipeline.dispatcher.simulated is False
        finally:
            await pipeline.close()

    async def test_missing_credentials_fall_back_to_simulation(self) -> None:
        pipeline = create_alert_pipeline(_settings())
        assert pipeline.dispatcher.simulated is True
        assert pipeline.dispatcher.provider is None
        await pipeline.close()

    def test_unknown_provider_propagates(self) -> None:
        with pytest.raises(UnknownProviderError):
            create_alert_pipeline(_settings(provider="twilio"))

    async def test_retry_settings_applied(self) -> None:
        pipeline = create_alert_pipeline(_settings())
        retry = pipeline.dispatcher._retry
        assert retry.max_attempts == 3
        assert retry.delay_ms == 500
        assert retry.max_delay_ms == 4000
        assert retry.attempt_timeout_secs == 5.0
        await pipeline.close()

    async def test_store_injected(self) -> None:
        store = InMemoryIncidentStore()
        pipeline = create_alert_pipeline(_settings(), store=store)
        assert pipeline.tracker.store is store
        await pipeline.close()
