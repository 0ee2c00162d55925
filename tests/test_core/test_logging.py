"""Tests for logging setup and per-incident context binding."""

from __future__ import annotations

import asyncio
import logging

import structlog

from safealert.core.config import reset_settings
from safealert.core.logging import incident_context, setup_logging


class TestSetupLogging:
    def setup_method(self) -> None:
        reset_settings()

    def teardown_method(self) -> None:
        reset_settings()
        structlog.reset_defaults()

    def test_level_override(self) -> None:
        setup_logging(level="DEBUG", fmt="console")
        assert logging.getLogger().level == logging.DEBUG
        assert len(logging.getLogger().handlers) == 1

    def test_httpx_kept_at_warning(self) -> None:
        setup_logging(level="DEBUG", fmt="json")
        assert logging.getLogger("httpx").level == logging.WARNING

    def test_httpx_follows_stricter_root_level(self) -> None:
        setup_logging(level="ERROR")
        assert logging.getLogger("httpx").level == logging.ERROR


class TestIncidentContext:
    def test_binds_and_unbinds(self) -> None:
        with incident_context("inc-1"):
            assert structlog.contextvars.get_contextvars()["incident_id"] == "inc-1"
        assert "incident_id" not in structlog.contextvars.get_contextvars()

    async def test_isolated_between_tasks(self) -> None:
        seen: dict[str, str] = {}

        async def worker(incident_id: str) -> None:
            with incident_context(incident_id):
                await asyncio.sleep(0)
                seen[incident_id] = structlog.contextvars.get_contextvars()["incident_id"]

        await asyncio.gather(worker("a"), worker("b"))
        assert seen == {"a": "a", "b": "b"}
