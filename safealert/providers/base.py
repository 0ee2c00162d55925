"""Abstract CPaaS provider — HTTP lifecycle, error translation, number formatting."""

from __future__ import annotations

import abc
from types import TracebackType
from typing import Any, ClassVar

import httpx
import structlog

from safealert.core.types import ProviderResponse
from safealert.providers.exceptions import ConfigError, ProviderError
from safealert.providers.phone import (
    DEFAULT_CALLING_CODE,
    DEFAULT_NATIONAL_LENGTH,
    normalize_phone,
)

logger = structlog.get_logger(__name__)

# Vendor body limits.
SMS_MAX_CHARS = 1600
VOICE_MAX_CHARS = 500


class NotificationProvider(abc.ABC):
    """Base class for SMS / voice vendors.

    Subclasses declare ``name``, implement ``validate_config()``,
    ``send_sms()`` and ``make_voice_call()``. The base class owns the
    ``httpx.AsyncClient`` and turns transport/HTTP failures into
    ``ProviderError`` so callers only ever see one failure type per send.

    Usage::

        async with Msg91Provider(config) as provider:
            await provider.send_sms("9876543210", "help")
    """

    name: ClassVar[str]

    def __init__(
        self,
        *,
        timeout_secs: float = 10.0,
        calling_code: str = DEFAULT_CALLING_CODE,
        national_length: int = DEFAULT_NATIONAL_LENGTH,
        http: httpx.AsyncClient | None = None,
    ) -> None:
        self._timeout_secs = timeout_secs
        self._calling_code = calling_code
        self._national_length = national_length
        self._http = http
        self.validate_config()

    def provider_name(self) -> str:
        """Stable vendor tag used for attribution and logging."""
        return self.name

    @abc.abstractmethod
    def validate_config(self) -> None:
        """Raise ``ConfigError`` for the first missing required field."""

    @abc.abstractmethod
    async def send_sms(self, number: str, message: str) -> ProviderResponse:
        """Send one SMS."""

    @abc.abstractmethod
    async def make_voice_call(self, number: str, message: str) -> ProviderResponse:
        """Place one text-to-speech voice call."""

    # ── Helpers for subclasses ───────────────────────────────────

    def _require(self, **fields: object) -> None:
        for field, value in fields.items():
            if hasattr(value, "get_secret_value"):
                value = value.get_secret_value()
            if not value:
                raise ConfigError(self.name, field)

    def _warn_degraded(self, field: str, detail: str) -> None:
        logger.warning(
            "provider_degraded_mode",
            provider=self.name,
            missing_field=field,
            detail=detail,
        )

    def format_number(self, number: str) -> str:
        return normalize_phone(number, self._calling_code, self._national_length)

    def _get_http(self) -> httpx.AsyncClient:
        if self._http is None or self._http.is_closed:
            self._http = httpx.AsyncClient(timeout=httpx.Timeout(self._timeout_secs))
        return self._http

    async def _request(self, method: str, url: str, **kwargs: Any) -> dict[str, Any]:
        """Issue a request and return the decoded JSON object body."""
        http = self._get_http()
        try:
            response = await http.request(method, url, **kwargs)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise ProviderError(
                self.name,
                f"HTTP {exc.response.status_code}: {_error_detail(exc.response)}",
            ) from exc
        except httpx.HTTPError as exc:
            raise ProviderError(
                self.name, f"request failed: {type(exc).__name__}: {exc}"
            ) from exc

        try:
            body = response.json()
        except ValueError as exc:
            raise ProviderError(self.name, "response is not valid JSON") from exc

        if not isinstance(body, dict):
            raise ProviderError(self.name, "response is not a JSON object")
        return body

    # ── Lifecycle ────────────────────────────────────────────────

    async def close(self) -> None:
        """Close the httpx async client."""
        if self._http is not None:
            await self._http.aclose()
            self._http = None

    async def __aenter__(self) -> NotificationProvider:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.close()


def _error_detail(response: httpx.Response) -> str:
    """Best-effort vendor error message from a failed response."""
    try:
        body = response.json()
    except ValueError:
        return response.text[:200]
    if isinstance(body, dict):
        for key in ("message", "error", "RestException"):
            value = body.get(key)
            if isinstance(value, dict):
                value = value.get("Message") or value.get("message")
            if value:
                return str(value)[:200]
    return str(body)[:200]
