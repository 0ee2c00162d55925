"""Tests for the provider selector — name mapping, defaults, failure modes."""

from __future__ import annotations

import pytest
from pydantic import SecretStr

from safealert.core.config import CpaasConfig, ExotelConfig, GupshupConfig, Msg91Config
from safealert.providers.exceptions import ConfigError, UnknownProviderError
from safealert.providers.exotel import ExotelProvider
from safealert.providers.factory import select_provider, supported_providers
from safealert.providers.gupshup import GupshupProvider
from safealert.providers.msg91 import Msg91Provider


def _cpaas(**kw: object) -> CpaasConfig:
    defaults: dict[str, object] = {
        "msg91": Msg91Config(auth_key=SecretStr("a"), sender_id="S", template_id="t"),
        "exotel": ExotelConfig(
            account_sid="sid",
            api_key="k",
            api_token=SecretStr("t"),
            exo_phone="0801",
            flow_url="https://flow",
        ),
        "gupshup": GupshupConfig(user_id="u", password=SecretStr("p")),
    }
    defaults.update(kw)
    return CpaasConfig(**defaults)  # type: ignore[arg-type]


class TestSupportedProviders:
    def test_exactly_three_vendors(self) -> None:
        assert supported_providers() == frozenset({"msg91", "exotel", "gupshup"})


class TestSelectProvider:
    def test_default_is_msg91(self) -> None:
        provider = select_provider(_cpaas())
        assert isinstance(provider, Msg91Provider)

    def test_empty_name_falls_back_to_default(self) -> None:
        provider = select_provider(_cpaas(provider=""))
        assert isinstance(provider, Msg91Provider)

    @pytest.mark.parametrize(
        ("name", "cls"),
        [
            ("exotel", ExotelProvider),
            ("EXOTEL", ExotelProvider),
            ("Gupshup", GupshupProvider),
            ("  msg91 ", Msg91Provider),
        ],
    )
    def test_case_insensitive_mapping(self, name: str, cls: type) -> None:
        assert isinstance(select_provider(_cpaas(provider=name)), cls)

    def test_returns_fresh_instance_each_call(self) -> None:
        cfg = _cpaas()
        assert select_provider(cfg) is not select_provider(cfg)

    def test_provider_name_is_declared_constant(self) -> None:
        for name in supported_providers():
            assert select_provider(_cpaas(provider=name)).provider_name() == name

    def test_call_duration_passed_to_exotel(self) -> None:
        provider = select_provider(_cpaas(provider="exotel"), call_duration_secs=50)
        assert isinstance(provider, ExotelProvider)
        assert provider._call_duration_secs == 50

    def test_calling_code_passed_through(self) -> None:
        provider = select_provider(_cpaas(home_calling_code="1"))
        assert provider.format_number("4155550123") == "+14155550123"


class TestSelectProviderErrors:
    def test_unknown_vendor(self) -> None:
        with pytest.raises(UnknownProviderError) as exc_info:
            select_provider(_cpaas(provider="unknown-vendor"))
        assert exc_info.value.name == "unknown-vendor"
        assert sorted(exc_info.value.supported) == ["exotel", "gupshup", "msg91"]
        assert "exotel, gupshup, msg91" in str(exc_info.value)

    def test_missing_credentials_raise_config_error(self) -> None:
        with pytest.raises(ConfigError) as exc_info:
            select_provider(CpaasConfig(provider="gupshup"))
        assert exc_info.value.vendor == "gupshup"
        assert exc_info.value.field == "user_id"
