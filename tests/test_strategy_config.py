from typing import Any

import pytest
from pydantic import ValidationError

from discord_auth.constants import AUTHORIZATION_URL, TOKEN_URL
from discord_auth.contracts import ConfigurationError, Strategy
from discord_auth.models import DiscordStrategyConfigModel
from discord_auth.strategy import DiscordStrategy


def _verify(access_token: str, refresh_token: str | None, profile: dict[str, Any]) -> Any:
    return profile


def _raw_config(**overrides: Any) -> dict[str, Any]:
    raw: dict[str, Any] = {
        "client_id": "cid",
        "client_secret": "secret",
        "callback_url": "http://localhost:8000/callback",
        "scope": ["identify"],
    }
    raw.update(overrides)
    return raw


def test_defaults_are_applied() -> None:
    config = DiscordStrategyConfigModel(**_raw_config())
    assert config.authorization_url == AUTHORIZATION_URL
    assert config.token_url == TOKEN_URL
    assert config.scope_separator == " "


@pytest.mark.parametrize("empty", ["", None])
def test_empty_overrides_fall_back_to_defaults(empty: Any) -> None:
    config = DiscordStrategyConfigModel(
        **_raw_config(authorization_url=empty, token_url=empty, scope_separator=empty)
    )
    assert config.authorization_url == AUTHORIZATION_URL
    assert config.token_url == TOKEN_URL
    assert config.scope_separator == " "


def test_overrides_are_kept() -> None:
    config = DiscordStrategyConfigModel(
        **_raw_config(
            authorization_url="https://idp.test/authorize",
            token_url="https://idp.test/token",
            scope_separator=",",
        )
    )
    assert config.authorization_url == "https://idp.test/authorize"
    assert config.token_url == "https://idp.test/token"
    assert config.scope_separator == ","


def test_scope_string_is_split() -> None:
    config = DiscordStrategyConfigModel(**_raw_config(scope="identify  email guilds"))
    assert config.scope == ["identify", "email", "guilds"]


def test_config_is_immutable() -> None:
    config = DiscordStrategyConfigModel(**_raw_config())
    with pytest.raises(ValidationError):
        config.client_id = "other"  # type: ignore[misc]


@pytest.mark.parametrize("field", ["client_id", "client_secret", "callback_url"])
def test_missing_required_field_raises_configuration_error(field: str) -> None:
    raw = _raw_config()
    del raw[field]
    with pytest.raises(ConfigurationError) as exc:
        DiscordStrategy(raw, _verify)
    assert field in str(exc.value)
    assert exc.value.error == "invalid_configuration"


@pytest.mark.parametrize("field", ["client_id", "client_secret", "callback_url"])
def test_empty_required_field_raises_configuration_error(field: str) -> None:
    with pytest.raises(ConfigurationError):
        DiscordStrategy(_raw_config(**{field: ""}), _verify)


def test_unknown_option_raises_configuration_error() -> None:
    with pytest.raises(ConfigurationError):
        DiscordStrategy(_raw_config(bogus=True), _verify)


def test_verify_must_be_callable() -> None:
    with pytest.raises(ConfigurationError):
        DiscordStrategy(_raw_config(), "not-callable")  # type: ignore[arg-type]


def test_strategy_configures_engine() -> None:
    strategy = DiscordStrategy(_raw_config(scope_separator=","), _verify)
    assert isinstance(strategy, Strategy)
    assert strategy.name == "discord"
    assert strategy.callback_url == "http://localhost:8000/callback"
    assert strategy.scope == ["identify"]
    assert strategy.oauth2.client_id == "cid"
    assert strategy.oauth2.authorization_url == AUTHORIZATION_URL
    assert strategy.oauth2.token_url == TOKEN_URL
    assert strategy.oauth2.scope_separator == ","
    assert strategy.oauth2.token_placement == "header"


def test_strategy_accepts_config_model(discord_config: DiscordStrategyConfigModel) -> None:
    strategy = DiscordStrategy(discord_config, _verify)
    assert strategy.config is discord_config
