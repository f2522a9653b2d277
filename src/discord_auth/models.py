"""Pydantic models for the Discord auth strategy.

All models inherit from `DiscordAuthBaseModel`, which establishes:

- Strict field validation (no extra fields allowed)
- Immutable instances, so a configuration can be shared across requests

## Security-relevant configuration fields

- `callback_url`: where Discord redirects the user-agent with the authorization code.
- `scope`: what permissions are requested from Discord.

Treat changes to these fields as security-sensitive.

Example:
    >>> from discord_auth.models import DiscordStrategyConfigModel
    >>> config = DiscordStrategyConfigModel(
    ...     client_id="cid",
    ...     client_secret="secret",
    ...     callback_url="http://localhost:8000/callback",
    ...     scope=["identify", "email"],
    ... )
    >>> config.token_url
    'https://discord.com/api/oauth2/token'
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .constants import AUTHORIZATION_URL, DEFAULT_SCOPE_SEPARATOR, TOKEN_URL


class DiscordAuthBaseModel(BaseModel):
    """Base model for all discord_auth Pydantic models.

    - extra="forbid": Rejects any fields not defined in the model
    - frozen=True: Makes instances immutable for thread safety
    """

    model_config = ConfigDict(extra="forbid", frozen=True)


class DiscordStrategyConfigModel(DiscordAuthBaseModel):
    """Discord OAuth2 strategy configuration.

    `client_id`, `client_secret` and `callback_url` are required and must be
    non-empty. Endpoint URLs and the scope separator fall back to Discord's
    defaults when omitted, empty or None.
    """

    client_id: str = Field(min_length=1)
    client_secret: str = Field(min_length=1)
    callback_url: str = Field(min_length=1)
    scope: list[str] = Field(default_factory=list)
    authorization_url: str = AUTHORIZATION_URL
    token_url: str = TOKEN_URL
    scope_separator: str = DEFAULT_SCOPE_SEPARATOR

    @field_validator("scope", mode="before")
    @classmethod
    def _split_scope(cls, value: Any) -> Any:
        if value is None:
            return []
        if isinstance(value, str):
            return [s for s in value.split() if s]
        return value

    @field_validator("authorization_url", mode="before")
    @classmethod
    def _default_authorization_url(cls, value: Any) -> Any:
        return value or AUTHORIZATION_URL

    @field_validator("token_url", mode="before")
    @classmethod
    def _default_token_url(cls, value: Any) -> Any:
        return value or TOKEN_URL

    @field_validator("scope_separator", mode="before")
    @classmethod
    def _default_scope_separator(cls, value: Any) -> Any:
        return value or DEFAULT_SCOPE_SEPARATOR


class GrantResult(DiscordAuthBaseModel):
    """Result of exchanging an authorization code with Discord."""

    access_token: str
    refresh_token: str | None = None
    token_type: str = "Bearer"
    expires_at: float | None = None
    scopes: list[str] | None = None


__all__ = ["DiscordAuthBaseModel", "DiscordStrategyConfigModel", "GrantResult"]
