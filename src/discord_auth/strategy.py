"""Discord OAuth2 strategy.

`DiscordStrategy` authenticates users by delegating to Discord via the OAuth 2.0
authorization-code flow. It configures an `OAuth2Engine` with Discord's
endpoints and adds the Discord-specific pieces: the profile fetch against
`/users/@me`, authorization parameter filtering and rate-limit classification.

Applications supply a `verify` callback which receives the access token, the
refresh token and the normalized profile, and returns the application user (or
None/False to reject the login). It may be a plain function or a coroutine
function.

Example:
    >>> async def verify(access_token, refresh_token, profile):
    ...     return profile
    >>> strategy = DiscordStrategy(
    ...     {
    ...         "client_id": "cid",
    ...         "client_secret": "secret",
    ...         "callback_url": "http://localhost:8000/callback",
    ...         "scope": ["identify", "email"],
    ...     },
    ...     verify,
    ... )
    >>> strategy.name
    'discord'
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from .constants import CONNECTIONS_URL, GUILDS_URL, PROVIDER_NAME, RATE_LIMIT_STATUS, USER_URL
from .contracts import (
    ConfigurationError,
    Profile,
    ProfileFetchFailed,
    ProfileParseFailed,
    RateLimited,
    Strategy,
    VerifyCallback,
)
from .engine import OAuth2Engine, OAuth2RequestError
from .models import DiscordStrategyConfigModel


class DiscordStrategy(Strategy):
    """Discord authentication strategy."""

    name = PROVIDER_NAME

    def __init__(
        self,
        config: DiscordStrategyConfigModel | Mapping[str, Any],
        verify: VerifyCallback,
    ):
        if not isinstance(config, DiscordStrategyConfigModel):
            try:
                config = DiscordStrategyConfigModel.model_validate(dict(config))
            except ValidationError as exc:
                fields = sorted({str(err["loc"][0]) for err in exc.errors() if err["loc"]})
                raise ConfigurationError(
                    f"Invalid Discord strategy configuration: {', '.join(fields) or exc}"
                ) from exc
        if not callable(verify):
            raise ConfigurationError("DiscordStrategy requires a verify callback")

        self.config = config
        self.verify = verify
        self._oauth2 = OAuth2Engine(
            client_id=config.client_id,
            client_secret=config.client_secret,
            authorization_url=config.authorization_url,
            token_url=config.token_url,
            scope_separator=config.scope_separator,
        )
        # Discord rejects query-parameter tokens on the /users endpoints.
        self._oauth2.use_authorization_header_for_get(True)

    @property
    def oauth2(self) -> OAuth2Engine:
        return self._oauth2

    @property
    def callback_url(self) -> str:
        return self.config.callback_url

    @property
    def scope(self) -> list[str]:
        return list(self.config.scope)

    async def user_profile(self, access_token: str) -> Profile:
        """Retrieve the user profile from Discord.

        Along with the properties returned by `/users/@me`, the profile contains:

        - `provider`: always `"discord"`
        - `accessToken`: the access token used to fetch the profile

        Raises:
            RateLimited: Discord answered with HTTP 429.
            ProfileFetchFailed: Any other HTTP or transport failure.
            ProfileParseFailed: The response body was not a JSON object.
        """
        profile = await self._get_json(USER_URL, access_token, "user profile")
        if not isinstance(profile, dict):
            raise ProfileParseFailed("user profile")

        profile["provider"] = self.name
        profile["accessToken"] = access_token
        return profile

    async def fetch_guilds(self, access_token: str) -> list[dict[str, Any]]:
        """Fetch the guilds of the user (requires the `guilds` scope)."""
        return await self._get_json_list(GUILDS_URL, access_token, "guilds")

    async def fetch_connections(self, access_token: str) -> list[dict[str, Any]]:
        """Fetch the third-party connections of the user (requires the `connections` scope)."""
        return await self._get_json_list(CONNECTIONS_URL, access_token, "connections")

    def authorization_params(self, options: Mapping[str, Any]) -> dict[str, Any]:
        """Return extra parameters to be included in the authorization request.

        Entries set to None are dropped. The caller's mapping is left untouched.
        Other falsy values are kept here; `OAuth2Engine.authorize_url` omits
        empty strings from the redirect URL.
        """
        return {key: value for key, value in options.items() if value is not None}

    # ── helpers ──────────────────────────────────────────────────────────────
    async def _get_json(self, url: str, access_token: str, resource: str) -> Any:
        try:
            body = await self._oauth2.get(url, access_token)
        except OAuth2RequestError as exc:
            if exc.status_code == RATE_LIMIT_STATUS:
                raise RateLimited(exc, resource) from exc
            raise ProfileFetchFailed(exc, resource) from exc

        try:
            return json.loads(body)
        except ValueError as exc:
            raise ProfileParseFailed(resource) from exc

    async def _get_json_list(
        self, url: str, access_token: str, resource: str
    ) -> list[dict[str, Any]]:
        payload = await self._get_json(url, access_token, resource)
        if not isinstance(payload, list):
            raise ProfileParseFailed(resource)
        return payload


__all__ = ["DiscordStrategy"]
