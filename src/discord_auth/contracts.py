"""Errors and shared interfaces for the discord_auth strategy stack."""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Mapping
from typing import Any, Protocol, runtime_checkable

from .engine import OAuth2Engine, OAuth2RequestError

Profile = dict[str, Any]

# verify(access_token, refresh_token, profile) -> user | None (sync or async)
VerifyCallback = Callable[[str, str | None, Profile], Any | Awaitable[Any]]


class StrategyError(Exception):
    """Standardized strategy error with HTTP-style status information."""

    def __init__(self, error: str, description: str | None = None, status_code: int = 400):
        super().__init__(description or error)
        self.error = error
        self.description = description
        self.status_code = status_code


class ConfigurationError(StrategyError):
    """Raised at construction time when the strategy configuration is invalid."""

    def __init__(self, description: str):
        super().__init__("invalid_configuration", description, status_code=500)


class InternalOAuthError(StrategyError):
    """Wraps an error raised by the OAuth2 engine."""

    def __init__(
        self,
        error: str,
        description: str,
        oauth_error: Exception | None = None,
        status_code: int = 500,
    ):
        super().__init__(error, description, status_code=status_code)
        self.oauth_error = oauth_error


class RateLimited(InternalOAuthError):
    """Discord answered a user API request with HTTP 429."""

    def __init__(self, oauth_error: OAuth2RequestError, resource: str = "user profile"):
        super().__init__(
            "rate_limited",
            f"Reached rate limit while fetching the {resource}.",
            oauth_error,
            status_code=429,
        )


class ProfileFetchFailed(InternalOAuthError):
    """A user API request failed for any reason other than rate limiting."""

    def __init__(self, oauth_error: OAuth2RequestError, resource: str = "user profile"):
        super().__init__(
            "profile_fetch_failed",
            f"Failed to fetch the {resource}.",
            oauth_error,
            status_code=oauth_error.status_code or 502,
        )


class TokenExchangeError(InternalOAuthError):
    """The authorization code could not be exchanged for an access token."""

    def __init__(self, oauth_error: Exception | None = None):
        super().__init__(
            "invalid_grant",
            "Failed to obtain access token.",
            oauth_error,
            status_code=400,
        )


class ProfileParseFailed(StrategyError):
    """A user API response body was not the expected JSON shape."""

    def __init__(self, resource: str = "user profile") -> None:
        super().__init__(
            "profile_parse_failed", f"Failed to parse the {resource}.", status_code=502
        )


class AuthorizationError(StrategyError):
    """The authorization callback was rejected or incomplete."""

    def __init__(self, error: str, description: str | None = None):
        super().__init__(error, description, status_code=400)


class StateMismatchError(AuthorizationError):
    """The callback state is missing, already used, or does not match the session."""

    def __init__(self) -> None:
        super().__init__("invalid_state", "State not found or does not match")


@runtime_checkable
class Strategy(Protocol):
    """Interface the Authenticator expects from a provider strategy."""

    name: str
    callback_url: str
    scope: list[str]
    verify: VerifyCallback

    @property
    def oauth2(self) -> OAuth2Engine:
        """The OAuth2 engine the strategy configures and delegates to."""

    def authorization_params(self, options: Mapping[str, Any]) -> dict[str, Any]:
        """Return extra parameters for the authorization request."""

    async def user_profile(self, access_token: str) -> Profile:
        """Fetch the normalized user profile for an access token."""


__all__ = [
    "AuthorizationError",
    "ConfigurationError",
    "InternalOAuthError",
    "Profile",
    "ProfileFetchFailed",
    "ProfileParseFailed",
    "RateLimited",
    "StateMismatchError",
    "Strategy",
    "StrategyError",
    "TokenExchangeError",
    "VerifyCallback",
]
