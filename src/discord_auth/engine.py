"""Provider-agnostic OAuth2 engine built on Authlib.

`OAuth2Engine` owns the protocol mechanics a provider strategy delegates to:
building the authorization redirect, exchanging the authorization code for
tokens, and issuing token-authenticated GET requests. Provider strategies hold
an engine and configure it; they never subclass it.

All HTTP traffic goes through `create_oauth2_client()`, which returns an
Authlib `AsyncOAuth2Client` (an `httpx.AsyncClient`). Tests replace this
factory with a fake client.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any

import httpx
from authlib.integrations.base_client import OAuthError
from authlib.integrations.httpx_client import AsyncOAuth2Client
from authlib.oauth2.rfc6749.parameters import prepare_grant_uri

from .models import GrantResult

logger = logging.getLogger(__name__)


class OAuth2RequestError(Exception):
    """Raised when a request issued by the engine fails.

    `status_code` is None when no HTTP response was received.
    """

    def __init__(self, status_code: int | None, data: str | None = None, message: str | None = None):
        super().__init__(message or f"OAuth2 request failed with status {status_code}")
        self.status_code = status_code
        self.data = data


def create_oauth2_client(**kwargs: Any) -> AsyncOAuth2Client:
    """Create the Authlib client used for a single engine operation."""
    return AsyncOAuth2Client(**kwargs)


class OAuth2Engine:
    """Generic OAuth2 authorization-code client."""

    def __init__(
        self,
        *,
        client_id: str,
        client_secret: str,
        authorization_url: str,
        token_url: str,
        scope_separator: str = " ",
        token_endpoint_auth_method: str = "client_secret_post",
    ):
        self.client_id = client_id
        self.client_secret = client_secret
        self.authorization_url = authorization_url
        self.token_url = token_url
        self.scope_separator = scope_separator
        self.token_endpoint_auth_method = token_endpoint_auth_method
        self._use_authorization_header_for_get = False

    def use_authorization_header_for_get(self, enabled: bool) -> None:
        """Send the access token as an Authorization header instead of a query parameter."""
        self._use_authorization_header_for_get = enabled

    @property
    def token_placement(self) -> str:
        return "header" if self._use_authorization_header_for_get else "uri"

    def authorize_url(
        self,
        *,
        redirect_uri: str,
        scope: Sequence[str] | str | None,
        state: str | None,
        params: Mapping[str, Any] | None = None,
    ) -> str:
        """Build the authorization redirect URL for the authorization-code grant.

        Extra `params` are sent as strings. Entries that are None or render to
        an empty string are omitted, since `prepare_grant_uri` skips empty values.
        """
        if isinstance(scope, str):
            scope_str: str | None = scope
        else:
            scope_str = self.scope_separator.join(scope) if scope else None
        extra = {
            key: str(value)
            for key, value in (params or {}).items()
            if value is not None and str(value) != ""
        }
        return prepare_grant_uri(
            self.authorization_url,
            self.client_id,
            "code",
            redirect_uri=redirect_uri,
            scope=scope_str,
            state=state,
            **extra,
        )

    async def exchange_code(self, *, code: str, redirect_uri: str) -> GrantResult:
        """Exchange an authorization code for tokens at the token endpoint."""
        try:
            async with create_oauth2_client(
                client_id=self.client_id,
                client_secret=self.client_secret,
                redirect_uri=redirect_uri,
                token_endpoint_auth_method=self.token_endpoint_auth_method,
            ) as client:
                token = await client.fetch_token(
                    self.token_url, code=code, grant_type="authorization_code"
                )
        except OAuthError as exc:
            logger.debug(
                "Token endpoint returned OAuth error",
                extra={"endpoint": "token", "provider_error": exc.error},
            )
            raise OAuth2RequestError(
                None, exc.description, f"Token request failed: {exc.error}"
            ) from exc
        except httpx.HTTPStatusError as exc:
            raise OAuth2RequestError(
                exc.response.status_code, exc.response.text, "Token request failed"
            ) from exc
        except httpx.HTTPError as exc:
            raise OAuth2RequestError(None, None, f"Token request failed: {exc}") from exc
        except ValueError as exc:
            raise OAuth2RequestError(None, None, "Invalid token response payload") from exc

        access_token = token.get("access_token")
        if not access_token:
            raise OAuth2RequestError(None, None, "No access_token in token response")

        scope = token.get("scope")
        return GrantResult(
            access_token=access_token,
            refresh_token=token.get("refresh_token"),
            token_type=token.get("token_type") or "Bearer",
            expires_at=token.get("expires_at"),
            scopes=scope.split() if isinstance(scope, str) else None,
        )

    async def get(self, url: str, access_token: str) -> str:
        """GET `url` authenticated with `access_token` and return the response body."""
        token = {"access_token": access_token, "token_type": "Bearer"}
        try:
            async with create_oauth2_client(
                client_id=self.client_id,
                token=token,
                token_placement=self.token_placement,
            ) as client:
                resp = await client.get(url)
        except httpx.HTTPError as exc:
            raise OAuth2RequestError(None, None, f"GET {url} failed: {exc}") from exc

        if not 200 <= resp.status_code < 300:
            logger.debug(
                "GET returned non-2xx",
                extra={"url": url, "status_code": resp.status_code},
            )
            raise OAuth2RequestError(resp.status_code, resp.text)
        return resp.text


__all__ = ["OAuth2Engine", "OAuth2RequestError", "create_oauth2_client"]
