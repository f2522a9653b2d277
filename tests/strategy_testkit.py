"""Test utilities for strategy and engine tests.

Provides a minimal fake of the Authlib `AsyncOAuth2Client` matching the shape
used by `OAuth2Engine` via `create_oauth2_client()`, so no test touches the
network.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

ENGINE_CLIENT_FACTORY_PATH = "discord_auth.engine.create_oauth2_client"


@dataclass(frozen=True)
class FakeResponse:
    status_code: int
    text: str = ""


class FakeOAuth2Client:
    """Async context manager returned by `FakeOAuth2ClientFactory`."""

    def __init__(self, factory: "FakeOAuth2ClientFactory", kwargs: dict[str, Any]) -> None:
        self._factory = factory
        self.kwargs = kwargs

    async def __aenter__(self) -> "FakeOAuth2Client":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: Any,
    ) -> bool:
        return False

    async def get(self, url: str, **kwargs: Any) -> FakeResponse:
        self._factory.get_urls.append(str(url))
        # Yield so concurrent callers interleave.
        await asyncio.sleep(0)
        if self._factory.get_error is not None:
            raise self._factory.get_error
        if self._factory.get_handler is not None:
            return self._factory.get_handler(str(url), self.kwargs)
        for route_substring, resp in self._factory.get_responses.items():
            if route_substring in str(url):
                return resp
        return self._factory.default_get_response

    async def fetch_token(self, url: str, **kwargs: Any) -> dict[str, Any]:
        self._factory.token_calls.append((url, kwargs))
        if self._factory.token_error is not None:
            raise self._factory.token_error
        return dict(self._factory.token_response)


class FakeOAuth2ClientFactory:
    """Callable standing in for `create_oauth2_client`.

    - `get()` routes responses by substring match on URL (longest match first),
      or defers to `get_handler(url, client_kwargs)` when given
    - `fetch_token()` returns `token_response` or raises `token_error`
    - Records every client's constructor kwargs, GET URLs and token calls
    """

    def __init__(
        self,
        *,
        get_responses: dict[str, FakeResponse] | None = None,
        default_get_response: FakeResponse | None = None,
        get_handler: Callable[[str, dict[str, Any]], FakeResponse] | None = None,
        get_error: Exception | None = None,
        token_response: dict[str, Any] | None = None,
        token_error: Exception | None = None,
    ) -> None:
        self.get_responses = dict(
            sorted((get_responses or {}).items(), key=lambda item: len(item[0]), reverse=True)
        )
        self.default_get_response = default_get_response or FakeResponse(200, "{}")
        self.get_handler = get_handler
        self.get_error = get_error
        self.token_response = token_response or {
            "access_token": "at",
            "token_type": "Bearer",
            "refresh_token": "rt",
            "expires_at": 1_900_000_000,
            "scope": "identify email",
        }
        self.token_error = token_error
        self.clients: list[FakeOAuth2Client] = []
        self.get_urls: list[str] = []
        self.token_calls: list[tuple[str, dict[str, Any]]] = []

    def __call__(self, **kwargs: Any) -> FakeOAuth2Client:
        client = FakeOAuth2Client(self, kwargs)
        self.clients.append(client)
        return client


def patch_oauth2_client(monkeypatch: Any, fake_factory: FakeOAuth2ClientFactory) -> None:
    """Patch the engine module's `create_oauth2_client`."""

    monkeypatch.setattr(ENGINE_CLIENT_FACTORY_PATH, fake_factory)
