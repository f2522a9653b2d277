"""Authenticator drives the authorization-code flow for registered strategies.

The Authenticator is the host-framework side of the flow:

1. `authorize_redirect()` stores a one-time state in the session and redirects
   the user-agent to the provider.
2. `authorize_callback()` checks the returned state, asks the strategy's OAuth2
   engine to exchange the code, fetches the profile through the strategy and
   hands everything to the application's verify callback.
3. `login()` / `logout()` keep the accepted user in the session.

Sessions come from Starlette's `SessionMiddleware`; the Authenticator only
reads and writes `request.session`.

## Security invariants

- Pending states are keyed by their own value, so several logins can be in
  flight from one session.
- States are single use: a matching state is removed from the session before
  the code exchange starts, whatever the outcome. An unknown state removes
  nothing.
- Never log tokens, secrets or profile contents.
"""

from __future__ import annotations

import inspect
import logging
import secrets
from collections.abc import Callable, Sequence
from typing import Any

from starlette.requests import Request
from starlette.responses import RedirectResponse

from .contracts import (
    AuthorizationError,
    StateMismatchError,
    Strategy,
    StrategyError,
    TokenExchangeError,
)
from .engine import OAuth2RequestError

logger = logging.getLogger(__name__)

DEFAULT_SESSION_KEY = "discord_auth"


def _identity(user: Any) -> Any:
    return user


class Authenticator:
    """Registry of strategies plus the session-backed login flow."""

    def __init__(self, *, session_key: str = DEFAULT_SESSION_KEY):
        self.session_key = session_key
        self._strategies: dict[str, Strategy] = {}
        self._serialize_user: Callable[[Any], Any] = _identity
        self._deserialize_user: Callable[[Any], Any] = _identity

    def use(self, strategy: Strategy) -> Strategy:
        """Register a strategy under its name."""
        self._strategies[strategy.name] = strategy
        logger.info(f"Registered authentication strategy: {strategy.name}")
        return strategy

    def get_strategy(self, name: str) -> Strategy:
        try:
            return self._strategies[name]
        except KeyError:
            raise StrategyError(
                "unknown_strategy", f"Unknown authentication strategy '{name}'", status_code=500
            ) from None

    def serializer(self, func: Callable[[Any], Any]) -> Callable[[Any], Any]:
        """Decorator replacing how users are stored in the session."""
        self._serialize_user = func
        return func

    def deserializer(self, func: Callable[[Any], Any]) -> Callable[[Any], Any]:
        """Decorator replacing how users are restored from the session."""
        self._deserialize_user = func
        return func

    # ── flow ─────────────────────────────────────────────────────────────────
    def authorize_redirect(
        self,
        request: Request,
        name: str,
        *,
        scope: Sequence[str] | None = None,
        **options: Any,
    ) -> RedirectResponse:
        """Redirect the user-agent to the provider's authorization endpoint.

        Args:
            request: Incoming request; must carry a session.
            name: Name of the registered strategy.
            scope: Scopes to request. Defaults to the strategy's configured scope.
            **options: Extra authorization parameters (e.g. `prompt`, `permissions`),
                filtered by the strategy before being sent.
        """
        strategy = self.get_strategy(name)
        state = secrets.token_urlsafe(16)
        self._state_bucket(request)[state] = name

        url = strategy.oauth2.authorize_url(
            redirect_uri=strategy.callback_url,
            scope=list(scope) if scope is not None else strategy.scope,
            state=state,
            params=strategy.authorization_params(dict(options)),
        )
        logger.info("authorize: issued state", extra={"strategy": name})
        return RedirectResponse(url=url, status_code=302)

    async def authorize_callback(self, request: Request, name: str) -> Any | None:
        """Complete the flow from the provider callback.

        Returns:
            The user returned by the verify callback, or None when verify rejected
            the identity.

        Raises:
            AuthorizationError: The provider reported an error or sent no code.
            StateMismatchError: The state is missing, reused or does not match.
            TokenExchangeError: The code could not be exchanged.
            StrategyError: Profile fetch failures raised by the strategy.
        """
        strategy = self.get_strategy(name)
        params = request.query_params

        error = params.get("error")
        if error:
            logger.warning(
                "callback: provider returned error",
                extra={"strategy": name, "provider_error": error},
            )
            raise AuthorizationError(error, params.get("error_description"))

        states = self._state_bucket(request)
        state = params.get("state")
        if not state or states.get(state) != name:
            logger.warning("callback: state not found or mismatched", extra={"strategy": name})
            raise StateMismatchError()
        del states[state]

        code = params.get("code")
        if not code:
            raise AuthorizationError("invalid_request", "Missing code parameter")

        try:
            grant = await strategy.oauth2.exchange_code(
                code=code, redirect_uri=strategy.callback_url
            )
        except OAuth2RequestError as exc:
            logger.error(f"callback: token exchange failed: {exc}", extra={"strategy": name})
            raise TokenExchangeError(exc) from exc

        try:
            profile = await strategy.user_profile(grant.access_token)
        except StrategyError as exc:
            logger.error(
                f"callback: profile fetch failed: {exc}",
                extra={"strategy": name, "error_kind": exc.error},
            )
            raise

        user = strategy.verify(grant.access_token, grant.refresh_token, profile)
        if inspect.isawaitable(user):
            user = await user

        if not user:
            logger.info("callback: verify rejected identity", extra={"strategy": name})
            return None

        logger.info("callback: authentication succeeded", extra={"strategy": name})
        return user

    # ── session ──────────────────────────────────────────────────────────────
    def login(self, request: Request, user: Any) -> None:
        request.session[self.session_key] = {
            **request.session.get(self.session_key, {}),
            "user": self._serialize_user(user),
        }

    def logout(self, request: Request) -> None:
        bucket = dict(request.session.get(self.session_key, {}))
        bucket.pop("user", None)
        request.session[self.session_key] = bucket

    def current_user(self, request: Request) -> Any | None:
        stored = request.session.get(self.session_key, {}).get("user")
        if stored is None:
            return None
        return self._deserialize_user(stored)

    def is_authenticated(self, request: Request) -> bool:
        return self.current_user(request) is not None

    def _state_bucket(self, request: Request) -> dict[str, str]:
        # state value -> strategy name
        bucket = request.session.setdefault(self.session_key, {})
        return bucket.setdefault("states", {})


__all__ = ["Authenticator", "DEFAULT_SESSION_KEY"]
