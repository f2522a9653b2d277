"""Example Starlette application wiring the Discord strategy.

Routes:

- `/`          redirects to Discord (scopes + `prompt=consent`)
- `/callback`  completes the flow, then redirects to `/info` (or back to `/`)
- `/logout`    clears the login and redirects to `/`
- `/info`      returns the logged-in profile as JSON
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.middleware.sessions import SessionMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse, PlainTextResponse, RedirectResponse, Response
from starlette.routing import Route

from .authenticator import Authenticator
from .constants import DiscordScope
from .contracts import Profile, StrategyError
from .models import DiscordStrategyConfigModel
from .strategy import DiscordStrategy

logger = logging.getLogger(__name__)

DEFAULT_SCOPES = [
    DiscordScope.IDENTIFY,
    DiscordScope.EMAIL,
    DiscordScope.CONNECTIONS,
    DiscordScope.GUILDS,
    DiscordScope.GUILDS_JOIN,
]
DEFAULT_PROMPT = "consent"


async def _accept_profile(
    access_token: str, refresh_token: str | None, profile: Profile
) -> Profile:
    return profile


def create_app(
    config: DiscordStrategyConfigModel,
    *,
    session_secret: str,
    scopes: Sequence[str] | None = None,
    prompt: str | None = DEFAULT_PROMPT,
) -> Starlette:
    """Build the example application.

    Args:
        config: Discord strategy configuration.
        session_secret: Secret used to sign the session cookie.
        scopes: Scopes requested at login. Defaults to `DEFAULT_SCOPES`.
        prompt: Discord `prompt` authorization parameter; None omits it.
    """
    authenticator = Authenticator()
    authenticator.use(DiscordStrategy(config, _accept_profile))
    requested_scopes = list(scopes) if scopes is not None else list(DEFAULT_SCOPES)

    async def login(request: Request) -> Response:
        return authenticator.authorize_redirect(
            request, DiscordStrategy.name, scope=requested_scopes, prompt=prompt
        )

    async def callback(request: Request) -> Response:
        try:
            user = await authenticator.authorize_callback(request, DiscordStrategy.name)
        except StrategyError as exc:
            logger.warning(f"Login failed: {exc}", extra={"error_kind": exc.error})
            return RedirectResponse(url="/", status_code=302)
        if user is None:
            return RedirectResponse(url="/", status_code=302)
        authenticator.login(request, user)
        return RedirectResponse(url="/info", status_code=302)

    async def logout(request: Request) -> Response:
        authenticator.logout(request)
        return RedirectResponse(url="/", status_code=302)

    async def info(request: Request) -> Response:
        user: Any = authenticator.current_user(request)
        if user is None:
            return PlainTextResponse("not logged in :(")
        return JSONResponse(user)

    app = Starlette(
        routes=[
            Route("/", login),
            Route("/callback", callback),
            Route("/logout", logout),
            Route("/info", info),
        ],
        middleware=[Middleware(SessionMiddleware, secret_key=session_secret)],
    )
    app.state.authenticator = authenticator
    return app


__all__ = ["DEFAULT_PROMPT", "DEFAULT_SCOPES", "create_app"]
