"""discord_auth - Discord OAuth2 authentication strategy.

This package provides a Discord login strategy for ASGI web applications:

- `DiscordStrategy`: Discord endpoints, profile fetch and parameter filtering
- `OAuth2Engine`: provider-agnostic authorization-code client (Authlib/httpx)
- `Authenticator`: session-backed login flow for Starlette requests

## Quick Example

```python
from starlette.middleware.sessions import SessionMiddleware

from discord_auth import Authenticator, DiscordStrategy

async def verify(access_token, refresh_token, profile):
    return profile  # or None to reject the login

authenticator = Authenticator()
authenticator.use(
    DiscordStrategy(
        {
            "client_id": "your-client-id",
            "client_secret": "your-secret",
            "callback_url": "http://localhost:8000/callback",
            "scope": ["identify", "email"],
        },
        verify,
    )
)

async def login(request):
    return authenticator.authorize_redirect(request, "discord", prompt="consent")

async def callback(request):
    user = await authenticator.authorize_callback(request, "discord")
    ...
```
"""

from .authenticator import Authenticator
from .constants import DiscordScope
from .contracts import (
    AuthorizationError,
    ConfigurationError,
    InternalOAuthError,
    Profile,
    ProfileFetchFailed,
    ProfileParseFailed,
    RateLimited,
    StateMismatchError,
    Strategy,
    StrategyError,
    TokenExchangeError,
)
from .engine import OAuth2Engine, OAuth2RequestError
from .models import DiscordStrategyConfigModel, GrantResult
from .strategy import DiscordStrategy

__all__ = [
    # Core classes
    "Authenticator",
    "DiscordStrategy",
    "OAuth2Engine",
    # Types
    "DiscordScope",
    "DiscordStrategyConfigModel",
    "GrantResult",
    "Profile",
    "Strategy",
    # Errors
    "AuthorizationError",
    "ConfigurationError",
    "InternalOAuthError",
    "OAuth2RequestError",
    "ProfileFetchFailed",
    "ProfileParseFailed",
    "RateLimited",
    "StateMismatchError",
    "StrategyError",
    "TokenExchangeError",
]
