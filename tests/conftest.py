"""
Global pytest configuration and fixtures.
"""

from typing import Any

import pytest

from discord_auth.contracts import Profile
from discord_auth.models import DiscordStrategyConfigModel
from discord_auth.strategy import DiscordStrategy


async def _accept(access_token: str, refresh_token: str | None, profile: Profile) -> Any:
    return profile


@pytest.fixture
def discord_config() -> DiscordStrategyConfigModel:
    return DiscordStrategyConfigModel(
        client_id="cid",
        client_secret="secret",
        callback_url="http://localhost:8000/callback",
        scope=["identify", "email"],
    )


@pytest.fixture
def strategy(discord_config: DiscordStrategyConfigModel) -> DiscordStrategy:
    return DiscordStrategy(discord_config, _accept)
