"""Discord OAuth2 endpoints and scope names."""

PROVIDER_NAME = "discord"

DISCORD_API_URL = "https://discord.com/api"

AUTHORIZATION_URL = f"{DISCORD_API_URL}/oauth2/authorize"
TOKEN_URL = f"{DISCORD_API_URL}/oauth2/token"
USER_URL = f"{DISCORD_API_URL}/users/@me"
GUILDS_URL = f"{USER_URL}/guilds"
CONNECTIONS_URL = f"{USER_URL}/connections"

DEFAULT_SCOPE_SEPARATOR = " "

RATE_LIMIT_STATUS = 429


class DiscordScope:
    """OAuth2 scopes that can be requested"""

    ACTIVITIES_READ = "activities.read"
    ACTIVITIES_WRITE = "activities.write"
    APPLICATIONS_BUILDS_READ = "applications.builds.read"
    APPLICATIONS_COMMANDS = "applications.commands"
    APPLICATIONS_ENTITLEMENTS = "applications.entitlements"
    BOT = "bot"
    CONNECTIONS = "connections"
    DM_CHANNELS_READ = "dm_channels.read"
    EMAIL = "email"
    GDM_JOIN = "gdm.join"
    GUILDS = "guilds"
    GUILDS_JOIN = "guilds.join"
    GUILDS_MEMBERS_READ = "guilds.members.read"
    IDENTIFY = "identify"
    MESSAGES_READ = "messages.read"
    RELATIONSHIPS_READ = "relationships.read"
    ROLE_CONNECTIONS_WRITE = "role_connections.write"
    RPC = "rpc"
    VOICE = "voice"
    WEBHOOK_INCOMING = "webhook.incoming"


__all__ = [
    "AUTHORIZATION_URL",
    "CONNECTIONS_URL",
    "DEFAULT_SCOPE_SEPARATOR",
    "DISCORD_API_URL",
    "DiscordScope",
    "GUILDS_URL",
    "PROVIDER_NAME",
    "RATE_LIMIT_STATUS",
    "TOKEN_URL",
    "USER_URL",
]
