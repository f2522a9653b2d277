"""Command line entry point for the example Discord login server.

Configuration comes from the environment (optionally a `.env` file); logging is
set up the same way for every run, with `--debug` or `DISCORD_AUTH_DEBUG=1`
switching to DEBUG level.
"""

import logging
import os

import click
import uvicorn
from dotenv import load_dotenv

from discord_auth.contracts import ConfigurationError
from discord_auth.example import create_app
from discord_auth.models import DiscordStrategyConfigModel
from discord_auth.strategy import DiscordStrategy


def get_env_flag(env_var: str, default: bool = False) -> bool:
    """Get a boolean flag from an environment variable.

    Args:
        env_var: Name of the environment variable
        default: Default value if environment variable is not set

    Returns:
        True if the environment variable is set to "1", "true", or "yes" (case insensitive)
        False otherwise
    """
    value = os.environ.get(env_var, "").lower()
    return value in ("1", "true", "yes") if value else default


def configure_logging(debug: bool = False) -> None:
    """Configure logging for all modules.

    Args:
        debug: Whether to enable debug logging
    """
    if not debug:
        debug = get_env_flag("DISCORD_AUTH_DEBUG")

    log_level = logging.DEBUG if debug else logging.INFO

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    # Remove any existing handlers to avoid duplicate messages
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler()
    handler.setLevel(log_level)
    formatter = logging.Formatter("%(levelname)s:%(name)s:%(message)s")
    handler.setFormatter(formatter)
    root_logger.addHandler(handler)


def load_strategy_config() -> DiscordStrategyConfigModel:
    """Build the strategy configuration from CLIENT_ID, CLIENT_SECRET and CALLBACK.

    Raises:
        ConfigurationError: If a required variable is missing or empty.
    """
    raw = {
        "client_id": os.environ.get("CLIENT_ID", ""),
        "client_secret": os.environ.get("CLIENT_SECRET", ""),
        "callback_url": os.environ.get("CALLBACK", ""),
    }
    # Validate through the strategy so errors surface as ConfigurationError
    return DiscordStrategy(raw, lambda *args: None).config


@click.command(name="serve")
@click.option("--host", default="localhost", show_default=True, help="Interface to bind to")
@click.option("--port", type=int, help="Port to listen on (defaults to $PORT or 8000)")
@click.option("--debug", is_flag=True, help="Show detailed debug information")
def serve(host: str, port: int | None, debug: bool) -> None:
    """Run the example Discord login server.

    Reads CLIENT_ID, CLIENT_SECRET, CALLBACK, PORT and SESSION_SECRET from the
    environment or from a .env file in the working directory.

    \b
    Examples:
        discord-auth-example                 # Listen on $PORT (or 8000)
        discord-auth-example --port 9000     # Override the port
        discord-auth-example --debug         # Verbose logging
    """
    load_dotenv()
    configure_logging(debug)

    try:
        config = load_strategy_config()
    except ConfigurationError as e:
        click.echo(f"Error: {e}", err=True)
        raise click.Abort()

    if port is None:
        port = int(os.environ.get("PORT", "8000"))

    session_secret = os.environ.get("SESSION_SECRET")
    if not session_secret:
        click.echo("Error: SESSION_SECRET must be set", err=True)
        raise click.Abort()

    app = create_app(config, session_secret=session_secret)
    click.echo(f"Listening at port {port}")
    uvicorn.run(app, host=host, port=port, log_level="debug" if debug else "info")


if __name__ == "__main__":
    serve()
