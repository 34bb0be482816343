"""Auth0 client handling, including Auth0Stream base class."""

from collections.abc import Mapping

from singer_sdk.streams.core import Stream
from singer_sdk.tap_base import Tap

from tap_auth0_logs.auth0_sdk import (
    ConfigurationError,
    ManagementTokenProvider,
    StaticTokenProvider,
)
from tap_auth0_logs.logs import LogsClient


def get_base_url(config: Mapping) -> str:
    """Return the Management API root, defaulting to the tenant domain."""
    return config.get("base_url") or "https://%s/api/v2" % config["domain"]


def get_token_provider(config: Mapping):
    """Pick a token provider from the tap settings.

    A static ``token`` wins over client credentials.
    """
    if config.get("token"):
        return StaticTokenProvider(config["token"])
    if config.get("client_id") and config.get("client_secret"):
        return ManagementTokenProvider(
            config["domain"], config["client_id"], config["client_secret"]
        )
    raise ConfigurationError("Must provide either a token or client credentials")


def get_logs_client(config: Mapping) -> LogsClient:
    """Build a LogsClient from the tap settings."""
    return LogsClient(
        {
            "base_url": get_base_url(config),
            "token_provider": get_token_provider(config),
            "retry": {"max_retries": config.get("max_retries", 3)},
        }
    )


class Auth0Stream(Stream):
    """auth0 stream class."""

    def __init__(self, tap: Tap, schema, name: str):
        super().__init__(tap, name=name, schema=schema)
        self.conn = get_logs_client(self.config)

    @property
    def url_base(self) -> str:
        """Return the API URL root, configurable via tap settings."""
        return get_base_url(self.config)
