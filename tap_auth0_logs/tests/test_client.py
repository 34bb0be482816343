"""Tests for building clients from tap settings."""

import pytest

from tap_auth0_logs.auth0_sdk import (
    ConfigurationError,
    ManagementTokenProvider,
    StaticTokenProvider,
)
from tap_auth0_logs.client import get_base_url, get_logs_client, get_token_provider

DOMAIN = "example.auth0.com"


def test_base_url_defaults_to_domain():
    assert get_base_url({"domain": DOMAIN}) == "https://example.auth0.com/api/v2"


def test_base_url_override():
    config = {"domain": DOMAIN, "base_url": "https://auth.example.com/api/v2"}

    assert get_base_url(config) == "https://auth.example.com/api/v2"


def test_token_wins_over_client_credentials():
    provider = get_token_provider(
        {"domain": DOMAIN, "token": "abc", "client_id": "id", "client_secret": "s"}
    )

    assert isinstance(provider, StaticTokenProvider)
    assert provider.get_access_token() == "abc"


def test_client_credentials_provider():
    provider = get_token_provider(
        {"domain": DOMAIN, "client_id": "client", "client_secret": "secret"}
    )

    assert isinstance(provider, ManagementTokenProvider)
    assert provider.domain == DOMAIN


@pytest.mark.parametrize(
    "config",
    [
        {"domain": DOMAIN},
        {"domain": DOMAIN, "client_id": "client"},
        {"domain": DOMAIN, "client_secret": "secret"},
    ],
)
def test_credentials_are_required(config):
    with pytest.raises(ConfigurationError, match="token or client credentials"):
        get_token_provider(config)


def test_logs_client_uses_client_credentials(requests_mock):
    requests_mock.post(
        "https://example.auth0.com/oauth/token",
        json={"access_token": "granted", "expires_in": 86400},
    )
    requests_mock.get("https://auth.example.com/api/v2/logs", json=[])
    conn = get_logs_client(
        {
            "domain": DOMAIN,
            "base_url": "https://auth.example.com/api/v2",
            "client_id": "client",
            "client_secret": "secret",
        }
    )

    assert conn.get_all() == []
    assert requests_mock.call_count == 2
    assert requests_mock.request_history[0].json()["client_id"] == "client"
    assert requests_mock.last_request.headers["Authorization"] == "Bearer granted"


def test_max_retries_reaches_retry_client():
    conn = get_logs_client({"domain": DOMAIN, "token": "abc", "max_retries": 5})

    assert conn.resource.max_retries == 5


def test_max_retries_defaults_to_three():
    conn = get_logs_client({"domain": DOMAIN, "token": "abc"})

    assert conn.resource.max_retries == 3
