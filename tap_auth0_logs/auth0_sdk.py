"""Minimal REST plumbing for the Auth0 Management API."""

import logging
import random
import re
import time
from urllib.parse import quote

import requests

MAX_REQUEST_RETRY_COUNT = 10
DEFAULT_MAX_RETRIES = 3
RATE_LIMITED = 429

_PLACEHOLDER = re.compile(r"/:([A-Za-z_][A-Za-z0-9_]*)")


class ConfigurationError(ValueError):
    """Raised when a client is constructed with missing or invalid options."""


class StaticTokenProvider(object):
    """Hand out a token obtained elsewhere."""

    def __init__(self, token):
        if not token:
            raise ConfigurationError("Must provide an access token")
        self.token = token

    def get_access_token(self):
        return self.token


class ManagementTokenProvider(object):
    """Obtain Management API tokens with the client credentials grant.

    The token is cached and reused until shortly before it expires, so a
    long-running sync only hits the token endpoint once per token lifetime.
    """

    EXPIRY_LEEWAY = 10

    def __init__(self, domain, client_id, client_secret, audience=None, clock=None):
        if not domain:
            raise ConfigurationError("Must provide a domain")
        if not client_id:
            raise ConfigurationError("Must provide a client ID")
        if not client_secret:
            raise ConfigurationError("Must provide a client secret")
        self.domain = domain
        self.client_id = client_id
        self.client_secret = client_secret
        self.audience = audience or "https://%s/api/v2/" % domain
        self.session = requests.Session()
        self.session.headers = {
            "content-type": "application/json",
            "accept": "application/json",
        }
        self._clock = clock or time.monotonic
        self._token = None
        self._expires_at = 0.0
        self.logger = logging.getLogger("Auth0ManagementSDK")

    def get_access_token(self):
        """Return a cached token, requesting a new one when it is stale."""
        if self._token is not None and self._clock() < self._expires_at:
            return self._token

        self.logger.info("Requesting a management token from %s", self.domain)
        r = self.session.post(
            "https://%s/oauth/token" % self.domain,
            json={
                "grant_type": "client_credentials",
                "client_id": self.client_id,
                "client_secret": self.client_secret,
                "audience": self.audience,
            },
        )
        if 400 <= r.status_code < 600:
            r.reason = r.text
        r.raise_for_status()
        body = r.json()
        self._token = body["access_token"]
        self._expires_at = (
            self._clock() + body.get("expires_in", 86400) - self.EXPIRY_LEEWAY
        )
        return self._token


class RestResource(object):
    """A REST resource bound to a URL template like ``.../logs/:id``.

    Placeholders are filled from the call parameters; a placeholder without a
    value drops its path segment. Whatever is left becomes the query string.
    """

    def __init__(self, url_template, options=None, token_provider=None):
        options = options or {}
        self.url_template = url_template.strip()
        self.headers = dict(options.get("headers") or {})
        self.repeat_params = (options.get("query") or {}).get("repeat_params", True)
        self.token_provider = token_provider
        self.session = requests.Session()
        self.session.headers = {
            "content-type": "application/json",
            "accept": "application/json",
        }
        self.session.headers.update(self.headers)

    def build_url(self, params):
        """Return the URL for ``params`` and the params left for the query."""
        remaining = dict(params or {})

        def fill(match):
            value = remaining.pop(match.group(1), None)
            if value is None or value == "":
                return ""
            return "/" + quote(str(value), safe="")

        return _PLACEHOLDER.sub(fill, self.url_template), remaining

    def build_query(self, params):
        query = []
        for key, value in params.items():
            if value is None:
                continue
            if isinstance(value, (list, tuple)):
                values = [_query_value(v) for v in value]
                if self.repeat_params:
                    query.extend((key, v) for v in values)
                else:
                    query.append((key, ",".join(values)))
            else:
                query.append((key, _query_value(value)))
        return query

    def request(self, method, params=None):
        url, remaining = self.build_url(params)
        headers = {}
        if self.token_provider is not None:
            headers["Authorization"] = (
                "Bearer %s" % self.token_provider.get_access_token()
            )
        r = self.session.request(
            method, url, params=self.build_query(remaining), headers=headers
        )
        if 400 <= r.status_code < 600:
            r.reason = r.text
        r.raise_for_status()
        return r.json()

    def get_all(self, params=None):
        """List the collection."""
        return self.request("GET", params)

    def get(self, params=None):
        """Fetch a single item addressed by the template placeholders."""
        return self.request("GET", params)


class RetryRestClient(object):
    """Wrap a resource and retry calls that were rate limited."""

    def __init__(self, resource, options=None, sleep=None):
        if resource is None:
            raise ConfigurationError("Must provide a resource")
        options = options or {}
        self.resource = resource
        self.enabled = options.get("enabled", True)
        max_retries = options.get("max_retries", DEFAULT_MAX_RETRIES)
        self.max_retries = max(0, min(max_retries, MAX_REQUEST_RETRY_COUNT))
        self.sleep = sleep or time.sleep
        self.logger = logging.getLogger("Auth0ManagementSDK")

    def get_all(self, params=None):
        return self.invoke("get_all", params)

    def get(self, params=None):
        return self.invoke("get", params)

    def invoke(self, method, params):
        """Call ``method`` on the wrapped resource, retrying on HTTP 429."""
        retries = self.max_retries if self.enabled else 0
        attempt = 0
        while True:
            try:
                return getattr(self.resource, method)(params)
            except requests.HTTPError as exc:
                status = exc.response.status_code if exc.response is not None else None
                if status != RATE_LIMITED or attempt >= retries:
                    raise
                delay = self.backoff(attempt)
                attempt += 1
                self.logger.warning(
                    "Rate limited on %s, retry %d/%d in %.2fs",
                    method,
                    attempt,
                    retries,
                    delay,
                )
                self.sleep(delay)

    @staticmethod
    def backoff(attempt):
        return min(0.25 * 2 ** attempt, 10.0) + random.uniform(0, 0.25)


def _query_value(value):
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)
