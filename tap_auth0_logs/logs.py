"""Client for the Auth0 Management API log events."""

from collections.abc import Mapping
from typing import Any, Callable, Dict, List, Optional, Union

from tap_auth0_logs.auth0_sdk import ConfigurationError, RestResource, RetryRestClient

Callback = Callable[[Optional[BaseException], Any], None]


class LogsClient(object):
    """Read Auth0 log events.

    Args:
        options: client options.
            base_url: the URL of the API, e.g. ``https://tenant.auth0.com/api/v2``.
            headers: headers to be included in all requests.
            retry: retry policy config for the rate-limit decorator.
            token_provider: object with a ``get_access_token()`` method.

    """

    def __init__(self, options: Mapping) -> None:
        if options is None or not isinstance(options, Mapping):
            raise ConfigurationError("Must provide client options")

        if options.get("base_url") is None:
            raise ConfigurationError("Must provide a base URL for the API")

        base_url = options["base_url"]
        if not isinstance(base_url, str) or len(base_url) == 0:
            raise ConfigurationError("The provided base URL is invalid")

        client_options = {
            "headers": options.get("headers"),
            "query": {"repeat_params": False},
        }
        rest_resource = RestResource(
            base_url + "/logs/:id",
            client_options,
            options.get("token_provider"),
        )
        self.resource = RetryRestClient(rest_resource, options.get("retry"))

    def get_all(
        self,
        params: Optional[Dict[str, Any]] = None,
        callback: Optional[Callback] = None,
    ) -> Union[List[Dict[str, Any]], Dict[str, Any], None]:
        """Get all logs.

        Without pagination options the first page of a limited number of
        results is returned. With ``include_totals`` the response is a summary
        object holding ``logs`` and ``total``.

        Args:
            params: q, page, per_page, sort, fields, include_fields,
                include_totals, or ``from`` and ``take`` for checkpoint
                pagination.
            callback: receives ``(error, logs)`` instead of the call
                returning or raising.

        """
        return _deliver(self.resource.get_all, params, callback)

    def get(
        self, params: Dict[str, Any], callback: Optional[Callback] = None
    ) -> Optional[Dict[str, Any]]:
        """Get a single log event by its ``id``."""
        return _deliver(self.resource.get, params, callback)


def _deliver(method, params, callback):
    if callback is None:
        return method(params)
    try:
        result = method(params)
    except Exception as exc:
        callback(exc, None)
    else:
        callback(None, result)
    return None
