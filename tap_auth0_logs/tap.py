"""auth0 logs tap class."""

import copy
import json
from typing import Dict, List

from genson import SchemaBuilder
from singer_sdk import Tap
from singer_sdk import typing as th

from tap_auth0_logs.client import get_logs_client
from tap_auth0_logs.streams import LogsStream

LOG_SCHEMA = th.PropertiesList(
    th.Property("log_id", th.StringType, required=True),
    th.Property("date", th.DateTimeType),
    th.Property("type", th.StringType),
    th.Property("description", th.StringType),
    th.Property("connection", th.StringType),
    th.Property("connection_id", th.StringType),
    th.Property("client_id", th.StringType),
    th.Property("client_name", th.StringType),
    th.Property("ip", th.StringType),
    th.Property("hostname", th.StringType),
    th.Property("user_id", th.StringType),
    th.Property("user_name", th.StringType),
    th.Property("audience", th.StringType),
    th.Property("scope", th.StringType),
    th.Property("strategy", th.StringType),
    th.Property("strategy_type", th.StringType),
    th.Property("user_agent", th.StringType),
    th.Property("isMobile", th.BooleanType),
    th.Property("details", th.CustomType({"type": ["object", "null"]})),
    th.Property("location_info", th.CustomType({"type": ["object", "null"]})),
).to_dict()


class TapAuth0Logs(Tap):
    """auth0 logs tap class."""

    name = "tap-auth0-logs"

    config_jsonschema = th.PropertiesList(
        th.Property(
            "domain",
            th.StringType,
            required=True,
            description="The Auth0 tenant domain, e.g. `tenant.eu.auth0.com`.",
        ),
        th.Property(
            "base_url",
            th.StringType,
            description="The Management API root. Defaults to "
            "`https://<domain>/api/v2`.",
        ),
        th.Property(
            "client_id",
            th.StringType,
            description="The client id of a machine-to-machine application "
            "allowed to read logs.",
        ),
        th.Property(
            "client_secret",
            th.StringType,
            secret=True,
            description="The client secret of that application.",
        ),
        th.Property(
            "token",
            th.StringType,
            secret=True,
            description="A Management API token. Used instead of the client "
            "credentials when set.",
        ),
        th.Property(
            "start_from",
            th.StringType,
            description="The log event id to start from when there is no "
            "bookmark yet.",
        ),
        th.Property(
            "take",
            th.IntegerType,
            default=100,  # type: ignore
            description="The number of log events per request. Values above 100 "
            "are lowered to 100.",
        ),
        th.Property(
            "query",
            th.StringType,
            description="A query in Lucene query string syntax, sent as `q`.",
        ),
        th.Property(
            "max_retries",
            th.IntegerType,
            default=3,  # type: ignore
            description="How many times a rate limited request is retried. "
            "Max 10.",
        ),
        th.Property(
            "infer_schema",
            th.BooleanType,
            default=False,  # type: ignore
            description="Define as true to infer the stream schema from a "
            "sample of log events instead of using the built-in one.",
        ),
        th.Property(
            "schema",
            th.CustomType(
                {
                    "anyOf": [
                        {"type": "string"},
                        {"type": "null"},
                        {"type": "object"},
                    ]
                }
            ),
            required=False,
            description="A valid Singer schema or a path-like string "
            "that provides the path to a `.json` file that "
            "contains a valid Singer schema. If provided, "
            "the schema will not be inferred "
            "from the results of an api call.",
        ),
    ).to_dict()

    def discover_streams(self) -> List[LogsStream]:  # type: ignore
        """Return a list of discovered streams."""
        schema_config = self.config.get("schema")
        if isinstance(schema_config, str):
            self.logger.info("Found path to a schema, not doing discovery.")
            with open(schema_config, "r") as f:
                schema = json.load(f)

        elif isinstance(schema_config, dict):
            self.logger.info("Found schema in config, not doing discovery.")
            builder = SchemaBuilder()
            builder.add_schema(schema_config)
            schema = builder.to_schema()

        elif self.config.get("infer_schema"):
            self.logger.info("Inferring schema from API call.")
            schema = self.get_schema_for_logs()

        else:
            schema = copy.deepcopy(LOG_SCHEMA)

        return [LogsStream(tap=self, schema=schema)]

    def get_schema_for_logs(self) -> Dict:
        """Detect json schema using a sample page of log events.

        Returns:
            detected schema, or the built-in one when the tenant has no logs.

        """
        conn = get_logs_client(self.config)
        logs = conn.get_all({"per_page": 10, "page": 0})
        if not logs:
            self.logger.info("No log events to sample, using built-in schema.")
            return copy.deepcopy(LOG_SCHEMA)

        builder = SchemaBuilder()
        builder.add_schema({"type": "object", "properties": {}})
        for log in logs:
            builder.add_object(log)
        schema = builder.to_schema()
        schema.pop("$schema", None)
        schema.pop("required", None)
        return schema
