"""Stream type classes for tap-auth0-logs."""

from typing import Any, Dict, Iterable, Optional

from tap_auth0_logs.client import Auth0Stream

MAX_TAKE = 100


class LogsStream(Auth0Stream):
    """Log events, read with checkpoint pagination."""

    primary_keys = ["log_id"]
    replication_key = "log_id"

    def __init__(self, tap: Any, schema: dict = None, name: str = "logs") -> None:
        super().__init__(tap=tap, schema=schema, name=name)
        self.take = min(self.config.get("take", 100), MAX_TAKE)
        self.query = self.config.get("query")

    def get_records(self, context: Optional[dict]) -> Iterable[Dict[str, Any]]:
        """Return a generator of log events.

        Starts from the bookmarked ``log_id``, else the configured
        ``start_from``, and asks for ``take`` events after it until a page
        comes back empty or short.
        """
        checkpoint = self.get_starting_replication_key_value(context)
        if checkpoint is None:
            checkpoint = self.config.get("start_from")
        self.logger.info("Reading logs from %s after %s", self.url_base, checkpoint)

        while True:
            params = {"from": checkpoint, "take": self.take, "q": self.query}
            logs = self.conn.get_all(params)
            self.logger.info("Got %d logs after %s", len(logs), checkpoint)

            for log in logs:
                yield log

            if len(logs) < self.take:
                break
            last = logs[-1]["log_id"]
            if last == checkpoint:
                break  # make sure we exit if the cursor stops moving
            checkpoint = last
