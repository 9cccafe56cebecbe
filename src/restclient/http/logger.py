"""
HTTP traffic logger for debugging and auditing.

Records every request the client sends and the status of every response
it receives, one line per event, with timestamps and full JSON payloads.
"""

import json
from datetime import UTC
from datetime import datetime
from pathlib import Path
from typing import Any
from typing import Protocol

# Written in place of the body for Raw payloads, which may be one-shot streams.
RAW_BODY_PLACEHOLDER = "<raw stream>"


class HTTPLogger(Protocol):
    """Protocol for HTTP logging callbacks."""

    def log_request(self, method: str, url: str, body: Any) -> None:
        """Log an outgoing HTTP request."""
        ...

    def log_response(self, url: str, status: int) -> None:
        """Log an incoming HTTP response status."""
        ...


class FileHTTPLogger:
    """
    Logs HTTP traffic to a file.

    Format:
        [timestamp] [direction] [type] payload

    Where:
        - timestamp: ISO 8601 format, UTC, millisecond precision
        - direction: >>> for outgoing, <<< for incoming
        - type: REQUEST or RESPONSE
        - payload: JSON-formatted data
    """

    def __init__(self, log_file: Path):
        """
        Initialize the file logger.

        Args:
            log_file: Path to the log file. Parent directories will be created
                      if they don't exist.
        """
        self.log_file = log_file
        self.log_file.parent.mkdir(parents=True, exist_ok=True)
        self.log_file.touch(exist_ok=True)

    def _write_log(self, kind: str, payload: dict[str, Any]) -> None:
        timestamp = datetime.now(UTC).isoformat(timespec="milliseconds")
        with self.log_file.open("a", encoding="utf-8") as f:
            f.write(f"[{timestamp}] {kind} {json.dumps(payload, ensure_ascii=False, default=repr)}\n")

    def log_request(self, method: str, url: str, body: Any) -> None:
        """Log an outgoing HTTP request."""
        self._write_log(">>> REQUEST", {"method": method, "url": url, "body": body})

    def log_response(self, url: str, status: int) -> None:
        """Log an incoming HTTP response status."""
        self._write_log("<<< RESPONSE", {"url": url, "status": status})
