"""Append-only CSV log of chat exchanges, one row per turn."""

import csv
import logging
from datetime import datetime, timezone
from pathlib import Path

logger = logging.getLogger(__name__)

# Column order is part of the download format
CSV_HEADER = [
    "Survey Session ID",
    "User ID (First Message)",
    "User Message",
    "Bot Response",
    "Timestamp",
]


def utc_timestamp() -> str:
    """Current UTC time as ISO-8601 with millisecond precision, e.g. 2024-05-01T12:30:00.123Z."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class ChatLogWriter:
    """Best-effort CSV writer for chat exchanges."""

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def append(self, session_id: str, user_id: str, user_message: str, bot_response: str) -> None:
        """Append one row for an exchange, writing the header on first use.

        Failures are logged and never raised: the chat response must not depend
        on the log.
        """
        row = [session_id, user_id, user_message, bot_response, utc_timestamp()]
        try:
            write_header = not self.path.exists() or self.path.stat().st_size == 0
            with self.path.open("a", newline="", encoding="utf-8") as f:
                writer = csv.writer(f)
                if write_header:
                    writer.writerow(CSV_HEADER)
                writer.writerow(row)
        except OSError:
            logger.exception(f"CSV write error for session {session_id}")
