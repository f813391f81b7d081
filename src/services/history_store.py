"""JSON file-backed conversation history store.

The whole document (session_id -> list of messages) is read and written as a
unit. Format: {"<session_id>": [{"role": "user_id"|"user"|"assistant", "content": str}, ...]}
"""

import json
import logging
import os
import stat
import tempfile
from pathlib import Path

from src.services.errors import HistoryStoreError

logger = logging.getLogger(__name__)

HistoryDocument = dict[str, list[dict[str, str]]]


class JsonHistoryStore:
    """Load and save the full history document at a fixed path."""

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def load(self) -> HistoryDocument:
        """Read the persisted document.

        A missing, unreadable or corrupt file is treated as an empty history.
        """
        try:
            with self.path.open("r", encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            return {}
        except (OSError, ValueError) as e:
            logger.warning(f"Ignoring unreadable history file {self.path}: {e}")
            return {}

        if not isinstance(data, dict):
            logger.warning(f"Ignoring history file {self.path}: expected a JSON object")
            return {}
        return data

    def save(self, doc: HistoryDocument) -> None:
        """Overwrite the persisted document with ``doc``.

        Raises:
            HistoryStoreError: If the document cannot be serialized or written
        """
        try:
            payload = json.dumps(doc, indent=2, ensure_ascii=False)
        except (TypeError, ValueError) as e:
            raise HistoryStoreError(f"History document is not serializable: {e}") from e

        directory = self.path.parent
        try:
            mode = self._file_mode()
            fd, tmp_name = tempfile.mkstemp(
                dir=directory, prefix=f".{self.path.name}.", suffix=".tmp"
            )
            try:
                # mkstemp creates 0600; keep the mode a plain open() would give
                os.fchmod(fd, mode)
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    f.write(payload)
                os.replace(tmp_name, self.path)
            except BaseException:
                # Leave the previous document untouched
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise HistoryStoreError(f"Failed to write history file {self.path}: {e}") from e

    def _file_mode(self) -> int:
        """Permission bits of the existing file, or the umask default for a new one."""
        try:
            return stat.S_IMODE(self.path.stat().st_mode)
        except FileNotFoundError:
            umask = os.umask(0)
            os.umask(umask)
            return 0o666 & ~umask
