"""Chat turn orchestration.

A session's first message is always the participant's self-reported ID and is
answered with a fixed confirmation; every later message is relayed to the
completion API together with the recent conversation.
"""

import logging
from enum import Enum

from src.services.chat_log import ChatLogWriter
from src.services.completion_client import CompletionClient, build_window
from src.services.history_store import HistoryDocument, JsonHistoryStore
from src.services.session_locks import SessionLocks

logger = logging.getLogger(__name__)

CONFIRMATION = "Thanks! I've recorded your ID. You can now start asking questions."
UNKNOWN_USER_ID = "N/A"


class SessionState(str, Enum):
    """Lifecycle of a session."""

    UNREGISTERED = "unregistered"
    REGISTERED = "registered"


def session_state(doc: HistoryDocument, session_id: str) -> SessionState:
    """Registered once the session key exists in the document."""
    if session_id in doc:
        return SessionState.REGISTERED
    return SessionState.UNREGISTERED


def resolve_user_id(log: list[dict[str, str]]) -> str:
    """Return the ID recorded by the session's first message."""
    for entry in log:
        if entry.get("role") == "user_id":
            return entry.get("content", UNKNOWN_USER_ID)
    return UNKNOWN_USER_ID


class ChatService:
    """Handle one chat message per call against file-backed state.

    The history document is reloaded on every call and rewritten in full after
    every mutation. Turns on the same session are serialized by a per-session
    lock.
    """

    def __init__(
        self,
        history_store: JsonHistoryStore,
        chat_log: ChatLogWriter,
        completion_client: CompletionClient,
        session_locks: SessionLocks | None = None,
    ):
        self.history_store = history_store
        self.chat_log = chat_log
        self.completion_client = completion_client
        self.session_locks = session_locks or SessionLocks()

    def get_history(self) -> HistoryDocument:
        return self.history_store.load()

    async def handle_message(self, session_id: str, message: str) -> str:
        """Process ``message`` for ``session_id`` and return the reply text.

        Raises:
            CompletionError: The upstream call failed; nothing was persisted
            HistoryStoreError: The updated history could not be written
        """
        async with self.session_locks.hold(session_id):
            doc = self.history_store.load()
            state = session_state(doc, session_id)
            logger.info(f"Chat turn for session {session_id} ({state.value})")

            if state is SessionState.UNREGISTERED:
                return self._register(session_id, message)
            return await self._converse(session_id, message, doc[session_id])

    def _register(self, session_id: str, user_id: str) -> str:
        entries = [
            {"role": "user_id", "content": user_id},
            {"role": "assistant", "content": CONFIRMATION},
        ]
        self._append(session_id, entries)
        self.chat_log.append(session_id, user_id, user_id, CONFIRMATION)
        return CONFIRMATION

    async def _converse(self, session_id: str, message: str, log: list[dict[str, str]]) -> str:
        window = build_window(log, message)
        reply = await self.completion_client.complete(window)

        entries = [
            {"role": "user", "content": message},
            {"role": "assistant", "content": reply},
        ]
        updated_log = self._append(session_id, entries)
        self.chat_log.append(session_id, resolve_user_id(updated_log), message, reply)
        return reply

    def _append(self, session_id: str, entries: list[dict[str, str]]) -> list[dict[str, str]]:
        """Append entries to the session log on a fresh copy of the document and save it.

        Reload and save run without a suspension point in between, so another
        session's turn saved during the upstream call is not overwritten. This
        relies on the file I/O being synchronous; it blocks the event loop for
        the length of a full-document write.
        """
        doc = self.history_store.load()
        log = doc.setdefault(session_id, [])
        log.extend(entries)
        self.history_store.save(doc)
        return log
