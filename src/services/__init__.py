"""Services module for business logic."""

from src.services.chat_log import ChatLogWriter
from src.services.chat_service import ChatService
from src.services.completion_client import CompletionClient
from src.services.errors import CompletionError, HistoryStoreError, RelayError
from src.services.history_store import JsonHistoryStore

__all__ = [
    "ChatLogWriter",
    "ChatService",
    "CompletionClient",
    "CompletionError",
    "HistoryStoreError",
    "JsonHistoryStore",
    "RelayError",
]
