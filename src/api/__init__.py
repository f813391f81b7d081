"""API module for request/response models and handlers."""

from src.api.models import ChatRequest, ChatResponse, ErrorResponse
from src.api.handlers import (
    create_chat_handler,
    create_chat_history_handler,
    create_download_chat_logs_handler,
)

__all__ = [
    "ChatRequest",
    "ChatResponse",
    "ErrorResponse",
    "create_chat_handler",
    "create_chat_history_handler",
    "create_download_chat_logs_handler",
]
