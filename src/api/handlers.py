"""API request handlers."""

import logging
import os

from fastapi.responses import FileResponse, JSONResponse, PlainTextResponse

from src.api.models import ChatRequest, ChatResponse, ErrorResponse
from src.services.chat_log import ChatLogWriter
from src.services.chat_service import ChatService

logger = logging.getLogger(__name__)

CHAT_ERROR = "Something went wrong."
HISTORY_ERROR = "Could not retrieve chat history."
DOWNLOAD_ERROR = "Error downloading file."
DOWNLOAD_FILENAME = "chatLogs.csv"


def _error_response(message: str) -> JSONResponse:
    return JSONResponse(status_code=500, content=ErrorResponse(error=message).model_dump())


def create_chat_handler(chat_service: ChatService):
    """Create chat handler with chat service dependency.

    Args:
        chat_service: Service handling session state and the upstream call

    Returns:
        Chat handler function
    """

    async def chat(request: ChatRequest):
        """Chat endpoint: register the session ID or relay the message."""
        try:
            reply = await chat_service.handle_message(request.session_id, request.message)
        except Exception:
            # Uniform error contract: details stay in the server log
            logger.exception(f"Chat request failed for session {request.session_id}")
            return _error_response(CHAT_ERROR)
        return ChatResponse(reply=reply)

    return chat


def create_chat_history_handler(chat_service: ChatService):
    """Create handler returning the full history document."""

    async def chat_history():
        """Return every session's conversation log."""
        try:
            return chat_service.get_history()
        except Exception:
            logger.exception("Could not retrieve chat history")
            return _error_response(HISTORY_ERROR)

    return chat_history


def create_download_chat_logs_handler(chat_log: ChatLogWriter):
    """Create handler serving the CSV log as a download."""

    async def download_chat_logs():
        """Send the CSV log as an attachment."""
        if not chat_log.path.is_file() or not os.access(chat_log.path, os.R_OK):
            logger.error(f"File download error: {chat_log.path} is missing or unreadable")
            return PlainTextResponse(DOWNLOAD_ERROR, status_code=500)
        return FileResponse(chat_log.path, media_type="text/csv", filename=DOWNLOAD_FILENAME)

    return download_chat_logs
