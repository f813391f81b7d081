"""FastAPI application entry point."""

import logging
import os
from pathlib import Path
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.api.handlers import (
    create_chat_handler,
    create_chat_history_handler,
    create_download_chat_logs_handler,
)
from src.api.models import ChatResponse, ErrorResponse
from src.config import Config
from src.services.chat_log import ChatLogWriter
from src.services.chat_service import ChatService
from src.services.completion_client import CompletionClient
from src.services.history_store import JsonHistoryStore

# Load .env file if it exists (for local development)
env_path = Path(__file__).parent.parent / ".env"
if env_path.exists():
    load_dotenv(env_path)

logging.basicConfig(level=logging.INFO, format="[%(asctime)s] %(levelname)s %(name)s - %(message)s")
logger = logging.getLogger(__name__)


def load_config() -> Config:
    """Load configuration from environment variables.

    This is the only place that reads from environment variables.
    """
    openai_api_key = os.getenv("OPENAI_API_KEY")
    port = int(os.getenv("PORT", "3000"))

    if not openai_api_key:
        raise ValueError("OPENAI_API_KEY environment variable must be set")

    return Config(openai_api_key=openai_api_key, port=port)


def create_chat_service(config: Config) -> ChatService:
    """Wire the file-backed stores and the completion client."""
    return ChatService(
        history_store=JsonHistoryStore(config.history_file),
        chat_log=ChatLogWriter(config.csv_file),
        completion_client=CompletionClient(api_key=config.openai_api_key),
    )


def create_app(config: Config, chat_service: ChatService | None = None) -> FastAPI:
    """Build the FastAPI app.

    Args:
        config: Application configuration
        chat_service: Optional pre-built service (tests inject fakes here)

    Returns:
        Configured FastAPI application
    """
    service = chat_service or create_chat_service(config)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Lifespan context manager for startup/shutdown."""
        logger.info(f"Starting survey chat relay on port {config.port}")
        logger.info(f"History file: {config.history_file}, CSV log: {config.csv_file}")
        yield
        await service.completion_client.aclose()
        logger.info("Shutting down survey chat relay")

    app = FastAPI(
        title="Survey Chat Relay",
        description="Relays survey participants' chat messages to an LLM and logs the exchanges",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    error_responses = {500: {"model": ErrorResponse}}
    app.post("/chat", response_model=ChatResponse, responses=error_responses)(
        create_chat_handler(service)
    )
    app.get("/chat-history", responses=error_responses)(create_chat_history_handler(service))
    app.get("/download-chat-logs")(create_download_chat_logs_handler(service.chat_log))

    return app


def main():
    """Run the FastAPI server."""
    import uvicorn

    config = load_config()
    uvicorn.run(create_app(config), host="0.0.0.0", port=config.port)


if __name__ == "__main__":
    main()
