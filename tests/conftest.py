"""Shared test fixtures for the relay services and API."""

import csv
import json
import os
from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

# Set required environment variables before any imports that might read them
os.environ.setdefault("OPENAI_API_KEY", "test-key-for-tests")

from src.config import Config
from src.main import create_app
from src.services.chat_log import ChatLogWriter
from src.services.chat_service import ChatService
from src.services.errors import HistoryStoreError

# ============================================================================
# Store Fakes
# ============================================================================


class InMemoryHistoryStore:
    """History store that keeps the serialized document in memory.

    Stores JSON text rather than the dict so that callers mutating a loaded
    document cannot change persisted state without calling save().
    """

    def __init__(self, initial: dict | None = None):
        self._payload = json.dumps(initial) if initial is not None else None
        self.save_count = 0
        self.fail_on_save = False

    def load(self) -> dict:
        if self._payload is None:
            return {}
        return json.loads(self._payload)

    def save(self, doc: dict) -> None:
        if self.fail_on_save:
            raise HistoryStoreError("disk full")
        self._payload = json.dumps(doc)
        self.save_count += 1

    @property
    def document(self) -> dict:
        return self.load()


class FakeCompletionClient:
    """Completion client whose replies are driven by an AsyncMock."""

    def __init__(self, reply: str = "Bot reply"):
        self.complete = AsyncMock(return_value=reply)
        self.aclose = AsyncMock()

    def window(self, call_index: int = -1) -> list[dict[str, str]]:
        """Messages passed on the given call."""
        return self.complete.await_args_list[call_index].args[0]


# ============================================================================
# Service Fixtures
# ============================================================================


@pytest.fixture
def test_config(tmp_path) -> Config:
    """Config pointing both files into a temporary directory."""
    return Config(
        openai_api_key="test-key",
        history_file=str(tmp_path / "chatHistory.json"),
        csv_file=str(tmp_path / "chatLogs.csv"),
    )


@pytest.fixture
def history_store() -> InMemoryHistoryStore:
    return InMemoryHistoryStore()


@pytest.fixture
def chat_log(test_config: Config) -> ChatLogWriter:
    return ChatLogWriter(test_config.csv_file)


@pytest.fixture
def completion_client() -> FakeCompletionClient:
    return FakeCompletionClient()


@pytest.fixture
def chat_service(history_store, chat_log, completion_client) -> ChatService:
    return ChatService(
        history_store=history_store,
        chat_log=chat_log,
        completion_client=completion_client,
    )


@pytest.fixture
def client(test_config: Config, chat_service: ChatService):
    """TestClient for an app wired to the fake services."""
    app = create_app(test_config, chat_service=chat_service)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def csv_rows(chat_log: ChatLogWriter):
    """Return a callable reading the CSV log as a list of rows."""

    def _read() -> list[list[str]]:
        with open(chat_log.path, newline="", encoding="utf-8") as f:
            return list(csv.reader(f))

    return _read
