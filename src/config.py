"""Configuration dataclass for the relay."""

from dataclasses import dataclass

DEFAULT_HISTORY_FILE = "chatHistory.json"
DEFAULT_CSV_FILE = "chatLogs.csv"


@dataclass
class Config:
    """Application configuration.

    All configuration should be passed as a Config instance rather than
    reading from environment variables directly.
    """

    openai_api_key: str
    port: int = 3000
    history_file: str = DEFAULT_HISTORY_FILE
    csv_file: str = DEFAULT_CSV_FILE
