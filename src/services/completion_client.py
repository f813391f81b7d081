"""OpenAI chat-completions client used for established sessions."""

import logging

import httpx

from src.services.errors import CompletionError

logger = logging.getLogger(__name__)

OPENAI_CHAT_COMPLETIONS_URL = "https://api.openai.com/v1/chat/completions"
OPENAI_MODEL = "gpt-4"

# Prior user/assistant messages sent along with each new message
HISTORY_WINDOW = 10

CONVERSATION_ROLES = ("user", "assistant")


def build_window(log: list[dict[str, str]], message: str) -> list[dict[str, str]]:
    """Build the message list sent upstream for a new user message.

    The ``user_id`` entry never leaves the server; only the most recent
    ``HISTORY_WINDOW`` conversation messages are kept.

    Args:
        log: Stored conversation log for the session
        message: New user message

    Returns:
        List of {"role", "content"} dicts ending with the new user message
    """
    past = [
        {"role": entry["role"], "content": entry["content"]}
        for entry in log
        if entry.get("role") in CONVERSATION_ROLES
    ][-HISTORY_WINDOW:]
    past.append({"role": "user", "content": message})
    return past


class CompletionClient:
    """Send a message window to the completion API and return the reply text."""

    def __init__(
        self,
        api_key: str,
        client: httpx.AsyncClient | None = None,
        url: str = OPENAI_CHAT_COMPLETIONS_URL,
        model: str = OPENAI_MODEL,
        timeout: float | None = None,
    ):
        self._api_key = api_key
        self._client = client or httpx.AsyncClient(timeout=timeout)
        self._url = url
        self._model = model

    async def complete(self, messages: list[dict[str, str]]) -> str:
        """Request a completion for ``messages``.

        Raises:
            CompletionError: On network failure, non-2xx status or malformed body
        """
        headers = {
            "Authorization": f"Bearer {self._api_key}",
            "Content-Type": "application/json",
        }
        body = {"model": self._model, "messages": messages}

        try:
            response = await self._client.post(self._url, json=body, headers=headers)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise CompletionError(
                f"Completion API returned {e.response.status_code}: {e.response.text[:500]}"
            ) from e
        except httpx.HTTPError as e:
            raise CompletionError(f"Completion API request failed: {e}") from e

        try:
            reply = response.json()["choices"][0]["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise CompletionError(f"Malformed completion response: {e}") from e

        if not isinstance(reply, str):
            raise CompletionError("Malformed completion response: content is not text")

        logger.info(f"Completion received: {len(reply)} chars from {len(messages)} messages")
        return reply

    async def aclose(self) -> None:
        await self._client.aclose()
