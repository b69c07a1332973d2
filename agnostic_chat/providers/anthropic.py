from typing import Any, AsyncIterator, Dict, List, Sequence

import httpx

from agnostic_chat.core.config import BackendConfig
from agnostic_chat.providers.base import ChatBackend, ProviderError, error_message, iter_sse_data
from agnostic_chat.schemas.messages import Message


class AnthropicChatBackend(ChatBackend):
    """
    Anthropic Messages API over httpx.
    System turns are lifted into the top-level "system" field; the API
    only accepts user/assistant turns in "messages".
    """

    provider = "anthropic"

    def __init__(self, settings: BackendConfig) -> None:
        self._settings = settings

    @property
    def model(self) -> str:
        return self._settings.model

    def _headers(self) -> Dict[str, str]:
        if not self._settings.api_key:
            raise ProviderError("ANTHROPIC_API_KEY is not set")
        return {
            "x-api-key": self._settings.api_key,
            "anthropic-version": self._settings.api_version or "2023-06-01",
            "content-type": "application/json",
        }

    def _payload(self, messages: Sequence[Message], stream: bool) -> Dict[str, Any]:
        system = [m.content for m in messages if m.role == "system"]
        turns: List[Dict[str, str]] = [
            {"role": "user" if m.role == "human" else "assistant", "content": m.content}
            for m in messages
            if m.role != "system"
        ]
        if not turns:
            raise ProviderError("Anthropic requires at least one human or assistant message.")
        payload: Dict[str, Any] = {
            "model": self._settings.model,
            "max_tokens": self._settings.max_tokens,
            "temperature": self._settings.temperature,
            "messages": turns,
            "stream": stream,
        }
        if system:
            payload["system"] = "\n\n".join(system)
        return payload

    async def invoke(self, messages: Sequence[Message]) -> Message:
        headers = self._headers()
        payload = self._payload(messages, stream=False)
        timeout = httpx.Timeout(self._settings.request_timeout, connect=self._settings.connect_timeout)
        try:
            async with httpx.AsyncClient(timeout=timeout) as client:
                r = await client.post(f"{self._settings.base_url}/messages", json=payload, headers=headers)
                r.raise_for_status()
                data = r.json()
        except httpx.HTTPError as e:
            raise ProviderError(f"Anthropic HTTP error: {e}") from e
        except ValueError as e:
            raise ProviderError(f"Anthropic returned invalid JSON: {e}") from e

        if not isinstance(data, dict):
            raise ProviderError("Unexpected response type from Anthropic.")
        if data.get("type") == "error" or data.get("error"):
            raise ProviderError(f"Anthropic error: {error_message(data)}")
        blocks = data.get("content")
        if not isinstance(blocks, list):
            raise ProviderError("Unexpected response type from Anthropic.")
        text = "".join(
            b.get("text", "") for b in blocks if isinstance(b, dict) and b.get("type") == "text"
        )
        return Message.assistant(text)

    async def stream(self, messages: Sequence[Message]) -> AsyncIterator[str]:
        headers = self._headers()
        payload = self._payload(messages, stream=True)
        timeout = httpx.Timeout(self._settings.stream_timeout, connect=self._settings.connect_timeout)
        try:
            async with httpx.AsyncClient(timeout=timeout) as client:
                async with client.stream(
                    "POST", f"{self._settings.base_url}/messages", json=payload, headers=headers
                ) as r:
                    r.raise_for_status()
                    async for data in iter_sse_data(r):
                        kind = data.get("type")
                        if kind == "error":
                            raise ProviderError(f"Anthropic error: {error_message(data)}")
                        if kind == "message_stop":
                            break
                        if kind != "content_block_delta":
                            continue
                        delta = data.get("delta") or {}
                        chunk = delta.get("text")
                        if delta.get("type") == "text_delta" and isinstance(chunk, str) and chunk:
                            yield chunk
        except httpx.HTTPError as e:
            raise ProviderError(f"Anthropic HTTP error: {e}") from e
