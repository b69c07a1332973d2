from typing import Any, AsyncIterator, Dict, List, Sequence

import httpx

from agnostic_chat.core.config import BackendConfig
from agnostic_chat.providers.base import ChatBackend, ProviderError, error_message, iter_sse_data
from agnostic_chat.schemas.messages import Message

_ROLES = {"system": "system", "human": "user", "assistant": "assistant"}


class OpenAIChatBackend(ChatBackend):
    """OpenAI chat completions over httpx."""

    provider = "openai"

    def __init__(self, settings: BackendConfig) -> None:
        self._settings = settings

    @property
    def model(self) -> str:
        return self._settings.model

    def _headers(self) -> Dict[str, str]:
        if not self._settings.api_key:
            raise ProviderError("OPENAI_API_KEY is not set")
        return {
            "Authorization": f"Bearer {self._settings.api_key}",
            "Content-Type": "application/json",
        }

    def _payload(self, messages: Sequence[Message], stream: bool) -> Dict[str, Any]:
        wire: List[Dict[str, str]] = [
            {"role": _ROLES[m.role], "content": m.content} for m in messages
        ]
        return {
            "model": self._settings.model,
            "messages": wire,
            "temperature": self._settings.temperature,
            "max_tokens": self._settings.max_tokens,
            "stream": stream,
        }

    async def invoke(self, messages: Sequence[Message]) -> Message:
        headers = self._headers()
        payload = self._payload(messages, stream=False)
        timeout = httpx.Timeout(self._settings.request_timeout, connect=self._settings.connect_timeout)
        try:
            async with httpx.AsyncClient(timeout=timeout) as client:
                r = await client.post(f"{self._settings.base_url}/chat/completions", json=payload, headers=headers)
                r.raise_for_status()
                data = r.json()
        except httpx.HTTPError as e:
            raise ProviderError(f"OpenAI HTTP error: {e}") from e
        except ValueError as e:
            raise ProviderError(f"OpenAI returned invalid JSON: {e}") from e

        if not isinstance(data, dict):
            raise ProviderError("Unexpected response type from OpenAI.")
        if data.get("error"):
            raise ProviderError(f"OpenAI error: {error_message(data)}")
        choices = data.get("choices") or []
        if not choices:
            raise ProviderError("OpenAI response contained no choices.")
        content = (choices[0].get("message") or {}).get("content")
        if not isinstance(content, str):
            raise ProviderError("Unexpected response type from OpenAI.")
        return Message.assistant(content)

    async def stream(self, messages: Sequence[Message]) -> AsyncIterator[str]:
        headers = self._headers()
        payload = self._payload(messages, stream=True)
        timeout = httpx.Timeout(self._settings.stream_timeout, connect=self._settings.connect_timeout)
        try:
            async with httpx.AsyncClient(timeout=timeout) as client:
                async with client.stream(
                    "POST", f"{self._settings.base_url}/chat/completions", json=payload, headers=headers
                ) as r:
                    r.raise_for_status()
                    async for data in iter_sse_data(r):
                        if data.get("error"):
                            raise ProviderError(f"OpenAI error: {error_message(data)}")
                        for choice in data.get("choices") or []:
                            chunk = (choice.get("delta") or {}).get("content")
                            if isinstance(chunk, str) and chunk:
                                yield chunk
        except httpx.HTTPError as e:
            raise ProviderError(f"OpenAI HTTP error: {e}") from e
