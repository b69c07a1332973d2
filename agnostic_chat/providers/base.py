# the capability contract every backend implements (invoke / stream / format_messages)
# lets the harness and the API run the same code against openai, claude or a fake

import json
from abc import ABC, abstractmethod
from typing import Any, AsyncIterator, Dict, List, Sequence

import httpx

from agnostic_chat.schemas.messages import Message
from agnostic_chat.services.prompt import ChatPromptTemplate


class ProviderError(Exception):
    pass


class ChatBackend(ABC):
    provider: str = "base"

    @property
    @abstractmethod
    def model(self) -> str:
        """Model identifier."""

    @abstractmethod
    async def invoke(self, messages: Sequence[Message]) -> Message:
        """Return the full assistant reply; no partial output."""

    @abstractmethod
    def stream(self, messages: Sequence[Message]) -> AsyncIterator[str]:
        """Yield content fragments in arrival order. Not restartable."""

    def format_messages(self, template: ChatPromptTemplate, **variables: object) -> List[Message]:
        return template.format_messages(**variables)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(model={self.model!r})"


async def iter_sse_data(response: httpx.Response) -> AsyncIterator[Dict[str, Any]]:
    async for line in response.aiter_lines():
        if not line or not line.startswith("data:"):
            # blank separators, ": keepalive" comments and "event:" lines
            continue
        raw = line[len("data:"):].strip()
        if raw == "[DONE]":
            return
        try:
            data = json.loads(raw)
        except json.JSONDecodeError:
            continue
        if isinstance(data, dict):
            yield data


def error_message(data: Dict[str, Any]) -> str:
    err = data.get("error")
    if isinstance(err, dict):
        return str(err.get("message") or err.get("type") or err)
    return str(err)
