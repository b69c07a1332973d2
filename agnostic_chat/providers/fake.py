"""Deterministic offline backend; no network calls."""

import asyncio
import re
from typing import AsyncIterator, List, Optional, Sequence, Tuple

from agnostic_chat.providers.base import ChatBackend, ProviderError
from agnostic_chat.schemas.messages import Message

# split after whitespace so fragments keep their spacing
_FRAGMENT_BOUNDARY = re.compile(r"(?<=\s)(?=\S)")


def split_fragments(text: str) -> List[str]:
    return [part for part in _FRAGMENT_BOUNDARY.split(text) if part]


class FakeChatBackend(ChatBackend):
    """
    Replies with canned responses in rotation, or echoes the last human
    message when none are given. stream() yields the same reply that
    invoke() would return, one word at a time.

    fail_after=n makes stream() raise after n fragments and invoke() raise
    immediately; every call is recorded in .calls.
    """

    provider = "fake"

    def __init__(
        self,
        responses: Optional[Sequence[str]] = None,
        *,
        model: str = "fake-chat",
        fail_after: Optional[int] = None,
        error: Optional[Exception] = None,
    ) -> None:
        self._responses = list(responses or [])
        self._model = model
        self._next = 0
        self.fail_after = fail_after
        self.error = error
        self.calls: List[Tuple[str, Tuple[Message, ...]]] = []

    @property
    def model(self) -> str:
        return self._model

    def _failure(self) -> Exception:
        return self.error or ProviderError("fake backend failure")

    def _reply(self, messages: Sequence[Message]) -> str:
        if self._responses:
            reply = self._responses[self._next % len(self._responses)]
            self._next += 1
            return reply
        last_human = next((m.content for m in reversed(messages) if m.role == "human"), "")
        return f"echo: {last_human}"

    async def invoke(self, messages: Sequence[Message]) -> Message:
        self.calls.append(("invoke", tuple(messages)))
        if self.fail_after is not None:
            raise self._failure()
        await asyncio.sleep(0)
        return Message.assistant(self._reply(messages))

    async def stream(self, messages: Sequence[Message]) -> AsyncIterator[str]:
        self.calls.append(("stream", tuple(messages)))
        for i, fragment in enumerate(split_fragments(self._reply(messages))):
            if self.fail_after is not None and i >= self.fail_after:
                raise self._failure()
            await asyncio.sleep(0)
            yield fragment
        if self.fail_after is not None:
            # fewer fragments than fail_after still ends in failure
            raise self._failure()
