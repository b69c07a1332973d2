# tests/test_providers_anthropic.py
import json
import pytest
import respx
import httpx

from agnostic_chat.core.config import BackendConfig
from agnostic_chat.providers.anthropic import AnthropicChatBackend
from agnostic_chat.providers.base import ProviderError
from agnostic_chat.schemas.messages import Message

BASE = "https://api.anthropic.com/v1"
MODEL = "claude-haiku-4-5-20251001"
MSGS = [Message.system("be brief"), Message.system("no emoji"), Message.human("hi")]


def backend(api_key="ak-test"):
    return AnthropicChatBackend(
        BackendConfig(api_key=api_key, model=MODEL, base_url=BASE, max_tokens=64, api_version="2023-06-01")
    )


def event(kind, data):
    return f"event: {kind}\ndata: {json.dumps(data)}\n\n".encode()


@pytest.mark.asyncio
@respx.mock
async def test_invoke_ok():
    # Tests a normal completion:
    # - system turns are joined into the top-level "system" field
    # - human turns are sent as "user"
    # - text blocks are joined into the reply
    route = respx.post(f"{BASE}/messages").mock(
        return_value=httpx.Response(
            200,
            json={
                "type": "message",
                "content": [{"type": "text", "text": "Par"}, {"type": "text", "text": "is"}],
            },
        )
    )
    out = await backend().invoke(MSGS)
    assert out == Message.assistant("Paris")
    req = route.calls.last.request
    assert req.headers["x-api-key"] == "ak-test"
    assert req.headers["anthropic-version"] == "2023-06-01"
    body = json.loads(req.content)
    assert body["system"] == "be brief\n\nno emoji"
    assert body["messages"] == [{"role": "user", "content": "hi"}]
    assert body["max_tokens"] == 64


@pytest.mark.asyncio
@respx.mock
async def test_invoke_error_body():
    respx.post(f"{BASE}/messages").mock(
        return_value=httpx.Response(
            200, json={"type": "error", "error": {"type": "overloaded_error", "message": "Overloaded"}}
        )
    )
    with pytest.raises(ProviderError, match="Overloaded"):
        await backend().invoke(MSGS)


@pytest.mark.asyncio
@respx.mock
async def test_invoke_http_error_wrapped():
    respx.post(f"{BASE}/messages").mock(return_value=httpx.Response(529, json={}))
    with pytest.raises(ProviderError, match="HTTP error"):
        await backend().invoke(MSGS)


@pytest.mark.asyncio
async def test_system_only_request_rejected():
    with pytest.raises(ProviderError):
        await backend().invoke([Message.system("only system")])


@pytest.mark.asyncio
async def test_missing_key_fails_at_call_time():
    with pytest.raises(ProviderError, match="ANTHROPIC_API_KEY"):
        await backend(api_key="").invoke(MSGS)


@pytest.mark.asyncio
@respx.mock
async def test_stream_ok():
    # Tests streaming: only text_delta events produce fragments; message_stop ends the stream.
    body = b"".join(
        [
            event("message_start", {"type": "message_start", "message": {"id": "m1"}}),
            event("content_block_start", {"type": "content_block_start", "index": 0}),
            b": ping\n\n",
            event("content_block_delta", {"type": "content_block_delta", "delta": {"type": "text_delta", "text": "he"}}),
            event("content_block_delta", {"type": "content_block_delta", "delta": {"type": "text_delta", "text": "llo"}}),
            event("message_delta", {"type": "message_delta", "delta": {"stop_reason": "end_turn"}}),
            event("message_stop", {"type": "message_stop"}),
            event("content_block_delta", {"type": "content_block_delta", "delta": {"type": "text_delta", "text": "!"}}),
        ]
    )
    respx.post(f"{BASE}/messages").mock(
        return_value=httpx.Response(200, content=body, headers={"Content-Type": "text/event-stream"})
    )
    acc = [c async for c in backend().stream(MSGS)]
    assert acc == ["he", "llo"]


@pytest.mark.asyncio
@respx.mock
async def test_stream_error_mid():
    body = event(
        "content_block_delta", {"type": "content_block_delta", "delta": {"type": "text_delta", "text": "he"}}
    ) + event("error", {"type": "error", "error": {"type": "overloaded_error", "message": "Overloaded"}})
    respx.post(f"{BASE}/messages").mock(
        return_value=httpx.Response(200, content=body, headers={"Content-Type": "text/event-stream"})
    )
    acc = []
    with pytest.raises(ProviderError, match="Overloaded"):
        async for c in backend().stream(MSGS):
            acc.append(c)
    assert acc == ["he"]


@pytest.mark.asyncio
@respx.mock
@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(200, text="<html>gateway</html>"),
        httpx.Response(200, json=["not", "an", "object"]),
    ],
)
async def test_invoke_non_object_body_wrapped(response):
    respx.post(f"{BASE}/messages").mock(return_value=response)
    with pytest.raises(ProviderError):
        await backend().invoke(MSGS)


@pytest.mark.asyncio
async def test_stream_missing_key_fails_at_call_time():
    with pytest.raises(ProviderError, match="ANTHROPIC_API_KEY"):
        async for _ in backend(api_key="").stream(MSGS):
            pass


@pytest.mark.asyncio
@respx.mock
async def test_stream_http_error_wrapped():
    respx.post(f"{BASE}/messages").mock(return_value=httpx.Response(401, json={}))
    acc = []
    with pytest.raises(ProviderError, match="HTTP error"):
        async for c in backend().stream(MSGS):
            acc.append(c)
    assert acc == []
