import logging
from typing import AsyncIterator, Optional

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import StreamingResponse

from agnostic_chat.api.deps import get_harness
from agnostic_chat.providers.base import ProviderError
from agnostic_chat.schemas.chat import ChatRequest, ChatResponse
from agnostic_chat.services.harness import BackendNotFoundError, DispatchHarness

router = APIRouter(tags=["chat"])
logger = logging.getLogger(__name__)


@router.post("/chat", response_model=ChatResponse)
async def chat(req: ChatRequest, request: Request, harness: DispatchHarness = Depends(get_harness)):
    try:
        backend = harness.get(req.backend)
    except BackendNotFoundError:
        logger.error("Backend %s not found", req.backend)
        raise HTTPException(status_code=404, detail=f"unknown backend: {req.backend}")

    # Non-stream path
    if not req.stream:
        try:
            reply = await backend.invoke(req.messages)
        except ProviderError as e:
            logger.warning("Error with %s: %s", req.backend, e)
            raise HTTPException(status_code=502, detail=str(e))
        return ChatResponse(
            reply=reply.content,
            backend=req.backend,
            provider=backend.provider,
            model=backend.model,
        )

    # Stream path
    # pull the first fragment before headers go out, so setup failures
    # (missing key, HTTP status) still map to 502
    gen = backend.stream(req.messages)
    try:
        first: Optional[str] = await gen.__anext__()
    except StopAsyncIteration:
        first = None
    except ProviderError as e:
        logger.warning("Error with %s: %s", req.backend, e)
        raise HTTPException(status_code=502, detail=str(e))

    async def streamer() -> AsyncIterator[bytes]:
        if first is None:
            return
        yield first.encode("utf-8")
        try:
            async for chunk in gen:
                if await request.is_disconnected():
                    logger.info("client disconnected, stopping stream")
                    break
                yield chunk.encode("utf-8")
        except Exception as e:
            # headers are already sent; keep the partial body
            logger.exception("streaming error occurred with %s: %s", req.backend, e)

    headers = {"X-Backend": req.backend}
    return StreamingResponse(streamer(), media_type="text/plain; charset=utf-8", headers=headers)
