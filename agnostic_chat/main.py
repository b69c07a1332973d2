# agnostic_chat/main.py
from typing import Mapping, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from agnostic_chat.api.routers.backends import router as backends_router
from agnostic_chat.api.routers.chat import router as chat_router
from agnostic_chat.api.routers.health import router as health_router
from agnostic_chat.providers.base import ChatBackend
from agnostic_chat.providers.factory import build_registry
from agnostic_chat.services.harness import DispatchHarness


def create_app(registry: Optional[Mapping[str, ChatBackend]] = None) -> FastAPI:
    app = FastAPI(title="Model-Agnostic Chat", version="0.1.0")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # one registry per app, built at startup and read-only afterwards;
    # routers reach it through Depends(get_harness)
    app.state.harness = DispatchHarness(build_registry() if registry is None else registry)

    app.include_router(health_router)
    app.include_router(backends_router)
    app.include_router(chat_router)

    return app


app = create_app()
