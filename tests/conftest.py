# tests/conftest.py
import os
import logging
import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

# Ensure test-friendly env: no real keys, fixed defaults
os.environ["OPENAI_API_KEY"] = ""
os.environ["ANTHROPIC_API_KEY"] = ""
os.environ.setdefault("BACKENDS", "openai,claude")

# IMPORTANT: import the app after envs are set
from agnostic_chat.main import create_app
from agnostic_chat.providers.fake import FakeChatBackend
from agnostic_chat.services.harness import DispatchHarness


@pytest.fixture
def fake_registry():
    return {
        "alpha": FakeChatBackend(["alpha says hi"], model="fake-alpha"),
        "beta": FakeChatBackend(model="fake-beta"),
    }


@pytest.fixture
def harness(fake_registry):
    return DispatchHarness(fake_registry)


@pytest_asyncio.fixture
async def app(fake_registry):
    return create_app(fake_registry)


@pytest_asyncio.fixture
async def client(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def caplog_info(caplog):
    caplog.set_level(logging.INFO)
    return caplog


@pytest.fixture
def caplog_debug(caplog):
    caplog.set_level(logging.DEBUG)
    return caplog
