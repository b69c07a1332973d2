# centralized configuration loader
# runs load_dotenv() to read .env
# credentials are read here once and handed to each backend as a BackendConfig value

import os
from typing import List

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict

load_dotenv()


def _as_list(value: str) -> List[str]:
    return [item.strip().lower() for item in value.split(",") if item.strip()]


# Registry (insertion order is run order)
BACKENDS = _as_list(os.getenv("BACKENDS", "openai,claude"))

# OpenAI
OPENAI_API_KEY = os.getenv("OPENAI_API_KEY", "").strip()
OPENAI_MODEL = os.getenv("OPENAI_MODEL", "gpt-4o-mini").strip()
OPENAI_BASE_URL = os.getenv("OPENAI_BASE_URL", "https://api.openai.com/v1").rstrip("/")

# Anthropic
ANTHROPIC_API_KEY = os.getenv("ANTHROPIC_API_KEY", "").strip()
ANTHROPIC_MODEL = os.getenv("ANTHROPIC_MODEL", "claude-haiku-4-5-20251001").strip()
ANTHROPIC_BASE_URL = os.getenv("ANTHROPIC_BASE_URL", "https://api.anthropic.com/v1").rstrip("/")
ANTHROPIC_VERSION = os.getenv("ANTHROPIC_VERSION", "2023-06-01")

# Generation caps
TEMPERATURE = float(os.getenv("TEMPERATURE", "0.7"))
MAX_TOKENS = int(os.getenv("MAX_TOKENS", "1024"))

# Timeouts (seconds)
REQUEST_TIMEOUT = float(os.getenv("REQUEST_TIMEOUT", "60"))
STREAM_TIMEOUT = float(os.getenv("STREAM_TIMEOUT", "120"))
CONNECT_TIMEOUT = float(os.getenv("CONNECT_TIMEOUT", "10"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()


class BackendConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    api_key: str
    model: str
    base_url: str
    # caps default to the env values read above
    temperature: float = TEMPERATURE
    max_tokens: int = MAX_TOKENS
    request_timeout: float = REQUEST_TIMEOUT
    stream_timeout: float = STREAM_TIMEOUT
    connect_timeout: float = CONNECT_TIMEOUT
    api_version: str = ""


def openai_config() -> BackendConfig:
    return BackendConfig(
        api_key=OPENAI_API_KEY,
        model=OPENAI_MODEL,
        base_url=OPENAI_BASE_URL,
    )


def anthropic_config() -> BackendConfig:
    return BackendConfig(
        api_key=ANTHROPIC_API_KEY,
        model=ANTHROPIC_MODEL,
        base_url=ANTHROPIC_BASE_URL,
        api_version=ANTHROPIC_VERSION,
    )
