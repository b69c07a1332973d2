from typing import Callable, Dict, Iterable, Optional

from agnostic_chat.core import config
from agnostic_chat.providers.anthropic import AnthropicChatBackend
from agnostic_chat.providers.base import ChatBackend, ProviderError
from agnostic_chat.providers.fake import FakeChatBackend
from agnostic_chat.providers.openai import OpenAIChatBackend

BackendBuilder = Callable[[], ChatBackend]


def _openai() -> ChatBackend:
    return OpenAIChatBackend(config.openai_config())


def _claude() -> ChatBackend:
    return AnthropicChatBackend(config.anthropic_config())


BUILDERS: Dict[str, BackendBuilder] = {
    "openai": _openai,
    "claude": _claude,
    "anthropic": _claude,
    "fake": FakeChatBackend,
}


def get_backend(name: str) -> ChatBackend:
    builder = BUILDERS.get(name.strip().lower())
    if builder is None:
        raise ProviderError(f"Unknown provider: {name}")
    return builder()


def build_registry(names: Optional[Iterable[str]] = None) -> Dict[str, ChatBackend]:
    # dict keeps insertion order, which is the run order
    registry: Dict[str, ChatBackend] = {}
    for name in config.BACKENDS if names is None else names:
        key = name.strip().lower()
        if key in registry:
            continue
        registry[key] = get_backend(key)
    return registry
