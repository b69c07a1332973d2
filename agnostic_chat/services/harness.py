import logging
import sys
from types import MappingProxyType
from typing import Awaitable, Callable, List, Mapping, Optional, TextIO

from agnostic_chat.providers.base import ChatBackend

logger = logging.getLogger(__name__)

Operation = Callable[[ChatBackend], Awaitable[None]]

BANNER_WIDTH = 80


class BackendNotFoundError(KeyError):
    pass


class DispatchHarness:
    """
    Runs one operation against one named backend, or against every backend
    in registration order. A failing backend is logged and skipped; it never
    stops the backends after it.

    There is no timeout here: a backend call that hangs blocks the harness.
    """

    def __init__(self, registry: Mapping[str, ChatBackend], *, out: Optional[TextIO] = None) -> None:
        # read-only copy; the registry does not change during a run
        self._registry: Mapping[str, ChatBackend] = MappingProxyType(dict(registry))
        self._out = out

    @property
    def registry(self) -> Mapping[str, ChatBackend]:
        return self._registry

    @property
    def names(self) -> List[str]:
        return list(self._registry)

    def get(self, name: str) -> ChatBackend:
        try:
            return self._registry[name]
        except KeyError:
            raise BackendNotFoundError(name) from None

    def _banner(self, name: str) -> None:
        out = self._out or sys.stdout
        print(f"\n{'=' * BANNER_WIDTH}", file=out)
        print(f"Running with: {name.upper()}", file=out)
        print("=" * BANNER_WIDTH, file=out, flush=True)

    async def run_one(self, name: str, operation: Operation) -> bool:
        backend = self._registry.get(name)
        if backend is None:
            logger.error("Backend %s not found", name)
            return False

        self._banner(name)
        try:
            await operation(backend)
        except Exception as e:
            logger.exception("Error with %s: %s", name, e)
            return False
        return True

    async def run_all(self, operation: Operation) -> List[str]:
        failed: List[str] = []
        for name in self._registry:
            if not await self.run_one(name, operation):
                failed.append(name)
        return failed
