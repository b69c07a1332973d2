from fastapi import Request

from agnostic_chat.services.harness import DispatchHarness


def get_harness(request: Request) -> DispatchHarness:
    return request.app.state.harness
