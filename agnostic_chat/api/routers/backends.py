from fastapi import APIRouter, Depends

from agnostic_chat.api.deps import get_harness
from agnostic_chat.schemas.chat import BackendInfo
from agnostic_chat.services.harness import DispatchHarness

router = APIRouter(tags=["backends"])


@router.get("/backends")
def list_backends(harness: DispatchHarness = Depends(get_harness)) -> dict:
    # registry order
    return {
        "backends": [
            BackendInfo(name=name, provider=backend.provider, model=backend.model).model_dump()
            for name, backend in harness.registry.items()
        ]
    }
