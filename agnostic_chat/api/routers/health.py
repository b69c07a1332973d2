from fastapi import APIRouter, Depends

from agnostic_chat.api.deps import get_harness
from agnostic_chat.services.harness import DispatchHarness

router = APIRouter(tags=["meta"])


@router.get("/health")
def health(harness: DispatchHarness = Depends(get_harness)) -> dict:
    # liveness only; backends are not contacted
    return {"status": "ok", "backends": len(harness.names)}
