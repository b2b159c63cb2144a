import asyncio
import time

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from netcompiler.api.deps import get_store
from netcompiler.services.artifact_store import ArtifactStore

router = APIRouter()


async def _check_artifact_root(store: ArtifactStore) -> dict:
    start = time.perf_counter()
    if not await asyncio.to_thread(store.is_writable):
        return {"status": "error", "error": f"{store.root} is not writable"}
    return {"status": "ok", "latency_ms": round((time.perf_counter() - start) * 1000, 1)}


@router.get("/health")
async def health(store: ArtifactStore = Depends(get_store)):
    artifacts = await _check_artifact_root(store)
    overall = "ok" if artifacts["status"] == "ok" else "degraded"
    return JSONResponse(
        status_code=200 if overall == "ok" else 503,
        content={"status": overall, "dependencies": {"artifact_root": artifacts}},
    )
