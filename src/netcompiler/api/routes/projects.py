import asyncio

import httpx
import structlog
from fastapi import APIRouter, Depends, Header, HTTPException, Request

from netcompiler.api.deps import get_compiler, get_runner, get_store, get_trainer_client
from netcompiler.compiler.project import Artifacts, ProjectCompiler, render
from netcompiler.errors import (
    BindError,
    GraphError,
    PersistenceError,
    ProcessError,
    UnsupportedTypeError,
)
from netcompiler.schemas.project import Project
from netcompiler.schemas.responses import CompileResponse, SaveResponse, TrainSubmitResponse
from netcompiler.services.artifact_store import ArtifactStore
from netcompiler.services.binder import bind_project
from netcompiler.services.train_runner import TrainRunner
from netcompiler.services.trainer_client import TrainerClient

logger = structlog.get_logger()

router = APIRouter(prefix="/api/v1/projects", tags=["projects"])


async def _bind(request: Request, user_id: str | None) -> Project:
    try:
        payload = await request.json()
    except ValueError:
        raise HTTPException(status_code=400, detail="Request body is not valid JSON")
    try:
        return bind_project(payload, user_id)
    except BindError as exc:
        raise HTTPException(status_code=400, detail=str(exc))


def _compile(compiler: ProjectCompiler, project: Project) -> Artifacts:
    try:
        return compiler.compile_project(project)
    except (GraphError, UnsupportedTypeError) as exc:
        raise HTTPException(status_code=422, detail=str(exc))


@router.post("/compile", response_model=CompileResponse)
async def compile_project(
    request: Request,
    user_id: str | None = Header(None, alias="id"),
    compiler: ProjectCompiler = Depends(get_compiler),
):
    project = await _bind(request, user_id)
    artifacts = _compile(compiler, project)
    return CompileResponse(
        user_id=project.user_id,
        model=render(artifacts.model),
        trainer=render(artifacts.trainer),
        fit=artifacts.fit,
    )


@router.post("/save", response_model=SaveResponse)
async def save_project(
    request: Request,
    user_id: str | None = Header(None, alias="id"),
    compiler: ProjectCompiler = Depends(get_compiler),
    store: ArtifactStore = Depends(get_store),
    runner: TrainRunner = Depends(get_runner),
):
    project = await _bind(request, user_id)
    artifacts = _compile(compiler, project)

    try:
        workdir = await asyncio.to_thread(
            store.write, project.user_id, artifacts, getattr(request.state, "request_id", None)
        )
    except PersistenceError as exc:
        logger.error("artifact_write_failed", error=str(exc))
        raise HTTPException(status_code=500, detail=str(exc))

    try:
        result = await runner.run(workdir, artifacts.trainer_name)
    except ProcessError as exc:
        logger.warning("train_process_failed", error=str(exc), returncode=exc.returncode)
        raise HTTPException(
            status_code=502,
            detail={
                "reason": str(exc),
                "artifact_dir": str(workdir),
                "returncode": exc.returncode,
                "stderr": exc.stderr,
            },
        )

    logger.info("model_saved", user_id=project.user_id, artifact_dir=str(workdir))
    return SaveResponse(
        status="saved",
        artifact_dir=str(workdir),
        returncode=result.returncode,
        stdout=result.stdout,
        stderr=result.stderr,
    )


@router.post("/train", response_model=TrainSubmitResponse, status_code=202)
async def submit_training(
    request: Request,
    user_id: str | None = Header(None, alias="id"),
    client: TrainerClient | None = Depends(get_trainer_client),
):
    project = await _bind(request, user_id)
    if client is None:
        raise HTTPException(status_code=503, detail="No remote trainer configured")

    try:
        trainer_response = await client.submit(project.train_body())
    except httpx.HTTPError as exc:
        logger.warning("trainer_submit_failed", error=str(exc))
        raise HTTPException(status_code=502, detail=f"Remote trainer failed: {exc}")

    return TrainSubmitResponse(
        status="submitted",
        user_id=project.user_id,
        trainer_response=trainer_response,
    )
