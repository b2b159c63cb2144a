from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI

from netcompiler.api.middleware import RequestLoggingMiddleware
from netcompiler.api.routes import health, layers, metrics, projects
from netcompiler.config import settings

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("FastAPI starting up", artifact_root=settings.artifact_root)
    yield
    logger.info("FastAPI shut down")


def create_app() -> FastAPI:
    app = FastAPI(
        title="netcompiler",
        version="0.1.0",
        description="Compile layer graphs into TensorFlow training scripts",
        lifespan=lifespan,
    )
    app.add_middleware(RequestLoggingMiddleware)

    if settings.api_key:
        from netcompiler.api.middleware import ApiKeyMiddleware

        app.add_middleware(ApiKeyMiddleware, api_key=settings.api_key)

    app.include_router(health.router)
    app.include_router(metrics.router)
    app.include_router(layers.router)
    app.include_router(projects.router)

    return app
