"""Shared test fixtures: sample payloads, FastAPI test app, temporary artifact store."""

import copy
from collections.abc import AsyncGenerator

import httpx
import pytest

from netcompiler.services.artifact_store import ArtifactStore

SAMPLE_PAYLOAD = {
    "config": {
        "optimizer": "Adam",
        "learning_rate": 0.001,
        "loss": "categorical_crossentropy",
        "metrics": ["accuracy"],
        "batch_size": 64,
        "epochs": 5,
        "early_stopping": {"usage": False},
        "learning_rate_reduction": {"usage": False},
    },
    "dataset": {"name": "mnist"},
    "content": {
        "input": "x",
        "output": "out",
        "layers": [
            {
                "category": "Layer",
                "type": "Input",
                "name": "x",
                "output": "conv",
                "param": {"shape": "28,28,1"},
            },
            {
                "category": "Layer",
                "type": "Conv2D",
                "name": "conv",
                "input": "x",
                "output": "pool",
                "param": {"filters": 32, "kernel_size": "3,3", "activation": "relu"},
            },
            {
                "category": "Layer",
                "type": "MaxPool2D",
                "name": "pool",
                "input": "conv",
                "output": "flat",
                "param": {"pool_size": [2, 2]},
            },
            {
                "category": "Layer",
                "type": "Flatten",
                "name": "flat",
                "input": "pool",
                "output": "out",
                "param": {},
            },
            {
                "category": "Layer",
                "type": "Dense",
                "name": "out",
                "input": "flat",
                "param": {"units": "10", "activation": "softmax"},
            },
        ],
    },
}


@pytest.fixture
def payload() -> dict:
    """A fresh copy of the sample payload, safe to mutate."""
    return copy.deepcopy(SAMPLE_PAYLOAD)


@pytest.fixture
def store(tmp_path) -> ArtifactStore:
    return ArtifactStore(tmp_path / "artifacts")


@pytest.fixture
async def app(store: ArtifactStore):
    """FastAPI app with the artifact store pointed at a temp directory."""
    from netcompiler.api.app import create_app
    from netcompiler.api.deps import get_store

    test_app = create_app()
    test_app.dependency_overrides[get_store] = lambda: store
    return test_app


@pytest.fixture
async def client(app) -> AsyncGenerator[httpx.AsyncClient, None]:
    """Async HTTP client for the test FastAPI app."""
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
