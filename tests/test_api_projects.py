"""Tests for the /api/v1/projects REST routes."""

from unittest.mock import AsyncMock

import httpx
import pytest

from netcompiler.api.deps import get_runner, get_trainer_client
from netcompiler.errors import ProcessError
from netcompiler.services.train_runner import TrainResult

HEADERS = {"id": "user-1"}


class TestCompileEndpoint:
    async def test_compile(self, client: httpx.AsyncClient, payload):
        resp = await client.post("/api/v1/projects/compile", json=payload, headers=HEADERS)
        assert resp.status_code == 200
        data = resp.json()
        assert data["user_id"] == "user-1"
        assert "x = tf.keras.layers.Input(shape=(28,28,1))\n" in data["model"]
        assert "model = tf.keras.Model(inputs=x, outputs=out)\n" in data["model"]
        assert 'model.model.save("models/user-1/Model")' in data["trainer"]
        assert "fit(" not in data["trainer"]
        assert data["fit"].startswith("model.model.fit(data, label, epochs=5, batch_size=64,")

    async def test_compile_is_deterministic(self, client: httpx.AsyncClient, payload):
        first = await client.post("/api/v1/projects/compile", json=payload, headers=HEADERS)
        second = await client.post("/api/v1/projects/compile", json=payload, headers=HEADERS)
        assert first.json() == second.json()

    async def test_missing_user_header(self, client: httpx.AsyncClient, payload):
        resp = await client.post("/api/v1/projects/compile", json=payload)
        assert resp.status_code == 400
        assert "user id" in resp.json()["detail"]

    async def test_invalid_json(self, client: httpx.AsyncClient):
        resp = await client.post(
            "/api/v1/projects/compile",
            content=b"{not json",
            headers={**HEADERS, "content-type": "application/json"},
        )
        assert resp.status_code == 400

    async def test_unknown_type(self, client: httpx.AsyncClient, payload):
        payload["content"]["layers"][2]["type"] = "Conv3D"
        resp = await client.post("/api/v1/projects/compile", json=payload, headers=HEADERS)
        assert resp.status_code == 400
        assert resp.json()["detail"] == "invalid node type: Conv3D"

    async def test_graph_error(self, client: httpx.AsyncClient, payload):
        payload["content"]["layers"][0]["type"] = "Dense"
        payload["content"]["layers"][0]["param"] = {}
        resp = await client.post("/api/v1/projects/compile", json=payload, headers=HEADERS)
        assert resp.status_code == 422
        assert "Input" in resp.json()["detail"]


class TestSaveEndpoint:
    async def test_save_writes_and_runs(self, app, client: httpx.AsyncClient, payload, store):
        runner = AsyncMock()
        runner.run.return_value = TrainResult(returncode=0, stdout="done", stderr="")
        app.dependency_overrides[get_runner] = lambda: runner

        resp = await client.post("/api/v1/projects/save", json=payload, headers=HEADERS)
        assert resp.status_code == 200
        data = resp.json()
        assert data["status"] == "saved"
        assert data["stdout"] == "done"

        workdirs = list((store.root / "user-1").iterdir())
        assert len(workdirs) == 1
        assert workdirs[0].name == resp.headers["x-request-id"]
        assert (workdirs[0] / "model.py").exists()
        assert (workdirs[0] / "train.py").exists()
        runner.run.assert_awaited_once_with(workdirs[0], "train.py")

    async def test_unknown_type_writes_nothing(self, app, client: httpx.AsyncClient, payload, store):
        runner = AsyncMock()
        app.dependency_overrides[get_runner] = lambda: runner
        payload["content"]["layers"][1]["type"] = "Unknown"

        resp = await client.post("/api/v1/projects/save", json=payload, headers=HEADERS)
        assert resp.status_code == 400
        assert not store.root.exists()
        runner.run.assert_not_awaited()

    async def test_process_failure(self, app, client: httpx.AsyncClient, payload):
        runner = AsyncMock()
        runner.run.side_effect = ProcessError(
            "Training script exited with status 1", returncode=1, stderr="Traceback"
        )
        app.dependency_overrides[get_runner] = lambda: runner

        resp = await client.post("/api/v1/projects/save", json=payload, headers=HEADERS)
        assert resp.status_code == 502
        detail = resp.json()["detail"]
        assert detail["returncode"] == 1
        assert detail["stderr"] == "Traceback"


class TestTrainEndpoint:
    async def test_no_trainer_configured(self, client: httpx.AsyncClient, payload):
        resp = await client.post("/api/v1/projects/train", json=payload, headers=HEADERS)
        assert resp.status_code == 503

    async def test_forwards_train_body(self, app, client: httpx.AsyncClient, payload):
        from netcompiler.services.trainer_client import TrainerClient

        received = {}

        def handler(request: httpx.Request) -> httpx.Response:
            import json

            received.update(json.loads(request.content))
            return httpx.Response(200, json={"job": "abc"})

        trainer = TrainerClient("http://trainer", transport=httpx.MockTransport(handler))
        app.dependency_overrides[get_trainer_client] = lambda: trainer

        resp = await client.post("/api/v1/projects/train", json=payload, headers=HEADERS)
        assert resp.status_code == 202
        assert resp.json()["trainer_response"] == {"job": "abc"}
        assert received["id"] == "user-1"
        assert received["dataset"] == {"name": "mnist"}
        assert "content" not in received
        await trainer.close()

    async def test_trainer_failure(self, app, client: httpx.AsyncClient, payload):
        from netcompiler.services.trainer_client import TrainerClient

        trainer = TrainerClient(
            "http://trainer",
            transport=httpx.MockTransport(lambda request: httpx.Response(500)),
        )
        app.dependency_overrides[get_trainer_client] = lambda: trainer

        resp = await client.post("/api/v1/projects/train", json=payload, headers=HEADERS)
        assert resp.status_code == 502
        await trainer.close()


class TestLayersEndpoint:
    async def test_list_layers(self, client: httpx.AsyncClient):
        resp = await client.get("/api/v1/layers")
        assert resp.status_code == 200
        by_type = {item["type"]: item["params"] for item in resp.json()}
        assert set(by_type) == {
            "Input", "Conv2D", "Dense", "AveragePooling2D", "MaxPool2D",
            "Activation", "Dropout", "BatchNormalization", "Flatten",
        }
        assert by_type["Dropout"] == ["rate", "seed"]

    async def test_namespaces(self, client: httpx.AsyncClient):
        resp = await client.get("/api/v1/layers/namespaces")
        assert resp.json() == {"Layer": "tf.keras.layers", "Math": "tf.math"}
