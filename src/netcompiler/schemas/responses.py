from typing import Any

from pydantic import BaseModel


class CompileResponse(BaseModel):
    user_id: str
    model: str
    trainer: str
    fit: str


class SaveResponse(BaseModel):
    status: str
    artifact_dir: str
    returncode: int
    stdout: str
    stderr: str


class TrainSubmitResponse(BaseModel):
    status: str
    user_id: str
    trainer_response: Any = None


class LayerInfo(BaseModel):
    type: str
    params: list[str]
