from fastapi import APIRouter

from netcompiler.compiler.modules import DEFAULT_NAMESPACES
from netcompiler.schemas.params import PARAM_TYPES
from netcompiler.schemas.responses import LayerInfo

router = APIRouter(prefix="/api/v1/layers", tags=["layers"])


@router.get("", response_model=list[LayerInfo])
async def list_layers():
    return [
        LayerInfo(type=layer_type, params=list(param_type.model_fields))
        for layer_type, param_type in PARAM_TYPES.items()
    ]


@router.get("/namespaces")
async def list_namespaces() -> dict[str, str]:
    return dict(DEFAULT_NAMESPACES)
