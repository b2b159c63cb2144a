"""Turn an inbound transport payload into a bound Project."""

import re
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from netcompiler.compiler.modules import DEFAULT_NAMESPACES
from netcompiler.errors import BindError
from netcompiler.schemas.project import Project

_USER_ID_RE = re.compile(r"^[A-Za-z0-9_-]{1,64}$")
REQUIRED_FIELDS = ("config", "content")


def _describe(exc: ValidationError) -> str:
    for err in exc.errors():
        if err["type"] == "union_tag_invalid":
            return f"invalid node type: {err['ctx']['tag']}"
        if err["type"] == "union_tag_not_found":
            return "invalid node type: missing 'type'"
    err = exc.errors()[0]
    loc = ".".join(str(part) for part in err["loc"])
    return f"{loc}: {err['msg']}"


def bind_project(
    payload: Any,
    user_id: str | None,
    namespaces: Mapping[str, str] = DEFAULT_NAMESPACES,
) -> Project:
    if not user_id or not _USER_ID_RE.match(user_id):
        raise BindError("Missing or invalid user id")
    if not isinstance(payload, Mapping):
        raise BindError("Payload must be a JSON object")
    missing = [f for f in REQUIRED_FIELDS if payload.get(f) is None]
    if missing:
        raise BindError(f"Missing field(s): {', '.join(missing)}")

    try:
        project = Project.model_validate(
            {
                "user_id": user_id,
                "config": payload["config"],
                "dataset": payload.get("dataset"),
                "content": payload["content"],
            }
        )
    except ValidationError as exc:
        raise BindError(_describe(exc)) from exc

    for module in project.content.layers:
        if module.category not in namespaces:
            raise BindError(f"Module {module.name!r}: unknown category {module.category!r}")
    return project
