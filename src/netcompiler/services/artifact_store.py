"""Write generated scripts under a per-user, per-request directory."""

import uuid
from pathlib import Path

import structlog

from netcompiler.compiler.project import Artifacts
from netcompiler.errors import PersistenceError

logger = structlog.get_logger()


class ArtifactStore:
    def __init__(self, root: str | Path) -> None:
        self.root = Path(root)

    def workdir(self, user_id: str, request_id: str | None = None) -> Path:
        return self.root / user_id / (request_id or uuid.uuid4().hex)

    def write(self, user_id: str, artifacts: Artifacts, request_id: str | None = None) -> Path:
        target = self.workdir(user_id, request_id)
        try:
            target.mkdir(parents=True, exist_ok=False)
            for name, text in artifacts.files().items():
                (target / name).write_text(text, encoding="utf-8")
        except OSError as exc:
            raise PersistenceError(f"Could not write artifacts to {target}: {exc}") from exc

        logger.info("artifacts_written", user_id=user_id, path=str(target))
        return target

    def is_writable(self) -> bool:
        try:
            self.root.mkdir(parents=True, exist_ok=True)
            marker = self.root / f".writable-{uuid.uuid4().hex}"
            marker.touch()
            marker.unlink()
        except OSError:
            return False
        return True
