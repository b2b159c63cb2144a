import time
from dataclasses import dataclass, field
from pathlib import PurePosixPath

import structlog

from netcompiler.compiler.graph import LayerGraphResolver, UnreachablePolicy
from netcompiler.compiler.modules import DEFAULT_NAMESPACES, MODEL_VAR, ModuleCompiler
from netcompiler.compiler.training import ConfigCompiler
from netcompiler.errors import CompilerError, GraphError
from netcompiler.observability.metrics import (
    COMPILATIONS_TOTAL,
    COMPILE_DURATION,
    MODULES_EMITTED_TOTAL,
)
from netcompiler.schemas.project import Config, Content, Project

logger = structlog.get_logger()

IMPORTS = ["import tensorflow as tf", "import tensorflow_addons as tfa"]


def render(statements: list[str]) -> str:
    return "\n".join(statements) + "\n"


@dataclass(frozen=True)
class Artifacts:
    model_name: str
    model: list[str] = field(default_factory=list)
    trainer_name: str = "train.py"
    trainer: list[str] = field(default_factory=list)
    # fit() for a runner that binds data and label itself; not written to disk
    fit: str = ""

    def files(self) -> dict[str, str]:
        return {self.model_name: render(self.model), self.trainer_name: render(self.trainer)}


class ProjectCompiler:
    def __init__(
        self,
        module_compiler: ModuleCompiler | None = None,
        config_compiler: ConfigCompiler | None = None,
        resolver: LayerGraphResolver | None = None,
        model_artifact: str = "model.py",
        trainer_artifact: str = "train.py",
        model_root: str = "models",
    ) -> None:
        self.module_compiler = module_compiler or ModuleCompiler(DEFAULT_NAMESPACES)
        self.config_compiler = config_compiler or ConfigCompiler()
        self.resolver = resolver or LayerGraphResolver(UnreachablePolicy.WARN)
        self.model_artifact = model_artifact
        self.trainer_artifact = trainer_artifact
        self.model_root = model_root

    @property
    def model_module(self) -> str:
        return PurePosixPath(self.model_artifact).stem

    def compile_model(self, content: Content, config: Config) -> list[str]:
        ordered = self.resolver.order(content.layers)

        emitted = {m.name for m in ordered}
        for role, name in (("input", content.input), ("output", content.output)):
            if name not in emitted:
                raise GraphError(f"Graph {role} {name!r} does not name an emitted module")

        statements = list(IMPORTS)
        statements.extend(self.module_compiler.emit(m) for m in ordered)
        statements.append(self.module_compiler.emit_model(content))
        statements.extend(self.config_compiler.emit(config, model=MODEL_VAR))
        MODULES_EMITTED_TOTAL.inc(len(ordered))
        return statements

    def compile_trainer(self, user_id: str) -> list[str]:
        module = self.model_module
        save_path = PurePosixPath(self.model_root) / user_id / "Model"
        return [
            *IMPORTS,
            f"import {module}",
            f'{module}.{MODEL_VAR}.save("{save_path}")',
        ]

    def compile_fit(self, config: Config) -> str:
        """fit() against the imported model artifact, callbacks qualified by its module."""
        module = self.model_module
        return self.config_compiler.emit_fit(
            config, model=f"{module}.{MODEL_VAR}", scope=f"{module}."
        )

    def compile_project(self, project: Project) -> Artifacts:
        start = time.perf_counter()
        try:
            artifacts = Artifacts(
                model_name=self.model_artifact,
                model=self.compile_model(project.content, project.config),
                trainer_name=self.trainer_artifact,
                trainer=self.compile_trainer(project.user_id),
                fit=self.compile_fit(project.config),
            )
        except CompilerError as exc:
            COMPILATIONS_TOTAL.labels(result="error").inc()
            logger.info("project_compile_failed", user_id=project.user_id, error=str(exc))
            raise
        COMPILATIONS_TOTAL.labels(result="ok").inc()
        COMPILE_DURATION.observe(time.perf_counter() - start)
        logger.info(
            "project_compiled",
            user_id=project.user_id,
            modules=len(project.content.layers),
            statements=len(artifacts.model),
        )
        return artifacts
