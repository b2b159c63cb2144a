"""Request-scoped collaborators built from settings."""

from collections.abc import AsyncGenerator

from netcompiler.compiler.graph import LayerGraphResolver, UnreachablePolicy
from netcompiler.compiler.modules import DEFAULT_NAMESPACES, ModuleCompiler
from netcompiler.compiler.project import ProjectCompiler
from netcompiler.compiler.training import ConfigCompiler
from netcompiler.config import settings
from netcompiler.services.artifact_store import ArtifactStore
from netcompiler.services.train_runner import TrainRunner
from netcompiler.services.trainer_client import TrainerClient


def get_compiler() -> ProjectCompiler:
    return ProjectCompiler(
        module_compiler=ModuleCompiler(DEFAULT_NAMESPACES),
        config_compiler=ConfigCompiler(
            monitor_root=settings.monitor_root,
            monitor_path=settings.monitor_path,
            validation_split=settings.validation_split,
        ),
        resolver=LayerGraphResolver(UnreachablePolicy(settings.unreachable_policy)),
        model_artifact=settings.model_artifact,
        trainer_artifact=settings.trainer_artifact,
        model_root=settings.model_root,
    )


def get_store() -> ArtifactStore:
    return ArtifactStore(settings.artifact_root)


def get_runner() -> TrainRunner:
    return TrainRunner(settings.python_executable, settings.train_timeout_seconds)


async def get_trainer_client() -> AsyncGenerator[TrainerClient | None, None]:
    if not settings.trainer_url:
        yield None
        return
    client = TrainerClient(settings.trainer_url, timeout=settings.trainer_timeout_seconds)
    try:
        yield client
    finally:
        await client.close()
