"""Run a generated training script as a subprocess."""

import asyncio
import time
from dataclasses import dataclass
from pathlib import Path

import structlog

from netcompiler.errors import ProcessError
from netcompiler.observability.metrics import TRAIN_RUN_DURATION, TRAIN_RUNS_TOTAL

logger = structlog.get_logger()


@dataclass(frozen=True)
class TrainResult:
    returncode: int
    stdout: str
    stderr: str


class TrainRunner:
    def __init__(self, python: str = "python", timeout_seconds: float = 3600) -> None:
        self.python = python
        self.timeout_seconds = timeout_seconds

    async def run(self, workdir: Path, script: str = "train.py") -> TrainResult:
        logger.info("train_process_starting", workdir=str(workdir), script=script)
        start = time.perf_counter()
        try:
            proc = await asyncio.create_subprocess_exec(
                self.python,
                script,
                cwd=workdir,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as exc:
            TRAIN_RUNS_TOTAL.labels(status="error").inc()
            raise ProcessError(f"Could not start {self.python!r}: {exc}") from exc

        try:
            stdout, stderr = await asyncio.wait_for(proc.communicate(), self.timeout_seconds)
        except asyncio.TimeoutError:
            proc.kill()
            await proc.wait()
            TRAIN_RUNS_TOTAL.labels(status="timeout").inc()
            raise ProcessError(
                f"Training script timed out after {self.timeout_seconds}s"
            ) from None

        duration = time.perf_counter() - start
        TRAIN_RUN_DURATION.observe(duration)
        result = TrainResult(
            returncode=proc.returncode,
            stdout=stdout.decode(errors="replace"),
            stderr=stderr.decode(errors="replace"),
        )
        logger.info(
            "train_process_finished",
            workdir=str(workdir),
            returncode=result.returncode,
            duration_s=round(duration, 2),
        )

        if result.returncode != 0:
            TRAIN_RUNS_TOTAL.labels(status="failed").inc()
            raise ProcessError(
                f"Training script exited with status {result.returncode}",
                returncode=result.returncode,
                stdout=result.stdout,
                stderr=result.stderr,
            )
        TRAIN_RUNS_TOTAL.labels(status="ok").inc()
        return result
