import logging

import structlog
import uvicorn

from netcompiler.config import settings


def configure_logging(level: str = settings.log_level, fmt: str = settings.log_format) -> None:
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer() if fmt == "console" else structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, level.upper(), logging.INFO)
        ),
    )


def main() -> None:
    configure_logging()
    logger = structlog.get_logger()
    logger.info(
        "netcompiler_starting",
        api_port=settings.api_port,
        artifact_root=settings.artifact_root,
        unreachable_policy=settings.unreachable_policy,
    )

    from netcompiler.api.app import create_app

    uvicorn.run(
        create_app(),
        host=settings.api_host,
        port=settings.api_port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
