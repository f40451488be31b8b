"""
Offline interception cache - Main Entry Point

Builds the worker from environment configuration, runs installation
(pre-population of the static partition) and the activation it
triggers (reclamation of old generations), then reports health.
"""
import asyncio
import os
import sys

from pydantic import ValidationError

from src.config import WorkerSettings
from src.utils.logger import get_logger, setup_logging
from src.worker import create_worker

# Initialize logger (will be reconfigured in main())
logger = get_logger(__name__)

WORKER_VERSION = "1.0.0"


async def main() -> int:
    """
    Main entry point.

    Initializes:
        1. Structured logging
        2. Worker settings from the environment
        3. Storage backend, network client and worker components
        4. Install + activate lifecycle

    Returns:
        Process exit code (0 healthy or degraded, 1 otherwise)
    """
    log_level = os.getenv("LOG_LEVEL", "INFO")
    setup_logging(level=log_level)

    logger.info(
        "worker_starting",
        version=WORKER_VERSION,
        environment=os.getenv("ENVIRONMENT", "production"),
        log_level=log_level,
    )

    try:
        settings = WorkerSettings.from_env()
    except ValidationError as e:
        logger.error("invalid_configuration", errors=e.errors())
        return 1

    worker = create_worker(settings)

    try:
        cached = await worker.install()
        health = await worker.health()

        logger.info(
            "worker_ready",
            precached=len(cached),
            reclaimed=worker.lifecycle.reclaimed,
            **health.model_dump(),
        )
        return 0 if health.status != "unhealthy" else 1

    except Exception as e:
        logger.error(
            "worker_error",
            error=str(e),
            exc_info=True,
        )
        raise
    finally:
        await worker.close()
        logger.info("worker_shutdown_complete")


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
