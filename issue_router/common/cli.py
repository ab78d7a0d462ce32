"""Shared command runner for the Issue Router entry points.

Every command follows the same lifecycle: configure logging, load and log
settings, run the job, record metrics, and map the outcome to an exit code.
Any exception escaping the job is logged with its traceback and turns into
exit status 1.
"""

import asyncio
import inspect
import time
from typing import Any, Callable

import structlog
from pydantic import ValidationError

from issue_router.common.config import IssueRouterSettings, get_settings
from issue_router.common.logging import configure_logging
from issue_router.common.metrics import PipelineMetrics

logger = structlog.get_logger()

Job = Callable[[IssueRouterSettings, PipelineMetrics], Any]


def execute(command: str, job: Job) -> int:
    """Run one command job and return the process exit code.

    Args:
        command: Short command name used in logs and metric labels.
        job: Callable receiving the settings and metrics. It may be a plain
            function or a coroutine function; coroutines run under
            ``asyncio.run``.

    Returns:
        0 on success, 1 on any failure.
    """
    configure_logging()

    try:
        settings = get_settings()
    except ValidationError as e:
        logger.error("Invalid configuration", command=command, error=str(e))
        return 1

    configure_logging(settings.log_level, settings.log_format)
    settings.log_summary()

    metrics = PipelineMetrics()
    start_time = time.time()
    job_name = f"issue-router-{command}"

    try:
        logger.info("Starting command", command=command)
        outcome = job(settings, metrics)
        if inspect.iscoroutine(outcome):
            asyncio.run(outcome)
    except Exception as e:
        metrics.record_run_failure(command, type(e).__name__)
        logger.error("Command failed", command=command, error=str(e), exc_info=True)
        metrics.push(settings.prometheus_gateway_url, job=job_name)
        return 1

    execution_time = time.time() - start_time
    metrics.record_run_success(command, execution_time)
    metrics.push(settings.prometheus_gateway_url, job=job_name)
    logger.info("Command completed", command=command, execution_time=execution_time)
    return 0
