"""Prometheus metrics for Issue Router runs."""

from typing import Optional

import structlog
from prometheus_client import CollectorRegistry, Counter, Histogram, push_to_gateway

logger = structlog.get_logger()


class PipelineMetrics:
    """Prometheus metrics for one command run.

    Each instance owns its registry so that several runs in one process
    (tests, notebooks) do not collide in the global registry.
    """

    def __init__(self, registry: Optional[CollectorRegistry] = None):
        self.registry = registry if registry is not None else CollectorRegistry()
        self.runs_total = Counter(
            'issue_router_runs_total',
            'Total command runs',
            ['command', 'status'],
            registry=self.registry,
        )
        self.duration_seconds = Histogram(
            'issue_router_run_duration_seconds',
            'Command run duration',
            ['command'],
            registry=self.registry,
        )
        self.issues_fetched_total = Counter(
            'issue_router_issues_fetched_total',
            'Issues written by the fetcher',
            registry=self.registry,
        )
        self.chunks_indexed_total = Counter(
            'issue_router_chunks_indexed_total',
            'Chunks upserted into the vector store',
            registry=self.registry,
        )
        self.predictions_total = Counter(
            'issue_router_predictions_total',
            'Label predictions made',
            ['predictor'],
            registry=self.registry,
        )
        self.mismatches_total = Counter(
            'issue_router_experiment_mismatches_total',
            'Experiment records whose predicted labels differ from ground truth',
            registry=self.registry,
        )
        self.errors_total = Counter(
            'issue_router_errors_total',
            'Command failures',
            ['command', 'error_type'],
            registry=self.registry,
        )

    def record_run_success(self, command: str, duration: float):
        """Record successful run."""
        self.runs_total.labels(command=command, status="success").inc()
        self.duration_seconds.labels(command=command).observe(duration)

    def record_run_failure(self, command: str, error_type: str):
        """Record failed run."""
        self.runs_total.labels(command=command, status="error").inc()
        self.errors_total.labels(command=command, error_type=error_type).inc()

    def record_issues_fetched(self, count: int):
        self.issues_fetched_total.inc(count)

    def record_chunks_indexed(self, count: int):
        self.chunks_indexed_total.inc(count)

    def record_prediction(self, predictor: str):
        self.predictions_total.labels(predictor=predictor).inc()

    def record_mismatches(self, count: int):
        self.mismatches_total.inc(count)

    def push(self, gateway_url: str, job: str):
        """Push metrics to a Prometheus push gateway if one is configured."""
        if not gateway_url:
            return
        try:
            push_to_gateway(gateway_url, job=job, registry=self.registry)
            logger.debug("Metrics pushed to gateway", gateway_url=gateway_url)
        except Exception as e:
            logger.warning("Failed to push metrics", error=str(e))
