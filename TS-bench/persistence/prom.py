"""
Prometheus persistence for benchmark results.
"""

import logging
from typing import Optional

from prometheus_client import CollectorRegistry, Gauge, push_to_gateway

from persistence.base import TestDataPersistence

logger = logging.getLogger(__name__)


def create_result_gauge(registry: CollectorRegistry) -> Gauge:
    """Register the result gauge on a registry."""
    return Gauge('tsbench_result', 'Benchmark result value',
                 ['category', 'metric'], registry=registry)


class PrometheusPersistence(TestDataPersistence):
    """Exposes results as a labelled gauge and optionally pushes them.

    Sinks of one run should share a registry and gauge so each push carries
    the results of every earlier reporting pass as well.
    """

    def __init__(self, gateway: Optional[str] = None, job: str = "tsbench",
                 registry: Optional[CollectorRegistry] = None, gauge: Optional[Gauge] = None):
        if gauge is not None and registry is None:
            raise ValueError("A gauge must be passed together with the registry it is registered in")
        super().__init__()
        self.gateway = gateway
        self.job = job
        self.registry = registry if registry is not None else CollectorRegistry()
        self.result = gauge if gauge is not None else create_result_gauge(self.registry)

    def _save(self, category: str, metric: str, value: str) -> None:
        try:
            numeric = float(value)
        except ValueError:
            logger.warning(f"Skipping non-numeric result {category}/{metric}: {value!r}")
            return
        self.result.labels(category=category, metric=metric).set(numeric)

    def _close(self) -> None:
        if not self.gateway:
            return
        try:
            push_to_gateway(self.gateway, job=self.job, registry=self.registry)
            logger.info(f"Pushed results to Pushgateway at {self.gateway}")
        except Exception as e:
            logger.error(f"Failed to push results to {self.gateway}: {e}")
