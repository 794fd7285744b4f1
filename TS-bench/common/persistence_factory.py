"""
Factory module for creating result persistence instances.
"""

import logging
from datetime import datetime
from typing import Callable

from prometheus_client import CollectorRegistry

from persistence.base import TestDataPersistence, NoPersistence
from persistence.parquet import CsvPersistence, ParquetPersistence
from persistence.prom import PrometheusPersistence, create_result_gauge
from configuration import (
    TEST_DATA_PERSISTENCE,
    RESULT_OUTPUT_DIR,
    PUSHGATEWAY_ADDRESS,
    PROMETHEUS_JOB_NAME,
)

logger = logging.getLogger(__name__)

PERSISTENCE_KINDS = ('none', 'csv', 'parquet', 'prometheus')


def _new_run_id() -> str:
    return f"result_{datetime.now().strftime('%Y%m%d_%H%M%S')}"


def _check_kind(kind: str) -> str:
    kind = (kind or TEST_DATA_PERSISTENCE).lower()
    if kind not in PERSISTENCE_KINDS:
        raise ValueError(f"Unsupported persistence type: {kind}. Must be one of {', '.join(PERSISTENCE_KINDS)}.")
    return kind


def create_persistence(kind: str = None, output_dir: str = None, run_id: str = None,
                       gateway: str = None) -> TestDataPersistence:
    """Create and return the appropriate persistence sink based on kind.

    Args:
        kind: Sink kind ('none', 'csv', 'parquet' or 'prometheus'; default: from configuration)
        output_dir: Directory for file sinks (default: from configuration)
        run_id: File name stem for file sinks (default: timestamp)
        gateway: Pushgateway address for the Prometheus sink (default: from configuration)

    Returns:
        Persistence sink instance

    Raises:
        ValueError: If kind is not supported
    """
    kind = _check_kind(kind)

    if kind == 'none':
        return NoPersistence()
    elif kind == 'prometheus':
        return PrometheusPersistence(gateway or PUSHGATEWAY_ADDRESS or None, job=PROMETHEUS_JOB_NAME)

    output_dir = output_dir or RESULT_OUTPUT_DIR
    run_id = run_id or _new_run_id()
    if kind == 'csv':
        return CsvPersistence(output_dir, run_id)
    return ParquetPersistence(output_dir, run_id)


def persistence_factory(kind: str = None, output_dir: str = None,
                        gateway: str = None) -> Callable[[], TestDataPersistence]:
    """Return a zero-argument factory for the sinks of one run.

    Every reporting pass opens a fresh sink. File sinks of the same run append
    to the same file and Prometheus sinks share one registry.
    """
    kind = _check_kind(kind)
    run_id = _new_run_id()
    logger.info(f"Result persistence: {kind} (run {run_id})")

    if kind == 'prometheus':
        registry = CollectorRegistry()
        gauge = create_result_gauge(registry)
        gateway = gateway or PUSHGATEWAY_ADDRESS or None

        def factory() -> TestDataPersistence:
            return PrometheusPersistence(gateway, job=PROMETHEUS_JOB_NAME,
                                         registry=registry, gauge=gauge)
        return factory

    def factory() -> TestDataPersistence:
        return create_persistence(kind, output_dir=output_dir, run_id=run_id, gateway=gateway)

    return factory
