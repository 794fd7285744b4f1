"""
Thread coordinator: one Measurement per worker thread, merged after the run.
"""

import time
import logging
from concurrent.futures import ThreadPoolExecutor, wait
from typing import Callable, List, Optional, Tuple

from configuration import CLIENT_NUMBER
from measurement.measurement import Measurement
from measurement.statistics import LatencyStatistics, calculate_metrics

logger = logging.getLogger(__name__)

# Worker callable: receives its client index and its own Measurement
Worker = Callable[[int, Measurement], None]


class MeasurementCoordinator:
    """Runs a workload on several threads and summarizes what they recorded.

    Each thread records into a Measurement nobody else touches, so the
    collection phase needs no locking. Merging and statistic derivation
    happen on the calling thread after every worker has finished.
    """

    def __init__(self, client_number: int = None):
        """Initialize the coordinator.

        Args:
            client_number: Number of worker threads (default: from configuration)
        """
        self.client_number = CLIENT_NUMBER if client_number is None else client_number
        if self.client_number <= 0:
            raise ValueError(f"client_number must be positive, got {self.client_number}")
        self.measurements: List[Measurement] = []

        logger.info(f"Initialized MeasurementCoordinator with {self.client_number} clients")

    def run(
        self,
        worker: Worker,
        create_schema_time: Optional[float] = None,
    ) -> Tuple[Measurement, LatencyStatistics]:
        """Run `worker` on every client thread, then merge and derive statistics.

        Args:
            worker: Callable receiving (client_index, measurement)
            create_schema_time: Schema creation time to attach to the result

        Returns:
            The merged Measurement and its LatencyStatistics

        Raises:
            Exception: The first worker exception, once all workers have finished
        """
        self.measurements = [Measurement() for _ in range(self.client_number)]

        start_time = time.perf_counter()
        with ThreadPoolExecutor(max_workers=self.client_number,
                                thread_name_prefix="client") as executor:
            futures = [
                executor.submit(worker, index, measurement)
                for index, measurement in enumerate(self.measurements)
            ]
            wait(futures)
        elapsed = time.perf_counter() - start_time

        errors = [future.exception() for future in futures if future.exception() is not None]
        for error in errors:
            logger.error(f"Client failed: {error}", exc_info=error)
        if errors:
            raise errors[0]

        logger.info(f"All {self.client_number} clients finished in {elapsed:.2f}s, merging results")
        return self.summarize(elapsed, create_schema_time)

    def summarize(
        self,
        elapsed_seconds: float,
        create_schema_time: Optional[float] = None,
    ) -> Tuple[Measurement, LatencyStatistics]:
        """Merge the worker measurements and derive statistics once."""
        merged = Measurement()
        for measurement in self.measurements:
            merged.merge_measurement(measurement)

        merged.elapse_time = elapsed_seconds
        if create_schema_time is not None:
            merged.create_schema_time = create_schema_time

        return merged, calculate_metrics(merged)
