"""
Per-worker latency and counter accumulator.
"""

import time
import logging
from contextlib import contextmanager
from typing import Iterable, List, Sequence, Tuple

from measurement.operation import Operation, OPERATION_COUNT

logger = logging.getLogger(__name__)


class Measurement:
    """Latency samples and success/failure counters for every operation kind.

    One instance is owned by each worker thread while the workload runs, so
    nothing here takes a lock. After the run the coordinator folds all worker
    instances into a fresh one with merge_measurement() and derives the
    statistics from that.

    Every per-operation field is a dense list indexed by the Operation tag,
    so an operation that was never exercised still has an empty slot.
    """

    def __init__(self):
        self._latencies: List[List[float]] = [[] for _ in range(OPERATION_COUNT)]
        self._ok_operations: List[int] = [0] * OPERATION_COUNT
        self._fail_operations: List[int] = [0] * OPERATION_COUNT
        self._ok_points: List[int] = [0] * OPERATION_COUNT
        self._fail_points: List[int] = [0] * OPERATION_COUNT
        # Sum of samples recorded on this measurement itself, not merged in
        self._direct_latency_sums: List[float] = [0.0] * OPERATION_COUNT
        # Largest single-thread latency sum seen by merge_measurement()
        self._max_thread_latency_sums: List[float] = [0.0] * OPERATION_COUNT
        self._merged_count: int = 0
        self.create_schema_time: float = 0.0
        self.elapse_time: float = 0.0

    # ------------------------------------------------------------------
    # Recording (hot path)
    # ------------------------------------------------------------------

    def add_operation_latency(self, operation: Operation, latency: float) -> None:
        self._latencies[operation].append(latency)
        self._direct_latency_sums[operation] += latency

    def add_ok_operation_num(self, operation: Operation) -> None:
        self._ok_operations[operation] += 1

    def add_fail_operation_num(self, operation: Operation) -> None:
        self._fail_operations[operation] += 1

    def add_ok_point_num(self, operation: Operation, point_num: int) -> None:
        if point_num < 0:
            raise ValueError(f"Point count must be non-negative, got {point_num}")
        self._ok_points[operation] += point_num

    def add_fail_point_num(self, operation: Operation, point_num: int) -> None:
        if point_num < 0:
            raise ValueError(f"Point count must be non-negative, got {point_num}")
        self._fail_points[operation] += point_num

    @contextmanager
    def timer(self, operation: Operation):
        """Record the wall-clock duration of the block in milliseconds.

        The latency is recorded whether or not the block raises; counting the
        operation as ok or failed is left to the caller.
        """
        start = time.perf_counter()
        try:
            yield
        finally:
            self.add_operation_latency(operation, (time.perf_counter() - start) * 1000.0)

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    def get_operation_latencies(self, operation: Operation) -> Tuple[float, ...]:
        return tuple(self._latencies[operation])

    def set_operation_latencies(self, operation: Operation, latencies: Sequence[float]) -> None:
        """Replace the samples of one operation (used to store the sorted order)."""
        self._latencies[operation] = list(latencies)

    def get_operation_latency_count(self, operation: Operation) -> int:
        return len(self._latencies[operation])

    def get_operation_latency_sum(self, operation: Operation) -> float:
        return sum(self._latencies[operation])

    def get_ok_operation_num(self, operation: Operation) -> int:
        return self._ok_operations[operation]

    def get_fail_operation_num(self, operation: Operation) -> int:
        return self._fail_operations[operation]

    def get_ok_point_num(self, operation: Operation) -> int:
        return self._ok_points[operation]

    def get_fail_point_num(self, operation: Operation) -> int:
        return self._fail_points[operation]

    def max_thread_latency_sum(self, operation: Operation) -> float:
        """Largest per-thread latency sum merged in so far (0.0 if none)."""
        return self._max_thread_latency_sums[operation]

    @property
    def merged_count(self) -> int:
        """Number of worker measurements folded into this one."""
        return self._merged_count

    # ------------------------------------------------------------------
    # Merging
    # ------------------------------------------------------------------

    def _thread_latency_sum(self, operation: Operation) -> float:
        # A merge result stands for many threads; pass on its slowest one,
        # counting the samples it recorded itself as one more thread.
        if self._merged_count:
            return max(self._max_thread_latency_sums[operation],
                       self._direct_latency_sums[operation])
        return self.get_operation_latency_sum(operation)

    def merge_measurement(self, other: "Measurement") -> None:
        """Fold another measurement into this one.

        Latencies are concatenated and counters added. The per-thread latency
        sum of `other` is computed before its samples are mixed in and only
        the running maximum is kept. Call calculate_metrics() afterwards to
        refresh the statistics.
        """
        if len(other._latencies) != len(self._latencies):
            raise ValueError(
                f"Cannot merge measurements with different operation catalogs "
                f"({len(other._latencies)} vs {len(self._latencies)} operations)"
            )

        for operation in Operation:
            thread_sum = other._thread_latency_sum(operation)
            if thread_sum > self._max_thread_latency_sums[operation]:
                self._max_thread_latency_sums[operation] = thread_sum
            self._latencies[operation].extend(other._latencies[operation])
            self._ok_operations[operation] += other._ok_operations[operation]
            self._fail_operations[operation] += other._fail_operations[operation]
            self._ok_points[operation] += other._ok_points[operation]
            self._fail_points[operation] += other._fail_points[operation]

        self._merged_count += max(other._merged_count, 1)

    def __repr__(self) -> str:
        samples = sum(len(latencies) for latencies in self._latencies)
        return f"Measurement(samples={samples}, merged={self._merged_count})"


def merge_measurements(measurements: Iterable[Measurement]) -> Measurement:
    """Merge worker measurements into a new one, leaving the inputs untouched."""
    merged = Measurement()
    for measurement in measurements:
        merged.merge_measurement(measurement)
    logger.debug(f"Merged {merged.merged_count} worker measurements")
    return merged
