"""
Latency statistics derived from a merged Measurement.

Percentiles use the truncated nearest-rank rule: for n sorted samples the
p-th percentile is sorted[n * p // 100]. This intentionally differs from
pandas/numpy quantile interpolation so results are comparable with earlier
benchmark reports.
"""

import math
import logging
from typing import Dict, List, Optional

import numpy as np
import pandas as pd

from configuration import MID_AVG_RANGE
from measurement.measurement import Measurement
from measurement.metric import Metric
from measurement.operation import Operation

logger = logging.getLogger(__name__)


class LatencyStatistics:
    """Statistic values per metric and operation.

    Operations without samples have no entries at all; callers must treat a
    missing value as "no data", never as zero.
    """

    def __init__(self):
        self._values: Dict[Metric, Dict[Operation, float]] = {metric: {} for metric in Metric}

    def set(self, metric: Metric, operation: Operation, value: float) -> None:
        self._values[metric][operation] = value

    def get(self, metric: Metric, operation: Operation) -> Optional[float]:
        return self._values[metric].get(operation)

    def has_data(self, operation: Operation) -> bool:
        return operation in self._values[Metric.MIN_LATENCY]

    def operations(self) -> List[Operation]:
        """Operations that have statistics, in catalog order."""
        return [operation for operation in Operation if self.has_data(operation)]

    def for_operation(self, operation: Operation) -> Dict[Metric, float]:
        return {
            metric: values[operation]
            for metric, values in self._values.items()
            if operation in values
        }

    def to_frame(self) -> pd.DataFrame:
        """Operations as rows, metric names as columns, NaN where absent."""
        rows = []
        for operation in Operation:
            row = {"operation": operation.display_name}
            for metric in Metric:
                value = self.get(metric, operation)
                row[metric.metric_name] = np.nan if value is None else value
            rows.append(row)
        return pd.DataFrame(rows).set_index("operation")

    def __eq__(self, other) -> bool:
        if not isinstance(other, LatencyStatistics):
            return NotImplemented
        if self._values.keys() != other._values.keys():
            return False
        for metric, values in self._values.items():
            other_values = other._values[metric]
            if values.keys() != other_values.keys():
                return False
            for operation, value in values.items():
                # NaN samples propagate into several metrics; treat them as equal
                if not (value == other_values[operation]
                        or (math.isnan(value) and math.isnan(other_values[operation]))):
                    return False
        return True


def percentile_index(sample_count: int, percentile: int) -> int:
    """Index of the p-th percentile in a sorted sequence of sample_count values."""
    return sample_count * percentile // 100


def calculate_mid_average(sorted_latencies: np.ndarray) -> float:
    """Mean of sorted[lo:hi] with lo/hi at the MID_AVG_RANGE ranks.

    Returns 0.0 and logs an error when the range is empty, which happens for
    very small sample counts.
    """
    sample_count = len(sorted_latencies)
    lo = percentile_index(sample_count, MID_AVG_RANGE[0])
    hi = percentile_index(sample_count, MID_AVG_RANGE[1])
    if hi <= lo:
        logger.error(
            "Can not calculate mid-average latency because mid-operation number is zero "
            f"({sample_count} samples)"
        )
        return 0.0
    return float(sorted_latencies[lo:hi].mean())


def calculate_metrics(measurement: Measurement) -> LatencyStatistics:
    """Derive latency statistics for every operation with recorded samples.

    Call once after all worker measurements have been merged. The sorted
    sample order is written back into the measurement, so repeated calls
    return identical results.
    """
    statistics = LatencyStatistics()

    for operation in Operation:
        latencies = measurement.get_operation_latencies(operation)
        if not latencies:
            continue

        sorted_latencies = np.sort(np.asarray(latencies, dtype=np.float64), kind="stable")
        measurement.set_operation_latencies(operation, sorted_latencies.tolist())
        sample_count = len(sorted_latencies)

        statistics.set(Metric.AVG_LATENCY, operation, float(sorted_latencies.sum()) / sample_count)
        statistics.set(Metric.MID_AVG_LATENCY, operation, calculate_mid_average(sorted_latencies))
        statistics.set(Metric.MIN_LATENCY, operation, float(sorted_latencies[0]))
        statistics.set(Metric.MAX_LATENCY, operation, float(sorted_latencies[-1]))
        for metric in Metric.percentile_metrics():
            index = percentile_index(sample_count, metric.percentile)
            statistics.set(metric, operation, float(sorted_latencies[index]))
        statistics.set(
            Metric.MAX_THREAD_LATENCY_SUM, operation, measurement.max_thread_latency_sum(operation)
        )

        logger.debug(
            f"{operation.display_name}: {sample_count} samples, "
            f"avg {statistics.get(Metric.AVG_LATENCY, operation):.2f} ms"
        )

    return statistics


def calculate_throughput(ok_points: int, elapsed_seconds: float) -> float:
    """Successful points per second.

    A zero elapsed time yields inf when points were written and nan when none
    were; both are logged. A negative elapsed time is a caller error.
    """
    if elapsed_seconds < 0:
        raise ValueError(f"Elapsed time must be non-negative, got {elapsed_seconds}")
    if elapsed_seconds == 0:
        logger.warning(f"Throughput undefined for zero elapsed time ({ok_points} ok points)")
        return math.inf if ok_points > 0 else math.nan
    return ok_points / elapsed_seconds
