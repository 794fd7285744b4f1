"""
Named result catalogs: latency statistics and run/operation totals.
"""

from enum import Enum
from typing import Optional


class Metric(Enum):
    """Derived latency statistics, in report column order."""

    AVG_LATENCY = ("AVG", None)
    MID_AVG_LATENCY = ("MID_AVG", None)
    MIN_LATENCY = ("MIN", None)
    P10_LATENCY = ("P10", 10)
    P25_LATENCY = ("P25", 25)
    MEDIAN_LATENCY = ("MEDIAN", 50)
    P75_LATENCY = ("P75", 75)
    P90_LATENCY = ("P90", 90)
    P95_LATENCY = ("P95", 95)
    P99_LATENCY = ("P99", 99)
    MAX_LATENCY = ("MAX", None)
    MAX_THREAD_LATENCY_SUM = ("SLOWEST_THREAD", None)

    def __init__(self, metric_name: str, percentile: Optional[int]):
        self.metric_name = metric_name
        self.percentile = percentile

    @classmethod
    def percentile_metrics(cls):
        return [metric for metric in cls if metric.percentile is not None]


class TotalResult(Enum):
    """Whole-run values, saved under the "total" category."""

    CREATE_SCHEMA_TIME = "createSchemaTime(s)"
    ELAPSED_TIME = "elapsedTime(s)"

    @property
    def metric_name(self) -> str:
        return self.value


class TotalOperationResult(Enum):
    """Per-operation counters and throughput."""

    OK_OPERATION_NUM = "okOperationNum"
    OK_POINT_NUM = "okPointNum"
    FAIL_OPERATION_NUM = "failOperationNum"
    FAIL_POINT_NUM = "failPointNum"
    THROUGHPUT = "throughput(point/s)"

    @property
    def metric_name(self) -> str:
        return self.value
