"""
Measurement core: per-worker accumulation, merging, and latency statistics.
"""

from .operation import Operation
from .metric import Metric, TotalResult, TotalOperationResult
from .measurement import Measurement, merge_measurements
from .statistics import LatencyStatistics, calculate_metrics, calculate_throughput

__all__ = [
    'Operation',
    'Metric',
    'TotalResult',
    'TotalOperationResult',
    'Measurement',
    'merge_measurements',
    'LatencyStatistics',
    'calculate_metrics',
    'calculate_throughput',
]
