"""Test suite for latency statistic derivation."""

import sys
import os
import math
import logging

import numpy as np
import pytest

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from measurement.measurement import Measurement
from measurement.metric import Metric
from measurement.operation import Operation
from measurement.statistics import (
    calculate_metrics,
    calculate_mid_average,
    calculate_throughput,
    percentile_index,
)


def measurement_with(latencies, operation=Operation.INGESTION):
    measurement = Measurement()
    for latency in latencies:
        measurement.add_operation_latency(operation, latency)
    return measurement


class TestPercentiles:
    """Truncated nearest-rank percentiles."""

    def test_ten_sample_sequence(self):
        """Values of the reference sequence 10..100."""
        measurement = measurement_with([70, 10, 100, 40, 20, 90, 30, 60, 80, 50])
        stats = calculate_metrics(measurement)
        op = Operation.INGESTION

        assert stats.get(Metric.MIN_LATENCY, op) == 10
        assert stats.get(Metric.MAX_LATENCY, op) == 100
        assert stats.get(Metric.P10_LATENCY, op) == 20
        assert stats.get(Metric.P25_LATENCY, op) == 30
        assert stats.get(Metric.MEDIAN_LATENCY, op) == 60
        assert stats.get(Metric.P75_LATENCY, op) == 80
        # floor(10 * 90 / 100) = 9 is the last index
        assert stats.get(Metric.P90_LATENCY, op) == 100
        assert stats.get(Metric.P95_LATENCY, op) == 100
        assert stats.get(Metric.P99_LATENCY, op) == 100
        assert stats.get(Metric.AVG_LATENCY, op) == 55.0

    def test_index_uses_truncation(self):
        assert percentile_index(10, 25) == 2
        assert percentile_index(7, 50) == 3
        assert percentile_index(199, 99) == 197
        assert percentile_index(3, 10) == 0

    def test_index_law_for_many_sizes(self):
        """Every percentile equals sorted[n * p // 100]."""
        for n in range(1, 250):
            values = [float((i * 37) % n) + i / 1000.0 for i in range(n)]
            stats = calculate_metrics(measurement_with(values))
            ordered = sorted(values)
            for metric in Metric.percentile_metrics():
                expected = ordered[n * metric.percentile // 100]
                assert stats.get(metric, Operation.INGESTION) == expected, (n, metric)

    def test_small_counts_collapse_to_min(self):
        stats = calculate_metrics(measurement_with([5.0, 1.0, 3.0]))
        op = Operation.INGESTION
        assert stats.get(Metric.P10_LATENCY, op) == 1.0
        assert stats.get(Metric.P25_LATENCY, op) == 1.0
        assert stats.get(Metric.MIN_LATENCY, op) == 1.0
        assert stats.get(Metric.MEDIAN_LATENCY, op) == 3.0

    def test_duplicates(self):
        stats = calculate_metrics(measurement_with([2.0, 2.0, 2.0, 2.0]))
        for metric in Metric:
            if metric is Metric.MAX_THREAD_LATENCY_SUM:
                continue
            assert stats.get(metric, Operation.INGESTION) == 2.0


class TestMidAverage:
    """Mean of the samples between the 10% and 90% ranks."""

    def test_reference_sequence(self):
        stats = calculate_metrics(measurement_with([float(v) for v in range(10, 101, 10)]))
        assert stats.get(Metric.MID_AVG_LATENCY, Operation.INGESTION) == 55.0

    def test_empty_range_reports_zero_and_logs(self, caplog):
        with caplog.at_level(logging.ERROR, logger="measurement.statistics"):
            stats = calculate_metrics(measurement_with([42.0]))
        assert stats.get(Metric.MID_AVG_LATENCY, Operation.INGESTION) == 0.0
        assert "mid-operation number is zero" in caplog.text

    def test_two_samples_use_first(self):
        assert calculate_mid_average(np.array([1.0, 9.0])) == 1.0

    def test_twenty_samples(self):
        values = [float(v) for v in range(1, 21)]
        stats = calculate_metrics(measurement_with(values))
        # lo = 2, hi = 18 -> values 3..18
        assert stats.get(Metric.MID_AVG_LATENCY, Operation.INGESTION) == sum(range(3, 19)) / 16


class TestDerivation:
    """Absence, idempotence and the slowest-thread statistic."""

    def test_empty_operation_has_no_entries(self):
        measurement = measurement_with([1.0, 2.0])
        measurement.add_fail_operation_num(Operation.RANGE_QUERY)
        stats = calculate_metrics(measurement)

        assert not stats.has_data(Operation.RANGE_QUERY)
        assert stats.for_operation(Operation.RANGE_QUERY) == {}
        for metric in Metric:
            assert stats.get(metric, Operation.RANGE_QUERY) is None
        assert stats.operations() == [Operation.INGESTION]
        assert measurement.get_fail_operation_num(Operation.RANGE_QUERY) == 1
        assert measurement.get_ok_point_num(Operation.RANGE_QUERY) == 0

    def test_idempotent(self):
        measurement = measurement_with([3.0, 1.0, 2.0, 9.0, 4.0, 7.0, 7.0, 0.5])
        first = calculate_metrics(measurement)
        assert measurement.get_operation_latencies(Operation.INGESTION) == (
            0.5, 1.0, 2.0, 3.0, 4.0, 7.0, 7.0, 9.0)
        second = calculate_metrics(measurement)
        assert first == second

    def test_idempotent_with_nan_sample(self):
        measurement = measurement_with([1.0, float('nan'), 2.0])
        first = calculate_metrics(measurement)
        second = calculate_metrics(measurement)
        assert math.isnan(first.get(Metric.AVG_LATENCY, Operation.INGESTION))
        assert first == second

    def test_unequal_statistics(self):
        assert calculate_metrics(measurement_with([1.0, 2.0])) != calculate_metrics(measurement_with([1.0, 3.0]))
        assert calculate_metrics(measurement_with([1.0])) != calculate_metrics(
            measurement_with([1.0], operation=Operation.GROUP_BY_QUERY))

    def test_max_thread_latency_sum(self):
        slow = measurement_with([100.0, 200.0])
        fast = measurement_with([1.0, 2.0, 3.0])
        merged = Measurement()
        merged.merge_measurement(fast)
        merged.merge_measurement(slow)

        stats = calculate_metrics(merged)
        assert stats.get(Metric.MAX_THREAD_LATENCY_SUM, Operation.INGESTION) == 300.0

    def test_unmerged_measurement_has_zero_thread_sum(self):
        stats = calculate_metrics(measurement_with([5.0]))
        assert stats.get(Metric.MAX_THREAD_LATENCY_SUM, Operation.INGESTION) == 0.0

    def test_to_frame(self):
        stats = calculate_metrics(measurement_with([1.0, 2.0, 3.0]))
        frame = stats.to_frame()
        assert list(frame.columns) == [metric.metric_name for metric in Metric]
        assert frame.loc["INGESTION", "MAX"] == 3.0
        assert math.isnan(frame.loc["GROUP_BY", "MAX"])


class TestThroughput:
    """Successful points per second, including zero elapsed time."""

    def test_regular(self):
        assert calculate_throughput(1000, 10.0) == 100.0
        assert f"{calculate_throughput(1000, 10.0):.2f}" == "100.00"

    def test_zero_elapsed_with_points_is_infinite(self):
        value = calculate_throughput(1000, 0.0)
        assert not math.isfinite(value)
        assert math.isinf(value) and value > 0

    def test_zero_elapsed_without_points_is_nan(self):
        value = calculate_throughput(0, 0.0)
        assert math.isnan(value)

    def test_negative_elapsed_rejected(self):
        with pytest.raises(ValueError):
            calculate_throughput(10, -1.0)
