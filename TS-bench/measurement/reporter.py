"""
Console report and result persistence for a merged Measurement.
"""

import sys
import logging
import threading
from typing import Callable, List, Optional, TextIO

import pandas as pd

from configuration import BenchmarkConfig, TOTAL_CATEGORY, REPORT_FLOAT_FORMAT, MISSING_STATISTIC
from measurement.measurement import Measurement
from measurement.metric import Metric, TotalResult, TotalOperationResult
from measurement.operation import Operation
from measurement.statistics import LatencyStatistics, calculate_metrics, calculate_throughput
from persistence.base import TestDataPersistence, NoPersistence

logger = logging.getLogger(__name__)

RULE_WIDTH = 120


def format_value(value: float) -> str:
    return REPORT_FLOAT_FORMAT.format(value)


def _banner(title: str = "") -> str:
    if not title:
        return "-" * RULE_WIDTH
    return f" {title} ".center(RULE_WIDTH, "-")


class MeasurementReporter:
    """Prints and persists the results of one benchmark run.

    Each show_* call is one reporting pass: it opens a sink from the
    persistence factory, saves every value it prints and closes the sink.
    """

    def __init__(
        self,
        measurement: Measurement,
        config: BenchmarkConfig,
        statistics: Optional[LatencyStatistics] = None,
        persistence_factory: Callable[[], TestDataPersistence] = NoPersistence,
        out: TextIO = None,
    ):
        self.measurement = measurement
        self.config = config
        self.statistics = statistics
        self.persistence_factory = persistence_factory
        self.out = out or sys.stdout

    def _print(self, line: str = "") -> None:
        print(line, file=self.out)

    def show_configs(self) -> None:
        """Print the workload configuration block."""
        self._print(_banner("Main Configurations"))
        for name, value in self.config.display_items():
            self._print(f"{name}: {value}")
        self._print(_banner())

    def result_frame(self) -> pd.DataFrame:
        """Counters and throughput per operation."""
        rows = []
        for operation in Operation:
            ok_points = self.measurement.get_ok_point_num(operation)
            throughput = calculate_throughput(ok_points, self.measurement.elapse_time)
            rows.append({
                'Operation': operation.display_name,
                'okOperation': self.measurement.get_ok_operation_num(operation),
                'okPoint': ok_points,
                'failOperation': self.measurement.get_fail_operation_num(operation),
                'failPoint': self.measurement.get_fail_point_num(operation),
                'throughput(point/s)': format_value(throughput),
            })
        return pd.DataFrame(rows)

    def show_measurements(self) -> None:
        """Print and persist run totals and the per-operation result matrix."""
        measurement = self.measurement
        self._print(f"{threading.current_thread().name} measurements:")
        self._print(f"Create schema cost {format_value(measurement.create_schema_time)} second")
        self._print(
            "Test elapsed time (not include schema creation): "
            f"{format_value(measurement.elapse_time)} second"
        )

        frame = self.result_frame()
        self._print(_banner("Result Matrix"))
        self._print(frame.to_string(index=False))
        self._print(_banner())

        with self.persistence_factory() as recorder:
            recorder.save_result(TOTAL_CATEGORY, TotalResult.CREATE_SCHEMA_TIME.metric_name,
                                 str(measurement.create_schema_time))
            recorder.save_result(TOTAL_CATEGORY, TotalResult.ELAPSED_TIME.metric_name,
                                 str(measurement.elapse_time))
            for operation, row in zip(Operation, frame.to_dict('records')):
                category = operation.name
                recorder.save_result(category, TotalOperationResult.OK_OPERATION_NUM.metric_name,
                                     str(row['okOperation']))
                recorder.save_result(category, TotalOperationResult.OK_POINT_NUM.metric_name,
                                     str(row['okPoint']))
                recorder.save_result(category, TotalOperationResult.FAIL_OPERATION_NUM.metric_name,
                                     str(row['failOperation']))
                recorder.save_result(category, TotalOperationResult.FAIL_POINT_NUM.metric_name,
                                     str(row['failPoint']))
                recorder.save_result(category, TotalOperationResult.THROUGHPUT.metric_name,
                                     row['throughput(point/s)'])

    def metric_frame(self) -> pd.DataFrame:
        """Formatted latency statistics, MISSING_STATISTIC where there is no data."""
        statistics = self._ensure_statistics()
        rows = []
        for operation in Operation:
            row = {'Operation': operation.display_name}
            for metric in Metric:
                value = statistics.get(metric, operation)
                row[metric.metric_name] = MISSING_STATISTIC if value is None else format_value(value)
            rows.append(row)
        return pd.DataFrame(rows)

    def show_metrics(self) -> None:
        """Print and persist the latency (ms) matrix."""
        statistics = self._ensure_statistics()
        self._print(_banner("Latency (ms) Matrix"))
        self._print(self.metric_frame().to_string(index=False))
        self._print(_banner())

        missing = missing_operations(statistics)
        if missing:
            logger.info(f"No latency samples for: {', '.join(op.display_name for op in missing)}")

        with self.persistence_factory() as recorder:
            for operation in statistics.operations():
                for metric, value in statistics.for_operation(operation).items():
                    recorder.save_result(operation.name, metric.metric_name, format_value(value))

    def report(self) -> None:
        """Run all three reporting passes."""
        self.show_configs()
        self.show_measurements()
        self.show_metrics()

    def _ensure_statistics(self) -> LatencyStatistics:
        if self.statistics is None:
            logger.debug("No statistics supplied, deriving them from the measurement")
            self.statistics = calculate_metrics(self.measurement)
        return self.statistics


def missing_operations(statistics: LatencyStatistics) -> List[Operation]:
    """Operations that have no latency samples."""
    return [operation for operation in Operation if not statistics.has_data(operation)]
