"""Test suite for record loading and the report CLI."""

import sys
import os
import io
import logging

import pandas as pd
import pytest

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from cli import MeasurementCLI
from configuration import BenchmarkConfig
from measurement.loader import build_thread_measurements, load_records
from measurement.operation import Operation


def records_frame():
    return pd.DataFrame({
        'thread_id': [0, 0, 1, 1, 1],
        'operation': ['INGESTION', 'INGESTION', 'ingestion', 'TIME_RANGE', 'INGESTION'],
        'latency_ms': [10.0, 20.0, 30.0, 5.0, 40.0],
        'status': ['ok', 'fail', 'ok', 'ok', 'ok'],
        'points': [100, 100, 100, 0, 100],
    })


class TestOperationNames:
    """Operation lookup by member or display name."""

    def test_from_name(self):
        assert Operation.from_name("RANGE_QUERY") is Operation.RANGE_QUERY
        assert Operation.from_name("time_range") is Operation.RANGE_QUERY
        assert Operation.from_name(" latest_point ") is Operation.LATEST_POINT_QUERY

    def test_unknown_name(self):
        with pytest.raises(ValueError):
            Operation.from_name("DELETE")

    def test_tags_are_contiguous(self):
        assert [int(op) for op in Operation] == list(range(len(Operation)))


class TestLoader:
    """Building worker measurements from records."""

    def test_one_measurement_per_thread(self):
        measurements = build_thread_measurements(records_frame())
        assert sorted(measurements) == [0, 1]

        first = measurements[0]
        assert first.get_operation_latencies(Operation.INGESTION) == (10.0, 20.0)
        assert first.get_ok_operation_num(Operation.INGESTION) == 1
        assert first.get_fail_operation_num(Operation.INGESTION) == 1
        assert first.get_fail_point_num(Operation.INGESTION) == 100

        second = measurements[1]
        assert second.get_ok_point_num(Operation.INGESTION) == 200
        assert second.get_ok_operation_num(Operation.RANGE_QUERY) == 1

    def test_unknown_status(self):
        data = records_frame()
        data.loc[0, 'status'] = 'timeout'
        with pytest.raises(ValueError):
            build_thread_measurements(data)

    def test_missing_columns(self, tmp_path):
        path = tmp_path / "records.csv"
        records_frame().drop(columns=['points']).to_csv(path, index=False)
        with pytest.raises(ValueError):
            load_records(str(path))

    def test_unsupported_extension(self, tmp_path):
        with pytest.raises(ValueError):
            load_records(str(tmp_path / "records.json"))

    def test_parquet_records(self, tmp_path):
        path = tmp_path / "records.parquet"
        records_frame().to_parquet(path, index=False)
        assert len(load_records(str(path))) == 5


class TestConfig:
    """Explicit configuration object."""

    def test_overrides_and_order(self):
        config = BenchmarkConfig(CLIENT_NUMBER=16)
        assert config.CLIENT_NUMBER == 16
        names = [name for name, _ in config.display_items()]
        assert names == list(BenchmarkConfig.DISPLAY_KEYS)

    def test_unknown_key(self):
        with pytest.raises(ValueError):
            BenchmarkConfig(NOT_A_SETTING=1)


class TestReportCommand:
    """End-to-end report command."""

    def test_report_with_csv_results(self, tmp_path):
        input_path = tmp_path / "records.csv"
        records_frame().to_csv(input_path, index=False)
        output_dir = tmp_path / "results"
        out = io.StringIO()

        code = MeasurementCLI(out=out).run([
            'report', '--input', str(input_path), '--elapsed', '2',
            '--schema-time', '0.5', '--persistence', 'csv', '--output-dir', str(output_dir),
        ])

        assert code == 0
        text = out.getvalue()
        assert "Result Matrix" in text
        assert "Latency (ms) Matrix" in text

        result_files = list(output_dir.glob("*.csv"))
        assert len(result_files) == 1
        results = pd.read_csv(result_files[0], dtype=str)
        throughput = results[(results['category'] == 'INGESTION')
                             & (results['metric'] == 'throughput(point/s)')]
        assert list(throughput['value']) == ["150.00"]
        assert "MEDIAN" in set(results['metric'])

    def test_missing_input(self, tmp_path):
        code = MeasurementCLI(out=io.StringIO()).run([
            'report', '--input', str(tmp_path / "missing.csv"), '--elapsed', '1',
        ])
        assert code == 1

    def test_failure_logs_traceback(self, tmp_path, caplog):
        input_path = tmp_path / "records.csv"
        records_frame().drop(columns=['points']).to_csv(input_path, index=False)

        with caplog.at_level(logging.ERROR, logger="cli"):
            code = MeasurementCLI(out=io.StringIO()).run([
                'report', '--input', str(input_path), '--elapsed', '1',
            ])

        assert code == 1
        errors = [record for record in caplog.records if record.message.startswith("Error in report")]
        assert len(errors) == 1
        assert errors[0].exc_info is not None
        assert errors[0].exc_info[0] is ValueError

    def test_no_command(self):
        assert MeasurementCLI().run([]) == 1
