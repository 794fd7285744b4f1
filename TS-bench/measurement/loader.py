"""
Build worker Measurements from recorded per-operation rows.

Expected columns:
    thread_id   worker thread that ran the operation
    operation   Operation member or display name
    latency_ms  measured latency
    status      'ok' or 'fail'
    points      points the operation wrote or intended to write
"""

import os
import logging
from typing import Dict

import pandas as pd

from measurement.measurement import Measurement
from measurement.operation import Operation

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = ['thread_id', 'operation', 'latency_ms', 'status', 'points']


def load_records(path: str) -> pd.DataFrame:
    """Read operation records from a .csv or .parquet file."""
    extension = os.path.splitext(path)[1].lower()
    if extension == '.csv':
        data = pd.read_csv(path)
    elif extension == '.parquet':
        data = pd.read_parquet(path)
    else:
        raise ValueError(f"Unsupported record file type: {extension or path}")

    missing = [col for col in REQUIRED_COLUMNS if col not in data.columns]
    if missing:
        raise ValueError(f"Missing required columns: {missing}")

    logger.info(f"Loaded {len(data)} records from {path}")
    return data


def build_thread_measurements(data: pd.DataFrame) -> Dict[object, Measurement]:
    """One Measurement per thread_id, replaying rows in file order."""
    measurements: Dict[object, Measurement] = {}

    for thread_id, rows in data.groupby('thread_id', sort=True):
        measurement = Measurement()
        for row in rows.itertuples(index=False):
            operation = Operation.from_name(str(row.operation))
            points = int(row.points)
            measurement.add_operation_latency(operation, float(row.latency_ms))

            status = str(row.status).strip().lower()
            if status == 'ok':
                measurement.add_ok_operation_num(operation)
                measurement.add_ok_point_num(operation, points)
            elif status == 'fail':
                measurement.add_fail_operation_num(operation)
                measurement.add_fail_point_num(operation, points)
            else:
                raise ValueError(f"Unknown status {row.status!r} for thread {thread_id}")
        measurements[thread_id] = measurement

    logger.debug(f"Built measurements for {len(measurements)} threads")
    return measurements
