"""
Configuration constants for the TS-bench measurement core.

This module contains all configuration parameters including:
- Workload settings shown in the configuration block of a report
- Statistic parameters (mid-range bounds, percentile set)
- Result persistence settings
"""

import os
from typing import List, Tuple


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


# =============================================================================
# WORKLOAD CONFIGURATION (display only)
# =============================================================================

DB_SWITCH: str = os.getenv("DB_SWITCH", "IoTDB")
OPERATION_PROPORTION: str = os.getenv("OPERATION_PROPORTION", "1:0:0:0:0:0:0:0:0")
IS_CLIENT_BIND: bool = _env_bool("IS_CLIENT_BIND", True)
CLIENT_NUMBER: int = int(os.getenv("CLIENT_NUMBER", "2"))
GROUP_NUMBER: int = int(os.getenv("GROUP_NUMBER", "1"))
DEVICE_NUMBER: int = int(os.getenv("DEVICE_NUMBER", "2"))
SENSOR_NUMBER: int = int(os.getenv("SENSOR_NUMBER", "5"))
BATCH_SIZE: int = int(os.getenv("BATCH_SIZE", "10"))
LOOP: int = int(os.getenv("LOOP", "100"))
POINT_STEP: int = int(os.getenv("POINT_STEP", "1000"))
QUERY_INTERVAL: int = int(os.getenv("QUERY_INTERVAL", "250000"))
IS_OVERFLOW: bool = _env_bool("IS_OVERFLOW", False)
OVERFLOW_MODE: int = int(os.getenv("OVERFLOW_MODE", "0"))
OVERFLOW_RATIO: float = float(os.getenv("OVERFLOW_RATIO", "1.0"))

# =============================================================================
# STATISTIC PARAMETERS
# =============================================================================

# Lower and upper rank bounds of the mid-range average, in percent (upper bound excluded)
MID_AVG_RANGE: Tuple[int, int] = (10, 90)

# =============================================================================
# RESULT PERSISTENCE
# =============================================================================

TEST_DATA_PERSISTENCE: str = os.getenv("TEST_DATA_PERSISTENCE", "none")
RESULT_OUTPUT_DIR: str = os.getenv("RESULT_OUTPUT_DIR", "results")
PUSHGATEWAY_ADDRESS: str = os.getenv("PUSHGATEWAY_ADDRESS", "")
PROMETHEUS_JOB_NAME: str = os.getenv("PROMETHEUS_JOB_NAME", "tsbench")

# =============================================================================
# REPORT LAYOUT
# =============================================================================

TOTAL_CATEGORY: str = "total"
REPORT_FLOAT_FORMAT: str = "{:.2f}"
MISSING_STATISTIC: str = "-"


class BenchmarkConfig:
    """Read-only view of the workload settings shown alongside the results.

    Values are not interpreted by the statistics code; they are only printed
    by the reporter so a result set can be traced back to its run.
    """

    DISPLAY_KEYS = (
        "DB_SWITCH",
        "OPERATION_PROPORTION",
        "IS_CLIENT_BIND",
        "CLIENT_NUMBER",
        "GROUP_NUMBER",
        "DEVICE_NUMBER",
        "SENSOR_NUMBER",
        "BATCH_SIZE",
        "LOOP",
        "POINT_STEP",
        "QUERY_INTERVAL",
        "IS_OVERFLOW",
        "OVERFLOW_MODE",
        "OVERFLOW_RATIO",
    )

    def __init__(self, **values):
        unknown = set(values) - set(self.DISPLAY_KEYS)
        if unknown:
            raise ValueError(f"Unknown configuration keys: {sorted(unknown)}")
        self._values = {key: values.get(key, globals()[key]) for key in self.DISPLAY_KEYS}

    @classmethod
    def from_environment(cls) -> "BenchmarkConfig":
        """Build a config from the module defaults (which honour env overrides)."""
        return cls()

    def __getattr__(self, name):
        values = self.__dict__.get("_values", {})
        if name in values:
            return values[name]
        raise AttributeError(name)

    def display_items(self) -> List[Tuple[str, object]]:
        """Return (name, value) pairs in display order."""
        return [(key, self._values[key]) for key in self.DISPLAY_KEYS]
