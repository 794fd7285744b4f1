"""
Operation catalog: the closed set of workload action kinds.
"""

from enum import IntEnum


class Operation(IntEnum):
    """Workload operation kinds.

    Tags are contiguous from zero and double as slot indices in the
    per-operation arrays of a Measurement.
    """

    INGESTION = 0
    PRECISE_QUERY = 1
    RANGE_QUERY = 2
    VALUE_RANGE_QUERY = 3
    AGG_RANGE_QUERY = 4
    AGG_VALUE_QUERY = 5
    AGG_RANGE_VALUE_QUERY = 6
    GROUP_BY_QUERY = 7
    LATEST_POINT_QUERY = 8

    @property
    def display_name(self) -> str:
        return _DISPLAY_NAMES[self]

    @classmethod
    def from_name(cls, text: str) -> "Operation":
        """Resolve a member name or display name, ignoring case."""
        key = text.strip().upper()
        if key in cls.__members__:
            return cls[key]
        for operation, display_name in _DISPLAY_NAMES.items():
            if display_name == key:
                return operation
        raise ValueError(f"Unknown operation: {text}")


_DISPLAY_NAMES = {
    Operation.INGESTION: "INGESTION",
    Operation.PRECISE_QUERY: "PRECISE_POINT",
    Operation.RANGE_QUERY: "TIME_RANGE",
    Operation.VALUE_RANGE_QUERY: "VALUE_RANGE",
    Operation.AGG_RANGE_QUERY: "AGG_RANGE",
    Operation.AGG_VALUE_QUERY: "AGG_VALUE",
    Operation.AGG_RANGE_VALUE_QUERY: "AGG_RANGE_VALUE",
    Operation.GROUP_BY_QUERY: "GROUP_BY",
    Operation.LATEST_POINT_QUERY: "LATEST_POINT",
}

OPERATION_COUNT: int = len(Operation)
