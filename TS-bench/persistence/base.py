"""
Base interface for benchmark result persistence.
"""

import time
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List

logger = logging.getLogger(__name__)


class TestDataPersistence(ABC):
    """Sink for (category, metric, value) result triples.

    A reporter opens one sink per reporting pass, calls save_result() for each
    value it wants kept and then close() exactly once. The storage format is
    up to the subclass.
    """

    # Not a pytest test class despite the name
    __test__ = False

    def __init__(self):
        self.closed: bool = False

    def save_result(self, category: str, metric: str, value: str) -> None:
        """Record one result value.

        Args:
            category: "total" for whole-run values, otherwise the operation name
            metric: Metric name
            value: Formatted value
        """
        if self.closed:
            raise RuntimeError(f"{type(self).__name__} is already closed")
        self._save(category, metric, value)

    def close(self) -> None:
        """Flush buffered results and release held resources. Idempotent."""
        if self.closed:
            return
        self.closed = True
        self._close()

    @abstractmethod
    def _save(self, category: str, metric: str, value: str) -> None:
        ...

    def _close(self) -> None:
        pass

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False


class NoPersistence(TestDataPersistence):
    """Discards all results."""

    def _save(self, category: str, metric: str, value: str) -> None:
        pass


class BufferedPersistence(TestDataPersistence):
    """Collects result rows in memory until close()."""

    def __init__(self):
        super().__init__()
        self.rows: List[Dict[str, Any]] = []

    def _save(self, category: str, metric: str, value: str) -> None:
        self.rows.append({
            'category': category,
            'metric': metric,
            'value': value,
            'ts': time.time(),
        })

    def _close(self) -> None:
        if not self.rows:
            logger.debug(f"{type(self).__name__}: nothing to write")
            return
        self._flush(self.rows)
        self.rows = []

    def _flush(self, rows: List[Dict[str, Any]]) -> None:
        raise NotImplementedError
