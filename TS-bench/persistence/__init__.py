"""
Result persistence sinks.
"""

from .base import TestDataPersistence, NoPersistence
from .parquet import CsvPersistence, ParquetPersistence
from .prom import PrometheusPersistence

__all__ = [
    'TestDataPersistence',
    'NoPersistence',
    'CsvPersistence',
    'ParquetPersistence',
    'PrometheusPersistence',
]
