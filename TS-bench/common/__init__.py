"""
Common utilities for the TS-bench measurement core.
"""

from .coordinator import MeasurementCoordinator
from .persistence_factory import create_persistence, persistence_factory

__all__ = ['MeasurementCoordinator', 'create_persistence', 'persistence_factory']
