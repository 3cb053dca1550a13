"""
Test Fixtures Package

Factories for stores, clocks and recorded operations.
"""

from .store_factory import FakeClock, RecordingOperation, StoreTestFactory

__all__ = ["FakeClock", "RecordingOperation", "StoreTestFactory"]
