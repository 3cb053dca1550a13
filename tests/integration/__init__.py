"""
Integration tests.

These tests require a running Redis server and are skipped unless
USE_REAL_REDIS is set.
"""
