"""
Unit Tests for Configuration Constants

Tests stage identifiers and backend names.
"""

import pytest

from memocache.core.config.constants import (
    KEY_FINGERPRINT_DEPTH,
    LRU_DEFAULT_MAX_ENTRIES,
    REDIS_DEFAULT_MAX_AGE,
    REDIS_KEY_PREFIX,
    Stage,
    StoreBackend,
)


@pytest.mark.unit
class TestStage:
    """Test stage identifiers."""

    def test_stage_values_are_namespaced(self):
        prefixes = {"MEMO", "LRU", "REDIS", "DEBUG"}

        for stage in Stage:
            assert stage.value.split(".")[0] in prefixes

    def test_stage_is_string(self):
        assert Stage.HIT == "MEMO.HIT"


@pytest.mark.unit
class TestDefaults:
    """Test default values."""

    def test_backend_names(self):
        assert {backend.value for backend in StoreBackend} == {"lru", "redis"}

    def test_defaults(self):
        assert KEY_FINGERPRINT_DEPTH == 8
        assert LRU_DEFAULT_MAX_ENTRIES == 1000
        assert REDIS_DEFAULT_MAX_AGE == 60
        assert REDIS_KEY_PREFIX == "memo"
