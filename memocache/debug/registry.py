"""
Debug Registry

Process-wide registry of named Memoizers for inspection. Registered caches
show up in snapshot(), in log_stats() output and in the /debug HTTP view.

Usage:
    memo = register(Memoizer(options), "users")
    snapshot()["users"]["stats"]["hit"]
"""

from typing import TYPE_CHECKING, Any

from memocache.core.config.constants import Stage
from memocache.core.logging.logger import get_logger, log_stage

if TYPE_CHECKING:  # pragma: no cover - imported for typing only
    from memocache.memoizer.memoizer import Memoizer

logger = get_logger(__name__)

# Global registry (name -> Memoizer)
_caches: dict[str, "Memoizer"] = {}


def register(memoizer: "Memoizer", name: str) -> "Memoizer":
    """
    Register a Memoizer under a name.

    Registering another instance under an existing name replaces it.

    Returns:
        The registered Memoizer (for chaining)
    """
    _caches[name] = memoizer
    log_stage(logger, Stage.DEBUG_REGISTER, "Registered cache", name=name)
    return memoizer


def unregister(name: str) -> "Memoizer | None":
    return _caches.pop(name, None)


def registered() -> dict[str, "Memoizer"]:
    """Copy of the registry."""
    return dict(_caches)


def clear_registry() -> None:
    _caches.clear()


def describe(memoizer: "Memoizer") -> dict[str, Any]:
    """Inspection data for one Memoizer."""
    store = memoizer.store
    return {
        "stats": memoizer.stats.as_dict(),
        "hit_rate": memoizer.stats.hit_rate(),
        "keycount": store.keycount(),
        "size": store.size(),
        "ready": memoizer.is_ready(),
        "pending_keys": len(memoizer.pending_keys()),
        "store": type(store).__name__,
    }


def snapshot() -> dict[str, dict[str, Any]]:
    """Inspection data for every registered Memoizer."""
    return {name: describe(memoizer) for name, memoizer in _caches.items()}


def log_stats() -> dict[str, dict[str, Any]]:
    """
    Log one entry per registered cache.

    Returns:
        The snapshot that was logged
    """
    data = snapshot()
    for name, info in data.items():
        log_stage(logger, Stage.DEBUG_STATS, "Cache statistics", name=name, **info)
    return data
