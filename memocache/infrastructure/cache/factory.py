"""
Cache Store Factory

Selects the storage backend for a Memoizer from its options:
a Redis store when redis options are present, the in-memory LRU store
otherwise.
"""

from memocache.core.config.constants import StoreBackend
from memocache.core.config.options import CacheOptions
from memocache.core.interfaces.store import CacheStore
from memocache.core.logging.logger import get_logger
from memocache.infrastructure.cache.lru_store import LRUStore
from memocache.infrastructure.cache.redis_store import RedisStore

logger = get_logger(__name__)


class CacheStoreFactory:
    """
    Factory for creating store instances.

    Supports:
    - In-memory LRU (LRUStore)
    - Redis (RedisStore)
    """

    def __init__(self):
        self._store_types = {
            StoreBackend.LRU: LRUStore,
            StoreBackend.REDIS: RedisStore,
        }

    @staticmethod
    def backend_for(options: CacheOptions) -> StoreBackend:
        return StoreBackend.REDIS if options.redis is not None else StoreBackend.LRU

    def get(self, options: CacheOptions) -> CacheStore:
        """
        Create the store described by the options.

        Args:
            options: Memoizer options

        Returns:
            CacheStore: New, not yet connected store
        """
        backend = self.backend_for(options)
        logger.info("Creating cache store", backend=backend.value)
        return self._store_types[backend].from_options(options)

    def get_available(self) -> list[str]:
        """
        Get list of available backends.

        Returns:
            list[str]: Supported backend names
        """
        return [backend.value for backend in self._store_types]


def create_store(options: CacheOptions) -> CacheStore:
    """Create the store for the given options."""
    return CacheStoreFactory().get(options)
