"""
Memoizer

Turns asynchronous callables into cache-aware operations.

Architecture:
    Memoizer (Public API)
        ├── CacheStore (LRUStore | RedisStore)
        ├── PendingRegistry (in-flight coalescing)
        ├── ResetScheduler (lazy scheduled reset)
        └── CacheStats (hit/miss/reset/pending)

Call path (per invocation):
    1. Scheduled reset check
    2. Key derivation (skip positions filtered out)
    3. Store lookup -> hit: result posted to the event loop
    4. Miss -> first caller for the key runs the operation, later callers queue
    5. Completion -> successful result stored, original caller notified,
       then every queued caller in arrival order

Usage:
    memo = Memoizer(CacheOptions(max=500))

    async def fetch_user(user_id):
        ...

    get_user = memo.wrap(fetch_user)
    user = await get_user(42)

    await memo.warmup(get_user, 43, {"id": 43})
    await memo.invalidate(get_user, 42)
"""

import asyncio
import time
from collections.abc import Callable, Coroutine, Iterable
from typing import Any

from memocache.core.config.constants import ANONYMOUS_FUNCTION_NAME, Stage
from memocache.core.config.options import CacheOptions
from memocache.core.exceptions import InvalidCachedOperationError, ValidationError
from memocache.core.interfaces.store import CacheStore
from memocache.core.logging.logger import get_logger, log_stage, preview_key
from memocache.infrastructure.cache.factory import create_store
from memocache.memoizer.cached_operation import CachedOperation
from memocache.memoizer.pending import Completion, PendingRegistry
from memocache.memoizer.reset_scheduler import ResetScheduler
from memocache.memoizer.stats import CacheStats

logger = get_logger(__name__)


class Memoizer:
    """
    Memoization engine with request coalescing.

    Concurrency model: one asyncio event loop, no locks. Store calls are
    awaited inside a task created per call, and every delivery to a caller
    goes through loop.call_soon so callbacks never run inside the call that
    triggered them.
    """

    def __init__(
        self,
        options: CacheOptions | None = None,
        *,
        store: CacheStore | None = None,
        clock: Callable[[], float] = time.time,
    ):
        """
        Initialize the memoizer.

        Args:
            options: Construction options (default: built from settings)
            store: Storage backend (default: chosen from the options)
            clock: Wall clock for the reset schedule
        """
        self._options = options or CacheOptions.from_settings()
        self.store: CacheStore = store if store is not None else create_store(self._options)
        self.stats = CacheStats()

        self._pending = PendingRegistry(self.stats) if self._options.queue_enabled else None
        self._reset_scheduler = (
            ResetScheduler.from_options(self._options.reset, clock=clock)
            if self._options.reset is not None
            else None
        )
        self._function_id = 0
        self._tasks: set[asyncio.Task] = set()

        logger.info(
            "Memoizer initialized",
            store=type(self.store).__name__,
            queue_enabled=self._options.queue_enabled,
            reset_interval=self._options.reset.interval if self._options.reset else None,
        )

    @property
    def options(self) -> CacheOptions:
        return self._options

    @property
    def reset_scheduler(self) -> ResetScheduler | None:
        return self._reset_scheduler

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    async def initialize(self) -> None:
        """
        Connect the store.

        A Redis store also connects on first use, so calls made before
        initialize() still reach the backend; initialize() adds the startup
        ping and key count sample.

        Raises:
            CacheConnectionError: If the backend is unreachable
        """
        await self.store.connect()

    async def shutdown(self) -> None:
        """Close the store."""
        await self.store.close()

    def is_ready(self) -> bool:
        return self.store.ready()

    def pending_keys(self) -> list[str]:
        """Keys with a computation in flight."""
        return self._pending.keys() if self._pending is not None else []

    # -------------------------------------------------------------------------
    # Wrapping
    # -------------------------------------------------------------------------

    def wrap(
        self,
        fn: Callable[..., Any],
        receiver: Any = None,
        skip_args: Iterable[int] | None = None,
    ) -> CachedOperation:
        """
        Create a cache-aware version of an asynchronous callable.

        Args:
            fn: Callable returning an awaitable
            receiver: Passed as the first argument of every call
            skip_args: Positional indexes ignored when deriving keys

        Returns:
            CachedOperation
        """
        if not callable(fn):
            raise TypeError(f"Cannot wrap non-callable {fn!r}")

        name = getattr(fn, "__name__", None) or ANONYMOUS_FUNCTION_NAME
        cache_name = f"{name}{self._function_id}"
        self._function_id += 1

        log_stage(logger, Stage.WRAP, "Wrapping function", level="debug", cache_name=cache_name)
        return CachedOperation(self, fn, cache_name, receiver=receiver, skip_args=skip_args)

    # -------------------------------------------------------------------------
    # Call path
    # -------------------------------------------------------------------------

    def dispatch(
        self,
        op: CachedOperation,
        args: tuple,
        kwargs: dict[str, Any],
        callback: Completion,
    ) -> None:
        """
        Start a callback-style call of a cached operation.

        The reset check runs synchronously; key derivation and the lookup
        continue in a task, so every outcome reaches the callback.
        """
        reset_due = self._reset_scheduler is not None and self._reset_scheduler.due()
        if reset_due:
            self.stats.record_reset()
            log_stage(
                logger, Stage.RESET, "Resetting cache",
                next_reset=self._reset_scheduler.next_reset, resets=self.stats.reset,
            )

        self._spawn(self._lookup(op, args, kwargs, callback, reset_due))

    async def _lookup(
        self,
        op: CachedOperation,
        args: tuple,
        kwargs: dict[str, Any],
        callback: Completion,
        reset_due: bool,
    ) -> None:
        loop = asyncio.get_running_loop()

        try:
            key = op.key_for(*args, **kwargs)
        except Exception as exc:
            log_stage(
                logger, Stage.LOOKUP, "Key derivation failed", level="warning",
                cache_name=op.cache_name, error=str(exc),
            )
            loop.call_soon(callback, exc, None)
            return

        try:
            value, present = await self._read(key, reset_due)
        except asyncio.CancelledError as exc:
            loop.call_soon(callback, exc, None)
            raise

        if present:
            self.stats.record_hit()
            log_stage(logger, Stage.HIT, "Cache hit", level="debug", cache_key=preview_key(key))
            loop.call_soon(callback, None, value)
            return

        # Check-and-create with no await in between
        if self._pending is not None and not self._pending.open(key):
            self._pending.enqueue(key, callback)
            log_stage(
                logger, Stage.QUEUED, "Fetch pending, queuing", level="debug",
                cache_key=preview_key(key), waiting=self._pending.waiting(key),
            )
            return

        self.stats.record_miss()
        log_stage(logger, Stage.MISS, "Cache miss", level="debug", cache_key=preview_key(key), cache_name=op.cache_name)

        error: BaseException | None = None
        result: Any = None
        try:
            result = await op.invoke(args, kwargs)
        except BaseException as exc:
            error = exc

        if error is None:
            self._spawn(self._save(key, result))

        self._complete(key, callback, error, result)

        # Re-raised only after every caller has been notified
        if error is not None and not isinstance(error, Exception):
            raise error

    async def _read(self, key: str, reset_due: bool) -> tuple[Any, bool]:
        """Run a due reset, then look the key up. Any store error is a miss."""
        if reset_due:
            await self._reset_store()

        log_stage(logger, Stage.LOOKUP, "Looking up key", level="debug", cache_key=preview_key(key))
        try:
            return await self.store.get(key)
        except Exception as e:
            log_stage(
                logger, Stage.BACKEND_ERROR, "Cache lookup failed, treating as miss",
                level="warning", cache_key=preview_key(key), error=str(e),
            )
            return None, False

    def _complete(
        self,
        key: str,
        callback: Completion,
        error: BaseException | None,
        result: Any,
    ) -> None:
        """Notify the original caller, then every queued caller in arrival order."""
        loop = asyncio.get_running_loop()
        loop.call_soon(callback, error, result)

        if self._pending is None:
            return

        waiters = self._pending.drain(key)
        if waiters:
            log_stage(
                logger, Stage.FAN_OUT, "Processing queue", level="debug",
                cache_key=preview_key(key), waiters=len(waiters),
            )
        for waiter in waiters:
            loop.call_soon(waiter, error, result)

    async def _save(self, key: str, value: Any) -> None:
        try:
            await self.store.set(key, value)
            log_stage(logger, Stage.STORE, "Saved key", level="debug", cache_key=preview_key(key))
        except Exception as e:
            log_stage(
                logger, Stage.BACKEND_ERROR, "Cache write failed", level="warning",
                cache_key=preview_key(key), error=str(e),
            )

    async def _reset_store(self) -> None:
        try:
            await self.store.reset()
        except Exception as e:
            log_stage(logger, Stage.BACKEND_ERROR, "Cache reset failed", level="error", error=str(e))

    def _spawn(self, coro: Coroutine[Any, Any, None]) -> asyncio.Task:
        task = asyncio.get_running_loop().create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    # -------------------------------------------------------------------------
    # Administrative operations
    # -------------------------------------------------------------------------

    @staticmethod
    def _validate(op: Any) -> CachedOperation:
        if not isinstance(op, CachedOperation):
            raise InvalidCachedOperationError(
                "Not a memocache function", details={"received": type(op).__name__}
            )
        return op

    async def warmup(self, op: CachedOperation, *args: Any, **kwargs: Any) -> bool:
        """
        Store a value for a call without running the operation.

        The last positional argument is the value; the others (and kwargs)
        are the call arguments.

        Usage:
            await memo.warmup(get_user, 42, {"id": 42})

        Returns:
            True if the value was written

        Raises:
            InvalidCachedOperationError: If op was not created by wrap()
            ValidationError: If no value is given
        """
        op = self._validate(op)
        if not args:
            raise ValidationError("warmup requires a value", details={"cache_name": op.cache_name})

        *call_args, value = args
        key = op.key_for(*call_args, **kwargs)
        log_stage(logger, Stage.WARMUP, "Warming cache", cache_name=op.cache_name, cache_key=preview_key(key))

        try:
            await self.store.set(key, value)
        except Exception as e:
            log_stage(logger, Stage.BACKEND_ERROR, "Warmup write failed", level="warning", error=str(e))
            return False
        return True

    async def invalidate(self, op: CachedOperation, *args: Any, **kwargs: Any) -> bool:
        """
        Remove the stored value for a call.

        Usage:
            await memo.invalidate(get_user, 42)

        Returns:
            True if the key was expired

        Raises:
            InvalidCachedOperationError: If op was not created by wrap()
        """
        op = self._validate(op)
        key = op.key_for(*args, **kwargs)
        log_stage(logger, Stage.INVALIDATE, "Invalidating key", cache_name=op.cache_name, cache_key=preview_key(key))

        try:
            await self.store.expire(key)
        except Exception as e:
            log_stage(logger, Stage.BACKEND_ERROR, "Invalidate failed", level="warning", error=str(e))
            return False
        return True


def create_memoizer(options: CacheOptions | None = None, **option_fields: Any) -> Memoizer:
    """
    Build a Memoizer.

    Usage:
        memo = create_memoizer(max=100, queue_enabled=True)
    """
    if options is None and option_fields:
        options = CacheOptions(**option_fields)
    return Memoizer(options)
