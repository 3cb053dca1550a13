"""
Cached Operation Handle

The callable returned by Memoizer.wrap. It offers two entry points that
share one completion path:

    # Awaitable style
    user = await get_user(42)

    # Callback style: callback(error, result), never invoked synchronously
    get_user.call(42, callback=on_user)

The awaitable style is an adapter: it passes a completion callback that
resolves an asyncio.Future to the callback style.
"""

import asyncio
import functools
from collections.abc import Callable, Iterable
from typing import TYPE_CHECKING, Any

from memocache.memoizer.keygen import derive_key, filter_args
from memocache.memoizer.pending import Completion

if TYPE_CHECKING:  # pragma: no cover - imported for typing only
    from memocache.memoizer.memoizer import Memoizer


class CachedOperation:
    """
    Cache-aware wrapper around an asynchronous callable.

    Attributes:
        cache_name: Stable identifier (function name + per-Memoizer counter)
        receiver: Object passed as first argument to the wrapped callable
        skip_args: Positional indexes excluded from key derivation
        memoizer: Owning Memoizer
    """

    def __init__(
        self,
        memoizer: "Memoizer",
        fn: Callable[..., Any],
        cache_name: str,
        receiver: Any = None,
        skip_args: Iterable[int] | None = None,
    ):
        self._memoizer = memoizer
        self._fn = fn
        self._cache_name = cache_name
        self._receiver = receiver
        self._skip_args = frozenset(skip_args or ())
        functools.update_wrapper(self, fn, updated=())

    @property
    def cache_name(self) -> str:
        return self._cache_name

    @property
    def receiver(self) -> Any:
        return self._receiver

    @property
    def skip_args(self) -> frozenset[int]:
        return self._skip_args

    @property
    def memoizer(self) -> "Memoizer":
        return self._memoizer

    def key_for(self, *args: Any, **kwargs: Any) -> str:
        """Cache key for a call with these arguments."""
        return derive_key(self._cache_name, filter_args(args, self._skip_args), kwargs)

    def invoke(self, args: tuple, kwargs: dict[str, Any]) -> Any:
        """Run the wrapped callable, returning its awaitable."""
        if self._receiver is not None:
            return self._fn(self._receiver, *args, **kwargs)
        return self._fn(*args, **kwargs)

    def call(self, *args: Any, callback: Completion, **kwargs: Any) -> None:
        """
        Callback-style invocation.

        Args:
            *args: Arguments for the wrapped callable
            callback: Called once with (error, result) from the event loop
            **kwargs: Keyword arguments for the wrapped callable

        Raises:
            RuntimeError: If no event loop is running
        """
        self._memoizer.dispatch(self, args, kwargs, callback)

    def __call__(self, *args: Any, **kwargs: Any) -> asyncio.Future:
        """Awaitable-style invocation."""
        future = asyncio.get_running_loop().create_future()

        def complete(error: BaseException | None, result: Any) -> None:
            if future.done():
                return
            if isinstance(error, asyncio.CancelledError):
                future.cancel()
            elif error is not None:
                future.set_exception(error)
            else:
                future.set_result(result)

        self.call(*args, callback=complete, **kwargs)
        return future

    def __repr__(self) -> str:
        return f"<CachedOperation {self._cache_name}>"
