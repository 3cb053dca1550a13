"""
Cache Statistics

Counters updated by the Memoizer and its reset scheduler.
"""

from dataclasses import asdict, dataclass


@dataclass
class CacheStats:
    """
    Memoizer counters.

    hit:     calls answered from the store
    miss:    executions of the underlying operation
    reset:   scheduled full-store resets
    pending: keys with a computation in flight (not the number of waiters)
    """

    hit: int = 0
    miss: int = 0
    reset: int = 0
    pending: int = 0

    def record_hit(self) -> None:
        self.hit += 1

    def record_miss(self) -> None:
        self.miss += 1

    def record_reset(self) -> None:
        self.reset += 1

    def open_pending(self) -> None:
        self.pending += 1

    def close_pending(self) -> None:
        self.pending = max(0, self.pending - 1)

    def hit_rate(self) -> float:
        total = self.hit + self.miss
        return round(self.hit / total, 3) if total > 0 else 0.0

    def as_dict(self) -> dict[str, int]:
        return asdict(self)
