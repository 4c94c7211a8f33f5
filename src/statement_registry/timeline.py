"""
Activity timeline reconciliation.

Merges the published and revoked event streams of one address into a single
feed, newest first, and guards the displayed feed against late responses
from superseded queries.
"""

from __future__ import annotations

import itertools
import threading
from dataclasses import dataclass
from typing import Generic, Iterator, Optional, Sequence, Tuple, TypeVar

from .events import EventKind, StatementEvent

T = TypeVar("T")


@dataclass(frozen=True)
class ChainQueryWindow:
    """Inclusive block range of a log query."""

    from_block: int
    to_block: int

    @classmethod
    def from_current_block(cls, current_block: int, lookback: int) -> "ChainQueryWindow":
        return cls(from_block=max(0, current_block - lookback), to_block=current_block)


@dataclass(frozen=True)
class ActivityTimeline:
    """
    Immutable, timestamp-descending list of statement events.

    Published and revoked records for the same hash stay separate rows;
    no "current status" is derived here.
    """

    events: Tuple[StatementEvent, ...] = ()

    def __iter__(self) -> Iterator[StatementEvent]:
        return iter(self.events)

    def __len__(self) -> int:
        return len(self.events)

    def __getitem__(self, index):
        return self.events[index]

    @property
    def published(self) -> Tuple[StatementEvent, ...]:
        return tuple(e for e in self.events if e.kind is EventKind.PUBLISHED)

    @property
    def revoked(self) -> Tuple[StatementEvent, ...]:
        return tuple(e for e in self.events if e.kind is EventKind.REVOKED)


def reconcile(
    published: Sequence[StatementEvent],
    revoked: Sequence[StatementEvent],
) -> ActivityTimeline:
    """
    Merge two event lists into one timeline, most recent first.

    Ties keep concatenation order (published before revoked), since
    ``sorted`` is stable.

    Example:
        >>> [e.timestamp for e in reconcile(pub_100_300, rev_200)]
        [300, 200, 100]
    """
    merged = list(published) + list(revoked)
    return ActivityTimeline(tuple(sorted(merged, key=lambda e: e.timestamp, reverse=True)))


@dataclass(frozen=True)
class QueryToken:
    sequence: int
    address: str


class LatestQueryGuard(Generic[T]):
    """
    Keeps only the result of the most recently started query.

    Each query takes a token from ``begin``; when its response arrives,
    ``accept`` stores it only if no newer query has started since.

    Example:
        >>> guard = LatestQueryGuard()
        >>> first = guard.begin("0xaaa...")
        >>> second = guard.begin("0xbbb...")
        >>> guard.accept(first, old_timeline)
        False
        >>> guard.accept(second, new_timeline)
        True
    """

    def __init__(self) -> None:
        self._counter = itertools.count(1)
        self._lock = threading.Lock()
        self._current: Optional[QueryToken] = None
        self.latest: Optional[T] = None

    def begin(self, address: str) -> QueryToken:
        with self._lock:
            self._current = QueryToken(next(self._counter), address)
            return self._current

    def is_current(self, token: QueryToken) -> bool:
        return self._current == token

    def accept(self, token: QueryToken, result: T) -> bool:
        with self._lock:
            if self._current != token:
                return False
            self.latest = result
            return True
