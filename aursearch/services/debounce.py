"""Per-requester debounce for rapidly retyped inline queries."""

from __future__ import annotations

import threading
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Callable


@dataclass(slots=True, frozen=True)
class _Dispatch:
    term: str
    at: float


class QueryDebouncer:
    """Suppress upstream calls while a requester is still typing.

    A query is suppressed when the same requester dispatched a shorter term
    less than ``interval`` seconds ago and the new term extends it. State is
    kept in an insertion-ordered map so entries older than ``ttl`` can be
    dropped from the front.
    """

    def __init__(
        self,
        *,
        interval: float = 0.3,
        ttl: float = 60.0,
        max_entries: int = 10_000,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.interval = interval
        self.ttl = ttl
        self.max_entries = max_entries
        self.clock = clock
        self._entries: OrderedDict[int, _Dispatch] = OrderedDict()
        self._lock = threading.Lock()

    def should_dispatch(self, requester_id: int, term: str, now: float | None = None) -> bool:
        now = self.clock() if now is None else now
        with self._lock:
            self._evict(now)
            previous = self._entries.get(requester_id)
            if (
                previous is not None
                and now - previous.at < self.interval
                and len(term) > len(previous.term)
                and term.startswith(previous.term)
            ):
                return False

            self._entries[requester_id] = _Dispatch(term=term, at=now)
            self._entries.move_to_end(requester_id)
            while len(self._entries) > self.max_entries:
                self._entries.popitem(last=False)
            return True

    def is_latest(self, requester_id: int, term: str, dispatched_at: float) -> bool:
        """Whether no newer dispatch replaced this one."""

        with self._lock:
            current = self._entries.get(requester_id)
            if current is None:
                return True
            return current.term == term and current.at == dispatched_at

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def _evict(self, now: float) -> None:
        while self._entries:
            requester_id, dispatch = next(iter(self._entries.items()))
            if now - dispatch.at <= self.ttl:
                break
            del self._entries[requester_id]


__all__ = ["QueryDebouncer"]
