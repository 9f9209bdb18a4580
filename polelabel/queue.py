"""Generic max-priority queue ordered by a caller-supplied key."""

from __future__ import annotations

import heapq
from itertools import count
from typing import Callable, Generic, Iterable, List, Tuple, TypeVar

T = TypeVar("T")


class PriorityQueue(Generic[T]):
    """Max-heap over arbitrary items.

    Items are ranked by ``key(item)``; the largest key pops first and equal
    keys pop in insertion order. Items themselves are never compared.
    """

    def __init__(self, key: Callable[[T], float], items: Iterable[T] = ()) -> None:
        self._key = key
        self._counter = count()
        self._heap: List[Tuple[float, int, T]] = []
        for item in items:
            self.push(item)

    def push(self, item: T) -> None:
        heapq.heappush(self._heap, (-self._key(item), next(self._counter), item))

    def pop(self) -> T:
        if not self._heap:
            raise IndexError("pop from an empty priority queue")
        return heapq.heappop(self._heap)[2]

    def peek(self) -> T:
        if not self._heap:
            raise IndexError("peek at an empty priority queue")
        return self._heap[0][2]

    def __len__(self) -> int:
        return len(self._heap)

    def __bool__(self) -> bool:
        return bool(self._heap)
