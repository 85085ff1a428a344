"""
Per-kind shape stores.

A store keeps shapes by id for O(1) lookup and an ordered id list so that
iteration (and therefore render order and hit-test order) is stable.
Unknown ids are never an error: callers get False/None back.
"""

from __future__ import annotations

from typing import Dict, Generic, Iterator, List, Optional, Tuple, TypeVar


T = TypeVar("T")


class ShapeStore(Generic[T]):
    """Insertion-ordered, id-keyed collection of immutable shapes."""

    def __init__(self) -> None:
        self._by_id: Dict[str, T] = {}
        self._order: List[str] = []

    def __len__(self) -> int:
        return len(self._order)

    def __iter__(self) -> Iterator[T]:
        # Iterate over a snapshot so callers may mutate while looping.
        return iter(self.values())

    def __contains__(self, shape_id: object) -> bool:
        return shape_id in self._by_id

    def add(self, shape: T) -> None:
        shape_id = getattr(shape, "id")
        if shape_id in self._by_id:
            raise ValueError(f"duplicate shape id: {shape_id}")
        self._by_id[shape_id] = shape
        self._order.append(shape_id)

    def replace(self, shape: T) -> bool:
        """Swap in a new value for an existing id, keeping its position."""
        shape_id = getattr(shape, "id")
        if shape_id not in self._by_id:
            return False
        self._by_id[shape_id] = shape
        return True

    def remove(self, shape_id: Optional[str]) -> Optional[T]:
        if shape_id is None or shape_id not in self._by_id:
            return None
        self._order.remove(shape_id)
        return self._by_id.pop(shape_id)

    def get(self, shape_id: Optional[str]) -> Optional[T]:
        if shape_id is None:
            return None
        return self._by_id.get(shape_id)

    def index_of(self, shape_id: str) -> int:
        try:
            return self._order.index(shape_id)
        except ValueError:
            return -1

    def ids(self) -> Tuple[str, ...]:
        return tuple(self._order)

    def values(self) -> Tuple[T, ...]:
        """Read-only snapshot in insertion order."""
        return tuple(self._by_id[i] for i in self._order)

    def clear(self) -> None:
        self._by_id.clear()
        self._order.clear()
