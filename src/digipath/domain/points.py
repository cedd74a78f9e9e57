# digipath/domain/points.py
from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass

import numpy as np

from digipath.errors import IndexOutOfRangeError

Point = tuple[int, ...]
Index = int


def as_point(p: Sequence[int]) -> Point:
    return tuple(int(c) for c in p)


@dataclass(frozen=True)
class IndexedPoint:
    index: Index
    coords: Point


class PointIndex:
    """
    Dense index over lattice points.
    Indices are handed out in first-occurrence order, so the same input
    sequence always yields the same numbering.
    """

    def __init__(self):
        self._points: list[Point] = []
        self._index: dict[Point, Index] = {}
        self._dim: int | None = None

    @classmethod
    def from_points(cls, points: Iterable[Sequence[int]]) -> "PointIndex":
        reg = cls()
        for p in points:
            reg.register(p)
        return reg

    @property
    def dim(self) -> int | None:
        return self._dim

    def register(self, p: Sequence[int]) -> Index:
        q = as_point(p)
        idx = self._index.get(q)
        if idx is not None:
            return idx
        if self._dim is None:
            if not q:
                raise ValueError("points must have at least one coordinate")
            self._dim = len(q)
        elif len(q) != self._dim:
            raise ValueError(f"expected a {self._dim}D point, got {q!r}")
        idx = len(self._points)
        self._points.append(q)
        self._index[q] = idx
        return idx

    def point(self, i: Index) -> Point:
        if not 0 <= i < len(self._points):
            raise IndexOutOfRangeError(f"index {i} outside [0, {len(self._points)})")
        return self._points[i]

    point_at = point

    def index(self, p: Sequence[int]) -> Index:
        try:
            return self._index[as_point(p)]
        except KeyError:
            raise IndexOutOfRangeError(f"point {tuple(p)!r} is not registered") from None

    def indexed(self, i: Index) -> IndexedPoint:
        return IndexedPoint(i, self.point(i))

    def as_array(self) -> np.ndarray:
        return np.asarray(self._points, dtype=np.int64).reshape(len(self._points), self._dim or 0)

    def __len__(self) -> int:
        return len(self._points)

    def __contains__(self, p) -> bool:
        return as_point(p) in self._index

    def __iter__(self) -> Iterator[Point]:
        return iter(self._points)
