# digipath/domain/shapes.py
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

import numpy as np

from digipath.domain.points import Point


@dataclass(frozen=True)
class DigitalImage:
    """Binary image plus the lattice coordinate of its first cell."""

    image: np.ndarray  # bool
    lower: Point

    @property
    def upper(self) -> Point:
        return tuple(lo + n - 1 for lo, n in zip(self.lower, self.image.shape))

    def points(self) -> list[Point]:
        return points(self.image, self.lower)

    def boundary(self) -> list[Point]:
        return interior_boundary_points(self.image, self.lower)


def ball(radius: float, dim: int = 3, center: Sequence[int] | None = None) -> DigitalImage:
    center = tuple(center) if center is not None else (0,) * dim
    r = int(np.floor(radius))
    lower = tuple(c - r for c in center)
    grid = np.indices((2 * r + 1,) * dim) - r
    image = (grid**2).sum(axis=0) <= radius * radius
    return DigitalImage(image, lower)


def box(lower: Sequence[int], upper: Sequence[int]) -> DigitalImage:
    shape = tuple(hi - lo + 1 for lo, hi in zip(lower, upper))
    if any(n <= 0 for n in shape):
        raise ValueError(f"empty box {tuple(lower)}..{tuple(upper)}")
    return DigitalImage(np.ones(shape, dtype=bool), tuple(lower))


def from_points(pts: Iterable[Sequence[int]]) -> DigitalImage:
    arr = np.asarray([tuple(p) for p in pts], dtype=np.int64)
    if arr.ndim != 2 or len(arr) == 0:
        raise ValueError("need a non-empty list of points of equal dimension")
    lower = arr.min(axis=0)
    image = np.zeros(tuple(arr.max(axis=0) - lower + 1), dtype=bool)
    image[tuple((arr - lower).T)] = True
    return DigitalImage(image, tuple(int(c) for c in lower))


def threshold(volume: np.ndarray, lo: float = 0, hi: float = 255) -> np.ndarray:
    # same convention as thresholded .vol imports: lo < v <= hi
    volume = np.asarray(volume)
    return (volume > lo) & (volume <= hi)


def points(image: np.ndarray, lower: Sequence[int]) -> list[Point]:
    offs = np.asarray(lower, dtype=np.int64)
    return [tuple(int(c) for c in p) for p in np.argwhere(image) + offs]


def interior_boundary_points(image: np.ndarray, lower: Sequence[int]) -> list[Point]:
    """
    Shape points with at least one axis-neighbour outside the shape (cells
    outside the image count as outside): the voxels lying behind the
    surface of the shape. Raster order.
    """
    image = np.asarray(image, dtype=bool)
    padded = np.pad(image, 1, constant_values=False)
    inner = np.ones_like(image)
    core = tuple(slice(1, -1) for _ in range(image.ndim))
    for axis in range(image.ndim):
        for step in (-1, 1):
            inner &= np.roll(padded, step, axis=axis)[core]
    return points(image & ~inner, lower)
