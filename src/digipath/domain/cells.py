# digipath/domain/cells.py
"""
Khalimsky cells of the cubical grid.

A lattice point p is the voxel cell 2p; its faces, edges and vertices are the
cells 2p + e with e in {-1, 0, 1}^d. The codimension of a cell is its number
of odd coordinates (0 for voxels, d for vertices).
"""

from collections.abc import Iterable, Iterator, Sequence
from fractions import Fraction
from itertools import product
from math import floor, gcd

from digipath.domain.points import Point

Cell = tuple[int, ...]

HALF = Fraction(1, 2)


def voxel(p: Sequence[int]) -> Cell:
    return tuple(2 * c for c in p)


def incident_voxels(cell: Cell) -> Iterator[Point]:
    """Lattice points whose voxel has this cell in its closure (2^codim of them)."""
    choices = [((c - 1) // 2, (c + 1) // 2) if c & 1 else (c // 2,) for c in cell]
    return product(*choices)


def codimension(cell: Cell) -> int:
    return sum(c & 1 for c in cell)


def is_primitive(a: Sequence[int], b: Sequence[int]) -> bool:
    """True when the chord [a, b] holds no lattice point besides its ends."""
    g = 0
    for x, y in zip(a, b):
        g = gcd(g, y - x)
    return g == 1


def _cell_at(coords: Iterable[Fraction]) -> Cell:
    out = []
    for x in coords:
        fl = floor(x)
        if x - fl == HALF:
            out.append(2 * fl + 1)
        else:
            out.append(2 * floor(x + HALF))
    return tuple(out)


def chord_breaks(a: Sequence[int], b: Sequence[int]) -> list[Fraction]:
    """Parameters t in [0, 1] where a + t(b - a) crosses a half-integer plane."""
    ts = {Fraction(0), Fraction(1)}
    for ak, bk in zip(a, b):
        dk = bk - ak
        if dk == 0:
            continue
        for m in range(min(ak, bk), max(ak, bk)):
            ts.add(Fraction(2 * m + 1 - 2 * ak, 2 * dk))
    return sorted(ts)


def cell_cover(a: Sequence[int], b: Sequence[int]) -> Iterator[Cell]:
    """
    Yield the cells met by the closed segment [a, b], in order from a to b.

    Between two consecutive breaks the segment stays inside one open voxel;
    at a break it sits on a lower-dimensional cell. Arithmetic is exact.
    """
    d = [bk - ak for ak, bk in zip(a, b)]

    def at(t: Fraction) -> Cell:
        return _cell_at(ak + t * dk for ak, dk in zip(a, d))

    ts = chord_breaks(a, b)
    yield at(ts[0])
    for t0, t1 in zip(ts, ts[1:]):
        yield at((t0 + t1) / 2)
        yield at(t1)
