# digipath/geometry/tangency.py
import math
from collections.abc import Iterable

from digipath.app.protocols import OracleFactory, TangencyOracle
from digipath.domain.cells import cell_cover, codimension, incident_voxels, is_primitive
from digipath.domain.points import Index, PointIndex

_EPS = 1e-9

# secure on 3D lattices
DEFAULT_OPT = math.sqrt(3.0)


def secure_threshold(dim: int) -> float:
    return math.sqrt(dim)


def checked_codimension(opt: float, dim: int) -> int:
    """Highest cell codimension inspected along a chord for this opt."""
    if math.isnan(opt) or opt < 0:
        raise ValueError(f"opt must be >= 0, got {opt!r}")
    if math.isinf(opt):
        return dim
    # sqrt(3) ** 2 lands just under 3
    return min(dim, math.floor(opt * opt + _EPS))


class FullConvexityOracle(TangencyOracle):
    """
    Cotangency by full convexity: the chord [a, b] is tangent when, for every
    cell it meets, all voxels around that cell belong to the point set.

    opt selects which met cells are inspected: those of codimension up to
    floor(opt^2), plus every voxel. With opt >= sqrt(d) the test is exact.
    Lower values skip the edges and vertices where a chord slips between
    diagonal voxels, which is faster but may accept chords leaving the shape.

    Chords going through another lattice point are rejected. Such a point is
    itself in the shape, and the split chord has the same length.
    """

    def __init__(self, registry: PointIndex):
        self.registry = registry
        self.dim = registry.dim or 0
        self._points = frozenset(registry)

    def is_secure(self, opt: float) -> bool:
        return checked_codimension(opt, self.dim) >= self.dim

    def candidates(self, i: Index) -> Iterable[Index]:
        return range(len(self.registry))

    def is_tangent(self, i: Index, j: Index, opt: float) -> bool:
        if i == j:
            return False
        a, b = self.registry.point(i), self.registry.point(j)
        if not is_primitive(a, b):
            return False
        max_codim = checked_codimension(opt, self.dim)
        for c in cell_cover(a, b):
            k = codimension(c)
            if k == 1 or k > max_codim:
                # a face only touches the voxels met just before and after it
                continue
            if not all(p in self._points for p in incident_voxels(c)):
                return False
        return True


class FixedAdjacencyOracle(TangencyOracle):
    """Explicit undirected edge list; ignores opt. Handy for exercising the search alone."""

    def __init__(self, edges: Iterable[tuple[Index, Index]]):
        self._adj: dict[Index, set[Index]] = {}
        for u, v in edges:
            if u == v:
                continue
            self._adj.setdefault(u, set()).add(v)
            self._adj.setdefault(v, set()).add(u)

    def is_secure(self, opt: float) -> bool:
        return True

    def candidates(self, i: Index) -> Iterable[Index]:
        return sorted(self._adj.get(i, ()))

    def is_tangent(self, i: Index, j: Index, opt: float) -> bool:
        return j in self._adj.get(i, ())


def fixed_adjacency(edges: Iterable[tuple[Index, Index]]) -> OracleFactory:
    edges = list(edges)
    return lambda registry: FixedAdjacencyOracle(edges)
