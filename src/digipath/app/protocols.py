from collections.abc import Callable, Iterable, Sequence
from typing import Protocol, runtime_checkable

from digipath.domain.points import Index, PointIndex


# ------------- Tangency --------------------
@runtime_checkable
class TangencyOracle(Protocol):
    """
    Responsibilities:
      • Decide whether the chord between two indexed points can be a shortest-path edge.
      • Name the indices worth testing against a given point.
    Answers must be deterministic and symmetric in (i, j) for a fixed opt.
    """

    def is_tangent(self, i: Index, j: Index, opt: float) -> bool: ...
    def is_secure(self, opt: float) -> bool: ...
    def candidates(self, i: Index) -> Iterable[Index]: ...


OracleFactory = Callable[[PointIndex], TangencyOracle]


# ------------- Distances --------------------
@runtime_checkable
class SeparableMetric(Protocol):
    """
    Integer-exact metric usable by the separable Voronoi map.
    power() must be a monotone, exactly comparable image of distance().
    """

    def power(self, a: Sequence[int], b: Sequence[int]) -> int: ...
    def distance(self, a: Sequence[int], b: Sequence[int]) -> float: ...
