# digipath/geometry/tangency_computer.py
import math
from collections.abc import Iterable, Iterator, Sequence

from digipath.app.protocols import OracleFactory, TangencyOracle
from digipath.domain.points import Index, Point, PointIndex
from digipath.errors import InvalidStateError
from digipath.geometry.tangency import DEFAULT_OPT, FullConvexityOracle, secure_threshold
from digipath.search.hooks import NoopHooks, SearchHooks
from digipath.search.shortest_paths import ShortestPaths

Adjacency = tuple[tuple[tuple[Index, float], ...], ...]


class TangencyComputer:
    """
    Implicit weighted graph over a digital point set.

    Edges are the tangent chords reported by the oracle, weighted by their
    Euclidean length. neighbors() tests every candidate the oracle names, so
    one call costs O(N) oracle tests with the full-convexity oracle (each
    linear in the chord length). precompute() pays that once per opt and
    freezes the result, after which searches only read shared state.
    """

    def __init__(
        self,
        points: Iterable[Sequence[int]] | None = None,
        *,
        oracle_factory: OracleFactory = FullConvexityOracle,
        hooks: SearchHooks | None = None,
    ):
        self.registry = PointIndex()
        self.oracle: TangencyOracle | None = None
        self._oracle_factory = oracle_factory
        self._hooks = hooks or NoopHooks()
        self._adjacency: dict[float, Adjacency] = {}
        self._warned: set[float] = set()
        self._search_ids = 0
        if points is not None:
            self.init(points)

    def init(self, points: Iterable[Sequence[int]]) -> "TangencyComputer":
        if self.oracle is not None:
            raise InvalidStateError("TangencyComputer is already initialized")
        for p in points:
            self.registry.register(p)
        self.oracle = self._oracle_factory(self.registry)
        return self

    # ------------------ points -------------------------

    @property
    def size(self) -> int:
        return len(self.registry)

    @property
    def dim(self) -> int | None:
        return self.registry.dim

    def point(self, i: Index) -> Point:
        return self.registry.point(i)

    def index(self, p: Sequence[int]) -> Index:
        return self.registry.index(p)

    def edge_weight(self, i: Index, j: Index) -> float:
        return math.dist(self.point(i), self.point(j))

    # ------------------ graph --------------------------

    def is_tangent(self, i: Index, j: Index, opt: float = DEFAULT_OPT) -> bool:
        self.point(i)
        self.point(j)
        return self._require_oracle().is_tangent(i, j, opt)

    def neighbors(self, i: Index, opt: float = DEFAULT_OPT) -> Iterator[tuple[Index, float]]:
        oracle = self._require_oracle()
        self.point(i)
        table = self._adjacency.get(opt)
        if table is not None:
            return iter(table[i])
        return self._scan(oracle, i, opt)

    def _scan(self, oracle: TangencyOracle, i: Index, opt: float) -> Iterator[tuple[Index, float]]:
        pi = self.registry.point(i)
        for j in oracle.candidates(i):
            if oracle.is_tangent(i, j, opt):
                yield j, math.dist(pi, self.registry.point(j))

    def precompute(self, opt: float = DEFAULT_OPT) -> "TangencyComputer":
        oracle = self._require_oracle()
        if opt not in self._adjacency:
            self._adjacency[opt] = tuple(
                tuple(self._scan(oracle, i, opt)) for i in range(self.size)
            )
        return self

    def make_shortest_paths(
        self, opt: float = DEFAULT_OPT, *, hooks: SearchHooks | None = None
    ) -> ShortestPaths:
        oracle = self._require_oracle()
        if not oracle.is_secure(opt) and opt not in self._warned:
            self._warned.add(opt)
            self._hooks.warning(
                "insecure_opt", opt=opt, threshold=secure_threshold(self.dim or 0)
            )
        self._search_ids += 1
        return ShortestPaths(self, opt, hooks=hooks or self._hooks, search_id=self._search_ids)

    def _require_oracle(self) -> TangencyOracle:
        if self.oracle is None:
            raise InvalidStateError("TangencyComputer used before init()")
        return self.oracle
