# digipath/search/shortest_paths.py
import heapq
import math
import time
from enum import Enum
from typing import NamedTuple

import numpy as np

from digipath.domain.points import Index, Point
from digipath.errors import InvalidStateError, NotVisitedError
from digipath.search.hooks import NoopHooks, SearchHooks


class SearchPhase(Enum):
    UNSEEDED = "unseeded"
    ACTIVE = "active"
    FINISHED = "finished"


class Node(NamedTuple):
    index: Index
    ancestor: Index
    distance: float


class ShortestPaths:
    """
    Single-source best-first expansion over the implicit tangency graph.

    The graph only has to offer point(i), neighbors(i, opt) and size. Each
    instance owns its bookkeeping, so several searches can share one graph.
    Improved frontier keys are pushed again rather than decreased; stale
    entries are skipped on pop because their index is already visited.
    """

    def __init__(self, graph, opt: float, *, hooks: SearchHooks | None = None, search_id: int = 0):
        self.graph = graph
        self.opt = opt
        self.search_id = search_id
        self._hooks = hooks or NoopHooks()
        self._phase = SearchPhase.UNSEEDED
        self._source: Index | None = None
        self._distance: dict[Index, float] = {}  # settled (and the seeded source)
        self._tentative: dict[Index, float] = {}  # best key pushed per frontier index
        self._ancestor: dict[Index, Index] = {}
        self._visited: set[Index] = set()
        self._q: list[tuple[float, int, Index, Index]] = []
        self._seq = 0
        self._current: Node | None = None
        self._t0 = 0.0

    # ------------------ state --------------------------

    @property
    def phase(self) -> SearchPhase:
        return self._phase

    @property
    def source(self) -> Index | None:
        return self._source

    @property
    def size(self) -> int:
        return self.graph.size

    @property
    def settled_count(self) -> int:
        return len(self._visited)

    def finished(self) -> bool:
        return self._phase is SearchPhase.FINISHED

    def current(self) -> Node:
        """Last settled node; right after init() this is the pending source."""
        if self._current is None:
            raise InvalidStateError("current() called before init()")
        return self._current

    @staticmethod
    def infinity() -> float:
        return math.inf

    # ------------------ driving ------------------------

    def init(self, source: Index) -> "ShortestPaths":
        if self._phase is not SearchPhase.UNSEEDED:
            raise InvalidStateError(f"init() called on a {self._phase.value} search")
        self.graph.point(source)  # range check
        self._source = source
        self._distance[source] = 0.0
        self._tentative[source] = 0.0
        self._push(source, source, 0.0)
        self._current = Node(source, source, 0.0)
        self._phase = SearchPhase.ACTIVE
        self._t0 = time.perf_counter()
        self._hooks.search_start(
            search_id=self.search_id, source=source, opt=self.opt, size=self.size
        )
        return self

    def expand(self) -> Node:
        if self._phase is SearchPhase.UNSEEDED:
            raise InvalidStateError("expand() called before init()")
        if self._phase is SearchPhase.FINISHED:
            raise InvalidStateError("expand() called on a finished search")

        d, _, i, a = heapq.heappop(self._q)
        while i in self._visited:
            d, _, i, a = heapq.heappop(self._q)

        self._visited.add(i)
        self._ancestor[i] = a
        self._distance[i] = d
        self._tentative.pop(i, None)
        node = Node(i, a, d)
        self._current = node

        for j, w in self.graph.neighbors(i, self.opt):
            if j in self._visited:
                continue
            if w < 0:
                self._hooks.error("negative_edge_weight", search_id=self.search_id, i=i, j=j, w=w)
                raise ValueError(f"negative edge weight {w} between {i} and {j}")
            cand = d + w
            if cand < self._tentative.get(j, math.inf):
                self._tentative[j] = cand
                self._push(j, i, cand)

        # keep the heap top fresh so finished() flips on the last settle
        while self._q and self._q[0][2] in self._visited:
            heapq.heappop(self._q)

        self._hooks.settle(
            node, search_id=self.search_id, step=len(self._visited), frontier=len(self._q)
        )
        if not self._q:
            self._phase = SearchPhase.FINISHED
            self._hooks.search_end(
                search_id=self.search_id,
                settled=len(self._visited),
                last_distance=d,
                wall_ms=(time.perf_counter() - self._t0) * 1000,
            )
        return node

    def run(self, max_steps: int | None = None) -> int:
        """Expand until finished or max_steps settles; returns the settles done."""
        if self._phase is SearchPhase.UNSEEDED:
            raise InvalidStateError("run() called before init()")
        n = 0
        while not self.finished():
            if max_steps is not None and n >= max_steps:
                break
            self.expand()
            n += 1
        return n

    def _push(self, i: Index, ancestor: Index, d: float) -> None:
        self._seq += 1
        heapq.heappush(self._q, (d, self._seq, i, ancestor))

    # ------------------ queries ------------------------

    def is_visited(self, i: Index) -> bool:
        return i in self._visited

    def distance(self, i: Index) -> float:
        return self._distance.get(i, math.inf)

    def ancestor(self, i: Index) -> Index:
        if i not in self._visited:
            raise NotVisitedError(i)
        return self._ancestor[i]

    def path_to_source(self, i: Index) -> list[Index]:
        """Indices from i back to the source, both included."""
        if i not in self._visited:
            raise NotVisitedError(i)
        path = [i]
        while path[-1] != self._source:
            path.append(self._ancestor[path[-1]])
        return path

    def point(self, i: Index) -> Point:
        return self.graph.point(i)

    def distances(self) -> np.ndarray:
        out = np.full(self.size, math.inf)
        for i in self._visited:
            out[i] = self._distance[i]
        return out

    def ancestors(self) -> np.ndarray:
        out = np.full(self.size, -1, dtype=np.int64)
        for i, a in self._ancestor.items():
            out[i] = a
        return out
