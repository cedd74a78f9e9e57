# tests/search/test_shortest_paths.py
import math

import numpy as np
import pytest

from digipath.errors import IndexOutOfRangeError, InvalidStateError, NotVisitedError
from digipath.geometry.tangency import fixed_adjacency
from digipath.geometry.tangency_computer import TangencyComputer
from digipath.search.shortest_paths import SearchPhase, ShortestPaths

SQ3 = math.sqrt(3.0)


@pytest.fixture
def line3() -> TangencyComputer:
    return TangencyComputer([(0, 0, 0), (1, 0, 0), (2, 0, 0)])


@pytest.fixture
def lshape() -> TangencyComputer:
    # 5x2 bar plus a 2x3 arm; axis neighbours are always tangent, so it is connected
    pts = [(x, y) for x in range(5) for y in range(2)]
    pts += [(x, y) for x in range(2) for y in range(2, 5)]
    return TangencyComputer(pts).precompute(SQ3)


def test_collinear_points(line3):
    sp = line3.make_shortest_paths(SQ3).init(0)
    sp.run()
    assert sp.finished()
    assert sp.distance(2) == pytest.approx(2.0)
    assert sp.path_to_source(2)[::-1] == [0, 1, 2]
    assert sp.ancestor(1) == 0
    assert sp.ancestor(0) == 0


def test_solid_box_distances_are_euclidean():
    tc = TangencyComputer([(x, y, z) for x in range(3) for y in range(3) for z in range(2)])
    sp = tc.make_shortest_paths(SQ3).init(0)
    sp.run()
    for t in range(tc.size):
        assert sp.distance(t) == pytest.approx(math.dist(tc.point(0), tc.point(t)))


def test_concave_corner_forces_a_detour(lshape):
    sp = lshape.make_shortest_paths(SQ3).init(lshape.index((4, 1)))
    sp.run()
    # the straight chord to (1, 4) leaves the shape through the missing corner
    assert sp.distance(lshape.index((1, 4))) > math.dist((4, 1), (1, 4)) + 1e-6


def test_fresh_search_state(line3):
    sp = line3.make_shortest_paths()
    assert sp.phase is SearchPhase.UNSEEDED
    assert not sp.finished()
    assert sp.infinity() == math.inf
    with pytest.raises(InvalidStateError):
        sp.current()
    with pytest.raises(InvalidStateError):
        sp.expand()

    sp.init(0)
    assert sp.current() == (0, 0, 0.0)
    assert sp.distance(0) == 0.0
    assert sp.distance(1) == math.inf
    assert not sp.is_visited(0)
    with pytest.raises(InvalidStateError):
        sp.init(1)


def test_init_rejects_unknown_source(line3):
    with pytest.raises(IndexOutOfRangeError):
        line3.make_shortest_paths().init(3)


def test_exactly_n_expands_on_connected_set(lshape):
    sp = lshape.make_shortest_paths(SQ3).init(0)
    n = 0
    while not sp.finished():
        node = sp.expand()
        assert node == sp.current()
        n += 1
    assert n == lshape.size
    assert sp.settled_count == lshape.size
    with pytest.raises(InvalidStateError):
        sp.expand()


def test_settle_order_is_monotone(lshape):
    sp = lshape.make_shortest_paths(SQ3).init(5)
    last = 0.0
    while not sp.finished():
        d = sp.expand().distance
        assert d >= last - 1e-12
        last = d


def test_distances_satisfy_triangle_inequality(lshape):
    sp = lshape.make_shortest_paths(SQ3).init(0)
    sp.run()
    for i in range(lshape.size):
        for j, w in lshape.neighbors(i, SQ3):
            assert sp.distance(j) <= sp.distance(i) + w + 1e-9


def test_path_length_equals_distance(lshape):
    sp = lshape.make_shortest_paths(SQ3).init(0)
    sp.run()
    for t in range(lshape.size):
        path = sp.path_to_source(t)
        assert path[0] == t and path[-1] == 0
        length = sum(lshape.edge_weight(a, b) for a, b in zip(path, path[1:]))
        assert length == pytest.approx(sp.distance(t))


def test_queries_are_idempotent(lshape):
    sp = lshape.make_shortest_paths(SQ3).init(3)
    sp.run()
    assert sp.distance(7) == sp.distance(7)
    assert sp.path_to_source(7) == sp.path_to_source(7)


def test_unreached_points_stay_at_infinity():
    tc = TangencyComputer(
        [(0, 0), (1, 0), (5, 5)], oracle_factory=fixed_adjacency([(0, 1)])
    )
    sp = tc.make_shortest_paths().init(0)
    assert sp.run() == 2
    assert sp.finished()
    assert sp.distance(2) == math.inf
    assert not sp.is_visited(2)
    with pytest.raises(NotVisitedError):
        sp.ancestor(2)
    with pytest.raises(NotVisitedError) as exc:
        sp.path_to_source(2)
    assert exc.value.index == 2
    assert sp.distances().tolist() == [0.0, 1.0, math.inf]
    assert sp.ancestors().tolist() == [0, 0, -1]


def test_run_with_step_budget(lshape):
    sp = lshape.make_shortest_paths(SQ3).init(0)
    assert sp.run(max_steps=4) == 4
    assert sp.settled_count == 4
    assert not sp.finished()
    sp.run()
    assert sp.finished()


def test_searches_on_one_graph_are_independent(lshape):
    a = lshape.make_shortest_paths(SQ3).init(0)
    b = lshape.make_shortest_paths(SQ3).init(lshape.size - 1)
    a.run()
    assert b.settled_count == 0
    b.run()
    assert a.distance(lshape.size - 1) == pytest.approx(b.distance(0))


def test_insecure_opt_gives_no_longer_paths(lshape):
    secure = lshape.make_shortest_paths(SQ3).init(0)
    secure.run()
    fast = lshape.make_shortest_paths(0.0).init(0)
    fast.run()
    assert np.all(fast.distances() <= secure.distances() + 1e-9)


class _NegativeGraph:
    size = 2

    def point(self, i):
        return (i,)

    def neighbors(self, i, opt):
        return iter([(1 - i, -1.0)])


def test_negative_weight_is_rejected():
    sp = ShortestPaths(_NegativeGraph(), 0.0).init(0)
    with pytest.raises(ValueError):
        sp.expand()
