# tests/domain/test_shapes.py
import numpy as np
import pytest

from digipath.domain import shapes


def test_ball_2d_points_and_boundary():
    b = shapes.ball(1, dim=2)
    assert b.lower == (-1, -1)
    assert b.upper == (1, 1)
    assert b.points() == [(-1, 0), (0, -1), (0, 0), (0, 1), (1, 0)]
    assert b.boundary() == [(-1, 0), (0, -1), (0, 1), (1, 0)]


def test_ball_center_offsets_lower_bound():
    b = shapes.ball(2, dim=3, center=(10, 0, -5))
    assert b.lower == (8, -2, -7)
    assert (10, 0, -5) in b.points()
    assert (10, 0, -5) not in b.boundary()


def test_box_boundary_skips_inner_cells():
    b = shapes.box((0, 0), (2, 2))
    assert len(b.points()) == 9
    assert (1, 1) not in b.boundary()
    assert len(b.boundary()) == 8


def test_box_rejects_empty_bounds():
    with pytest.raises(ValueError):
        shapes.box((0, 0), (-1, 2))


def test_from_points_roundtrip():
    img = shapes.from_points([(2, 3), (0, 0)])
    assert img.lower == (0, 0)
    assert img.image.shape == (3, 4)
    assert img.points() == [(0, 0), (2, 3)]


def test_threshold_interval():
    vol = np.array([0, 1, 5, 255, 256])
    assert shapes.threshold(vol, 0, 255).tolist() == [False, True, True, True, False]
