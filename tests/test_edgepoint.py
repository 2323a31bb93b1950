import numpy as np
import pytest

from ringtag.edgepoint import (
    EdgeMap,
    EdgePoint,
    edge_points_from_canny,
    received_more_vote_than,
)


def test_edge_point_norm_gradient():
    p = EdgePoint(1, 2, 3.0, 4.0)
    assert p.norm_gradient == pytest.approx(5.0)
    assert p.gradient == (3.0, 4.0)


def test_edge_point_initial_bookkeeping():
    p = EdgePoint(0, 0, 1.0, 0.0)
    assert (p.flow_length, p.processed, p.is_max, p.n_segment_out) == (0.0, 0, -1, -1)


def test_edge_point_str_format():
    p = EdgePoint(2, 3, 1.5, -2.0)
    assert str(p) == "quiver( 2 , 3,1.5,-2 ); "


def test_copy_resets_bookkeeping_and_keeps_geometry():
    p = EdgePoint(4, 5, -1.0, 2.0)
    p.flow_length = 7.5
    p.processed = 3
    p.is_max = 9
    p.n_segment_out = 2
    q = p.copy()
    assert (q.x, q.y, q.dx, q.dy) == (p.x, p.y, p.dx, p.dy)
    assert q.norm_gradient == p.norm_gradient
    assert (q.flow_length, q.processed, q.is_max, q.n_segment_out) == (0.0, 0, -1, -1)
    assert q is not p


def test_received_more_vote_than():
    a = EdgePoint(0, 0, 1.0, 1.0)
    b = EdgePoint(1, 1, 1.0, 1.0)
    a.is_max = 3
    b.is_max = 1
    assert received_more_vote_than(a, b) is True
    assert received_more_vote_than(b, a) is False
    b.is_max = 3
    assert received_more_vote_than(a, b) is False


def test_edge_map_add_and_get():
    m = EdgeMap(4, 3)
    p = m.add_point(2, 1, 0.5, -0.5)
    assert m.get(2, 1) is p
    assert m.get(0, 0) is None
    assert len(m) == 1
    assert m.shape == (4, 3)


def test_edge_map_iterates_in_insertion_order():
    m = EdgeMap(5, 5)
    coords = [(3, 0), (0, 4), (2, 2)]
    for x, y in coords:
        m.add_point(x, y, 1.0, 0.0)
    assert [(p.x, p.y) for p in m] == coords


def test_edge_map_out_of_bounds_raises():
    m = EdgeMap(2, 2)
    with pytest.raises(IndexError):
        m.add_point(2, 0, 1.0, 1.0)
    with pytest.raises(IndexError):
        m.get(0, -1)
    assert m.in_bounds(1, 1) is True
    assert m.in_bounds(1, 2) is False


def test_edge_map_duplicate_point_raises():
    m = EdgeMap(3, 3)
    m.add_point(1, 1, 1.0, 0.0)
    with pytest.raises(ValueError):
        m.add_point(1, 1, 0.0, 1.0)
    assert len(m) == 1


def test_edge_map_negative_size_raises():
    with pytest.raises(ValueError):
        EdgeMap(-1, 3)


def test_edge_points_from_canny_selects_255_in_row_major_order():
    edges = np.zeros((3, 4), dtype=np.uint8)
    edges[0, 3] = 255
    edges[2, 1] = 255
    edges[1, 0] = 254
    dx = np.arange(12, dtype=np.int16).reshape(3, 4)
    dy = -dx
    m = edge_points_from_canny(edges, dx, dy)
    assert m.shape == (4, 3)
    points = list(m)
    assert [(p.x, p.y) for p in points] == [(3, 0), (1, 2)]
    assert points[0].gradient == (float(dx[0, 3]), float(dy[0, 3]))
    assert points[1].gradient == (float(dx[2, 1]), float(dy[2, 1]))
    assert m.get(0, 1) is None


def test_edge_points_from_canny_shape_mismatch_raises():
    edges = np.zeros((3, 3), dtype=np.uint8)
    with pytest.raises(ValueError):
        edge_points_from_canny(edges, np.zeros((3, 2)), np.zeros((3, 3)))
    with pytest.raises(ValueError):
        edge_points_from_canny(np.zeros(5), np.zeros(5), np.zeros(5))