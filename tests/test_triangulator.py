import pytest
from loguru import logger

from scadmesh.geom import Pt2, Pt3
from scadmesh.profiles import circle, star
from scadmesh.triangulator import (
    TriangulationError,
    in_triangle,
    is_ccw,
    project_to_plane,
    signed_area,
    triangulate2d,
    triangulate2d_rev,
    triangulate3d,
    triangulate3d_rev,
    triangulate_polygon,
)

SQUARE = [Pt2(0, 0), Pt2(0, 1), Pt2(1, 1), Pt2(1, 0)]
L_SHAPE = [Pt2(0, 0), Pt2(0, 2), Pt2(1, 2), Pt2(1, 1), Pt2(2, 1), Pt2(2, 0)]


def _tri_areas(points, indices):
    return [signed_area([points[indices[i]], points[indices[i + 1]], points[indices[i + 2]]])
            for i in range(0, len(indices), 3)]


def test_predicates():
    assert is_ccw(Pt2(0, 0), Pt2(1, 0), Pt2(0, 1))
    assert not is_ccw(Pt2(0, 0), Pt2(0, 1), Pt2(1, 0))
    assert in_triangle(Pt2(0.2, 0.2), Pt2(0, 0), Pt2(1, 0), Pt2(0, 1))
    assert in_triangle(Pt2(0.5, 0.0), Pt2(0, 0), Pt2(1, 0), Pt2(0, 1))
    assert not in_triangle(Pt2(1, 1), Pt2(0, 0), Pt2(1, 0), Pt2(0, 1))
    assert signed_area(SQUARE) == pytest.approx(-1.0)
    assert signed_area(list(reversed(SQUARE))) == pytest.approx(1.0)


def test_unit_square():
    tris = triangulate2d(SQUARE)
    assert len(tris) == 6
    areas = _tri_areas(SQUARE, tris)
    assert sum(areas) == pytest.approx(-1.0)
    assert all(a < 0.0 for a in areas)


def test_reversed_variant_flips_each_triangle():
    tris = triangulate2d(SQUARE)
    rev = triangulate2d_rev(SQUARE)
    for i in range(0, len(tris), 3):
        assert rev[i:i + 3] == [tris[i + 2], tris[i + 1], tris[i]]


@pytest.mark.parametrize('points', [SQUARE, L_SHAPE, star(5, 1.0, 2.0), circle(3.0, 17)])
def test_triangle_count_and_area(points):
    tris = triangulate2d(points)
    assert len(tris) == 3 * (len(points) - 2)
    assert set(tris) == set(range(len(points)))
    areas = _tri_areas(points, tris)
    assert sum(areas) == pytest.approx(signed_area(points))
    assert all(a <= 0.0 for a in areas)


def test_collinear_points_are_kept():
    pts = [Pt2(0, 0), Pt2(0, 0.5), Pt2(0, 1), Pt2(1, 1), Pt2(1, 0)]
    tris = triangulate2d(pts)
    assert len(tris) == 9
    assert sum(_tri_areas(pts, tris)) == pytest.approx(-1.0)


def test_counter_clockwise_input_rejected():
    with pytest.raises(TriangulationError):
        triangulate2d(list(reversed(SQUARE)))
    assert issubclass(TriangulationError, ValueError)


def test_too_few_points():
    with pytest.raises(ValueError):
        triangulate2d([Pt2(0, 0), Pt2(1, 0)])


def test_self_intersecting_polygon_fails_cleanly():
    bowtie = [Pt2(0, 0), Pt2(0, 2), Pt2(2, 0), Pt2(2, 2), Pt2(1, 3), Pt2(-1, 3)]
    with pytest.raises(TriangulationError):
        triangulate2d(bowtie)


@pytest.mark.parametrize('normal,expected', [
    (Pt3(1, 0, 0), (2, 3)),
    (Pt3(-1, 0, 0), (-2, 3)),
    (Pt3(0, 1, 0), (-1, 3)),
    (Pt3(0, -1, 0), (1, 3)),
    (Pt3(0, 0, 1), (1, 2)),
    (Pt3(0, 0, -1), (-1, 2)),
    (Pt3(1, 1, 0), (2, 3)),
    (Pt3(0, -1, -1), (1, 3)),
])
def test_projection_table(normal, expected):
    (p,) = project_to_plane([Pt3(1, 2, 3)], normal)
    assert tuple(p) == expected


def test_triangulate3d_side_wall():
    ## clockwise when seen from +X
    pts = [Pt3(5, 0, 0), Pt3(5, 0, 1), Pt3(5, 1, 1), Pt3(5, 1, 0)]
    tris = triangulate3d(pts, Pt3(1, 0, 0))
    assert len(tris) == 6
    rev = triangulate3d_rev(pts, Pt3(1, 0, 0))
    assert rev[:3] == tris[:3][::-1]
    with pytest.raises(TriangulationError):
        triangulate3d(pts, Pt3(-1, 0, 0))


def test_polygon_with_hole():
    outer = [Pt2(0, 0), Pt2(0, 4), Pt2(4, 4), Pt2(4, 0)]
    hole = [Pt2(1, 1), Pt2(2, 1), Pt2(2, 2), Pt2(1, 2)]
    tris = triangulate_polygon(outer, [hole])
    pts = outer + hole
    assert len(tris) == 3 * 8
    areas = _tri_areas(pts, tris)
    assert all(a <= 0.0 for a in areas)
    assert sum(areas) == pytest.approx(-15.0)


def test_polygon_without_holes_matches_area():
    pts = list(star(6, 1.0, 3.0))
    tris = triangulate_polygon(pts)
    assert len(tris) == 3 * (len(pts) - 2)
    assert sum(_tri_areas(pts, tris)) == pytest.approx(signed_area(pts))


def test_polygon_loops_need_three_points():
    with pytest.raises(ValueError):
        triangulate_polygon(SQUARE, [[Pt2(0.5, 0.5), Pt2(0.6, 0.5)]])


def test_polygon_rejects_counter_clockwise_outline():
    outer = [Pt2(0, 0), Pt2(4, 0), Pt2(4, 4), Pt2(0, 4)]
    hole = [Pt2(1, 1), Pt2(1, 2), Pt2(2, 2), Pt2(2, 1)]
    with pytest.raises(TriangulationError):
        triangulate_polygon(outer, [hole])


def test_degenerate_ears_are_clipped_with_warning():
    ## a collinear run along x=0 starting at index 0 clips as slivers
    pts = [Pt2(0, i / 10) for i in range(1, 11)] + [Pt2(1, 1), Pt2(1, 0), Pt2(0, 0)]
    messages = []
    handler_id = logger.add(messages.append, level="WARNING", format="{message}")
    try:
        tris = triangulate2d(pts)
    finally:
        logger.remove(handler_id)
    assert len(tris) == 3 * 11
    assert sum(_tri_areas(pts, tris)) == pytest.approx(-1.0)
    assert len(messages) == 1
    assert "degenerate" in messages[0]


def test_few_degenerate_ears_do_not_warn():
    messages = []
    handler_id = logger.add(messages.append, level="WARNING", format="{message}")
    try:
        triangulate2d(L_SHAPE)
    finally:
        logger.remove(handler_id)
    assert messages == []
