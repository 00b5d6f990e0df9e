import math

import pytest

from scadmesh.geom import Pt2, Pt3
from scadmesh.geometry_checks import faces_oriented, mesh_watertight
from scadmesh.polyhedron import Polyhedron
from scadmesh.profiles import circle, rounded_rect, star
from scadmesh.triangulator import TriangulationError
from scadmesh.xform import RotZ

SQUARE = [Pt2(0, 0), Pt2(0, 1), Pt2(1, 1), Pt2(1, 0)]
RING_PROFILE = [Pt2(1, 0), Pt2(1, 1), Pt2(2, 1), Pt2(2, 0)]


def _signed_volume(poly):
    """divergence-theorem volume; negative for clockwise-outside faces"""
    total = 0.0
    for a, b, c in poly.triangles():
        pa, pb, pc = poly.points[a], poly.points[b], poly.points[c]
        total += pa.dot(pb.cross(pc))
    return total / 6.0


def _assert_closed(poly):
    poly.validate()
    watertight = mesh_watertight(poly)
    oriented = faces_oriented(poly)
    assert watertight, watertight.warnings
    assert oriented, oriented.warnings


def test_linear_extrude_square():
    poly = Polyhedron.linear_extrude(SQUARE, 2.0)
    assert len(poly.points) == 8
    assert len(poly.faces) == 4 + 2 * 2
    assert [p.z for p in poly.points] == [0.0] * 4 + [2.0] * 4
    assert poly.points[5] == Pt3(0, 1, 2.0)
    assert [0, 1, 5, 4] in poly.faces
    _assert_closed(poly)
    assert _signed_volume(poly) == pytest.approx(-2.0)


@pytest.mark.parametrize('profile', [star(5, 1.0, 3.0), rounded_rect(4, 3, 0.5, 3), circle(2, 24)])
def test_linear_extrude_profiles_are_closed(profile):
    poly = Polyhedron.linear_extrude(profile, 1.5)
    n = len(profile)
    assert len(poly.faces) == n + 2 * (n - 2)
    _assert_closed(poly)


def test_linear_extrude_rejects_bad_input():
    with pytest.raises(ValueError):
        Polyhedron.linear_extrude(SQUARE[:2], 1.0)
    with pytest.raises(ValueError):
        Polyhedron.linear_extrude(SQUARE, 0.0)


@pytest.mark.parametrize('hole', [
    [Pt2(1, 1), Pt2(2, 1), Pt2(2, 2), Pt2(1, 2)],
    [Pt2(1, 1), Pt2(1, 2), Pt2(2, 2), Pt2(2, 1)],
])
def test_linear_extrude_with_hole(hole):
    outer = [Pt2(0, 0), Pt2(0, 4), Pt2(4, 4), Pt2(4, 0)]
    poly = Polyhedron.linear_extrude(outer, 1.0, holes=[hole])
    assert len(poly.points) == 16
    assert len(poly.faces) == 8 + 8 + 4 + 4
    _assert_closed(poly)
    assert _signed_volume(poly) == pytest.approx(-15.0)


def test_loft():
    lower = circle(2.0, 12)
    upper = circle(1.0, 12)
    poly = Polyhedron.loft(lower, upper, 3.0)
    assert len(poly.points) == 24
    assert poly.points[12].x == pytest.approx(1.0)
    _assert_closed(poly)
    with pytest.raises(ValueError):
        Polyhedron.loft(lower, circle(1.0, 8), 3.0)


def test_cylinder():
    poly = Polyhedron.cylinder(1.0, 4.0, 16)
    assert len(poly.points) == 32
    assert poly.procedure.startswith('cylinder')
    _assert_closed(poly)


def test_rotate_extrude_full_turn_has_no_caps():
    poly = Polyhedron.rotate_extrude(RING_PROFILE, 360.0, 64)
    assert len(poly.points) == 4 * 64
    assert len(poly.faces) == 4 * 64
    assert all(len(f) == 4 for f in poly.faces)
    _assert_closed(poly)
    assert _signed_volume(poly) == pytest.approx(-3.0 * math.pi, rel=1e-2)


def test_rotate_extrude_half_turn_is_capped():
    poly = Polyhedron.rotate_extrude(RING_PROFILE, 180.0, 32)
    assert len(poly.points) == 4 * 33
    assert len(poly.faces) == 4 * 32 + 2 * 2
    _assert_closed(poly)
    assert _signed_volume(poly) == pytest.approx(-1.5 * math.pi, rel=1e-2)
    ## last ring lies in the -X half of the XZ plane
    assert poly.points[-1].x == pytest.approx(-2.0)


@pytest.mark.parametrize('degrees', [45.0, 90.0, 270.0])
def test_rotate_extrude_partial_angles_are_closed(degrees):
    poly = Polyhedron.rotate_extrude(RING_PROFILE, degrees, 8)
    _assert_closed(poly)
    assert _signed_volume(poly) < 0.0


@pytest.mark.parametrize('degrees,segments,profile', [
    (0.0, 8, RING_PROFILE),
    (361.0, 8, RING_PROFILE),
    (90.0, 2, RING_PROFILE),
    (90.0, 8, [Pt2(-1, 0), Pt2(-1, 1), Pt2(2, 1), Pt2(2, 0)]),
])
def test_rotate_extrude_rejects_bad_input(degrees, segments, profile):
    with pytest.raises(ValueError):
        Polyhedron.rotate_extrude(profile, degrees, segments)


def test_straight_sweep_matches_linear_extrude():
    profile = circle(2.0, 12)
    swept = Polyhedron.sweep(profile, [Pt3(0, 0, 0), Pt3(0, 0, 5)])
    extruded = Polyhedron.linear_extrude(profile, 5.0)
    assert len(swept.points) == len(extruded.points)
    for a, b in zip(swept.points, extruded.points):
        assert tuple(a) == pytest.approx(tuple(b), abs=1e-12)
    assert sorted(map(tuple, swept.faces)) == sorted(map(tuple, extruded.faces))


def test_sweep_bent_path():
    path = [Pt3(0, 0, 0), Pt3(10, 0, 0), Pt3(10, 10, 0)]
    poly = Polyhedron.sweep(circle(1.0, 8), path)
    assert len(poly.points) == 24
    assert len(poly.faces) == 8 * 2 + 2 * 6
    _assert_closed(poly)
    assert _signed_volume(poly) < 0.0
    ## the first ring is perpendicular to the first path segment
    assert all(p.x == pytest.approx(0.0, abs=1e-9) for p in poly.points[:8])


def test_sweep_closed_path():
    path = [Pt3(0, 0, 0), Pt3(10, 0, 0), Pt3(10, 10, 0), Pt3(0, 10, 0)]
    poly = Polyhedron.sweep(circle(1.0, 8), path, closed=True)
    assert len(poly.faces) == 8 * 4
    _assert_closed(poly)


def test_sweep_twist():
    profile = [Pt2(2, 0), Pt2(0, -2), Pt2(-2, 0), Pt2(0, 2)]
    poly = Polyhedron.sweep(profile, [Pt3(0, 0, 0), Pt3(0, 0, 1), Pt3(0, 0, 2)],
                            twist_degrees=90.0)
    assert tuple(poly.points[4]) == pytest.approx((2 ** 0.5, 2 ** 0.5, 1.0))
    assert tuple(poly.points[8]) == pytest.approx((0.0, 2.0, 2.0), abs=1e-12)
    _assert_closed(poly)


@pytest.mark.parametrize('path,closed', [
    ([Pt3(0, 0, 0), Pt3(0, 0, 0), Pt3(0, 0, 1)], False),
    ([Pt3(0, 0, 0), Pt3(1, 0, 0), Pt3(1, 1, 0), Pt3(0, 0, 0)], True),
    ([Pt3(0, 0, 0)], False),
    ([Pt3(0, 0, 0), Pt3(1, 0, 0)], True),
])
def test_sweep_rejects_bad_paths(path, closed):
    with pytest.raises(ValueError):
        Polyhedron.sweep(circle(1.0, 6), path, closed=closed)


def test_triangles_split_quads():
    poly = Polyhedron.linear_extrude(SQUARE, 1.0)
    tris = poly.triangles()
    assert len(tris) == 4 + 2 * 4
    assert all(len(t) == 3 for t in tris)
    vertices, faces = poly.as_arrays()
    assert vertices.shape == (8, 3)
    assert faces.shape == (12, 3)


def test_validate_catches_bad_faces():
    poly = Polyhedron([Pt3(0, 0, 0), Pt3(1, 0, 0), Pt3(0, 1, 0)], [[0, 1, 3]])
    with pytest.raises(ValueError):
        poly.validate()
    poly = Polyhedron([Pt3(0, 0, 0), Pt3(1, 0, 0), Pt3(0, 1, 0)], [[0, 1]])
    with pytest.raises(ValueError):
        poly.validate()


def test_transforms_are_chainable():
    poly = Polyhedron.linear_extrude(SQUARE, 1.0)
    result = poly.translate(Pt3(1, 0, 0)).rotate_z(90.0)
    assert result is poly
    assert tuple(poly.points[0]) == pytest.approx((0.0, 1.0, 0.0), abs=1e-12)
    poly.apply_matrix(RotZ(-90.0))
    assert tuple(poly.points[0]) == pytest.approx((1.0, 0.0, 0.0), abs=1e-12)
    poly.rotate_x(180.0).rotate_y(180.0)
    assert poly.points[4].z == pytest.approx(1.0)


def test_to_trimesh():
    trimesh = pytest.importorskip("trimesh")
    mesh = Polyhedron.linear_extrude(SQUARE, 2.0).to_trimesh()
    assert isinstance(mesh, trimesh.Trimesh)
    assert mesh.is_watertight
    assert mesh.volume == pytest.approx(2.0)


def test_linear_extrude_with_hole_rejects_counter_clockwise_outline():
    outline = list(reversed(circle(5.0, 16)))
    with pytest.raises(TriangulationError):
        Polyhedron.linear_extrude(outline, 2.0)
    with pytest.raises(TriangulationError):
        Polyhedron.linear_extrude(outline, 2.0, holes=[circle(2.0, 8)])
    poly = Polyhedron.linear_extrude(circle(5.0, 16), 2.0, holes=[circle(2.0, 8)])
    _assert_closed(poly)
