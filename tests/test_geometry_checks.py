from scadmesh.geom import Pt2, Pt3
from scadmesh.geometry_checks import (
    CheckResult,
    faces_oriented,
    is_clockwise,
    mesh_watertight,
)
from scadmesh.polyhedron import Polyhedron

import pytest

SQUARE = [Pt2(0, 0), Pt2(0, 1), Pt2(1, 1), Pt2(1, 0)]


def _make_tetra():
    verts = [Pt3(0, 0, 0), Pt3(1, 0, 0), Pt3(0, 1, 0), Pt3(0, 0, 1)]
    faces = [[0, 1, 2], [0, 3, 1], [0, 2, 3], [1, 3, 2]]
    return Polyhedron(verts, faces)


def test_is_clockwise():
    assert is_clockwise(SQUARE)
    assert not is_clockwise(list(reversed(SQUARE)))


def test_closed_mesh_passes():
    tetra = _make_tetra()
    assert mesh_watertight(tetra).ok
    result = faces_oriented(tetra)
    assert isinstance(result, CheckResult)
    assert result
    assert result.warnings == []


def test_quads_are_checked():
    cube = Polyhedron.linear_extrude(SQUARE, 1.0)
    assert mesh_watertight(cube)
    assert faces_oriented(cube)


def test_missing_face_reports_boundary():
    tetra = _make_tetra()
    tetra.faces.pop()
    result = mesh_watertight(tetra)
    assert not result
    assert any('boundary' in w for w in result.warnings)
    assert not faces_oriented(tetra)


def test_flipped_face_is_watertight_but_not_oriented():
    tetra = _make_tetra()
    tetra.faces[0] = tetra.faces[0][::-1]
    assert mesh_watertight(tetra)
    result = faces_oriented(tetra)
    assert not result
    assert result.warnings


def test_empty_mesh_is_not_watertight():
    assert not mesh_watertight(Polyhedron([], []))


def test_non_polyhedron_rejected():
    with pytest.raises(ValueError):
        mesh_watertight([[0, 1, 2]])
    with pytest.raises(ValueError):
        faces_oriented(None)
