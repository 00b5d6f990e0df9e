"""Validation helpers for scadmesh meshes."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from typing import Iterable, List, Sequence

from scadmesh.geom import Pt2, epsilon
from scadmesh.triangulator import signed_area


def _require_polyhedron(poly, name: str) -> None:
    from scadmesh.polyhedron import Polyhedron

    if not isinstance(poly, Polyhedron):
        raise ValueError('{} expects a Polyhedron'.format(name))


def _face_edges(face: Sequence[int]) -> Iterable[tuple[int, int]]:
    n = len(face)
    for i in range(n):
        yield face[i], face[(i + 1) % n]


def is_clockwise(points: Sequence[Pt2]) -> bool:
    """Return ``True`` if a closed 2D loop winds clockwise."""

    return signed_area(points) < -epsilon


def mesh_watertight(poly) -> "CheckResult":
    _require_polyhedron(poly, 'mesh_watertight')

    edges = Counter()
    for face in poly.faces:
        for a, b in _face_edges(face):
            edges[_edge_key(a, b)] += 1

    boundary = [edge for edge, count in edges.items() if count == 1]
    invalid = [edge for edge, count in edges.items() if count > 2]

    warnings: List[str] = []
    ok = True
    if not edges:
        ok = False
        warnings.append('mesh has no faces')
    if boundary:
        ok = False
        warnings.append(f'{len(boundary)} boundary edges detected')
    if invalid:
        ok = False
        warnings.append(f'edges with multiplicity >2: {invalid}')

    return CheckResult(ok, warnings)


def faces_oriented(poly) -> "CheckResult":
    """Every directed edge must appear once and its reverse once."""

    _require_polyhedron(poly, 'faces_oriented')

    directed = Counter()
    for face in poly.faces:
        for edge in _face_edges(face):
            directed[edge] += 1

    repeated = [edge for edge, count in directed.items() if count > 1]
    unmatched = [edge for edge in directed if (edge[1], edge[0]) not in directed]

    warnings: List[str] = []
    if repeated:
        warnings.append(f'directed edges used more than once: {repeated[:10]}')
    if unmatched:
        warnings.append(f'{len(unmatched)} edges without a reversed partner')
    return CheckResult(not warnings, warnings)


def _edge_key(a: int, b: int) -> tuple[int, int]:
    return (a, b) if a < b else (b, a)


@dataclass
class CheckResult:
    ok: bool
    warnings: List[str]

    def __bool__(self) -> bool:
        return self.ok


__all__ = [
    'CheckResult',
    'is_clockwise',
    'faces_oriented',
    'mesh_watertight',
]
