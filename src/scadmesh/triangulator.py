"""Triangulation helpers for scadmesh meshes.

Simple polygons (extrusion caps, sweep caps) are triangulated with an
ear clipper that keeps the caller's vertex indices, so the triangles can
be dropped straight into a polyhedron face list.  Polygons with holes are
delegated to ``mapbox-earcut`` (the ear clipping implementation used by
Mapbox GL) and re-wound to the clockwise convention used everywhere else
in the package.

Every routine returns a flat list of indices, three per triangle.
"""

from __future__ import annotations

from typing import Iterable, List, Sequence, Tuple

import numpy as np
from loguru import logger

try:
    import mapbox_earcut as _earcut
except ImportError as exc:  # pragma: no cover - import guard
    raise ImportError(
        "mapbox-earcut must be installed to triangulate polygons with holes"
    ) from exc

from scadmesh.geom import Pt2, Pt3, TRIANGULATION_EPSILON

Indices = List[int]


class TriangulationError(ValueError):
    """Raised when a polygon cannot be triangulated."""


def is_ccw(a: Pt2, b: Pt2, c: Pt2) -> bool:
    """Return ``True`` if the triangle ``a, b, c`` winds counter-clockwise."""

    return (b.x - a.x) * (c.y - a.y) - (c.x - a.x) * (b.y - a.y) > 0.0


def _twice_area(a: Pt2, b: Pt2, c: Pt2) -> float:
    return abs((b.x - a.x) * (c.y - a.y) - (c.x - a.x) * (b.y - a.y))


def in_triangle(p: Pt2, a: Pt2, b: Pt2, c: Pt2) -> bool:
    """Barycentric containment test; points on an edge count as inside."""

    denom = (b.y - c.y) * (a.x - c.x) + (c.x - b.x) * (a.y - c.y)
    if abs(denom) < TRIANGULATION_EPSILON:
        return True
    denom = 1.0 / denom

    alpha = denom * ((b.y - c.y) * (p.x - c.x) + (c.x - b.x) * (p.y - c.y))
    if alpha < 0.0:
        return False
    beta = denom * ((c.y - a.y) * (p.x - c.x) + (a.x - c.x) * (p.y - c.y))
    if beta < 0.0:
        return False
    return 1.0 - alpha - beta >= 0.0


def signed_area(points: Sequence[Pt2]) -> float:
    """Shoelace area, positive for counter-clockwise loops."""

    total = 0.0
    n = len(points)
    for i in range(n):
        p = points[i]
        q = points[(i + 1) % n]
        total += p.x * q.y - q.x * p.y
    return total * 0.5


def project_to_plane(points: Sequence[Pt3], normal: Pt3) -> List[Pt2]:
    """Drop each point onto the principal plane best aligned with ``normal``.

    The mapping keeps a loop that is clockwise when viewed from the normal
    side clockwise in the projected coordinates.
    """

    ax = abs(normal.x)
    ay = abs(normal.y)
    az = abs(normal.z)
    if ax >= ay and ax >= az:
        if normal.x >= 0.0:
            return [Pt2(p.y, p.z) for p in points]
        return [Pt2(-p.y, p.z) for p in points]
    if ay >= az:
        if normal.y >= 0.0:
            return [Pt2(-p.x, p.z) for p in points]
        return [Pt2(p.x, p.z) for p in points]
    if normal.z >= 0.0:
        return [Pt2(p.x, p.y) for p in points]
    return [Pt2(-p.x, p.y) for p in points]


def _clip_ears(polygon: List[Tuple[int, Pt2]]) -> Indices:
    count = len(polygon)
    if count < 3:
        raise ValueError('triangulation needs at least 3 points, got {}'.format(count))

    left = 0
    for i, (_, pt) in enumerate(polygon):
        lp = polygon[left][1]
        if pt.x < lp.x or (abs(pt.x - lp.x) < TRIANGULATION_EPSILON and pt.y < lp.y):
            left = i
    if is_ccw(polygon[left - 1][1], polygon[left][1],
              polygon[(left + 1) % count][1]):
        raise TriangulationError('polygon is not wound clockwise')

    triangles: Indices = []
    degenerate = 0
    while len(polygon) >= 3:
        n = len(polygon)
        eartip = -1
        for i in range(n):
            a = polygon[i - 1][1]
            b = polygon[i][1]
            c = polygon[(i + 1) % n][1]
            if is_ccw(a, b, c):
                continue
            if _twice_area(a, b, c) < TRIANGULATION_EPSILON:
                degenerate += 1
                eartip = i
                break
            ear = True
            for j in range(n):
                if j == i or j == (i - 1) % n or j == (i + 1) % n:
                    continue
                if in_triangle(polygon[j][1], a, b, c):
                    ear = False
                    break
            if ear:
                eartip = i
                break

        if eartip < 0:
            raise TriangulationError(
                'no ear found with {} points left; polygon is not simple'.format(n))

        triangles.extend((polygon[eartip - 1][0], polygon[eartip][0],
                          polygon[(eartip + 1) % n][0]))
        del polygon[eartip]

    n_tris = len(triangles) // 3
    if degenerate * 2 > n_tris:
        logger.warning('{} of {} triangles are degenerate slivers', degenerate, n_tris)
    logger.debug('triangulated {} points into {} triangles', count, n_tris)
    return triangles


def _reversed(indices: Indices) -> Indices:
    out: Indices = []
    for i in range(0, len(indices), 3):
        out.extend((indices[i + 2], indices[i + 1], indices[i]))
    return out


def triangulate2d(points: Sequence[Pt2]) -> Indices:
    """Ear clip a clockwise simple polygon into clockwise triangles."""
    return _clip_ears(list(enumerate(points)))


def triangulate2d_rev(points: Sequence[Pt2]) -> Indices:
    return _reversed(triangulate2d(points))


def triangulate3d(points: Sequence[Pt3], normal: Pt3) -> Indices:
    """Ear clip a planar 3D polygon that is clockwise seen from ``normal``."""
    return _clip_ears(list(enumerate(project_to_plane(points, normal))))


def triangulate3d_rev(points: Sequence[Pt3], normal: Pt3) -> Indices:
    return _reversed(triangulate3d(points, normal))


def triangulate_polygon(outer: Sequence[Pt2],
                        holes: Iterable[Sequence[Pt2]] | None = None) -> Indices:
    """Triangulate ``outer`` minus ``holes`` with earcut.

    ``outer`` must be wound clockwise; holes may have either winding.  The
    returned indices address the concatenation of ``outer`` and each hole
    in the order given, and every triangle is wound clockwise.
    """

    loops = [list(outer)]
    if holes is not None:
        loops.extend(list(h) for h in holes)

    point_map: List[Pt2] = []
    ring_ends: List[int] = []
    for loop in loops:
        if len(loop) < 3:
            raise ValueError('polygon loops need at least 3 points, got {}'.format(len(loop)))
        point_map.extend(loop)
        ring_ends.append(len(point_map))
    if signed_area(loops[0]) > 0.0:
        raise TriangulationError('polygon is not wound clockwise')

    vertices = np.asarray([(p.x, p.y) for p in point_map], dtype=np.float64)
    ring_array = np.asarray(ring_ends, dtype=np.uint32)
    raw = _earcut.triangulate_float64(vertices, ring_array)

    triangles: Indices = []
    for i in range(0, len(raw), 3):
        a, b, c = int(raw[i]), int(raw[i + 1]), int(raw[i + 2])
        if is_ccw(point_map[a], point_map[b], point_map[c]):
            a, c = c, a
        triangles.extend((a, b, c))
    if not triangles:
        raise TriangulationError('earcut produced no triangles')
    logger.debug('earcut triangulated {} loops into {} triangles',
                 len(loops), len(triangles) // 3)
    return triangles


__all__ = [
    'TriangulationError',
    'is_ccw',
    'in_triangle',
    'signed_area',
    'project_to_plane',
    'triangulate2d',
    'triangulate2d_rev',
    'triangulate3d',
    'triangulate3d_rev',
    'triangulate_polygon',
]
