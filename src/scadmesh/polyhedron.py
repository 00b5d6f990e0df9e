"""Indexed polyhedron meshes and the builders that produce them.

A :class:`Polyhedron` is a vertex buffer plus a list of faces.  Each face
holds three or four zero-based vertex indices ordered clockwise when
viewed from outside the solid, the convention of OpenSCAD's
``polyhedron()``.  Every builder returns a fresh, closed mesh:

``linear_extrude``
    prism from a clockwise 2D profile, optionally with holes.
``loft``
    prism whose top ring is a second profile of the same length.
``rotate_extrude``
    revolve a profile in the X/Z half plane about the Z axis.
``sweep``
    carry a profile along a 3D path, optionally twisting it.
``cylinder``
    extruded circle.

A polyhedron remembers the call that built it in
``procedure``.
"""

from __future__ import annotations

from typing import Iterable, List, Sequence

import numpy as np
from loguru import logger

try:
    import trimesh
except ImportError:  # pragma: no cover - optional dependency
    trimesh = None  # type: ignore[assignment]

from scadmesh.geom import Pt2, Pt3, Pt3s, epsilon
from scadmesh.profiles import circle
from scadmesh.triangulator import (
    signed_area,
    triangulate2d,
    triangulate2d_rev,
    triangulate3d,
    triangulate3d_rev,
    triangulate_polygon,
)
from scadmesh.xform import look_at_lh

Face = List[int]


def _triples(indices: Sequence[int], offset: int = 0) -> List[Face]:
    return [[indices[i] + offset, indices[i + 1] + offset, indices[i + 2] + offset]
            for i in range(0, len(indices), 3)]


def _ring_walls(a_start: int, b_start: int, count: int) -> List[Face]:
    """quads ``[a_i, a_i+1, b_i+1, b_i]`` joining two rings of ``count`` points"""
    faces = []
    for i in range(count):
        j = (i + 1) % count
        faces.append([a_start + i, a_start + j, b_start + j, b_start + i])
    return faces


class Polyhedron:
    """Closed indexed mesh with clockwise (viewed from outside) faces."""

    def __init__(self, points: Iterable[Pt3], faces: Iterable[Sequence[int]],
                 procedure: str | None = None):
        self.points = Pt3s(points)
        self.faces: List[Face] = [list(f) for f in faces]
        self.procedure = procedure

    def __repr__(self):
        return 'Polyhedron({} points, {} faces, {})'.format(
            len(self.points), len(self.faces), self.procedure)

    def validate(self) -> bool:
        """Raise ``ValueError`` if any face is malformed."""
        n = len(self.points)
        for idx, face in enumerate(self.faces):
            if len(face) not in (3, 4):
                raise ValueError('face {} has {} indices, expected 3 or 4'.format(idx, len(face)))
            for v in face:
                if not 0 <= v < n:
                    raise ValueError('face {} index {} out of range for {} points'
                                     .format(idx, v, n))
        return True

    def triangles(self) -> List[Face]:
        """faces with every quad split into two triangles"""
        tris: List[Face] = []
        for face in self.faces:
            if len(face) == 4:
                a, b, c, d = face
                tris.append([a, b, c])
                tris.append([a, c, d])
            else:
                tris.append(list(face))
        return tris

    def as_arrays(self):
        """Return ``(vertices, triangles)`` as numpy arrays."""
        vertices = np.asarray([tuple(p) for p in self.points], dtype=np.float64).reshape(-1, 3)
        tris = np.asarray(self.triangles(), dtype=np.int64).reshape(-1, 3)
        return vertices, tris

    def to_trimesh(self) -> "trimesh.Trimesh":
        if trimesh is None:  # pragma: no cover - optional dependency
            raise RuntimeError("trimesh is not installed")
        vertices, tris = self.as_arrays()
        # trimesh expects counter-clockwise faces
        return trimesh.Trimesh(vertices=vertices, faces=tris[:, ::-1], process=False)

    ## in-place transforms, chainable

    def translate(self, delta: Pt3) -> Polyhedron:
        self.points.translate(delta)
        return self

    def apply_matrix(self, matrix) -> Polyhedron:
        self.points.apply_matrix(matrix)
        return self

    def rotate_x(self, degrees: float) -> Polyhedron:
        self.points.rotate_x(degrees)
        return self

    def rotate_y(self, degrees: float) -> Polyhedron:
        self.points.rotate_y(degrees)
        return self

    def rotate_z(self, degrees: float) -> Polyhedron:
        self.points.rotate_z(degrees)
        return self

    ## builders

    @classmethod
    def linear_extrude(cls, points: Sequence[Pt2], height: float,
                       holes: Sequence[Sequence[Pt2]] | None = None) -> Polyhedron:
        """Extrude a clockwise profile from z=0 up to ``height``.

        The first ``len(points)`` vertices form the bottom ring and the
        next ``len(points)`` the top ring.  Each hole loop adds its own
        bottom and top rings after those.
        """

        n = len(points)
        if n < 3:
            raise ValueError('linear_extrude needs at least 3 points, got {}'.format(n))
        if height <= 0.0:
            raise ValueError('linear_extrude height must be positive, got {}'.format(height))

        vertices = Pt3s(p.as_pt3(0.0) for p in points)
        vertices.extend(p.as_pt3(height) for p in points)

        if not holes:
            faces = _triples(triangulate2d_rev(points))
            faces.extend(_triples(triangulate2d(points), n))
            faces.extend(_ring_walls(0, n, n))
            procedure = 'linear_extrude(height={})'.format(height)
        else:
            loops = []
            for hole in holes:
                loop = list(hole)
                if len(loop) < 3:
                    raise ValueError('hole loops need at least 3 points, got {}'.format(len(loop)))
                if signed_area(loop) < 0.0:
                    loop.reverse()
                loops.append(loop)

            # bottom and top vertex index for each point of outer + holes
            bottom = list(range(n))
            top = list(range(n, 2 * n))
            walls = _ring_walls(0, n, n)
            for loop in loops:
                m = len(loop)
                base = len(vertices)
                vertices.extend(p.as_pt3(0.0) for p in loop)
                vertices.extend(p.as_pt3(height) for p in loop)
                bottom.extend(range(base, base + m))
                top.extend(range(base + m, base + 2 * m))
                walls.extend(_ring_walls(base, base + m, m))

            tris = triangulate_polygon(points, loops)
            faces = []
            for i in range(0, len(tris), 3):
                a, b, c = tris[i], tris[i + 1], tris[i + 2]
                faces.append([bottom[c], bottom[b], bottom[a]])
            for i in range(0, len(tris), 3):
                faces.append([top[tris[i]], top[tris[i + 1]], top[tris[i + 2]]])
            faces.extend(walls)
            procedure = 'linear_extrude(height={}, holes={})'.format(height, len(loops))

        poly = cls(vertices, faces, procedure)
        logger.debug('linear_extrude: {} points, {} faces', len(poly.points), len(poly.faces))
        return poly

    @classmethod
    def loft(cls, lower: Sequence[Pt2], upper: Sequence[Pt2], height: float) -> Polyhedron:
        """Join ``lower`` at z=0 to ``upper`` at ``height`` point by point."""

        n = len(lower)
        if n < 3:
            raise ValueError('loft needs at least 3 points, got {}'.format(n))
        if len(upper) != n:
            raise ValueError('loft profiles differ in length: {} != {}'.format(n, len(upper)))
        if height <= 0.0:
            raise ValueError('loft height must be positive, got {}'.format(height))

        vertices = Pt3s(p.as_pt3(0.0) for p in lower)
        vertices.extend(p.as_pt3(height) for p in upper)
        faces = _triples(triangulate2d_rev(lower))
        faces.extend(_triples(triangulate2d(upper), n))
        faces.extend(_ring_walls(0, n, n))
        poly = cls(vertices, faces, 'loft(height={})'.format(height))
        logger.debug('loft: {} points, {} faces', len(poly.points), len(poly.faces))
        return poly

    @classmethod
    def cylinder(cls, radius: float, height: float, segments: int) -> Polyhedron:
        poly = cls.linear_extrude(circle(radius, segments), height)
        poly.procedure = 'cylinder(r={}, h={}, segments={})'.format(radius, height, segments)
        return poly

    @classmethod
    def rotate_extrude(cls, profile: Sequence[Pt2], degrees: float,
                       segments: int) -> Polyhedron:
        """Revolve ``profile`` counter-clockwise about Z.

        Profile x becomes the radius and profile y becomes z.  A full
        turn closes on itself; anything less gets flat end caps.
        """

        n = len(profile)
        if n < 3:
            raise ValueError('rotate_extrude needs at least 3 points, got {}'.format(n))
        if not 0.0 < degrees <= 360.0:
            raise ValueError('rotate_extrude degrees must be in (0, 360], got {}'.format(degrees))
        if segments < 3:
            raise ValueError('rotate_extrude needs at least 3 segments, got {}'.format(segments))
        for p in profile:
            if p.x < -epsilon:
                raise ValueError('rotate_extrude profile crosses the Z axis at {}'.format(p))

        full = degrees == 360.0
        n_rings = segments if full else segments + 1
        step = degrees / segments
        base = [p.to_xz() for p in profile]

        vertices = Pt3s()
        for k in range(n_rings):
            angle = step * k
            vertices.extend(p.rotated_z(angle) for p in base)

        faces: List[Face] = []
        for k in range(1, n_rings):
            faces.extend(_revolve_walls((k - 1) * n, k * n, n))
        if full:
            faces.extend(_revolve_walls((n_rings - 1) * n, 0, n))
        else:
            first = vertices[:n]
            last_start = (n_rings - 1) * n
            last = vertices[last_start:]
            faces.extend(_triples(triangulate3d(first, Pt3(0.0, -1.0, 0.0))))
            end_normal = Pt3(0.0, -1.0, 0.0).rotated_z(degrees)
            faces.extend(_triples(triangulate3d_rev(last, end_normal), last_start))

        poly = cls(vertices, faces,
                   'rotate_extrude(degrees={}, segments={})'.format(degrees, segments))
        logger.debug('rotate_extrude: {} points, {} faces', len(poly.points), len(poly.faces))
        return poly

    @classmethod
    def sweep(cls, profile: Sequence[Pt2], path: Sequence[Pt3],
              twist_degrees: float = 0.0, closed: bool = False) -> Polyhedron:
        """Carry ``profile`` along ``path``.

        Each ring is the profile turned by its share of ``twist_degrees``,
        oriented by a look-at frame along the local path direction and
        moved to its path point.  Open sweeps are capped at both ends;
        closed sweeps join the last ring back to the first.
        """

        n = len(profile)
        count = len(path)
        if n < 3:
            raise ValueError('sweep needs a profile of at least 3 points, got {}'.format(n))
        if count < (3 if closed else 2):
            raise ValueError('sweep path too short: {} points'.format(count))
        for k in range(count - 1):
            if (path[k + 1] - path[k]).len() < epsilon:
                raise ValueError('sweep path has duplicate points at index {}'.format(k))
        if closed and (path[0] - path[-1]).len() < epsilon:
            raise ValueError('closed sweep path repeats its first point at the end')

        twist_step = twist_degrees / count if closed else twist_degrees / (count - 1)

        vertices = Pt3s()
        for k in range(count):
            if k == 0:
                eye, center = (path[-1], path[1]) if closed else (path[0], path[1])
            elif k == count - 1:
                eye, center = (path[-2], path[0]) if closed else (path[-2], path[-1])
            else:
                eye, center = path[k - 1], path[k + 1]
            frame = look_at_lh(eye, center)
            angle = twist_step * k
            for p in profile:
                local = p.rotated(angle).as_pt3(0.0).as_pt4(0.0)
                vertices.append(frame.mul(local).as_pt3() + path[k])

        faces: List[Face] = []
        if not closed:
            faces.extend(_triples(triangulate3d_rev(vertices[:n], path[1] - path[0])))
        for k in range(count - 1):
            faces.extend(_ring_walls(k * n, (k + 1) * n, n))
        if closed:
            faces.extend(_ring_walls((count - 1) * n, 0, n))
        else:
            last_start = (count - 1) * n
            faces.extend(_triples(triangulate3d(vertices[last_start:], path[-1] - path[-2]),
                                  last_start))

        poly = cls(vertices, faces,
                   'sweep(twist={}, closed={})'.format(twist_degrees, closed))
        logger.debug('sweep: {} rings, {} points, {} faces',
                     count, len(poly.points), len(poly.faces))
        return poly


def _revolve_walls(a_start: int, b_start: int, count: int) -> List[Face]:
    """quads ``[a_i, b_i, b_i+1, a_i+1]``; a revolved ring is mirrored
    relative to an extruded one"""
    faces = []
    for i in range(count):
        j = (i + 1) % count
        faces.append([a_start + i, b_start + i, b_start + j, a_start + j])
    return faces


__all__ = ['Polyhedron']
