"""2D profile generators.

Every generator returns a :class:`~scadmesh.geom.Pt2s` describing a
closed loop wound clockwise (viewed from +Z), the orientation expected by
the extrusion and sweep builders in :mod:`scadmesh.polyhedron`.  The
closing edge from the last point back to the first is implicit.
"""

from __future__ import annotations

from dataclasses import dataclass

from scadmesh.bezier import CubicBezierChain
from scadmesh.geom import Pt2, Pt2s, dcos, dsin


def arc(start: Pt2, degrees: float, segments: int) -> Pt2s:
    """Rotate ``start`` clockwise about the origin through ``degrees``.

    A full circle yields ``segments`` points; a partial arc yields
    ``segments + 1`` so both end points are included.
    """

    if not 0.0 < degrees <= 360.0:
        raise ValueError('arc degrees must be in (0, 360], got {}'.format(degrees))
    if segments < 1:
        raise ValueError('arc needs at least one segment, got {}'.format(segments))
    n_pts = segments if degrees == 360.0 else segments + 1
    step = -degrees / segments
    return Pt2s(start.rotated(i * step) for i in range(n_pts))


def circle(radius: float, segments: int) -> Pt2s:
    if radius <= 0.0:
        raise ValueError('circle radius must be positive, got {}'.format(radius))
    if segments < 3:
        raise ValueError('circle needs at least 3 segments, got {}'.format(segments))
    return arc(Pt2(radius, 0.0), 360.0, segments)


def inscribed_polygon(n_sides: int, radius: float) -> Pt2s:
    """Regular polygon whose corners lie on a circle of ``radius``."""
    return circle(radius, n_sides)


def circumscribed_polygon(n_sides: int, radius: float) -> Pt2s:
    """Regular polygon whose edges touch a circle of ``radius``."""
    if n_sides < 3:
        raise ValueError('polygon needs at least 3 sides, got {}'.format(n_sides))
    return inscribed_polygon(n_sides, radius / dcos(180.0 / n_sides))


def rounded_rect(width: float, height: float, radius: float, segments: int,
                 center: bool = False) -> Pt2s:
    """Rectangle with quarter-circle corners, lower left corner at the origin
    unless ``center`` is set."""

    if width <= 0.0 or height <= 0.0:
        raise ValueError('rounded_rect needs positive width and height')
    if radius <= 0.0 or 2.0 * radius > min(width, height):
        raise ValueError('rounded_rect radius {} does not fit a {} x {} rectangle'
                         .format(radius, width, height))

    corners = [
        (Pt2(0.0, radius), Pt2(width - radius, height - radius)),
        (Pt2(radius, 0.0), Pt2(width - radius, radius)),
        (Pt2(0.0, -radius), Pt2(radius, radius)),
        (Pt2(-radius, 0.0), Pt2(radius, height - radius)),
    ]
    points = Pt2s()
    for start, offset in corners:
        points.extend(arc(start, 90.0, segments).translate(offset))

    if center:
        points.translate(Pt2(-width / 2.0, -height / 2.0))
    return points


def chamfer(size: float, oversize: float) -> Pt2s:
    """Cross-section of a 45 degree chamfer cutter.

    ``oversize`` grows the cutter past the surfaces it meets so the
    difference leaves no coincident faces.
    """
    s = size
    o = oversize
    return Pt2s([
        Pt2(0.0, s + o),
        Pt2(o, s + o),
        Pt2(o, s),
        Pt2(s, o),
        Pt2(s + o, o),
        Pt2(s + o, 0.0),
        Pt2(0.0, 0.0),
    ])


def star(n_points: int, inner_radius: float, outer_radius: float) -> Pt2s:
    if n_points < 2:
        raise ValueError('star needs at least 2 points, got {}'.format(n_points))
    angle = -360.0 / n_points
    points = Pt2s()
    for i in range(n_points):
        a = angle * i
        points.append(Pt2(dcos(a) * inner_radius, dsin(a) * inner_radius))
        a = angle * (i + 0.5)
        points.append(Pt2(dcos(a) * outer_radius, dsin(a) * outer_radius))
    return points


def bezier_star(n_points: int, inner_radius: float, inner_handle_length: float,
                outer_radius: float, outer_handle_length: float,
                segments: int) -> Pt2s:
    """Star with smooth cubic bezier arms.

    Knots alternate between the outer and inner radius; the control
    handle at each knot runs parallel to the line joining its two
    neighbours.
    """

    if n_points < 2:
        raise ValueError('bezier_star needs at least 2 points, got {}'.format(n_points))

    angle = -360.0 / n_points
    knots = []
    for i in range(n_points):
        a = angle * i
        knots.append(Pt2(dcos(a) * outer_radius, dsin(a) * outer_radius))
        a = angle * (i + 0.5)
        knots.append(Pt2(dcos(a) * inner_radius, dsin(a) * inner_radius))

    n_knots = len(knots)
    controls = []
    for i in range(n_knots):
        handle = inner_handle_length if i % 2 == 0 else outer_handle_length
        tangent = (knots[(i + 2) % n_knots] - knots[i]).normalized()
        controls.append(knots[(i + 1) % n_knots] - tangent * handle)

    chain = CubicBezierChain(knots[0], controls[0], controls[0], knots[1], segments)
    for i in range(1, n_knots - 1):
        chain.add(outer_handle_length if i % 2 == 0 else inner_handle_length,
                  controls[i], knots[i + 1], segments)
    chain.close(inner_handle_length, controls[-1], outer_handle_length, segments)
    return chain.gen_points()


@dataclass(frozen=True)
class BezierStar:
    n_points: int
    inner_radius: float
    inner_handle_length: float
    outer_radius: float
    outer_handle_length: float
    segments: int

    def gen_points(self) -> Pt2s:
        return bezier_star(self.n_points, self.inner_radius,
                           self.inner_handle_length, self.outer_radius,
                           self.outer_handle_length, self.segments)


__all__ = [
    'arc',
    'circle',
    'inscribed_polygon',
    'circumscribed_polygon',
    'rounded_rect',
    'chamfer',
    'star',
    'bezier_star',
    'BezierStar',
]
