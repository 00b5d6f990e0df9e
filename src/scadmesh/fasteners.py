"""ISO metric fasteners built from thread meshes (rods, taps, bolts, nuts)."""

from __future__ import annotations

import math
from bisect import bisect_right
from dataclasses import asdict, dataclass
from types import MappingProxyType
from typing import Mapping

from scadmesh.combine import Boolean
from scadmesh.geom import Pt2, Pt3
from scadmesh.polyhedron import Polyhedron
from scadmesh.profiles import chamfer, circumscribed_polygon
from scadmesh.threadgen import threaded_cylinder

__all__ = [
    "MetricThread",
    "metric_thread",
    "metric_catalog",
    "thread_height_from_pitch",
    "d_min_from_d_maj_pitch",
    "threaded_rod",
    "tap",
    "hex_bolt",
    "hex_nut",
    "external_circle_chamfer",
    "external_cylinder_chamfer",
]


@dataclass(frozen=True)
class MetricThread:
    """Dimensions (all millimeters) of one ISO metric size."""

    m: int
    pitch: float
    external_d_maj: float
    internal_d_maj: float
    nut_width: float
    chamfer_size: float


def _row(m, pitch, ext, internal, nut, cham):
    return m, MetricThread(m, pitch, ext, internal, nut, cham)


_METRIC_TABLE: Mapping[int, MetricThread] = MappingProxyType(dict([
    _row(2, 0.4, 1.886, 2.148, 4.0, 1.45),
    _row(3, 0.5, 2.874, 3.172, 5.5, 1.6),
    _row(4, 0.7, 3.838, 4.219, 7.0, 1.8),
    _row(5, 0.8, 4.826, 5.24, 8.0, 1.9),
    _row(6, 1.0, 5.794, 6.294, 10.0, 2.1),
    _row(7, 1.0, 6.794, 7.294, 13.0, 2.45),
    _row(8, 1.25, 7.76, 8.34, 13.0, 2.45),
    _row(9, 1.25, 8.76, 9.34, 16.0, 2.8),
    _row(10, 1.5, 9.732, 10.396, 16.0, 2.8),
    _row(11, 1.5, 10.73, 11.387, 18.0, 3.0),
    _row(12, 1.75, 11.7, 12.453, 18.0, 3.0),
    _row(14, 2.0, 13.68, 14.501, 21.0, 3.35),
    _row(15, 1.5, 14.73, 15.407, 24.0, 3.7),
    _row(16, 2.0, 15.68, 16.501, 24.0, 3.7),
    _row(17, 1.5, 16.73, 17.407, 27.0, 3.9),
    _row(18, 2.5, 17.62, 18.585, 27.0, 3.9),
    _row(20, 2.5, 19.62, 20.585, 30.0, 4.25),
    _row(22, 3.0, 21.58, 22.677, 34.0, 4.75),
    _row(24, 3.0, 23.58, 24.698, 36.0, 4.9),
    _row(25, 2.0, 24.68, 25.513, 41.0, 5.5),
    _row(26, 1.5, 25.73, 26.417, 41.0, 5.5),
    _row(27, 3.0, 26.58, 27.698, 41.0, 5.5),
    _row(28, 2.0, 27.68, 28.513, 46.0, 6.0),
    _row(30, 3.5, 29.52, 30.785, 46.0, 6.0),
    _row(32, 2.0, 31.68, 32.513, 49.0, 6.4),
    _row(33, 3.5, 32.54, 33.785, 49.0, 6.4),
    _row(35, 1.5, 34.73, 35.416, 55.0, 7.0),
    _row(36, 4.0, 35.47, 36.877, 55.0, 7.0),
    _row(38, 1.5, 37.73, 38.417, 60.0, 7.5),
    _row(39, 4.0, 38.47, 39.877, 60.0, 7.5),
    _row(40, 3.0, 39.58, 40.698, 65.0, 8.2),
    _row(42, 4.5, 41.44, 42.965, 65.0, 8.2),
    _row(45, 4.5, 44.44, 45.965, 70.0, 8.75),
    _row(48, 5.0, 47.4, 49.057, 75.0, 9.25),
    _row(50, 4.0, 49.47, 50.892, 80.0, 9.5),
    _row(52, 5.0, 51.4, 53.037, 80.0, 9.5),
    _row(55, 4.0, 54.47, 55.892, 85.0, 10.25),
    _row(56, 5.5, 55.37, 57.149, 85.0, 10.25),
    _row(58, 4.0, 57.47, 58.892, 90.0, 10.75),
    _row(60, 5.5, 59.37, 61.149, 90.0, 10.75),
    _row(62, 4.0, 61.47, 62.892, 95.0, 11.25),
    _row(63, 1.5, 62.73, 63.429, 95.0, 11.25),
    _row(64, 6.0, 63.32, 65.421, 95.0, 11.25),
    _row(65, 4.0, 64.47, 65.892, 100.0, 11.75),
    _row(68, 6.0, 67.32, 69.241, 100.0, 11.75),
    _row(70, 6.0, 69.32, 71.241, 100.0, 11.75),
    _row(72, 6.0, 71.32, 73.241, 110.0, 13.0),
    _row(75, 6.0, 74.32, 76.241, 110.0, 13.0),
    _row(76, 6.0, 75.32, 77.241, 110.0, 13.0),
    _row(78, 2.0, 77.68, 78.525, 120.0, 14.25),
    _row(80, 6.0, 79.32, 81.241, 120.0, 14.25),
    _row(82, 2.0, 81.68, 82.525, 120.0, 14.25),
    _row(85, 6.0, 84.32, 86.241, 130.0, 15.25),
    _row(90, 6.0, 89.32, 91.241, 130.0, 15.25),
    _row(95, 6.0, 94.32, 96.266, 130.0, 15.25),
    _row(100, 6.0, 99.32, 101.27, 140.0, 16.5),
]))

_METRIC_SIZES = sorted(_METRIC_TABLE)


def metric_thread(m: int) -> MetricThread:
    """Return the table row for M``m``.

    Sizes missing from the table resolve to the next smaller size, and
    anything below M2 resolves to M2.
    """
    idx = bisect_right(_METRIC_SIZES, m) - 1
    return _METRIC_TABLE[_METRIC_SIZES[max(idx, 0)]]


def metric_catalog():
    return {f"M{size}": asdict(row) for size, row in _METRIC_TABLE.items()}


def thread_height_from_pitch(pitch: float) -> float:
    return math.sqrt(3.0) / 2.0 * pitch


def d_min_from_d_maj_pitch(d_maj: float, pitch: float) -> float:
    return d_maj - 2.0 * 5.0 / 8.0 * thread_height_from_pitch(pitch)


def _head_chamfer_radius(width: float) -> float:
    return math.sqrt((0.25 * width) ** 2 + (0.5 * width) ** 2)


def threaded_rod(m: int, length: float, segments: int,
                 lead_in_degrees: float = 0.0, lead_out_degrees: float = 0.0,
                 left_hand_thread: bool = False, center: bool = False) -> Boolean:
    """Externally threaded rod standing on the XY plane."""
    row = metric_thread(m)
    d_min = d_min_from_d_maj_pitch(row.external_d_maj, row.pitch)
    return threaded_cylinder(d_min, row.external_d_maj, row.pitch, length, segments,
                             lead_in_degrees, lead_out_degrees, left_hand_thread, center)


def tap(m: int, length: float, segments: int, left_hand_thread: bool = False,
        center: bool = False) -> Boolean:
    """Cutter for a threaded hole, sized to the internal major diameter."""
    row = metric_thread(m)
    d_min = d_min_from_d_maj_pitch(row.internal_d_maj, row.pitch)
    return threaded_cylinder(d_min, row.internal_d_maj, row.pitch, length, segments,
                             0.0, 0.0, left_hand_thread, center)


def external_circle_chamfer(size: float, oversize: float, radius: float,
                            degrees: float, segments: int) -> Polyhedron:
    """Ring cutter that bevels the outer edge of a circle of ``radius``."""
    profile = chamfer(size, oversize).rotate(90.0)
    profile.translate(Pt2(radius + size / 2.0 + oversize / 2.0, -oversize))
    return Polyhedron.rotate_extrude(profile, degrees, segments)


def external_cylinder_chamfer(size: float, oversize: float, radius: float,
                              height: float, segments: int,
                              center: bool = False) -> Boolean:
    """Chamfer cutters for both the bottom and top edge of a cylinder."""
    bottom = external_circle_chamfer(size, oversize, radius, 360.0, segments)
    top = external_circle_chamfer(size, oversize, radius, 360.0, segments)
    top.rotate_x(180.0).translate(Pt3(0.0, 0.0, height))
    result = Boolean('union', [bottom, top]).finalize()
    if center:
        result.translate(Pt3(0.0, 0.0, -height / 2.0))
    return result


def hex_bolt(m: int, length: float, head_height: float, segments: int,
             lead_in_degrees: float = 0.0, chamfered: bool = False,
             left_hand_thread: bool = False, center: bool = False) -> Boolean:
    """Hex head bolt with the head on the XY plane and the thread above it.

    ``lead_in_degrees`` tapers the free end of the thread.
    """
    row = metric_thread(m)
    d_min = d_min_from_d_maj_pitch(row.external_d_maj, row.pitch)
    rod = threaded_cylinder(d_min, row.external_d_maj, row.pitch, length, segments,
                            0.0, lead_in_degrees, left_hand_thread, False)
    rod.translate(Pt3(0.0, 0.0, head_height))

    head = Polyhedron.linear_extrude(circumscribed_polygon(6, row.nut_width / 2.0),
                                     head_height)
    if chamfered:
        head = Boolean('difference', [
            head,
            external_cylinder_chamfer(row.chamfer_size, 1.0,
                                      _head_chamfer_radius(row.nut_width),
                                      head_height, segments),
        ]).finalize()

    bolt = Boolean('union', [rod, head]).finalize()
    if center:
        bolt.translate(Pt3(0.0, 0.0, -(head_height + length) / 2.0))
    return bolt


def hex_nut(m: int, height: float, segments: int, chamfered: bool = False,
            left_hand_thread: bool = False, center: bool = False) -> Boolean:
    row = metric_thread(m)
    # the tap overshoots both faces so the difference leaves no skin
    nut_tap = tap(m, height + 20.0, segments, left_hand_thread)
    nut_tap.translate(Pt3(0.0, 0.0, -10.0))

    blank = Polyhedron.linear_extrude(circumscribed_polygon(6, row.nut_width / 2.0), height)
    nut = Boolean('difference', [blank, nut_tap])
    if chamfered:
        nut.add(external_cylinder_chamfer(row.chamfer_size, 1.0,
                                          _head_chamfer_radius(row.nut_width),
                                          height, segments))
    nut.finalize()
    if center:
        nut.translate(Pt3(0.0, 0.0, -height / 2.0))
    return nut
