"""Bezier curve helpers for scadmesh.

Quadratic and cubic bezier segments are sampled uniformly in their
parameter.  The same routines serve 2D profiles and 3D paths: the type
of the returned sequence follows the type of the start point.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import List, Union

from scadmesh.geom import Pt2, Pt2s, Pt3, Pt3s

Point = Union[Pt2, Pt3]


def _sequence_for(pt: Point):
    return Pt2s() if isinstance(pt, Pt2) else Pt3s()


def _check_segments(segments: int) -> None:
    if segments < 1:
        raise ValueError('bezier curves need at least one segment, got {}'.format(segments))


def quadratic_bezier(start: Point, control: Point, end: Point, segments: int):
    """Sample a quadratic bezier into ``segments + 1`` points."""

    _check_segments(segments)
    delta = 1.0 / segments
    points = _sequence_for(start)
    for i in range(segments + 1):
        t = i * delta
        mt = 1.0 - t
        points.append(start * (mt * mt) + control * (2.0 * t * mt) + end * (t * t))
    return points


def cubic_bezier(start: Point, control1: Point, control2: Point, end: Point, segments: int):
    """Sample a cubic bezier into ``segments + 1`` points."""

    _check_segments(segments)
    delta = 1.0 / segments
    points = _sequence_for(start)
    for i in range(segments + 1):
        t = i * delta
        mt = 1.0 - t
        points.append(start * (mt * mt * mt)
                      + control1 * (3.0 * t * mt * mt)
                      + control2 * (3.0 * t * t * mt)
                      + end * (t * t * t))
    return points


@dataclass(frozen=True)
class QuadraticBezier:
    start: Point
    control: Point
    end: Point
    segments: int

    def gen_points(self):
        return quadratic_bezier(self.start, self.control, self.end, self.segments)


@dataclass(frozen=True)
class CubicBezier:
    start: Point
    control1: Point
    control2: Point
    end: Point
    segments: int

    def gen_points(self):
        return cubic_bezier(self.start, self.control1, self.control2,
                            self.end, self.segments)


class CubicBezierChain:
    """A run of cubic beziers joined end to start with continuous tangents.

    Each added segment derives its first control point from the previous
    segment, so callers only pick how far the handle reaches.  A closed
    chain loops back to its first start point and can no longer grow.
    """

    def __init__(self, start: Point, control1: Point, control2: Point,
                 end: Point, segments: int):
        _check_segments(segments)
        self.curves: List[CubicBezier] = [
            CubicBezier(start, control1, control2, end, segments)
        ]
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def __len__(self) -> int:
        return len(self.curves)

    def add(self, control1_length: float, control2: Point, end: Point,
            segments: int) -> "CubicBezierChain":
        if self._closed:
            raise ValueError('cannot add a segment to a closed bezier chain')
        self._append(control1_length, control2, end, segments)
        return self

    def close(self, control1_length: float, control2: Point,
              start_control1_length: float, segments: int) -> "CubicBezierChain":
        if self._closed:
            raise ValueError('bezier chain is already closed')
        self._append(control1_length, control2, self.curves[0].start, segments)
        last = self.curves[-1]
        first = self.curves[0]
        self.curves[0] = replace(
            first,
            control1=last.end + (last.end - last.control2).normalized() * start_control1_length,
        )
        self._closed = True
        return self

    def _append(self, control1_length, control2, end, segments):
        _check_segments(segments)
        prev = self.curves[-1]
        control1 = prev.end + (prev.end - prev.control2).normalized() * control1_length
        self.curves.append(CubicBezier(prev.end, control1, control2, end, segments))

    def gen_points(self):
        """Sample every segment, sharing the joint points.

        A closed chain omits its final point, which repeats the first.
        """
        points = _sequence_for(self.curves[0].start)
        for curve in self.curves:
            if points:
                points.pop()
            points.extend(curve.gen_points())
        if self._closed:
            points.pop()
        return points


__all__ = [
    'quadratic_bezier',
    'cubic_bezier',
    'QuadraticBezier',
    'CubicBezier',
    'CubicBezierChain',
]
