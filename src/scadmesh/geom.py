## foundational point and vector types for scadmesh
## Copyright (c) 2023 scadmesh contributors
## All rights reserved

# Permission is hereby granted, free of charge, to any person
# obtaining a copy of this software and associated documentation files
# (the "Software"), to deal in the Software without restriction,
# including without limitation the rights to use, copy, modify, merge,
# publish, distribute, sublicense, and/or sell copies of the Software,
# and to permit persons to whom the Software is furnished to do so,
# subject to the following conditions:
#
# The above copyright notice and this permission notice shall be
# included in all copies or substantial portions of the Software.
#
# THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND,
# EXPRESS OR IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF
# MERCHANTABILITY, FITNESS FOR A PARTICULAR PURPOSE AND
# NONINFRINGEMENT. IN NO EVENT SHALL THE AUTHORS OR COPYRIGHT HOLDERS
# BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER LIABILITY, WHETHER IN AN
# ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM, OUT OF OR IN
# CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN THE
# SOFTWARE.

"""foundational point types for **scadmesh**

====================
OVERVIEW
====================

The scadmesh.geom module provides the value types that every other
module builds on: two, three and four dimensional points, ordered point
sequences, and a handful of degree-based scalar helpers.

constants
=========

scadmesh.geom provides the "constants" ``epsilon`` and
``TRIANGULATION_EPSILON``.  ``epsilon`` is the general closeness
tolerance, ``TRIANGULATION_EPSILON`` is the area tolerance used by the
ear clipper to recognise degenerate ears.  Redefine these at your peril.

angles
======

All angles in **scadmesh** are expressed in degrees.  ``dsin()``,
``dcos()`` and ``dtan()`` take degrees.  Positive rotations are
counter-clockwise when viewed looking down the rotation axis (the
right-hand rule).  Profiles, however, are wound *clockwise*, which is
why the profile generators in :mod:`scadmesh.profiles` step through
negative angles.

points
======

``Pt2``, ``Pt3`` and ``Pt4`` are immutable values.  They support the
usual vector arithmetic (``+``, ``-``, scalar ``*`` and ``/``, unary
``-``), indexing and iteration, so ``x, y, z = p`` works.  ``Pt4``
carries a homogeneous coordinate and is what :class:`scadmesh.xform.Matrix`
multiplies.

point sequences
===============

``Pt2s`` and ``Pt3s`` are ``list`` subclasses holding points.  Unlike
the points themselves they are mutable, and ``translate()``,
``rotate()`` and friends update them in place.  A profile is a ``Pt2s``
describing a closed loop (the closing edge from the last point back to
the first is implicit) wound clockwise.

"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, Iterator

epsilon = 0.000005
TRIANGULATION_EPSILON = 1.0e-5


def dsin(degrees: float) -> float:
    """sine of an angle given in degrees"""
    return math.sin(math.radians(degrees))


def dcos(degrees: float) -> float:
    """cosine of an angle given in degrees"""
    return math.cos(math.radians(degrees))


def dtan(degrees: float) -> float:
    """tangent of an angle given in degrees"""
    return math.tan(math.radians(degrees))


def close(a: float, b: float, tol: float = epsilon) -> bool:
    """return ``True`` if ``a`` and ``b`` are within ``tol``"""
    return abs(a - b) < tol


@dataclass(frozen=True)
class Pt2:
    """A 2D point or vector."""

    x: float = 0.0
    y: float = 0.0

    def __add__(self, other: Pt2) -> Pt2:
        return Pt2(self.x + other.x, self.y + other.y)

    def __sub__(self, other: Pt2) -> Pt2:
        return Pt2(self.x - other.x, self.y - other.y)

    def __mul__(self, s: float) -> Pt2:
        return Pt2(self.x * s, self.y * s)

    __rmul__ = __mul__

    def __truediv__(self, s: float) -> Pt2:
        return Pt2(self.x / s, self.y / s)

    def __neg__(self) -> Pt2:
        return Pt2(-self.x, -self.y)

    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y

    def __getitem__(self, i: int) -> float:
        return (self.x, self.y)[i]

    def __len__(self) -> int:
        return 2

    def dot(self, other: Pt2) -> float:
        return self.x * other.x + self.y * other.y

    def len2(self) -> float:
        return self.dot(self)

    def len(self) -> float:
        return math.sqrt(self.len2())

    def normalized(self) -> Pt2:
        l = self.len()
        if l < epsilon:
            raise ValueError('cannot normalize zero-length vector {}'.format(self))
        return Pt2(self.x / l, self.y / l)

    def rotated(self, degrees: float) -> Pt2:
        """rotate about the origin, counter-clockwise for positive degrees"""
        c = dcos(degrees)
        s = dsin(degrees)
        return Pt2(self.x * c - self.y * s, self.x * s + self.y * c)

    def lerp(self, other: Pt2, t: float) -> Pt2:
        return self + (other - self) * t

    def as_pt3(self, z: float = 0.0) -> Pt3:
        return Pt3(self.x, self.y, z)

    def to_xz(self) -> Pt3:
        """lift into the X/Z plane, ``y`` becomes ``z``"""
        return Pt3(self.x, 0.0, self.y)


@dataclass(frozen=True)
class Pt3:
    """A 3D point or vector."""

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def __add__(self, other: Pt3) -> Pt3:
        return Pt3(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: Pt3) -> Pt3:
        return Pt3(self.x - other.x, self.y - other.y, self.z - other.z)

    def __mul__(self, s: float) -> Pt3:
        return Pt3(self.x * s, self.y * s, self.z * s)

    __rmul__ = __mul__

    def __truediv__(self, s: float) -> Pt3:
        return Pt3(self.x / s, self.y / s, self.z / s)

    def __neg__(self) -> Pt3:
        return Pt3(-self.x, -self.y, -self.z)

    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y
        yield self.z

    def __getitem__(self, i: int) -> float:
        return (self.x, self.y, self.z)[i]

    def __len__(self) -> int:
        return 3

    def dot(self, other: Pt3) -> float:
        return self.x * other.x + self.y * other.y + self.z * other.z

    def cross(self, other: Pt3) -> Pt3:
        return Pt3(self.y * other.z - self.z * other.y,
                   self.z * other.x - self.x * other.z,
                   self.x * other.y - self.y * other.x)

    def len2(self) -> float:
        return self.dot(self)

    def len(self) -> float:
        return math.sqrt(self.len2())

    def normalized(self) -> Pt3:
        l = self.len()
        if l < epsilon:
            raise ValueError('cannot normalize zero-length vector {}'.format(self))
        return Pt3(self.x / l, self.y / l, self.z / l)

    def rotated_x(self, degrees: float) -> Pt3:
        c = dcos(degrees)
        s = dsin(degrees)
        return Pt3(self.x, self.y * c - self.z * s, self.y * s + self.z * c)

    def rotated_y(self, degrees: float) -> Pt3:
        c = dcos(degrees)
        s = dsin(degrees)
        return Pt3(self.x * c + self.z * s, self.y, -self.x * s + self.z * c)

    def rotated_z(self, degrees: float) -> Pt3:
        c = dcos(degrees)
        s = dsin(degrees)
        return Pt3(self.x * c - self.y * s, self.x * s + self.y * c, self.z)

    def lerp(self, other: Pt3, t: float) -> Pt3:
        return self + (other - self) * t

    def as_pt2(self) -> Pt2:
        return Pt2(self.x, self.y)

    def as_pt4(self, w: float = 1.0) -> Pt4:
        return Pt4(self.x, self.y, self.z, w)


@dataclass(frozen=True)
class Pt4:
    """A homogeneous 3D coordinate ``[x, y, z, w]``."""

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0
    w: float = 1.0

    def __add__(self, other: Pt4) -> Pt4:
        return Pt4(self.x + other.x, self.y + other.y,
                   self.z + other.z, self.w + other.w)

    def __sub__(self, other: Pt4) -> Pt4:
        return Pt4(self.x - other.x, self.y - other.y,
                   self.z - other.z, self.w - other.w)

    def __mul__(self, s: float) -> Pt4:
        return Pt4(self.x * s, self.y * s, self.z * s, self.w * s)

    __rmul__ = __mul__

    def __truediv__(self, s: float) -> Pt4:
        return Pt4(self.x / s, self.y / s, self.z / s, self.w / s)

    def __neg__(self) -> Pt4:
        return Pt4(-self.x, -self.y, -self.z, -self.w)

    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y
        yield self.z
        yield self.w

    def __getitem__(self, i: int) -> float:
        return (self.x, self.y, self.z, self.w)[i]

    def __len__(self) -> int:
        return 4

    def dot(self, other: Pt4) -> float:
        return (self.x * other.x + self.y * other.y
                + self.z * other.z + self.w * other.w)

    def as_pt3(self) -> Pt3:
        """drop the homogeneous coordinate"""
        return Pt3(self.x, self.y, self.z)

    def homo(self) -> Pt3:
        """project back into the w=1 hyperplane"""
        if abs(self.w) < epsilon:
            raise ValueError('cannot project a direction (w == 0) to a point')
        return Pt3(self.x / self.w, self.y / self.w, self.z / self.w)


class Pt2s(list):
    """Mutable ordered sequence of :class:`Pt2` (a polyline or profile)."""

    def __init__(self, points: Iterable[Pt2] = ()):
        super().__init__(points)

    def translate(self, delta: Pt2) -> Pt2s:
        for i, p in enumerate(self):
            self[i] = p + delta
        return self

    def rotate(self, degrees: float) -> Pt2s:
        for i, p in enumerate(self):
            self[i] = p.rotated(degrees)
        return self

    def as_pt3s(self, z: float = 0.0) -> Pt3s:
        return Pt3s(p.as_pt3(z) for p in self)


class Pt3s(list):
    """Mutable ordered sequence of :class:`Pt3` (a path or vertex buffer)."""

    def __init__(self, points: Iterable[Pt3] = ()):
        super().__init__(points)

    def translate(self, delta: Pt3) -> Pt3s:
        for i, p in enumerate(self):
            self[i] = p + delta
        return self

    def rotate_x(self, degrees: float) -> Pt3s:
        for i, p in enumerate(self):
            self[i] = p.rotated_x(degrees)
        return self

    def rotate_y(self, degrees: float) -> Pt3s:
        for i, p in enumerate(self):
            self[i] = p.rotated_y(degrees)
        return self

    def rotate_z(self, degrees: float) -> Pt3s:
        for i, p in enumerate(self):
            self[i] = p.rotated_z(degrees)
        return self

    def apply_matrix(self, matrix) -> Pt3s:
        """transform every point (w=1) by a :class:`scadmesh.xform.Matrix`"""
        for i, p in enumerate(self):
            self[i] = matrix.mul(p.as_pt4(1.0)).as_pt3()
        return self


__all__ = [
    'epsilon',
    'TRIANGULATION_EPSILON',
    'dsin',
    'dcos',
    'dtan',
    'close',
    'Pt2',
    'Pt3',
    'Pt4',
    'Pt2s',
    'Pt3s',
]
