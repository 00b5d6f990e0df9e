## generalized matrix transformation operations for 3D homogeneous
## coordinates in scadmesh

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

import numpy as np

from scadmesh.geom import Pt3, Pt4, close, dcos, dsin, epsilon

## a matrix is represented as a list of four rows of four numbers. In
## a matrix, vectors represent rows unless the transpose property is
## true.  Points are treated as column vectors, so ``M.mul(p)``
## computes Mp.

## The frame builders at the bottom of this module (look_at_lh and
## friends) are what the sweep builder uses to orient a profile
## perpendicular to a path.


class Matrix:
    """4x4 transformation matrix class for transforming homogemenous 3D coordinates"""

    def __init__(self, a=None, trans=False):
        self.m = [[1.0, 0.0, 0.0, 0.0],
                  [0.0, 1.0, 0.0, 0.0],
                  [0.0, 0.0, 1.0, 0.0],
                  [0.0, 0.0, 0.0, 1.0]]
        self.trans = False

        if isinstance(a, Matrix):
            for i in range(4):
                self.setrow(i, a.getrow(i))
        elif isinstance(a, (tuple, list)):
            if len(a) == 4 and all(isinstance(r, (tuple, list)) and len(r) == 4 for r in a):
                for i in range(4):
                    for j in range(4):
                        self.m[i][j] = _checked(a[i][j])
            elif len(a) == 16:
                for i in range(4):
                    for j in range(4):
                        self.m[i][j] = _checked(a[i * 4 + j])
            else:
                raise ValueError('bad thing used in attempt to initialize matrix: {}'.format(a))
        elif a is not None:
            raise ValueError('bad thing used in attempt to initialize matrix: {}'.format(a))
        self.trans = trans

    def __repr__(self):
        return "Matrix({},{},{},{},{})".format(self.m[0], self.m[1],
                                               self.m[2], self.m[3], self.trans)

    def __eq__(self, other):
        if not isinstance(other, Matrix):
            return NotImplemented
        return self.rows() == other.rows()

    #return value indexed by i,j
    def get(self, i, j):
        if i < 0 or i > 3 or j < 0 or j > 3:
            raise ValueError('bad index passed to get: {},{}'.format(i, j))
        if self.trans:
            return self.m[j][i]
        return self.m[i][j]

    #set value indexed by i,j
    def set(self, i, j, x):
        if i < 0 or i > 3 or j < 0 or j > 3:
            raise ValueError('bad index passed to set: {},{}'.format(i, j))
        x = _checked(x)
        if self.trans:
            self.m[j][i] = x
        else:
            self.m[i][j] = x

    def getrow(self, i):
        if i < 0 or i > 3:
            raise ValueError('bad row passed to getrow: {}'.format(i))
        if self.trans:
            return [self.m[0][i], self.m[1][i], self.m[2][i], self.m[3][i]]
        return list(self.m[i])

    def getcol(self, j):
        if j < 0 or j > 3:
            raise ValueError('bad column passed to getcol: {}'.format(j))
        if not self.trans:
            return [self.m[0][j], self.m[1][j], self.m[2][j], self.m[3][j]]
        return list(self.m[j])

    def setrow(self, i, x):
        if i < 0 or i > 3:
            raise ValueError('bad row index passed to setrow: {}'.format(i))
        if len(x) != 4:
            raise ValueError('bad non-vector passed to setrow: {}'.format(x))
        for j in range(4):
            self.set(i, j, x[j])

    def setcol(self, j, x):
        if j < 0 or j > 3:
            raise ValueError('bad column index passed to setcol: {}'.format(j))
        if len(x) != 4:
            raise ValueError('bad non-vector passed to setcol: {}'.format(x))
        for i in range(4):
            self.set(i, j, x[i])

    def rows(self):
        return [self.getrow(i) for i in range(4)]

    def transpose(self):
        """return the transposed matrix as a new, untransposed instance"""
        return Matrix([self.getcol(j) for j in range(4)])

    # matrix multiply.  If x is a matrix, compute MX.  If x is a Pt4,
    # compute Mx.  A Pt3 is treated as a direction: only the upper 3x3
    # block is applied.  If x is a scalar, compute xM.  Respects the
    # transpose flag.

    def mul(self, x):
        if isinstance(x, Matrix):
            result = Matrix()
            for i in range(4):
                row = self.getrow(i)
                for j in range(4):
                    result.set(i, j, _dot4(row, x.getcol(j)))
            return result
        elif isinstance(x, Pt4):
            v = list(x)
            return Pt4(*[_dot4(self.getrow(i), v) for i in range(4)])
        elif isinstance(x, Pt3):
            v = [x.x, x.y, x.z, 0.0]
            return Pt3(*[_dot4(self.getrow(i), v) for i in range(3)])
        elif _isgoodnum(x):
            return Matrix([[e * x for e in self.getrow(i)] for i in range(4)])

        raise ValueError('bad thing passed to mul(): {}'.format(x))

    __mul__ = mul

    def inverse(self):
        """numerically invert the matrix, ``ValueError`` if singular"""
        try:
            inv = np.linalg.inv(np.array(self.rows(), dtype=float))
        except np.linalg.LinAlgError as exc:
            raise ValueError('matrix is singular and cannot be inverted') from exc
        return Matrix(inv.tolist())


def _isgoodnum(x):
    return (not isinstance(x, bool)) and isinstance(x, (int, float))


def _checked(x):
    if _isgoodnum(x):
        return float(x)
    if isinstance(x, np.floating):
        return float(x)
    raise ValueError('bad element in matrix initialization: {}'.format(x))


def _dot4(a, b):
    return a[0] * b[0] + a[1] * b[1] + a[2] * b[2] + a[3] * b[3]


# return the generalized 4x4 arbitrary axis rotation matrix
def Rotation(axis, angle, inverse=False):
    m = axis.len()
    if m < epsilon:
        raise ValueError('zero-length rotation axis not allowed')
    u = axis
    if not close(m, 1.0):
        u = axis / m

    if inverse:
        angle *= -1.0

    ux = u.x
    uy = u.y
    uz = u.z

    cang = dcos(angle % 360.0)
    cmin = 1.0 - cang
    sang = dsin(angle % 360.0)

    # see http://www.opengl-tutorial.org/assets/faq_quaternions/index.html#Q38
    R = [[cang + ux * ux * cmin, ux * uy * cmin - uz * sang, ux * uz * cmin + uy * sang, 0],
         [uy * ux * cmin + uz * sang, cang + uy * uy * cmin, uy * uz * cmin - ux * sang, 0],
         [uz * ux * cmin - uy * sang, uz * uy * cmin + ux * sang, cang + uz * uz * cmin, 0],
         [0, 0, 0, 1]]

    return Matrix(R)


def RotX(angle):
    return Rotation(Pt3(1, 0, 0), angle)


def RotY(angle):
    return Rotation(Pt3(0, 1, 0), angle)


def RotZ(angle):
    return Rotation(Pt3(0, 0, 1), angle)


def Translation(delta, inverse=False):
    if inverse:
        delta = -delta
    T = [[1, 0, 0, delta.x],
         [0, 1, 0, delta.y],
         [0, 0, 1, delta.z],
         [0, 0, 0, 1]]
    return Matrix(T)


def Scale(x, y=None, z=None, inverse=False):
    if isinstance(x, Pt3):
        sx, sy, sz = x.x, x.y, x.z
    elif _isgoodnum(x):
        sx = x
        if _isgoodnum(y) and _isgoodnum(z):
            sy = y
            sz = z
        else:
            sy = sz = x
    else:
        raise ValueError('bad scaling values passed to Scale')

    if inverse:
        if abs(sx) < epsilon or abs(sy) < epsilon or abs(sz) < epsilon:
            raise ValueError('cannot invert a zero scale')
        sx = 1.0 / sx
        sy = 1.0 / sy
        sz = 1.0 / sz

    S = [[sx, 0, 0, 0],
         [0, sy, 0, 0],
         [0, 0, sz, 0],
         [0, 0, 0, 1.0]]
    return Matrix(S)


def look_at_lh(eye, center, up=Pt3(0, 0, 1)):
    """Return a placement frame whose local +Z axis points from ``eye``
    toward ``center``.

    The columns of the rotation block are the local X, Y and Z axes in
    world space (X = up x forward, Y = forward x X), and the local
    origin sits at ``eye``.  When ``up`` is parallel to the forward
    direction there is no well defined X axis; the frame falls back to
    the identity rotation (same direction) or a 180 degree turn about X
    (opposite direction).
    """
    f = (center - eye)
    if f.len() < epsilon:
        raise ValueError('look_at needs distinct eye and center points, got {}'.format(eye))
    f = f.normalized()
    s = up.cross(f)
    if s.len() < epsilon:
        if up.dot(f) < 0.0:
            frame = RotX(180.0)
        else:
            frame = Matrix()
    else:
        s = s.normalized()
        u = f.cross(s)
        frame = Matrix([[s.x, u.x, f.x, 0],
                        [s.y, u.y, f.y, 0],
                        [s.z, u.z, f.z, 0],
                        [0, 0, 0, 1]])
    frame.setcol(3, [eye.x, eye.y, eye.z, 1.0])
    return frame


def look_at_rh(eye, center, up=Pt3(0, 0, 1)):
    """Return the right-handed view matrix mapping world coordinates into
    an eye space that looks down its own -Z axis."""
    f = (center - eye)
    if f.len() < epsilon:
        raise ValueError('look_at needs distinct eye and center points, got {}'.format(eye))
    f = f.normalized()
    s = f.cross(up)
    if s.len() < epsilon:
        if up.dot(f) < 0.0:
            return RotX(180.0).mul(Translation(eye, inverse=True))
        return Translation(eye, inverse=True)
    s = s.normalized()
    u = s.cross(f)
    return Matrix([[s.x, s.y, s.z, -s.dot(eye)],
                   [u.x, u.y, u.z, -u.dot(eye)],
                   [-f.x, -f.y, -f.z, f.dot(eye)],
                   [0, 0, 0, 1]])


def rotation_from_direction(direction, up=Pt3(0, 0, 1)):
    """rotation whose rows are ``up x d``, ``d`` and ``d x (up x d)``;
    it maps ``direction`` onto the local +Y axis"""
    d = direction.normalized()
    x_axis = up.cross(d)
    if x_axis.len() < epsilon:
        raise ValueError('direction {} is parallel to up vector {}'.format(direction, up))
    x_axis = x_axis.normalized()
    z_axis = d.cross(x_axis).normalized()
    return Matrix([[x_axis.x, x_axis.y, x_axis.z, 0],
                   [d.x, d.y, d.z, 0],
                   [z_axis.x, z_axis.y, z_axis.z, 0],
                   [0, 0, 0, 1]])


__all__ = [
    'Matrix',
    'Rotation',
    'RotX',
    'RotY',
    'RotZ',
    'Translation',
    'Scale',
    'look_at_lh',
    'look_at_rh',
    'rotation_from_direction',
]
