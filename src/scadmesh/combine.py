"""Constructive solid geometry combination nodes.

scadmesh does not evaluate booleans itself.  A :class:`Boolean` records
the operation and its operands so a scene writer (OpenSCAD, a trimesh
boolean backend, ...) can evaluate the tree later.
"""

from copy import deepcopy

from scadmesh.polyhedron import Polyhedron


class Boolean:
    """Boolean operations on polyhedrons and nested booleans"""

    types = ('union', 'intersection', 'difference')

    def __repr__(self):
        return f"Boolean({self.type},{self.elem})"

    def __init__(self, type='union', operands=()):
        if type not in self.types:
            raise ValueError('invalid type passed to Boolean(): {}'.format(type))
        self.__type = type
        self.__finalized = False
        self.elem = []
        for op in operands:
            self.add(op)

    @property
    def type(self):
        return self.__type

    @property
    def finalized(self):
        return self.__finalized

    def __len__(self):
        return len(self.elem)

    def __iter__(self):
        return iter(self.elem)

    ## operands are deep-copied so later edits to the caller's meshes do
    ## not leak into the tree
    def add(self, operand):
        if self.__finalized:
            raise ValueError('cannot add operands to a finalized Boolean')
        if not isinstance(operand, (Polyhedron, Boolean)):
            raise ValueError('not a Polyhedron or Boolean instance: {}'.format(operand))
        self.elem.append(deepcopy(operand))
        return self

    def finalize(self):
        if not self.elem:
            raise ValueError('Boolean({}) has no operands'.format(self.type))
        self.__finalized = True
        return self

    def translate(self, delta):
        for op in self.elem:
            op.translate(delta)
        return self

    def apply_matrix(self, matrix):
        for op in self.elem:
            op.apply_matrix(matrix)
        return self

    def meshes(self):
        """yield every leaf polyhedron, depth first"""
        for op in self.elem:
            if isinstance(op, Boolean):
                yield from op.meshes()
            else:
                yield op


__all__ = ['Boolean']
