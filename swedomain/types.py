"""Boundary edges of a grid block and the boundary conditions they can carry."""

from __future__ import annotations

from enum import IntEnum


class BoundaryEdge(IntEnum):
    """Numbering of the four boundary edges of a block."""

    LEFT = 0
    RIGHT = 1
    BOTTOM = 2
    TOP = 3

    def opposite(self) -> BoundaryEdge:
        """Return the edge on the other side of the block."""
        return _OPPOSITES[self]


_OPPOSITES = {
    BoundaryEdge.LEFT: BoundaryEdge.RIGHT,
    BoundaryEdge.RIGHT: BoundaryEdge.LEFT,
    BoundaryEdge.BOTTOM: BoundaryEdge.TOP,
    BoundaryEdge.TOP: BoundaryEdge.BOTTOM,
}


class BoundaryType(IntEnum):
    """Available types of boundary conditions."""

    OUTFLOW = 0
    WALL = 1
    INFLOW = 2
    CONNECT = 3
    PASSIVE = 4