"""Byte offsets of copy and ghost layers inside a block's flat storage.

A block of ``cols`` x ``rows`` values, ghost layers included, is stored
column by column: the value at column ``x`` and row ``y`` sits at flat index
``x * rows + y``. A column is therefore contiguous, while consecutive values
of a row lie ``rows`` elements apart. The offsets computed here address every
value of one boundary layer, in bytes, so that one-sided writes can move a
whole layer into a neighbour's storage.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from swedomain.types import BoundaryEdge, BoundaryType

DEFAULT_ITEM_SIZE = 8
"""Size in bytes of one stored value (a double)."""


def _layer_start(rows: int, cols: int, edge: BoundaryEdge, outflow: bool) -> tuple[int, int, int]:
    """Return the first flat index, the stride and the count of one layer."""
    if edge is BoundaryEdge.LEFT:
        return (1 if outflow else 0) * rows, 1, rows
    if edge is BoundaryEdge.RIGHT:
        return (cols - 2 if outflow else cols - 1) * rows, 1, rows
    if edge is BoundaryEdge.BOTTOM:
        return (1 if outflow else 0), rows, cols
    return (rows - 2 if outflow else rows - 1), rows, cols


def calculate_offsets(
    rows: int,
    cols: int,
    edge: BoundaryEdge,
    boundary_type: BoundaryType,
    item_size: int = DEFAULT_ITEM_SIZE,
) -> tuple[int, ...]:
    """Return the byte offsets of the layer at ``edge`` of a ``cols`` x ``rows`` grid.

    ``BoundaryType.OUTFLOW`` selects the copy layer (the outermost interior
    cells), ``BoundaryType.INFLOW`` the ghost layer. Left and right layers are
    whole columns, bottom and top layers whole rows, ghost corners included.
    """
    edge = BoundaryEdge(edge)
    boundary_type = BoundaryType(boundary_type)
    if boundary_type not in (BoundaryType.OUTFLOW, BoundaryType.INFLOW):
        raise ValueError(
            f"offsets exist only for outflow and inflow layers, not {boundary_type.name.lower()}"
        )
    if rows < 3 or cols < 3:
        raise ValueError(
            f"a grid with ghost layers needs at least 3x3 values, got {cols}x{rows}"
        )
    if item_size < 1:
        raise ValueError(f"item size must be positive, got {item_size}")

    start, stride, count = _layer_start(rows, cols, edge, boundary_type is BoundaryType.OUTFLOW)
    return tuple((start + stride * i) * item_size for i in range(count))


@dataclass(frozen=True)
class GhostOffsets:
    """Copy-layer and ghost-layer byte offsets for all four edges of a grid."""

    rows: int
    cols: int
    item_size: int = DEFAULT_ITEM_SIZE
    _outflow: dict[BoundaryEdge, tuple[int, ...]] = field(
        default_factory=dict, repr=False, compare=False
    )
    _inflow: dict[BoundaryEdge, tuple[int, ...]] = field(
        default_factory=dict, repr=False, compare=False
    )

    @classmethod
    def for_grid(cls, rows: int, cols: int, item_size: int = DEFAULT_ITEM_SIZE) -> GhostOffsets:
        """Compute the offsets of every layer of a ``cols`` x ``rows`` grid."""
        outflow = {
            edge: calculate_offsets(rows, cols, edge, BoundaryType.OUTFLOW, item_size)
            for edge in BoundaryEdge
        }
        inflow = {
            edge: calculate_offsets(rows, cols, edge, BoundaryType.INFLOW, item_size)
            for edge in BoundaryEdge
        }
        return cls(rows=rows, cols=cols, item_size=item_size, _outflow=outflow, _inflow=inflow)

    def outflow(self, edge: BoundaryEdge) -> tuple[int, ...]:
        """Return the offsets of the copy layer sent across ``edge``."""
        return self._outflow[BoundaryEdge(edge)]

    def inflow(self, edge: BoundaryEdge) -> tuple[int, ...]:
        """Return the offsets of the ghost layer filled from across ``edge``."""
        return self._inflow[BoundaryEdge(edge)]