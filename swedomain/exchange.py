"""Ghost-layer exchange between the blocks of a decomposed grid.

Every block stores its unknowns with one layer of ghost cells around the
interior, indexed ``[x, y]``. Copy layers are the outermost interior cells;
they are sent to the neighbouring block, which stores them in its ghost layer
on the opposite edge. Left/right exchanges move whole columns and bottom/top
exchanges move whole rows, ghost corners included, so that after both phases
the corner ghost cells hold the values of the diagonal neighbour.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass

import numpy as np

from swedomain.decomposition import BlockLayout
from swedomain.types import BoundaryEdge

_COPY_LAYER = {
    BoundaryEdge.LEFT: (1, slice(None)),
    BoundaryEdge.RIGHT: (-2, slice(None)),
    BoundaryEdge.BOTTOM: (slice(None), 1),
    BoundaryEdge.TOP: (slice(None), -2),
}

_GHOST_LAYER = {
    BoundaryEdge.LEFT: (0, slice(None)),
    BoundaryEdge.RIGHT: (-1, slice(None)),
    BoundaryEdge.BOTTOM: (slice(None), 0),
    BoundaryEdge.TOP: (slice(None), -1),
}


@dataclass
class LocalBlock:
    """The unknowns of one process's block, ghost layers included."""

    layout: BlockLayout
    h: np.ndarray
    hu: np.ndarray
    hv: np.ndarray

    @classmethod
    def create(cls, layout: BlockLayout) -> LocalBlock:
        """Create a zero-filled block sized for ``layout`` plus ghost layers."""
        shape = (layout.cells_x_local + 2, layout.cells_y_local + 2)
        return cls(
            layout=layout,
            h=np.zeros(shape),
            hu=np.zeros(shape),
            hv=np.zeros(shape),
        )

    def fields(self) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
        """Return the water height and the two discharges."""
        return self.h, self.hu, self.hv


def _index_by_rank(blocks: Iterable[LocalBlock]) -> dict[int, LocalBlock]:
    by_rank: dict[int, LocalBlock] = {}
    for block in blocks:
        rank = block.layout.rank
        if rank in by_rank:
            raise ValueError(f"rank {rank} appears more than once")
        by_rank[rank] = block
    return by_rank


def _exchange(blocks: Iterable[LocalBlock], edges: Sequence[BoundaryEdge]) -> None:
    by_rank = _index_by_rank(blocks)
    transfers: list[tuple[np.ndarray, tuple, np.ndarray]] = []
    for block in by_rank.values():
        for edge in edges:
            target_rank = block.layout.neighbor(edge)
            if target_rank is None:
                continue
            target = by_rank.get(target_rank)
            if target is None:
                raise ValueError(
                    f"rank {block.layout.rank} has neighbour {target_rank} "
                    f"across {edge.name.lower()} edge, but no such block was given"
                )
            slot = _GHOST_LAYER[edge.opposite()]
            for source, destination in zip(block.fields(), target.fields()):
                outgoing = source[_COPY_LAYER[edge]]
                if destination[slot].shape != outgoing.shape:
                    raise ValueError(
                        f"layer of rank {block.layout.rank} has shape {outgoing.shape}, "
                        f"rank {target_rank} expects {destination[slot].shape}"
                    )
                transfers.append((destination, slot, outgoing.copy()))
    # All layers are read before any is written, as in a simultaneous send/receive.
    for destination, slot, values in transfers:
        destination[slot] = values


def exchange_left_right_ghost_layers(blocks: Iterable[LocalBlock]) -> None:
    """Send copy columns to the left and right neighbours' ghost columns."""
    _exchange(blocks, (BoundaryEdge.LEFT, BoundaryEdge.RIGHT))


def exchange_bottom_top_ghost_layers(blocks: Iterable[LocalBlock]) -> None:
    """Send copy rows to the bottom and top neighbours' ghost rows."""
    _exchange(blocks, (BoundaryEdge.BOTTOM, BoundaryEdge.TOP))


def exchange_ghost_layers(blocks: Iterable[LocalBlock]) -> None:
    """Exchange left/right layers first, then bottom/top layers."""
    blocks = list(blocks)
    exchange_left_right_ghost_layers(blocks)
    exchange_bottom_top_ghost_layers(blocks)