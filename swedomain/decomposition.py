"""Layout of grid blocks over a set of processes and the output schedule."""

from __future__ import annotations

import math
from dataclasses import dataclass

from swedomain.types import BoundaryEdge


def compute_number_of_block_rows(number_of_processes: int) -> int:
    """Return the number of block rows for the given number of processes.

    This is the square root of the process count if that is a square number,
    otherwise the largest divisor of the process count below its square root.
    """
    if number_of_processes < 1:
        raise ValueError(f"number of processes must be positive, got {number_of_processes}")
    rows = math.isqrt(number_of_processes)
    while number_of_processes % rows != 0:
        rows -= 1
    return rows


def checkpoint_times(end_simulation_time: float, number_of_checkpoints: int) -> list[float]:
    """Return the times at which output is written, starting with zero."""
    if number_of_checkpoints < 1:
        raise ValueError(f"number of checkpoints must be positive, got {number_of_checkpoints}")
    interval = end_simulation_time / number_of_checkpoints
    return [cp * interval for cp in range(number_of_checkpoints + 1)]


def _local_cells(position: int, blocks: int, cells: int) -> int:
    normal = cells // blocks
    if position < blocks - 1:
        return normal
    return cells - (blocks - 1) * normal


@dataclass(frozen=True)
class BlockLayout:
    """Position and size of one process's block within the global grid.

    Ranks are laid out column by column: consecutive ranks share an x position
    and step upwards in y.
    """

    rank: int
    blocks_x: int
    blocks_y: int
    position_x: int
    position_y: int
    cells_x: int
    cells_y: int
    cells_x_local: int
    cells_y_local: int
    cells_x_normal: int
    cells_y_normal: int

    @classmethod
    def for_rank(
        cls, rank: int, number_of_processes: int, cells_x: int, cells_y: int
    ) -> BlockLayout:
        """Compute the layout of the block owned by ``rank``."""
        blocks_y = compute_number_of_block_rows(number_of_processes)
        blocks_x = number_of_processes // blocks_y
        if not 0 <= rank < number_of_processes:
            raise ValueError(f"rank {rank} outside 0..{number_of_processes - 1}")
        if cells_x < 1 or cells_y < 1:
            raise ValueError(f"grid size must be positive, got {cells_x}x{cells_y}")
        position_x = rank // blocks_y
        position_y = rank % blocks_y
        return cls(
            rank=rank,
            blocks_x=blocks_x,
            blocks_y=blocks_y,
            position_x=position_x,
            position_y=position_y,
            cells_x=cells_x,
            cells_y=cells_y,
            cells_x_local=_local_cells(position_x, blocks_x, cells_x),
            cells_y_local=_local_cells(position_y, blocks_y, cells_y),
            cells_x_normal=cells_x // blocks_x,
            cells_y_normal=cells_y // blocks_y,
        )

    def neighbor(self, edge: BoundaryEdge) -> int | None:
        """Return the rank across ``edge``, or None at the domain boundary."""
        if self.is_physical_boundary(edge):
            return None
        if edge is BoundaryEdge.LEFT:
            return self.rank - self.blocks_y
        if edge is BoundaryEdge.RIGHT:
            return self.rank + self.blocks_y
        if edge is BoundaryEdge.BOTTOM:
            return self.rank - 1
        return self.rank + 1

    def neighbors(self) -> dict[BoundaryEdge, int | None]:
        """Return the neighbouring rank for every edge."""
        return {edge: self.neighbor(edge) for edge in BoundaryEdge}

    def origin(
        self, left: float, bottom: float, cell_size_x: float, cell_size_y: float
    ) -> tuple[float, float]:
        """Return the lower-left corner of this block in domain coordinates."""
        origin_x = left + self.position_x * self.cells_x_normal * cell_size_x
        origin_y = bottom + self.position_y * self.cells_y_normal * cell_size_y
        return origin_x, origin_y

    def is_physical_boundary(self, edge: BoundaryEdge) -> bool:
        """Tell whether ``edge`` lies on the boundary of the whole domain."""
        edge = BoundaryEdge(edge)
        if edge is BoundaryEdge.LEFT:
            return self.position_x == 0
        if edge is BoundaryEdge.RIGHT:
            return self.position_x == self.blocks_x - 1
        if edge is BoundaryEdge.BOTTOM:
            return self.position_y == 0
        return self.position_y == self.blocks_y - 1