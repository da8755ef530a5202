# swedomain

Building blocks for a shallow water simulation on a grid that is split into
rectangular blocks, one block per process rank: the block layout, the
ghost-layer exchange between neighbouring blocks (both as direct array copies
and as one-sided writes into flat memory segments), and a base class for
edge-local wave propagation solvers.

## Modules

### `swedomain.types`

- `BoundaryEdge`: `LEFT`, `RIGHT`, `BOTTOM`, `TOP` (integer enum, 0 to 3).
  `BoundaryEdge.opposite()` returns the edge on the other side of a block.
- `BoundaryType`: `OUTFLOW`, `WALL`, `INFLOW`, `CONNECT`, `PASSIVE`.

### `swedomain.solver`

- `WetDryState`: the eight wet/dry states of a Riemann problem at an edge,
  from `DRY_DRY` and `WET_WET` to `DRY_WET_WALL_INUNDATION`.
- `NetUpdates`: frozen dataclass with `h_update_left`, `h_update_right`,
  `hu_update_left`, `hu_update_right` and `max_wave_speed`.
- `WavePropagationSolver`: abstract base class. The constructor takes
  `dry_tolerance`, `gravity` and `zero_tolerance` (stored as `dry_tol`,
  `gravity`, `zero_tol`). `store_parameters()` stores the edge-local heights,
  momenta and bathymetry; the velocities `u_left` and `u_right` are only
  replaced when given. Subclasses implement `determine_wet_dry_state()` and
  `compute_net_updates()`, which returns a `NetUpdates`.

### `swedomain.decomposition`

- `compute_number_of_block_rows(n)`: the square root of `n` if `n` is a
  square, otherwise the largest divisor of `n` below its square root.
  Raises `ValueError` for `n < 1`.
- `checkpoint_times(end, count)`: `count + 1` evenly spaced output times from
  0 to `end`. Raises `ValueError` for `count < 1`.
- `BlockLayout.for_rank(rank, number_of_processes, cells_x, cells_y)`: the
  block grid size, the rank's block position, and its local cell counts.
  Ranks are laid out column by column (consecutive ranks step upward in y);
  the last block in each direction takes the remaining cells. Raises
  `ValueError` for an out-of-range rank or a non-positive grid size.
- `BlockLayout.neighbor(edge)` / `neighbors()`: neighbouring ranks, `None` at
  the domain boundary. `is_physical_boundary(edge)` tells whether an edge lies
  on the boundary of the whole domain. `origin(left, bottom, dx, dy)` returns
  the block's lower-left corner.

### `swedomain.exchange`

- `LocalBlock.create(layout)`: zero-filled `h`, `hu`, `hv` arrays of shape
  `(cells_x_local + 2, cells_y_local + 2)`, indexed `[x, y]`, ghost layer
  included. `fields()` returns the three arrays.
- `exchange_left_right_ghost_layers(blocks)`,
  `exchange_bottom_top_ghost_layers(blocks)` and `exchange_ghost_layers(blocks)`
  copy each block's outermost interior cells into the neighbour's ghost layer
  on the opposite edge. Whole columns and rows are moved, corners included, so
  after both phases the ghost corners hold the diagonal neighbour's values.
  All layers are read before any is written. A missing neighbour block, a
  duplicated rank or mismatched layer shapes raise `ValueError`.

### `swedomain.offsets`

For a grid stored column by column (value at column `x`, row `y` at flat index
`x * rows + y`):

- `calculate_offsets(rows, cols, edge, boundary_type, item_size=8)`: byte
  offsets of the copy layer (`BoundaryType.OUTFLOW`) or ghost layer
  (`BoundaryType.INFLOW`) at an edge. Other boundary types, grids smaller than
  3x3 and non-positive item sizes raise `ValueError`.
- `GhostOffsets.for_grid(rows, cols, item_size=8)`: all of these at once, read
  back with `outflow(edge)` and `inflow(edge)`.

### `swedomain.segments`

- `Segment`: a flat array of doubles addressed by byte offsets, with `read()`,
  `write()`, `size` (bytes) and a `grid` view indexed `[x, y]`.
- `SegmentSpace.create(layouts)`: three segments (`h`, `hu`, `hv`) per rank.
  `write_list_notify()` copies values from one rank's segment to another's
  and posts a notification whose id is given by the caller;
  `wait_notification()` consumes it and raises `SegmentError` if it was never
  posted. `exchange_left_right(rank)` and `exchange_bottom_top(rank)` write a
  rank's copy layers into its neighbours; `exchange_all()` does both phases
  for every rank, each followed by consuming the neighbours' notifications.

## Install

```
pip install .
```

For the tests:

```
pip install ".[test]"
pytest
```

## Example

```python
from swedomain.decomposition import BlockLayout, compute_number_of_block_rows
from swedomain.exchange import LocalBlock, exchange_ghost_layers
from swedomain.segments import SegmentSpace
from swedomain.types import BoundaryEdge

processes = 6
rows = compute_number_of_block_rows(processes)   # 2
layouts = [BlockLayout.for_rank(rank, processes, 16, 16) for rank in range(processes)]
print(layouts[0].neighbors())
print(layouts[0].is_physical_boundary(BoundaryEdge.LEFT))   # True

blocks = [LocalBlock.create(layout) for layout in layouts]
blocks[0].h[1:-1, 1:-1] = 1.0
exchange_ghost_layers(blocks)

space = SegmentSpace.create(layouts)
space.exchange_all()
```

## What it does not do

The package contains no concrete solver: `WavePropagationSolver` is abstract,
and there are no scenarios (initial water height and bathymetry), no block
time-stepping, no output writers and no command-line program. The exchanges
run all ranks' blocks inside one Python process; there is no communication
between separate processes or machines.