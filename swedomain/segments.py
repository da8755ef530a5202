"""One-sided segment communication between the blocks of a decomposed grid.

Each rank owns three memory segments: the water height and the two
discharges. Every segment holds the rank's block, ghost layers included,
stored column by column as in :mod:`swedomain.offsets`.

Ghost layers are filled by one-sided writes. A rank copies the values at a
list of byte offsets of its own segment into a neighbour's segment and posts
a notification there. The neighbour then waits for that notification before
it uses its ghost layer. The notification id is the sender's rank.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

import numpy as np

from swedomain.decomposition import BlockLayout
from swedomain.offsets import DEFAULT_ITEM_SIZE, GhostOffsets
from swedomain.types import BoundaryEdge

SEGMENT_COUNT = 3
"""Segments per rank: water height, discharge hu and discharge hv."""

_HORIZONTAL = (BoundaryEdge.LEFT, BoundaryEdge.RIGHT)
_VERTICAL = (BoundaryEdge.BOTTOM, BoundaryEdge.TOP)


class SegmentError(Exception):
    """Raised when a segment operation cannot be carried out."""


@dataclass
class Segment:
    """A flat block of doubles addressed by byte offsets."""

    segment_id: int
    rows: int
    cols: int
    item_size: int = DEFAULT_ITEM_SIZE
    data: np.ndarray = field(init=False, repr=False)

    def __post_init__(self) -> None:
        if self.rows < 1 or self.cols < 1:
            raise SegmentError(f"segment needs a positive size, got {self.cols}x{self.rows}")
        self.data = np.zeros(self.rows * self.cols)

    @property
    def size(self) -> int:
        """Size of the segment in bytes."""
        return self.data.size * self.item_size

    @property
    def grid(self) -> np.ndarray:
        """A view of the storage indexed ``[x, y]``."""
        return self.data.reshape(self.cols, self.rows)

    def _index(self, byte_offset: int) -> int:
        if byte_offset < 0 or byte_offset >= self.size:
            raise SegmentError(
                f"offset {byte_offset} outside segment {self.segment_id} of {self.size} bytes"
            )
        index, remainder = divmod(byte_offset, self.item_size)
        if remainder:
            raise SegmentError(
                f"offset {byte_offset} is not a multiple of the item size {self.item_size}"
            )
        return index

    def read(self, byte_offset: int) -> float:
        """Return the value stored at ``byte_offset``."""
        return float(self.data[self._index(byte_offset)])

    def write(self, byte_offset: int, value: float) -> None:
        """Store ``value`` at ``byte_offset``."""
        self.data[self._index(byte_offset)] = value


@dataclass
class SegmentSpace:
    """The segments of all ranks together with their pending notifications."""

    layouts: dict[int, BlockLayout]
    segments: dict[int, tuple[Segment, ...]]
    offsets: dict[int, GhostOffsets]
    _notifications: dict[tuple[int, int], dict[int, int]] = field(
        default_factory=dict, repr=False
    )

    @classmethod
    def create(cls, layouts: Iterable[BlockLayout]) -> SegmentSpace:
        """Create zero-filled segments for every rank in ``layouts``."""
        by_rank: dict[int, BlockLayout] = {}
        for layout in layouts:
            if layout.rank in by_rank:
                raise SegmentError(f"rank {layout.rank} appears more than once")
            by_rank[layout.rank] = layout
        segments: dict[int, tuple[Segment, ...]] = {}
        offsets: dict[int, GhostOffsets] = {}
        for rank, layout in by_rank.items():
            rows = layout.cells_y_local + 2
            cols = layout.cells_x_local + 2
            segments[rank] = tuple(
                Segment(segment_id, rows, cols) for segment_id in range(SEGMENT_COUNT)
            )
            offsets[rank] = GhostOffsets.for_grid(rows, cols)
        return cls(layouts=by_rank, segments=segments, offsets=offsets)

    def segment(self, rank: int, segment_id: int) -> Segment:
        """Return segment ``segment_id`` of ``rank``."""
        try:
            owned = self.segments[rank]
        except KeyError:
            raise SegmentError(f"no segments for rank {rank}") from None
        if not 0 <= segment_id < len(owned):
            raise SegmentError(f"rank {rank} has no segment {segment_id}")
        return owned[segment_id]

    def write_list_notify(
        self,
        source_rank: int,
        target_rank: int,
        segment_id: int,
        source_offsets: Sequence[int],
        target_offsets: Sequence[int],
        notification_id: int,
    ) -> None:
        """Copy values between two ranks' segments, then notify the target."""
        if len(source_offsets) != len(target_offsets):
            raise SegmentError(
                f"{len(source_offsets)} source offsets but {len(target_offsets)} target offsets"
            )
        source = self.segment(source_rank, segment_id)
        target = self.segment(target_rank, segment_id)
        values = [source.read(offset) for offset in source_offsets]
        for offset, value in zip(target_offsets, values):
            target.write(offset, value)
        self._notifications.setdefault((target_rank, segment_id), {})[notification_id] = 1

    def wait_notification(self, rank: int, segment_id: int, source_rank: int) -> int:
        """Consume the notification ``source_rank`` posted on a segment of ``rank``.

        Returns the notification value and resets it. Raises SegmentError if
        the notification has not been posted, since waiting could never end.
        """
        self.segment(rank, segment_id)
        pending = self._notifications.get((rank, segment_id), {})
        value = pending.get(source_rank, 0)
        if not value:
            raise SegmentError(
                f"no notification from rank {source_rank} on segment {segment_id} of rank {rank}"
            )
        pending[source_rank] = 0
        return value

    def _send(self, rank: int, edges: Sequence[BoundaryEdge]) -> None:
        layout = self._layout(rank)
        for edge in edges:
            target_rank = layout.neighbor(edge)
            if target_rank is None:
                continue
            self._layout(target_rank)
            source_offsets = self.offsets[rank].outflow(edge)
            target_offsets = self.offsets[target_rank].inflow(edge.opposite())
            for segment_id in range(SEGMENT_COUNT):
                self.write_list_notify(
                    rank, target_rank, segment_id, source_offsets, target_offsets, rank
                )

    def _collect(self, rank: int, edges: Sequence[BoundaryEdge]) -> None:
        layout = self._layout(rank)
        for edge in reversed(edges):
            source_rank = layout.neighbor(edge)
            if source_rank is None:
                continue
            for segment_id in range(SEGMENT_COUNT):
                self.wait_notification(rank, segment_id, source_rank)

    def _layout(self, rank: int) -> BlockLayout:
        try:
            return self.layouts[rank]
        except KeyError:
            raise SegmentError(f"no segments for rank {rank}") from None

    def exchange_left_right(self, rank: int) -> None:
        """Write the copy columns of ``rank`` into its left and right neighbours."""
        self._send(rank, _HORIZONTAL)

    def exchange_bottom_top(self, rank: int) -> None:
        """Write the copy rows of ``rank`` into its bottom and top neighbours."""
        self._send(rank, _VERTICAL)

    def exchange_all(self) -> None:
        """Exchange all ghost layers: left/right first, then bottom/top.

        In each phase every rank writes its copy layers and then waits for the
        notifications of its neighbours.
        """
        ranks = sorted(self.layouts)
        for send, edges in (
            (self.exchange_left_right, _HORIZONTAL),
            (self.exchange_bottom_top, _VERTICAL),
        ):
            for rank in ranks:
                send(rank)
            for rank in ranks:
                self._collect(rank, edges)