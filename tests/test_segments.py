import numpy as np
import pytest

from swedomain.decomposition import BlockLayout
from swedomain.exchange import LocalBlock, exchange_ghost_layers
from swedomain.segments import SEGMENT_COUNT, Segment, SegmentError, SegmentSpace
from swedomain.types import BoundaryEdge


def _layouts(processes, cells_x, cells_y):
    return [BlockLayout.for_rank(r, processes, cells_x, cells_y) for r in range(processes)]


def _filled_space(processes, cells_x, cells_y):
    space = SegmentSpace.create(_layouts(processes, cells_x, cells_y))
    for rank, owned in space.segments.items():
        for segment in owned:
            segment.data[:] = np.arange(segment.data.size) + rank * 1000 + segment.segment_id * 100
    return space


def _blocks_from(space):
    blocks = []
    for rank, layout in space.layouts.items():
        block = LocalBlock.create(layout)
        for field, segment in zip(block.fields(), space.segments[rank]):
            field[...] = segment.grid
        blocks.append(block)
    return blocks


def test_segment_write_read_round_trip():
    segment = Segment(0, rows=4, cols=3)
    segment.write(16, 2.5)
    assert segment.read(16) == 2.5
    assert segment.data[2] == 2.5


def test_segment_grid_is_column_major():
    segment = Segment(1, rows=4, cols=3)
    segment.write(8, 7.0)
    assert segment.grid[0, 1] == 7.0
    assert segment.grid.shape == (3, 4)


def test_segment_size_in_bytes():
    segment = Segment(0, rows=4, cols=3)
    assert segment.size == 4 * 3 * 8


@pytest.mark.parametrize("offset", [-8, 96, 1000])
def test_segment_rejects_out_of_range_offset(offset):
    segment = Segment(0, rows=4, cols=3)
    with pytest.raises(SegmentError):
        segment.read(offset)


def test_segment_rejects_misaligned_offset():
    segment = Segment(0, rows=4, cols=3)
    with pytest.raises(SegmentError):
        segment.write(3, 1.0)


def test_create_builds_three_segments_per_rank():
    space = SegmentSpace.create(_layouts(2, 4, 2))
    assert sorted(space.segments) == [0, 1]
    for rank, layout in space.layouts.items():
        owned = space.segments[rank]
        assert len(owned) == SEGMENT_COUNT
        assert [s.segment_id for s in owned] == list(range(SEGMENT_COUNT))
        assert all(s.rows == layout.cells_y_local + 2 for s in owned)
        assert all(s.cols == layout.cells_x_local + 2 for s in owned)


def test_create_rejects_duplicate_rank():
    layout = BlockLayout.for_rank(0, 2, 4, 4)
    with pytest.raises(SegmentError):
        SegmentSpace.create([layout, layout])


def test_write_list_notify_copies_values_and_notifies():
    space = SegmentSpace.create(_layouts(2, 4, 2))
    source = space.segment(0, 1)
    source.write(0, 3.0)
    source.write(8, 4.0)
    space.write_list_notify(0, 1, 1, [0, 8], [16, 24], notification_id=0)
    target = space.segment(1, 1)
    assert target.read(16) == 3.0
    assert target.read(24) == 4.0
    assert space.wait_notification(1, 1, 0) == 1


def test_wait_resets_notification():
    space = SegmentSpace.create(_layouts(2, 4, 2))
    space.write_list_notify(0, 1, 0, [0], [0], notification_id=0)
    space.wait_notification(1, 0, 0)
    with pytest.raises(SegmentError):
        space.wait_notification(1, 0, 0)


def test_wait_without_notification_raises():
    space = SegmentSpace.create(_layouts(2, 4, 2))
    with pytest.raises(SegmentError):
        space.wait_notification(0, 0, 1)


def test_write_list_notify_rejects_mismatched_lengths():
    space = SegmentSpace.create(_layouts(2, 4, 2))
    with pytest.raises(SegmentError):
        space.write_list_notify(0, 1, 0, [0, 8], [0], notification_id=0)


def test_write_list_notify_rejects_unknown_rank_and_segment():
    space = SegmentSpace.create(_layouts(2, 4, 2))
    with pytest.raises(SegmentError):
        space.write_list_notify(0, 5, 0, [0], [0], notification_id=0)
    with pytest.raises(SegmentError):
        space.write_list_notify(0, 1, SEGMENT_COUNT, [0], [0], notification_id=0)


def test_exchange_left_right_posts_notifications_for_neighbours():
    space = _filled_space(2, 4, 2)
    space.exchange_left_right(0)
    for segment_id in range(SEGMENT_COUNT):
        assert space.wait_notification(1, segment_id, 0) == 1
    with pytest.raises(SegmentError):
        space.wait_notification(0, 0, 1)


def test_exchange_left_right_fills_neighbour_ghost_column():
    space = _filled_space(2, 4, 2)
    space.exchange_left_right(0)
    for segment_id in range(SEGMENT_COUNT):
        sender = space.segment(0, segment_id).grid
        receiver = space.segment(1, segment_id).grid
        assert np.array_equal(receiver[0, :], sender[-2, :])


def test_exchange_bottom_top_fills_neighbour_ghost_row():
    space = _filled_space(2, 2, 4)
    layouts = space.layouts
    assert layouts[0].neighbor(BoundaryEdge.TOP) == 1
    space.exchange_bottom_top(1)
    for segment_id in range(SEGMENT_COUNT):
        sender = space.segment(1, segment_id).grid
        receiver = space.segment(0, segment_id).grid
        assert np.array_equal(receiver[:, -1], sender[:, 1])


@pytest.mark.parametrize(
    "processes, cells_x, cells_y",
    [(1, 4, 4), (2, 4, 2), (4, 4, 4), (4, 5, 5), (6, 7, 9)],
)
def test_exchange_all_matches_direct_exchange(processes, cells_x, cells_y):
    space = _filled_space(processes, cells_x, cells_y)
    blocks = _blocks_from(space)
    space.exchange_all()
    exchange_ghost_layers(blocks)
    for block in blocks:
        for field, segment in zip(block.fields(), space.segments[block.layout.rank]):
            assert np.array_equal(field, segment.grid)


def test_exchange_all_consumes_every_notification():
    space = _filled_space(4, 4, 4)
    space.exchange_all()
    for rank, layout in space.layouts.items():
        for neighbour in layout.neighbors().values():
            if neighbour is None:
                continue
            with pytest.raises(SegmentError):
                space.wait_notification(rank, 0, neighbour)


def test_exchange_all_single_rank_leaves_data_unchanged():
    space = _filled_space(1, 3, 3)
    before = [s.data.copy() for s in space.segments[0]]
    space.exchange_all()
    for original, segment in zip(before, space.segments[0]):
        assert np.array_equal(original, segment.data)


def test_exchange_unknown_rank_raises():
    space = SegmentSpace.create(_layouts(2, 4, 2))
    with pytest.raises(SegmentError):
        space.exchange_left_right(7)