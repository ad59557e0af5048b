from __future__ import annotations

import numpy as np
import pytest

from pixcloud_app.cloud.data_structures import LoadError, PointIndexError, VertexRecords
from pixcloud_app.cloud.point_store import PointStore


def make_records(pixels=None, colors=None, n=None):
    if pixels is not None:
        n = len(pixels)
    positions = np.arange(n * 3, dtype=np.float64).reshape(n, 3)
    return VertexRecords(
        positions=positions,
        colors=None if colors is None else np.asarray(colors, dtype=np.uint8),
        pixels=None if pixels is None else np.asarray(pixels, dtype=np.uint32),
    )


def test_new_store_is_empty():
    store = PointStore()
    assert store.is_empty()
    assert len(store) == 0
    assert store.nearest_by_pixel(3, 4) is None
    assert store.exact_lookup(0, 0) is None


def test_load_reports_capabilities():
    store = PointStore()
    result = store.load(make_records(pixels=[(0, 0), (10, 10), (100, 100)]))

    assert result.point_count == 3
    assert result.has_pixels
    assert not result.has_color
    assert result.indexed_pixels == 3
    assert not result.is_empty
    assert store.generation == 1


def test_missing_color_defaults_to_white():
    store = PointStore()
    store.load(make_records(n=2))

    point = store.point_at(1)
    assert point.color == (255, 255, 255)
    assert point.pixel == (0, 0)
    assert point.position == (3.0, 4.0, 5.0)


def test_colors_are_kept():
    store = PointStore()
    store.load(make_records(pixels=[(1, 2)], colors=[(10, 20, 30)]))

    assert store.point_at(0).color == (10, 20, 30)


def test_empty_load_is_valid():
    store = PointStore()
    store.load(make_records(pixels=[(1, 1)]))
    result = store.load(VertexRecords(positions=np.zeros((0, 3))))

    assert result.is_empty
    assert store.is_empty()
    assert store.nearest_by_pixel(1, 1) is None


def test_duplicate_pixel_last_write_wins():
    store = PointStore()
    result = store.load(make_records(pixels=[(5, 5), (1, 1), (5, 5)]))

    assert result.indexed_pixels == 2
    assert store.exact_lookup(5, 5) == 2


def test_exact_and_nearest_agree_on_exact_entry():
    store = PointStore()
    store.load(make_records(pixels=[(3, 7), (8, 1), (20, 20), (0, 4)]))

    for u, v in [(3, 7), (8, 1), (20, 20), (0, 4)]:
        assert store.exact_lookup(u, v) == store.nearest_by_pixel(u, v)


def test_exact_and_nearest_agree_on_duplicate_pixels():
    store = PointStore()
    store.load(make_records(pixels=[(5, 5), (5, 5), (9, 9), (5, 5)]))

    assert store.exact_lookup(5, 5) == 3
    assert store.nearest_by_pixel(5, 5) == 3
    # Off-index queries keep the lowest-index tie-break.
    assert store.nearest_by_pixel(5, 6) == 0


def test_nearest_by_pixel_picks_closest():
    store = PointStore()
    store.load(make_records(pixels=[(0, 0), (10, 10), (100, 100)]))

    assert store.exact_lookup(50, 50) is None
    assert store.nearest_by_pixel(50, 50) == 1


def test_nearest_tie_goes_to_lowest_index():
    store = PointStore()
    store.load(make_records(pixels=[(10, 0), (0, 10), (20, 10), (10, 20)]))

    results = {store.nearest_by_pixel(10, 10) for _ in range(5)}
    assert results == {0}


def test_point_at_out_of_range():
    store = PointStore()
    store.load(make_records(n=2))

    with pytest.raises(PointIndexError):
        store.point_at(2)
    with pytest.raises(IndexError):
        store.point_at(-1)


@pytest.mark.parametrize(
    "records",
    [
        VertexRecords(positions=np.zeros((3, 2))),
        VertexRecords(positions=np.array([[0.0, np.nan, 0.0]])),
        VertexRecords(positions=np.zeros((2, 3)), colors=np.zeros((3, 3), dtype=np.uint8)),
        VertexRecords(positions=np.zeros((2, 3)), colors=np.full((2, 3), 300)),
        VertexRecords(positions=np.zeros((2, 3)), pixels=np.zeros((2, 3), dtype=np.uint32)),
        VertexRecords(positions=np.zeros((1, 3)), pixels=np.array([[-1, 4]])),
    ],
)
def test_failed_load_keeps_previous_cloud(records):
    store = PointStore()
    store.load(make_records(pixels=[(0, 0), (10, 10)]))

    with pytest.raises(LoadError):
        store.load(records)

    assert len(store) == 2
    assert store.generation == 1
    assert store.exact_lookup(10, 10) == 1


def test_positions_view_is_read_only():
    store = PointStore()
    store.load(make_records(n=2))

    with pytest.raises(ValueError):
        store.positions[0, 0] = 42.0
