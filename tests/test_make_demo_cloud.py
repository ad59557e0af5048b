from __future__ import annotations

import numpy as np
import pytest

from make_demo_cloud import synthesize_cloud
from pixcloud_app.cloud.correspondence import CorrespondenceEngine
from pixcloud_app.cloud.point_store import PointStore


def test_grid_size_and_flags():
    records = synthesize_cloud(40, 30, step=10)

    assert len(records) == 4 * 3
    assert records.has_color
    assert records.has_pixels


def test_center_pixel_lies_on_optical_axis():
    records = synthesize_cloud(40, 30, step=5, depth=7.0)
    store = PointStore()
    store.load(records)

    result = CorrespondenceEngine(store).query(20, 15)
    assert result.exact
    np.testing.assert_allclose(result.point.position, [0.0, 0.0, 7.0], atol=1e-12)


def test_off_grid_click_resolves_to_neighbor():
    store = PointStore()
    store.load(synthesize_cloud(40, 30, step=10))

    result = CorrespondenceEngine(store).query(12, 9)
    assert not result.exact
    assert result.point.pixel == (10, 10)


def test_invalid_arguments():
    with pytest.raises(ValueError):
        synthesize_cloud(0, 10)
