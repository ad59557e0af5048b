from __future__ import annotations

import numpy as np

from pixcloud_app.camera.orbit_camera import OrbitCamera
from pixcloud_app.cloud.data_structures import HighlightSegment, VertexRecords
from pixcloud_app.cloud.point_store import PointStore
from pixcloud_app.viz.plotly_viz import plot_cloud_correspondence


def test_empty_cloud_only_draws_camera():
    fig = plot_cloud_correspondence(PointStore(), OrbitCamera())
    assert [trace.name for trace in fig.data] == ["Eye / Center"]


def test_cloud_and_segment_traces():
    store = PointStore()
    store.load(
        VertexRecords(
            positions=np.array([[0.0, 0.0, 5.0], [1.0, 1.0, 5.0]]),
            colors=np.array([[255, 0, 0], [0, 0, 255]], dtype=np.uint8),
        )
    )
    camera = OrbitCamera((0, 0, 0), (0, 0, 5), (0, -1, 0))
    segment = HighlightSegment(start=camera.eye, end=np.array([0.0, 0.0, 5.0]))

    fig = plot_cloud_correspondence(store, camera, segment)

    names = [trace.name for trace in fig.data]
    assert names == ["Points", "Eye / Center", "Selected (5.00 m)"]
    assert list(fig.data[0].marker.color) == ["rgb(255,0,0)", "rgb(0,0,255)"]
    assert fig.layout.scene.camera.up.y == -1.0
