"""
Visualization of a loaded cloud and its highlighted correspondence using Plotly.
"""

from __future__ import annotations

from typing import Optional

import numpy as np
import plotly.graph_objs as go

from pixcloud_app.camera.orbit_camera import OrbitCamera
from pixcloud_app.cloud.data_structures import HighlightSegment
from pixcloud_app.cloud.point_store import PointStore


def plot_cloud_correspondence(
    store: PointStore,
    camera: OrbitCamera,
    segment: Optional[HighlightSegment] = None,
) -> go.Figure:
    """
    Create a 3D Plotly view of the cloud, the camera and the active highlight.

    Args:
        store: PointStore with the loaded cloud.
        camera: OrbitCamera whose eye/center/up are drawn and used for the
            initial scene camera.
        segment: Active highlight segment, drawn as a yellow line.

    Returns:
        Plotly Figure object.
    """
    points_xyz = np.asarray(store.positions)
    points_colors = np.asarray(store.colors)

    fig = go.Figure()

    if len(points_xyz) > 0:
        fig.add_trace(
            go.Scatter3d(
                x=points_xyz[:, 0],
                y=points_xyz[:, 1],
                z=points_xyz[:, 2],
                mode="markers",
                marker=dict(
                    size=2,
                    color=[f"rgb({r},{g},{b})" for r, g, b in points_colors.tolist()],
                    opacity=0.8,
                ),
                name="Points",
                text=[f"Point {i}" for i in range(len(points_xyz))],
            )
        )

    eye = camera.eye
    center = camera.center
    fig.add_trace(
        go.Scatter3d(
            x=[eye[0], center[0]],
            y=[eye[1], center[1]],
            z=[eye[2], center[2]],
            mode="markers",
            marker=dict(size=6, color=["red", "blue"], symbol="diamond"),
            name="Eye / Center",
            text=["Eye", "Center"],
        )
    )

    if segment is not None:
        fig.add_trace(
            go.Scatter3d(
                x=[segment.start[0], segment.end[0]],
                y=[segment.start[1], segment.end[1]],
                z=[segment.start[2], segment.end[2]],
                mode="lines",
                line=dict(color="yellow", width=6),
                name=f"Selected ({segment.length:.2f} m)",
            )
        )

    # Plotly's scene camera eye is relative to the scene center in
    # normalized units; only the direction is taken from the orbit camera.
    direction = eye - center
    direction = direction / np.linalg.norm(direction) * 1.5
    up = camera.up

    fig.update_layout(
        title="Point Cloud Correspondence",
        scene=dict(
            xaxis_title="X",
            yaxis_title="Y",
            zaxis_title="Z",
            aspectmode="data",
            camera=dict(
                eye=dict(x=float(direction[0]), y=float(direction[1]), z=float(direction[2])),
                up=dict(x=float(up[0]), y=float(up[1]), z=float(up[2])),
            ),
        ),
        paper_bgcolor="rgb(26,26,51)",
        width=800,
        height=600,
    )

    return fig


__all__ = ["plot_cloud_correspondence"]
