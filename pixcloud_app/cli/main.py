"""
Command-line interface for pixel-to-point correspondence queries.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from pixcloud_app.camera.orbit_camera import (
    DEFAULT_CENTER,
    DEFAULT_EYE,
    DEFAULT_UP,
    DegenerateCameraError,
    OrbitCamera,
)
from pixcloud_app.cloud.data_structures import LoadError
from pixcloud_app.io.cloud_io import load_vertex_records
from pixcloud_app.viewer.image_mapping import widget_to_image
from pixcloud_app.viewer.session import ViewerSession
from pixcloud_app.viz.plotly_viz import plot_cloud_correspondence


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Resolve reference-image pixels to points of a colored point cloud"
    )
    parser.add_argument(
        "--cloud",
        type=str,
        required=True,
        help="Path to a .npz point cloud (points_xyz, optional points_colors / points_uv)",
    )
    parser.add_argument(
        "--click",
        type=int,
        nargs=2,
        action="append",
        metavar=("U", "V"),
        default=[],
        help="Image pixel to resolve (repeatable); the last one stays highlighted",
    )
    parser.add_argument(
        "--widget-click",
        type=int,
        nargs=2,
        metavar=("X", "Y"),
        default=None,
        help="Click in image-widget coordinates; needs --widget-size and --image-size",
    )
    parser.add_argument(
        "--widget-size",
        type=int,
        nargs=2,
        metavar=("W", "H"),
        default=None,
        help="Size of the widget showing the reference image",
    )
    parser.add_argument(
        "--image-size",
        type=int,
        nargs=2,
        metavar=("W", "H"),
        default=None,
        help="Native size of the reference image",
    )
    parser.add_argument(
        "--eye",
        type=float,
        nargs=3,
        default=list(DEFAULT_EYE),
        help="Baseline camera position (default: %(default)s)",
    )
    parser.add_argument(
        "--center",
        type=float,
        nargs=3,
        default=list(DEFAULT_CENTER),
        help="Baseline look-at center (default: %(default)s)",
    )
    parser.add_argument(
        "--up",
        type=float,
        nargs=3,
        default=list(DEFAULT_UP),
        help="Baseline up vector (default: %(default)s)",
    )
    parser.add_argument(
        "--preset",
        type=str,
        default=None,
        choices=["front", "right", "top"],
        help="Switch to a preset view before the clicks",
    )
    parser.add_argument("--yaw", type=float, default=0.0, help="Yaw in degrees")
    parser.add_argument("--pitch", type=float, default=0.0, help="Pitch in degrees")
    parser.add_argument("--roll", type=float, default=0.0, help="Roll in degrees")
    parser.add_argument(
        "--zoom",
        type=float,
        default=0.0,
        help="Zoom in wheel notches (positive = closer)",
    )
    parser.add_argument(
        "--viewport",
        type=int,
        nargs=2,
        metavar=("W", "H"),
        default=[600, 650],
        help="3D view size used to place the distance label (default: %(default)s)",
    )
    parser.add_argument(
        "--allow-unmapped-fallback",
        action="store_true",
        help="Allow nearest-pixel matches on clouds without pixel coordinates",
    )
    parser.add_argument(
        "--output-dir",
        type=str,
        default="output",
        help="Output directory for the visualization (default: output)",
    )
    parser.add_argument(
        "--visualize",
        action="store_true",
        help="Write an HTML visualization of the cloud and the selected point",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main CLI entry point.

    Usage:
        pixcloud-query --cloud scene.npz --click 320 240 \\
                       --eye 0 0 0 --center 0 0 10 --up 0 -1 0 \\
                       --visualize --output-dir out/
    """
    args = build_parser().parse_args(argv)

    try:
        camera = OrbitCamera(args.eye, args.center, args.up)
    except DegenerateCameraError as e:
        print(f"Error: {e}")
        return 2

    session = ViewerSession(camera=camera, allow_unmapped_fallback=args.allow_unmapped_fallback)

    print(f"[cli] Loading point cloud from {args.cloud}...")
    try:
        load_result = session.load(load_vertex_records(args.cloud))
    except LoadError as e:
        print(f"Error: {e}")
        return 1

    if load_result.is_empty:
        print("[cli] Warning: point cloud is empty; clicks will not resolve")

    if args.preset is not None:
        getattr(session.camera, f"preset_{args.preset}")()
    if args.yaw:
        session.camera.yaw(args.yaw)
    if args.pitch:
        session.camera.pitch(args.pitch)
    if args.roll:
        session.camera.roll(args.roll)
    if args.zoom:
        session.camera.zoom(args.zoom)

    clicks = [tuple(c) for c in args.click]
    if args.widget_click is not None:
        if args.widget_size is None or args.image_size is None:
            print("Error: --widget-click needs --widget-size and --image-size")
            return 2
        uv = widget_to_image(
            args.widget_click[0],
            args.widget_click[1],
            tuple(args.widget_size),
            tuple(args.image_size),
        )
        if uv is None:
            print(f"[cli] Widget click {tuple(args.widget_click)} is outside the image")
        else:
            clicks.append(uv)

    for u, v in clicks:
        if u < 0 or v < 0:
            print(f"[cli] Skipping negative pixel ({u}, {v})")
            continue
        outcome = session.click(u, v)
        if outcome.found:
            result = outcome.result
            x, y, z = result.point.position
            match = "exact" if result.exact else f"nearest, {result.pixel_distance:.2f} px away"
            print(
                f"({u}, {v}) -> point {result.index} ({match}) "
                f"at ({x:.3f}, {y:.3f}, {z:.3f}), color {result.point.color}"
            )
        else:
            print(f"({u}, {v}) -> no point ({outcome.reason})")

    print(session.camera_info_text())
    distance_text = session.distance_text()
    if distance_text is not None:
        print(distance_text)
        anchor = session.label_position(args.viewport[0], args.viewport[1])
        if anchor is not None:
            print(f"Label at ({anchor[0]:.1f}, {anchor[1]:.1f})")
        else:
            print("Label not projectable in the current view")

    if args.visualize:
        output_dir = Path(args.output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)
        print("Generating visualization...")
        fig = plot_cloud_correspondence(session.store, session.camera, session.segment)
        viz_path = output_dir / "correspondence.html"
        fig.write_html(str(viz_path))
        print(f"Visualization saved to {viz_path}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
