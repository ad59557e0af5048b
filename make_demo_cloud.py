"""
Generate a synthetic point cloud whose points carry reference-image pixels.

Each sampled pixel (u, v) of a W x H pinhole image is back-projected through
K to a tilted plane in front of the camera, so every point has a known
pixel-to-point correspondence. Useful for trying the CLI without a scanner:

    python make_demo_cloud.py --width 640 --height 480 --step 8 --output-dir out/
    pixcloud-query --cloud out/demo_cloud.npz --click 320 240
"""

import argparse
from pathlib import Path

import numpy as np

from pixcloud_app.cloud.data_structures import VertexRecords
from pixcloud_app.io.cloud_io import save_vertex_records


def synthesize_cloud(
    width: int,
    height: int,
    step: int = 4,
    depth: float = 10.0,
    tilt: float = 0.2,
) -> VertexRecords:
    """Back-project a pixel grid onto the plane z = depth + tilt * y."""
    if width <= 0 or height <= 0 or step <= 0:
        raise ValueError("width, height and step must be positive")

    f = float(max(width, height))
    K = np.array([[f, 0.0, width / 2.0], [0.0, f, height / 2.0], [0.0, 0.0, 1.0]])

    us, vs = np.meshgrid(np.arange(0, width, step), np.arange(0, height, step))
    pixels = np.stack([us.ravel(), vs.ravel()], axis=1)

    # Rays through each pixel, then scale so the point lands on the plane.
    homog = np.hstack([pixels.astype(np.float64), np.ones((len(pixels), 1))])
    rays = (np.linalg.inv(K) @ homog.T).T
    scale = depth / (1.0 - tilt * rays[:, 1])
    positions = rays * scale[:, None]

    colors = np.zeros((len(pixels), 3), dtype=np.uint8)
    colors[:, 0] = (255 * pixels[:, 0] / max(width - 1, 1)).astype(np.uint8)
    colors[:, 1] = (255 * pixels[:, 1] / max(height - 1, 1)).astype(np.uint8)
    colors[:, 2] = 128

    return VertexRecords(positions=positions, colors=colors, pixels=pixels.astype(np.uint32))


def main():
    parser = argparse.ArgumentParser(description="Write a synthetic demo_cloud.npz")
    parser.add_argument("--width", type=int, default=640, help="Reference image width")
    parser.add_argument("--height", type=int, default=480, help="Reference image height")
    parser.add_argument("--step", type=int, default=4, help="Pixel sampling step")
    parser.add_argument("--depth", type=float, default=10.0, help="Plane distance at the image center row")
    parser.add_argument(
        "--output-dir",
        type=str,
        default="output",
        help="Directory where demo_cloud.npz will be written.",
    )
    args = parser.parse_args()

    records = synthesize_cloud(args.width, args.height, args.step, args.depth)

    out_dir = Path(args.output_dir)
    out_dir.mkdir(parents=True, exist_ok=True)
    out_path = out_dir / "demo_cloud.npz"
    save_vertex_records(str(out_path), records)

    print(f"[demo] Saved {len(records)} points to {out_path}")


if __name__ == "__main__":
    main()
