"""
Map clicks on an aspect-fit image widget back to the image's native pixels.
"""

from __future__ import annotations

from typing import Optional, Tuple


def widget_to_image(
    x: int,
    y: int,
    widget_size: Tuple[int, int],
    image_size: Tuple[int, int],
) -> Optional[Tuple[int, int]]:
    """
    Convert a widget click to (u, v) in the original image.

    The image is assumed to be scaled to fit the widget while keeping its
    aspect ratio, and centered.

    Args:
        x, y: Click position in widget coordinates (origin top-left).
        widget_size: (width, height) of the widget.
        image_size: (width, height) of the original image.

    Returns:
        (u, v) pixel coordinates, or None if the click is outside the drawn
        image or either size is empty.
    """
    widget_w, widget_h = widget_size
    image_w, image_h = image_size
    if image_w <= 0 or image_h <= 0 or widget_w <= 0 or widget_h <= 0:
        return None

    ratio = min(widget_w / image_w, widget_h / image_h)
    scaled_w = int(image_w * ratio)
    scaled_h = int(image_h * ratio)
    offset_x = (widget_w - scaled_w) // 2
    offset_y = (widget_h - scaled_h) // 2

    if not (offset_x <= x < offset_x + scaled_w and offset_y <= y < offset_y + scaled_h):
        return None

    u = int((x - offset_x) / ratio)
    v = int((y - offset_y) / ratio)
    # Rounding at the far edge can land one past the last pixel.
    return min(u, image_w - 1), min(v, image_h - 1)


__all__ = ["widget_to_image"]
