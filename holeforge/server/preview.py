"""
Top-down PNG preview of a loaded hole.
"""

import base64
import io
from typing import Tuple

import numpy as np
from PIL import Image, ImageDraw

from ..engine.hole_assembly import CATEGORY_ORDER, HoleInstance
from ..registry.surfaces import hex_to_rgb


PREVIEW_MARGIN = 20.0
FLAG_COLOR = (220, 30, 30)


def _to_rgb(color: str) -> Tuple[int, int, int]:
    return tuple(int(round(c * 255)) for c in hex_to_rgb(color))


def render_preview(hole: HoleInstance, size: int = 256) -> Image.Image:
    """
    Draw the hole with the tee at the bottom and the green at the top.

    The view is fitted to the playing area (everything but the background),
    so the out-of-bounds plane only fills the frame.
    """

    image = Image.new("RGB", (size, size), _to_rgb("#808080"))
    draw = ImageDraw.Draw(image)

    playing = [
        n for n in hole.nodes
        if n.mesh is not None and n.user_data.get("category") not in (None, "background")
    ]
    if not playing:
        return image

    points = np.concatenate([n.mesh.points() for n in playing])
    min_x, max_x = points[:, 0].min() - PREVIEW_MARGIN, points[:, 0].max() + PREVIEW_MARGIN
    min_z, max_z = points[:, 2].min() - PREVIEW_MARGIN, points[:, 2].max() + PREVIEW_MARGIN
    scale = (size - 1) / max(max_x - min_x, max_z - min_z)

    def project(x: float, z: float) -> Tuple[float, float]:
        return (x - min_x) * scale, (size - 1) - (z - min_z) * scale

    for category in CATEGORY_ORDER:
        for node in hole.surface_nodes(category):
            pts = node.mesh.points()
            fill = _to_rgb(node.material.color)
            for tri in node.mesh.triangles():
                draw.polygon([project(pts[i, 0], pts[i, 2]) for i in tri], fill=fill)

    for obstacle in hole.obstacles:
        cx, cy = project(obstacle.x, obstacle.z)
        r = max(1.0, obstacle.radius * scale)
        draw.ellipse([cx - r, cy - r, cx + r, cy + r], fill=_to_rgb(obstacle.properties.color))

    flag = hole.get_flag_position()
    if flag is not None:
        fx, fy = project(flag.x, flag.z)
        draw.ellipse([fx - 2, fy - 2, fx + 2, fy + 2], fill=FLAG_COLOR)

    return image


def preview_to_base64(hole: HoleInstance, size: int = 256) -> str:
    """Render the preview as a base64 PNG data URI."""

    buffer = io.BytesIO()
    render_preview(hole, size).save(buffer, format="PNG")
    image_base64 = base64.b64encode(buffer.getvalue()).decode("utf-8")
    return f"data:image/png;base64,{image_base64}"
