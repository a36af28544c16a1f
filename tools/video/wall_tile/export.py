"""Auto-crop and PNG export for rendered wall tiles."""
from __future__ import annotations

import logging
from pathlib import Path

import imageio.v2 as imageio
import numpy as np
from PIL import Image

from tools.video.wall_tile.compositor import Size, WallScene, render_export

LOG = logging.getLogger("wall_tile_tool.export")

TRIM_PADDING = 2


def content_bbox(image: Image.Image) -> tuple[int, int, int, int] | None:
    """Inclusive ``(min_x, min_y, max_x, max_y)`` of pixels with alpha > 0."""

    alpha = np.asarray(image.convert("RGBA"))[..., 3]
    ys, xs = np.nonzero(alpha > 0)
    if xs.size == 0:
        return None
    return int(xs.min()), int(ys.min()), int(xs.max()), int(ys.max())


def trim(image: Image.Image, padding: int = TRIM_PADDING) -> Image.Image:
    """Crop to visible content plus ``padding`` pixels, clamped to the image.

    A fully transparent image is returned as-is.
    """

    bbox = content_bbox(image)
    if bbox is None:
        return image
    min_x, min_y, max_x, max_y = bbox
    left = max(0, min_x - padding)
    top = max(0, min_y - padding)
    right = min(image.width, max_x + 1 + padding)
    bottom = min(image.height, max_y + 1 + padding)
    return image.crop((left, top, right, bottom))


def _format_number(value: float) -> str:
    return f"{value:g}".replace(".", "p").replace("-", "m")


def export_filename(scene: WallScene) -> str:
    depth = _format_number(scene.start_depth)
    length = _format_number(scene.segment_length)
    return f"wall_tile_d{depth}_l{length}_x{scene.export_scale}.png"


def render_trimmed(scene: WallScene, base_size: Size) -> Image.Image:
    return trim(render_export(scene, base_size))


def export_wall(scene: WallScene, output_dir: Path, base_size: Size) -> Path:
    """Render, trim and write the wall to ``output_dir``; returns the PNG path."""

    image = render_trimmed(scene, base_size)
    output_dir.mkdir(parents=True, exist_ok=True)
    path = output_dir / export_filename(scene)
    imageio.imwrite(str(path), np.asarray(image))
    LOG.info("Exported %dx%d wall tile to %s", image.width, image.height, path)
    return path


__all__ = ["TRIM_PADDING", "content_bbox", "export_filename", "export_wall", "render_trimmed", "trim"]
