"""Draw the striped wall segment, either as a preview frame or for export."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Sequence, Tuple

from PIL import Image, ImageColor, ImageDraw

from tools.video.wall_tile.perspective import CameraConfig, ScreenPoint, WallGeometry, horizon_y, project
from tools.video.wall_tile.stripes import Stripe, parse_stripes, stripe_segments

LOG = logging.getLogger("wall_tile_tool.compositor")

EXPORT_SCALES = (1, 2, 4)

SKY_COLOR = "#0a0a0a"
GROUND_COLOR = "#14210f"
GUIDE_COLOR = "#0b3d0b"
WIREFRAME_COLOR = "#f5f5f5"

Size = Tuple[int, int]


@dataclass(frozen=True)
class WallScene:
    """Snapshot of every parameter a render reads."""

    camera: CameraConfig = field(default_factory=CameraConfig)
    road_width: float = 2000.0
    side: int = 1
    start_depth: float = 2000.0
    segment_length: float = 4000.0
    wall_height: float = 1500.0
    stripes: Tuple[Stripe, ...] = ()
    show_ground: bool = True
    export_scale: int = 1

    @classmethod
    def from_settings(cls, payload: Mapping[str, Any]) -> "WallScene":
        """Build the initial scene from the ``wall_tile`` settings section."""

        camera = CameraConfig(
            field_of_view=float(payload.get("field_of_view", 60.0)),
            camera_height=float(payload.get("camera_height", 1000.0)),
            horizon_fraction=float(payload.get("horizon_fraction", 0.5)),
        )
        return cls(
            camera=camera,
            road_width=float(payload.get("road_width", 2000.0)),
            side=-1 if int(payload.get("side", 1)) < 0 else 1,
            start_depth=float(payload.get("start_depth", 2000.0)),
            segment_length=float(payload.get("segment_length", 4000.0)),
            wall_height=float(payload.get("wall_height", 1500.0)),
            stripes=tuple(parse_stripes(str(payload.get("stripes", "")))),
            show_ground=bool(payload.get("show_ground", True)),
            export_scale=int(payload.get("export_scale", 1)),
        )

    @property
    def wall(self) -> WallGeometry:
        return WallGeometry.on_road(
            self.road_width,
            self.side,
            start_depth=self.start_depth,
            segment_length=self.segment_length,
            height=self.wall_height,
        )


def _wall_quad(
    wall: WallGeometry,
    bottom: float,
    top: float,
    camera: CameraConfig,
    size: Size,
    camera_depth: float,
) -> Optional[list[ScreenPoint]]:
    """Corners near-bottom, far-bottom, far-top, near-top, or ``None`` if any is off-camera."""

    width, height = size
    y_bottom = wall.height * bottom
    y_top = wall.height * top
    corners = [
        project(wall.lateral_offset, y_bottom, wall.near_depth, camera, width, height, camera_depth),
        project(wall.lateral_offset, y_bottom, wall.far_depth, camera, width, height, camera_depth),
        project(wall.lateral_offset, y_top, wall.far_depth, camera, width, height, camera_depth),
        project(wall.lateral_offset, y_top, wall.near_depth, camera, width, height, camera_depth),
    ]
    if any(corner is None for corner in corners):
        return None
    return corners  # type: ignore[return-value]


def draw_stripes(
    draw: ImageDraw.ImageDraw,
    stripes: Sequence[Stripe],
    wall: WallGeometry,
    camera: CameraConfig,
    size: Size,
) -> int:
    """Fill every stripe quad bottom to top and return how many were drawn.

    Each quad is stroked with its own fill color after filling. Adjacent quads
    only share an edge, and without the stroke the rasterizer leaves hairline
    gaps along those edges.
    """

    camera_depth = camera.camera_depth
    drawn = 0
    for bottom, top, color in stripe_segments(stripes):
        if top <= bottom:
            continue
        quad = _wall_quad(wall, bottom, top, camera, size, camera_depth)
        if quad is None:
            LOG.debug("Stripe %.3f-%.3f is behind the camera, skipped", bottom, top)
            continue
        points = [(pt.x, pt.y) for pt in quad]
        draw.polygon(points, fill=color, outline=color, width=1)
        drawn += 1
    return drawn


def _draw_ground(draw: ImageDraw.ImageDraw, wall: WallGeometry, road_width: float, camera: CameraConfig, size: Size) -> None:
    width, height = size
    horizon = horizon_y(camera, height)
    draw.rectangle([(0, horizon), (width, height)], fill=GROUND_COLOR)

    guide_rgba = (*ImageColor.getrgb(GUIDE_COLOR)[:3], 200)
    near = max(wall.near_depth * 0.1, 1.0)
    far = wall.far_depth * 4
    for edge_x in (-road_width / 2, road_width / 2):
        start = project(edge_x, 0.0, near, camera, width, height)
        end = project(edge_x, 0.0, far, camera, width, height)
        if start is None or end is None:
            continue
        draw.line([(start.x, start.y), (end.x, end.y)], fill=guide_rgba, width=1)


def _draw_wireframe(draw: ImageDraw.ImageDraw, wall: WallGeometry, camera: CameraConfig, size: Size) -> None:
    quad = _wall_quad(wall, 0.0, 1.0, camera, size, camera.camera_depth)
    if quad is None:
        return
    outline = [(pt.x, pt.y) for pt in quad]
    draw.line(outline + [outline[0]], fill=WIREFRAME_COLOR, width=1)


def render_wall(
    stripes: Sequence[Stripe],
    wall: WallGeometry,
    camera: CameraConfig,
    canvas_size: Size,
    transparent: bool,
    *,
    road_width: Optional[float] = None,
    show_ground: bool = True,
) -> Image.Image:
    """Render the wall into a fresh RGBA image.

    With ``transparent`` set only the stripes are drawn, on a fully clear
    background. Otherwise the wall is composited over a sky backdrop, with the
    ground plane, road guides and horizon line underneath it and a wireframe
    outline on top.
    """

    width, height = canvas_size
    layer = Image.new("RGBA", (width, height), (0, 0, 0, 0))
    drawn = draw_stripes(ImageDraw.Draw(layer), stripes, wall, camera, canvas_size)
    LOG.debug("Rendered %d stripe(s) on %dx%d canvas", drawn, width, height)
    if transparent:
        return layer

    # RGBA ink only blends onto an RGB target; on RGBA it would punch holes.
    backdrop = Image.new("RGB", (width, height), SKY_COLOR)
    draw = ImageDraw.Draw(backdrop, "RGBA")
    if show_ground:
        _draw_ground(draw, wall, road_width if road_width is not None else abs(wall.lateral_offset) * 2, camera, canvas_size)
    horizon = horizon_y(camera, height)
    draw.line([(0, horizon), (width, horizon)], fill=(*ImageColor.getrgb(GUIDE_COLOR)[:3], 140), width=1)

    frame = backdrop.convert("RGBA")
    frame.alpha_composite(layer)
    _draw_wireframe(ImageDraw.Draw(frame, "RGBA"), wall, camera, canvas_size)
    return frame


def render_preview(scene: WallScene, canvas_size: Size) -> Image.Image:
    return render_wall(
        scene.stripes,
        scene.wall,
        scene.camera,
        canvas_size,
        transparent=False,
        road_width=scene.road_width,
        show_ground=scene.show_ground,
    )


def export_canvas_size(base_size: Size, scale: int) -> Size:
    if scale not in EXPORT_SCALES:
        raise ValueError(f"Export scale must be one of {EXPORT_SCALES}, got {scale}")
    return (base_size[0] * scale, base_size[1] * scale)


def render_export(scene: WallScene, base_size: Size) -> Image.Image:
    """Render the bare wall at ``export_scale`` times the base resolution."""

    size = export_canvas_size(base_size, scene.export_scale)
    return render_wall(scene.stripes, scene.wall, scene.camera, size, transparent=True)


__all__ = [
    "EXPORT_SCALES",
    "WallScene",
    "draw_stripes",
    "export_canvas_size",
    "render_export",
    "render_preview",
    "render_wall",
]
