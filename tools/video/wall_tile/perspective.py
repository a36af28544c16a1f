"""Pinhole projection helpers for the wall tile generator."""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import NamedTuple, Optional


class ScreenPoint(NamedTuple):
    """Projected canvas position plus the depth scale used to get there."""

    x: float
    y: float
    scale: float


@dataclass(frozen=True)
class CameraConfig:
    """Camera looking straight down the +z axis from ``camera_height``."""

    field_of_view: float = 60.0
    camera_height: float = 1000.0
    horizon_fraction: float = 0.5

    def __post_init__(self) -> None:
        if not 0.0 < self.field_of_view < 180.0:
            raise ValueError(f"Field of view must be between 0 and 180 degrees, got {self.field_of_view}")

    @property
    def fov_radians(self) -> float:
        return math.radians(self.field_of_view)

    @property
    def camera_depth(self) -> float:
        """Distance from the eye to a projection plane spanning [-1, 1]."""

        return 1.0 / math.tan(self.fov_radians / 2)


@dataclass(frozen=True)
class WallGeometry:
    """World-space placement of the wall segment."""

    lateral_offset: float = 1000.0
    start_depth: float = 2000.0
    segment_length: float = 4000.0
    height: float = 1500.0

    @classmethod
    def on_road(
        cls,
        road_width: float,
        side: int,
        *,
        start_depth: float,
        segment_length: float,
        height: float,
    ) -> "WallGeometry":
        """Place the wall along the left (-1) or right (+1) edge of the road."""

        side = -1 if side < 0 else 1
        return cls(
            lateral_offset=(road_width / 2) * side,
            start_depth=start_depth,
            segment_length=segment_length,
            height=height,
        )

    @property
    def near_depth(self) -> float:
        return self.start_depth

    @property
    def far_depth(self) -> float:
        return self.start_depth + self.segment_length


def project(
    world_x: float,
    world_y: float,
    world_z: float,
    camera: CameraConfig,
    canvas_width: float,
    canvas_height: float,
    camera_depth: Optional[float] = None,
) -> Optional[ScreenPoint]:
    """Project a world point onto the canvas.

    Returns ``None`` when the point sits on or behind the camera plane. The
    vertical mapping multiplies by ``horizon_fraction`` instead of using half
    the canvas height, so moving the horizon rescales the whole lower half of
    the frame rather than shifting it. Reference renders depend on this.

    ``camera_depth`` may be passed in when projecting many points for the same
    camera so the tangent is evaluated once per frame.
    """

    cam_z = world_z
    if cam_z <= 0:
        return None
    cam_x = world_x
    cam_y = world_y - camera.camera_height

    if camera_depth is None:
        camera_depth = camera.camera_depth
    scale = camera_depth / cam_z
    projection_x = scale * cam_x
    projection_y = scale * cam_y

    screen_x = (1 + projection_x) * canvas_width / 2
    screen_y = (1 - projection_y) * canvas_height * camera.horizon_fraction
    return ScreenPoint(screen_x, screen_y, scale)


def horizon_y(camera: CameraConfig, canvas_height: float) -> float:
    """Screen row where points at eye level land."""

    return canvas_height * camera.horizon_fraction


__all__ = ["CameraConfig", "ScreenPoint", "WallGeometry", "horizon_y", "project"]
