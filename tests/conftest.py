"""Shared pytest fixtures for the wall tile tests."""

import pytest

from tools.video.wall_tile.compositor import WallScene
from tools.video.wall_tile.perspective import CameraConfig
from tools.video.wall_tile.stripes import Stripe


@pytest.fixture
def camera() -> CameraConfig:
    return CameraConfig(field_of_view=60.0, camera_height=1000.0, horizon_fraction=0.5)


@pytest.fixture
def brick_stripes() -> list:
    return [
        Stripe.from_hex(0.0, "#78350f"),
        Stripe.from_hex(0.4, "#92400e"),
        Stripe.from_hex(0.8, "#b45309"),
    ]


@pytest.fixture
def scene(camera, brick_stripes) -> WallScene:
    """Right-hand wall, 2000-6000 units ahead, fully inside an 800x500 canvas."""
    return WallScene(
        camera=camera,
        road_width=2000.0,
        side=1,
        start_depth=2000.0,
        segment_length=4000.0,
        wall_height=1500.0,
        stripes=tuple(brick_stripes),
    )
