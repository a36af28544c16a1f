"""Tests for the pinhole projection."""

import math

import pytest

from tools.video.wall_tile.perspective import CameraConfig, WallGeometry, horizon_y, project


class TestProject:
    def test_eye_level_point_lands_on_horizon_center(self):
        """A point straight ahead at eye height maps to the canvas center on the horizon."""
        camera = CameraConfig(field_of_view=60.0, camera_height=1500.0, horizon_fraction=0.5)
        point = project(0.0, 1500.0, 1000.0, camera, 800, 500)
        assert point is not None
        assert point.x == pytest.approx(400.0)
        assert point.y == pytest.approx(250.0)
        assert point.scale == pytest.approx(camera.camera_depth / 1000.0)

    @pytest.mark.parametrize("depth", [0.0, -1.0, -2500.0])
    def test_points_on_or_behind_camera_plane_have_no_projection(self, depth):
        camera = CameraConfig()
        assert project(10.0, 20.0, depth, camera, 800, 500) is None

    def test_points_in_front_always_project(self):
        camera = CameraConfig(field_of_view=120.0, camera_height=300.0, horizon_fraction=0.9)
        for depth in (1e-3, 1.0, 50.0, 1e6):
            assert project(-5000.0, 8000.0, depth, camera, 640, 480) is not None

    def test_frustum_edge_maps_to_canvas_edge(self):
        """At 90 degrees a point with x equal to its depth sits on the right edge."""
        camera = CameraConfig(field_of_view=90.0, camera_height=1000.0, horizon_fraction=0.5)
        point = project(1000.0, 1000.0, 1000.0, camera, 800, 500)
        assert point is not None
        assert point.x == pytest.approx(800.0)
        assert point.y == pytest.approx(250.0)

    def test_horizon_fraction_scales_vertical_mapping(self):
        """Ground below the eye scales with horizon_fraction instead of shifting."""
        ground = (0.0, 0.0, 1000.0)
        low = CameraConfig(field_of_view=90.0, camera_height=1000.0, horizon_fraction=0.25)
        mid = CameraConfig(field_of_view=90.0, camera_height=1000.0, horizon_fraction=0.5)
        assert project(*ground, low, 800, 500).y == pytest.approx(250.0)
        assert project(*ground, mid, 800, 500).y == pytest.approx(500.0)

    def test_precomputed_camera_depth_matches(self):
        camera = CameraConfig(field_of_view=75.0, camera_height=1200.0, horizon_fraction=0.4)
        direct = project(300.0, 50.0, 4200.0, camera, 1024, 768)
        cached = project(300.0, 50.0, 4200.0, camera, 1024, 768, camera.camera_depth)
        assert direct == cached

    def test_horizon_y(self):
        camera = CameraConfig(horizon_fraction=0.3)
        assert horizon_y(camera, 500) == pytest.approx(150.0)


class TestCameraConfig:
    def test_camera_depth(self):
        assert CameraConfig(field_of_view=90.0).camera_depth == pytest.approx(1.0)
        assert CameraConfig(field_of_view=60.0).camera_depth == pytest.approx(math.sqrt(3))

    @pytest.mark.parametrize("fov", [0.0, 180.0, -10.0, 200.0])
    def test_field_of_view_must_be_open_interval(self, fov):
        with pytest.raises(ValueError):
            CameraConfig(field_of_view=fov)


class TestWallGeometry:
    def test_on_road_places_wall_at_half_road_width(self):
        left = WallGeometry.on_road(2000.0, -1, start_depth=500.0, segment_length=250.0, height=900.0)
        right = WallGeometry.on_road(2000.0, 1, start_depth=500.0, segment_length=250.0, height=900.0)
        assert left.lateral_offset == pytest.approx(-1000.0)
        assert right.lateral_offset == pytest.approx(1000.0)

    def test_near_and_far_depth(self):
        wall = WallGeometry(lateral_offset=0.0, start_depth=1200.0, segment_length=800.0, height=10.0)
        assert wall.near_depth == pytest.approx(1200.0)
        assert wall.far_depth == pytest.approx(2000.0)
