from __future__ import annotations

import numpy as np
import pytest

from pixcloud_app.camera.orbit_camera import OrbitCamera
from pixcloud_app.camera.projection import ScreenPoint, ScreenProjector, Viewport


@pytest.fixture
def setup():
    camera = OrbitCamera((0, 0, 0), (0, 0, -10), (0, 1, 0))
    viewport = Viewport.of_size(800, 600)
    view = camera.view_matrix()
    projection = camera.projection_matrix(viewport.aspect, 45.0, 0.1, 100.0)
    return ScreenProjector(), view, projection, viewport


def test_point_on_axis_lands_in_center(setup):
    projector, view, projection, viewport = setup
    sp = projector.project((0, 0, -10), view, projection, viewport)

    assert sp.x == pytest.approx(400.0)
    assert sp.y == pytest.approx(300.0)
    assert 0.0 < sp.depth < 1.0


def test_point_up_and_right_is_up_and_right(setup):
    projector, view, projection, viewport = setup
    sp = projector.project((1, 1, -10), view, projection, viewport)

    assert sp.x > 400.0
    assert sp.y > 300.0


def test_point_behind_eye_is_not_projectable(setup):
    projector, view, projection, viewport = setup
    assert projector.project((0, 0, 5), view, projection, viewport) is None


def test_point_outside_depth_range(setup):
    projector, view, projection, viewport = setup
    assert projector.project((0, 0, -500), view, projection, viewport) is None
    assert projector.project((0, 0, -0.01), view, projection, viewport) is None


def test_viewport_offset_is_applied(setup):
    projector, view, projection, _ = setup
    sp = projector.project((0, 0, -10), view, projection, Viewport(10, 20, 800, 600))

    assert sp.x == pytest.approx(410.0)
    assert sp.y == pytest.approx(320.0)


def test_label_anchor_flips_to_top_left_origin():
    anchor = ScreenProjector.label_anchor(ScreenPoint(100.0, 50.0, 0.5), Viewport.of_size(640, 480))
    assert anchor == (105.0, 425.0)


def test_projection_matches_manual_math(setup):
    projector, view, projection, viewport = setup
    world = np.array([2.0, -1.0, -20.0])
    clip = projection @ view @ np.append(world, 1.0)
    ndc = clip[:3] / clip[3]

    sp = projector.project(world, view, projection, viewport)
    assert sp.x == pytest.approx((ndc[0] + 1) * 400)
    assert sp.y == pytest.approx((ndc[1] + 1) * 300)
