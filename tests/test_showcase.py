"""Tests for the showcase scene factory and its animation step."""

import math

import numpy as np
import pytest


class TestShowcaseScene:
    """Tests for create_showcase_scene."""

    def test_default_contents(self):
        from whitted.scene.shapes import Disc, Ellipse, Plane, Rectangle, Sphere
        from whitted.scene.showcase import create_showcase_scene

        scene, camera = create_showcase_scene(frame_height=64, seed=0)
        kinds = [type(shape) for shape in scene.shapes]
        assert kinds == [Plane, Plane, Plane, Disc, Rectangle, Sphere, Ellipse]
        assert [light.intensity for light in scene.lights] == pytest.approx([1.5, 1.8])
        assert camera.frame_height == 64
        np.testing.assert_allclose(camera.position, [0.0, 0.0, 0.0])

    def test_without_ellipse(self):
        from whitted.scene.showcase import ShowcaseParams, create_showcase_scene

        scene, _ = create_showcase_scene(params=ShowcaseParams(include_ellipse=False))
        assert len(scene) == 6

    def test_seed_is_deterministic(self):
        from whitted.scene.showcase import create_showcase_scene

        first, _ = create_showcase_scene(seed=42)
        second, _ = create_showcase_scene(seed=42)
        assert first.shapes[-1].material == second.shapes[-1].material

    def test_explicit_generator(self):
        from whitted.scene.showcase import create_showcase_scene, random_matte_material

        scene, _ = create_showcase_scene(rng=np.random.default_rng(9))
        expected = random_matte_material(np.random.default_rng(9))
        assert scene.shapes[-1].material == expected

    def test_random_color_range(self):
        from whitted.scene.showcase import random_color

        rng = np.random.default_rng(1)
        for _ in range(20):
            color = random_color(rng)
            assert len(color) == 3
            assert all(0.0 <= c <= 1.0 for c in color)

    def test_shared_materials_deduplicated_on_upload(self):
        from whitted.materials.phong import get_material_count
        from whitted.scene.showcase import create_showcase_scene

        scene, _ = create_showcase_scene(seed=0)
        scene.upload()
        # Red rubber walls, ivory, glass, mirror and the random matte ellipse
        assert get_material_count() == 5

    def test_custom_field_of_view(self):
        from whitted.scene.showcase import ShowcaseParams, create_showcase_scene

        _, camera = create_showcase_scene(
            frame_height=100, params=ShowcaseParams(field_of_view=math.pi / 2)
        )
        assert camera.screen_distance == pytest.approx(50.0)


class TestAnimation:
    """Tests for advance_animation."""

    def test_disc_moves_along_x(self):
        from whitted.scene.showcase import (
            DEFAULT_FRAME_COUNT,
            DISC_INDEX,
            DISC_TRAVEL,
            advance_animation,
            create_showcase_scene,
        )

        scene, _ = create_showcase_scene(seed=0)
        start = scene.shapes[DISC_INDEX].center
        advance_animation(scene)
        step = DISC_TRAVEL / DEFAULT_FRAME_COUNT
        np.testing.assert_allclose(scene.shapes[DISC_INDEX].center, start + [step, 0.0, 0.0])

    def test_full_animation_travel(self):
        from whitted.scene.showcase import DISC_INDEX, advance_animation, create_showcase_scene

        scene, _ = create_showcase_scene(seed=0)
        start = scene.shapes[DISC_INDEX].center
        for _ in range(8):
            advance_animation(scene, frame_count=8)
        np.testing.assert_allclose(scene.shapes[DISC_INDEX].center, start + [5.0, 0.0, 0.0])

    def test_other_shapes_stay_put(self):
        from whitted.scene.showcase import DISC_INDEX, advance_animation, create_showcase_scene

        scene, _ = create_showcase_scene(seed=0)
        before = [shape.center for i, shape in enumerate(scene.shapes) if i != DISC_INDEX]
        advance_animation(scene)
        after = [shape.center for i, shape in enumerate(scene.shapes) if i != DISC_INDEX]
        for a, b in zip(before, after):
            np.testing.assert_allclose(a, b)

    def test_animation_rejected_while_in_flight(self):
        from whitted.scene.showcase import advance_animation, create_showcase_scene

        scene, _ = create_showcase_scene(seed=0)
        scene.begin_frame()
        with pytest.raises(RuntimeError):
            advance_animation(scene)
        scene.end_frame()
