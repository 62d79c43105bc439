"""Unit tests for the recursive Whitted shader.

Tests cover:
- Background color for misses and at the depth limit
- Lambert diffuse term and its falloff with the light angle
- Shadow rays blocked by shapes between the surface and a light
- Mirror recursion bounded by max_depth
- Refraction through a glass slab with index 1 leaving the ray unbent
"""

import math

import pytest


def _bg():
    from whitted.config import BACKGROUND_COLOR

    return BACKGROUND_COLOR


def _diffuse_white():
    from whitted.materials.phong import Material

    return Material(albedo=(1.0, 0.0, 0.0, 0.0), diffuse_color=(1.0, 1.0, 1.0))


class TestBackground:
    """Tests for rays that see the background."""

    def test_empty_scene_returns_background(self):
        from whitted.core.shader import shade
        from whitted.scene.manager import Scene

        Scene().upload()
        color = shade((0.0, 0.0, 0.0), (0.0, 0.0, -1.0))
        assert color == pytest.approx(_bg(), abs=1e-6)

    def test_zero_depth_returns_background(self):
        from whitted.core.shader import shade
        from whitted.scene.manager import Scene
        from whitted.scene.shapes import Sphere

        scene = Scene()
        scene.add_shape(Sphere((0.0, 0.0, -5.0), 1.0, _diffuse_white()))
        scene.upload()

        color = shade((0.0, 0.0, 0.0), (0.0, 0.0, -1.0), max_depth=0)
        assert color == pytest.approx(_bg(), abs=1e-6)

    def test_negative_depth_rejected(self):
        from whitted.core.shader import shade

        with pytest.raises(ValueError):
            shade((0.0, 0.0, 0.0), (0.0, 0.0, -1.0), max_depth=-1)


class TestDiffuse:
    """Tests for the Lambert term and shadow rays."""

    def _floor_scene(self, light_position):
        from whitted.scene.lights import Light
        from whitted.scene.manager import Scene
        from whitted.scene.shapes import Plane

        scene = Scene()
        scene.add_shape(Plane((0.0, -1.0, 0.0), (0.0, 1.0, 0.0), _diffuse_white()))
        scene.add_light(Light(light_position, 1.0))
        return scene

    @staticmethod
    def _floor_ray():
        # Hits the floor at (0, -1, -5)
        norm = math.sqrt(26.0)
        return (0.0, 0.0, 0.0), (0.0, -1.0 / norm, -5.0 / norm)

    def test_light_straight_above(self):
        from whitted.core.shader import shade

        self._floor_scene((0.0, 10.0, -5.0)).upload()
        origin, direction = self._floor_ray()
        color = shade(origin, direction)
        assert color == pytest.approx((1.0, 1.0, 1.0), abs=1e-4)

    def test_light_at_45_degrees(self):
        from whitted.core.shader import shade

        self._floor_scene((0.0, 9.0, 5.0)).upload()
        origin, direction = self._floor_ray()
        color = shade(origin, direction)
        expected = math.cos(math.pi / 4)
        assert color == pytest.approx((expected, expected, expected), abs=1e-4)

    def test_light_below_surface_contributes_nothing(self):
        from whitted.core.shader import shade

        self._floor_scene((0.0, -10.0, -5.0)).upload()
        origin, direction = self._floor_ray()
        color = shade(origin, direction)
        assert color == pytest.approx((0.0, 0.0, 0.0), abs=1e-6)

    def test_shadow_blocks_light(self):
        from whitted.core.shader import shade
        from whitted.scene.shapes import Sphere

        scene = self._floor_scene((0.0, 10.0, -5.0))
        scene.add_shape(Sphere((0.0, 4.0, -5.0), 1.0, _diffuse_white()))
        scene.upload()

        origin, direction = self._floor_ray()
        color = shade(origin, direction)
        assert color == pytest.approx((0.0, 0.0, 0.0), abs=1e-6)

    def test_shape_beyond_light_does_not_shadow(self):
        from whitted.core.shader import shade
        from whitted.scene.shapes import Sphere

        scene = self._floor_scene((0.0, 10.0, -5.0))
        scene.add_shape(Sphere((0.0, 20.0, -5.0), 1.0, _diffuse_white()))
        scene.upload()

        origin, direction = self._floor_ray()
        color = shade(origin, direction)
        assert color == pytest.approx((1.0, 1.0, 1.0), abs=1e-4)

    def test_light_intensities_add(self):
        from whitted.core.shader import shade
        from whitted.scene.lights import Light

        scene = self._floor_scene((0.0, 10.0, -5.0))
        scene.add_light(Light((0.0, 10.0, -5.0), 0.5))
        scene.upload()

        origin, direction = self._floor_ray()
        color = shade(origin, direction)
        assert color == pytest.approx((1.5, 1.5, 1.5), abs=1e-4)


class TestRecursion:
    """Tests for reflection and refraction rays."""

    def _mirror_corridor(self):
        from whitted.materials.phong import Material
        from whitted.scene.manager import Scene
        from whitted.scene.shapes import Plane

        mirror = Material(albedo=(0.0, 0.0, 0.8, 0.0))
        scene = Scene()
        scene.add_shape(Plane((0.0, 0.0, -5.0), (0.0, 0.0, 1.0), mirror))
        scene.add_shape(Plane((0.0, 0.0, 5.0), (0.0, 0.0, -1.0), mirror))
        return scene

    @pytest.mark.parametrize("max_depth", [1, 2, 3, 4])
    def test_facing_mirrors_stop_at_max_depth(self, max_depth):
        """Each bounce scales the background by 0.8 until the depth limit."""
        from whitted.core.shader import shade

        self._mirror_corridor().upload()
        color = shade((0.0, 0.0, 0.0), (0.0, 0.0, -1.0), max_depth=max_depth)
        scale = 0.8**max_depth
        assert color == pytest.approx(tuple(scale * c for c in _bg()), abs=1e-4)

    def test_index_one_glass_is_transparent(self):
        from whitted.core.shader import shade
        from whitted.materials.phong import Material
        from whitted.scene.manager import Scene
        from whitted.scene.shapes import Rectangle

        clear_glass = Material(refractive_index=1.0, albedo=(0.0, 0.0, 0.0, 1.0))
        scene = Scene()
        scene.add_shape(Rectangle((0.0, 0.0, -5.0), 2.0, 2.0, (0.0, 0.0, 1.0), clear_glass))
        scene.upload()

        color = shade((0.0, 0.0, 0.0), (0.0, 0.0, -1.0))
        assert color == pytest.approx(_bg(), abs=1e-4)

    def test_specular_highlight_is_white(self):
        """A light behind the camera gives a white highlight on a facing plane."""
        from whitted.core.shader import shade
        from whitted.materials.phong import Material
        from whitted.scene.lights import Light
        from whitted.scene.manager import Scene
        from whitted.scene.shapes import Plane

        shiny = Material(albedo=(0.0, 1.0, 0.0, 0.0), specular_exponent=10.0)
        scene = Scene()
        scene.add_shape(Plane((0.0, 0.0, -5.0), (0.0, 0.0, 1.0), shiny))
        scene.add_light(Light((0.0, 0.0, 5.0), 1.0))
        scene.upload()

        color = shade((0.0, 0.0, 0.0), (0.0, 0.0, -1.0))
        assert color == pytest.approx((1.0, 1.0, 1.0), abs=1e-4)
