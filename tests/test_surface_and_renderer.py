"""
Drawing surface primitives and the three-pass frame renderer.
Run from project root: python -m pytest tests/ -v
"""
import sys
import unittest
from pathlib import Path

import numpy as np

ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


class TestColors(unittest.TestCase):
    def test_parse_hex_forms(self):
        from flowreel.procedural.surface import parse_color

        self.assertEqual(parse_color("#ffffff"), (1.0, 1.0, 1.0, 1.0))
        self.assertEqual(parse_color("#000"), (0.0, 0.0, 0.0, 1.0))
        r, g, b, a = parse_color("#ffffff10")
        self.assertEqual((r, g, b), (1.0, 1.0, 1.0))
        self.assertAlmostEqual(a, 16 / 255)

    def test_parse_rejects_non_hex(self):
        from flowreel.procedural.surface import parse_color

        for bad in ("red", "#12", "#gggggg", "", "ffffff"):
            with self.assertRaises(ValueError):
                parse_color(bad)

    def test_with_alpha_clamps(self):
        from flowreel.procedural.surface import with_alpha

        self.assertEqual(with_alpha("#ff0000", 2.0), (1.0, 0.0, 0.0, 1.0))
        self.assertEqual(with_alpha("#ff0000", -1.0)[3], 0.0)


class TestDrawingSurface(unittest.TestCase):
    def test_resize_and_frame_shape(self):
        from flowreel.procedural.surface import DrawingSurface

        surface = DrawingSurface()
        surface.resize(20, 10)
        frame = surface.to_frame()
        self.assertEqual(frame.shape, (10, 20, 3))
        self.assertEqual(frame.dtype, np.uint8)
        self.assertEqual(surface.to_image().size, (20, 10))

    def test_resize_rejects_non_positive(self):
        from flowreel.procedural.surface import DrawingSurface

        with self.assertRaises(ValueError):
            DrawingSurface().resize(0, 10)

    def test_context_is_stable(self):
        from flowreel.procedural.surface import DrawingSurface

        surface = DrawingSurface(4, 4)
        self.assertIs(surface.get_context(), surface.get_context())

    def test_fill_color_respects_global_alpha(self):
        from flowreel.procedural.surface import DrawingSurface

        surface = DrawingSurface(4, 4)
        ctx = surface.get_context()
        ctx.global_alpha = 0.5
        ctx.fill_color("#ffffff")
        np.testing.assert_allclose(surface.pixels, 0.5)

    def test_screen_never_darkens(self):
        from flowreel.procedural.surface import SCREEN, DrawingSurface

        surface = DrawingSurface(4, 4)
        ctx = surface.get_context()
        ctx.fill_color("#808080")
        before = surface.pixels.copy()
        ctx.composite_operation = SCREEN
        ctx.fill_color("#202020")
        self.assertTrue(np.all(surface.pixels >= before))

    def test_linear_gradient_runs_corner_to_corner(self):
        from flowreel.procedural.surface import DrawingSurface

        surface = DrawingSurface(32, 32)
        surface.get_context().fill_linear_gradient(0, 0, 32, 32, [(0.0, "#000000"), (1.0, "#ffffff")])
        self.assertLess(surface.pixels[0, 0, 0], 0.1)
        self.assertGreater(surface.pixels[31, 31, 0], 0.9)
        self.assertAlmostEqual(surface.pixels[0, 31, 0], surface.pixels[31, 0, 0])

    def test_disc_paints_center_not_far_corner(self):
        from flowreel.procedural.surface import DrawingSurface

        surface = DrawingSurface(32, 32)
        surface.get_context().fill_disc(16, 16, 4, "#ff0000", glow_color=(1.0, 0.0, 0.0, 0.5), glow_blur=6)
        self.assertGreater(surface.pixels[16, 16, 0], 0.99)
        self.assertEqual(surface.pixels[0, 0, 0], 0.0)
        # Glow reaches a little past the rim
        self.assertGreater(surface.pixels[16, 22, 0], 0.0)

    def test_disc_off_surface_is_noop(self):
        from flowreel.procedural.surface import DrawingSurface

        surface = DrawingSurface(8, 8)
        surface.get_context().fill_disc(-50, -50, 3, "#ffffff", glow_color=(1, 1, 1, 1), glow_blur=4)
        self.assertEqual(surface.pixels.sum(), 0.0)

    def test_radial_gradient_bright_near_inner_circle(self):
        from flowreel.procedural.surface import DrawingSurface

        surface = DrawingSurface(40, 40)
        surface.get_context().fill_radial_gradient(
            20, 14, 3, 20, 20, 24, [(0.0, "#ffffff"), (1.0, "#ffffff00")]
        )
        self.assertGreater(surface.pixels[14, 20, 0], surface.pixels[38, 20, 0])


def _scene(seed=42, width=48, height=32, background=("#102030", "#304050", "#506070")):
    from flowreel.procedural.flow_field import build_flow_field
    from flowreel.procedural.schema import GenerationSettings, MotionProfile, Palette, SceneProfile

    settings = GenerationSettings(width=width, height=height, fps=8, duration=1.0, seed=seed)
    profile = SceneProfile(
        theme="t",
        mood="m",
        lighting="l",
        texture="x",
        density=0.2,
        motion=MotionProfile(amplitude=0.6, frequency=0.5, turbulence=0.4, drift=0.2),
        palette=Palette(background=background, accents=("#ff8040", "#40ff80")),
    )
    return settings, profile, build_flow_field(settings, profile)


class TestRenderer(unittest.TestCase):
    def test_render_paints_surface(self):
        from flowreel.procedural.renderer import render_frame
        from flowreel.procedural.surface import DrawingSurface

        settings, profile, field = _scene()
        surface = DrawingSurface(settings.width, settings.height)
        render_frame(surface, settings, profile, field, 0, settings.total_frames)
        self.assertGreater(surface.pixels.sum(), 0.0)
        self.assertTrue(np.all((surface.pixels >= 0.0) & (surface.pixels <= 1.0)))

    def test_same_frame_index_same_pixels(self):
        from flowreel.procedural.renderer import render_frame
        from flowreel.procedural.surface import DrawingSurface

        settings, profile, field = _scene()
        surface = DrawingSurface(settings.width, settings.height)
        render_frame(surface, settings, profile, field, 3, settings.total_frames)
        first = surface.to_frame()
        render_frame(surface, settings, profile, field, 5, settings.total_frames)
        render_frame(surface, settings, profile, field, 3, settings.total_frames)
        np.testing.assert_array_equal(first, surface.to_frame())

    def test_translucent_background_does_not_blend_with_previous_frame(self):
        """Half-transparent stops on a large surface: leftover pixels must not show through."""
        from flowreel.procedural.renderer import render_frame
        from flowreel.procedural.surface import DrawingSurface

        settings, profile, field = _scene(width=256, height=256, background=("#ff000080", "#00ff0080"))
        surface = DrawingSurface(settings.width, settings.height)
        render_frame(surface, settings, profile, field, 0, settings.total_frames)
        first = surface.pixels.copy()
        render_frame(surface, settings, profile, field, 0, settings.total_frames)
        np.testing.assert_array_equal(first, surface.pixels)

        render_frame(surface, settings, profile, field, 6, settings.total_frames)
        render_frame(surface, settings, profile, field, 0, settings.total_frames)
        np.testing.assert_array_equal(first, surface.pixels)

    def test_frames_change_over_time_and_seed(self):
        from flowreel.procedural.renderer import render_frame
        from flowreel.procedural.surface import DrawingSurface

        settings, profile, field = _scene()
        surface = DrawingSurface(settings.width, settings.height)
        render_frame(surface, settings, profile, field, 0, settings.total_frames)
        frame0 = surface.to_frame()
        render_frame(surface, settings, profile, field, 4, settings.total_frames)
        self.assertFalse(np.array_equal(frame0, surface.to_frame()))

        other_settings, _, other_field = _scene(seed=43)
        render_frame(surface, other_settings, profile, other_field, 0, settings.total_frames)
        self.assertFalse(np.array_equal(frame0, surface.to_frame()))

    def test_leaves_context_state_clean(self):
        from flowreel.procedural.renderer import render_frame
        from flowreel.procedural.surface import SOURCE_OVER, SCREEN, DrawingSurface

        settings, profile, field = _scene()
        surface = DrawingSurface(settings.width, settings.height)
        ctx = surface.get_context()
        ctx.global_alpha = 0.1
        ctx.composite_operation = SCREEN
        render_frame(surface, settings, profile, field, 1, settings.total_frames)
        self.assertEqual(ctx.global_alpha, 1.0)
        self.assertEqual(ctx.composite_operation, SOURCE_OVER)

    def test_single_background_stop(self):
        from flowreel.procedural.flow_field import FlowField
        from flowreel.procedural.renderer import render_frame
        from flowreel.procedural.surface import DrawingSurface

        settings, profile, _ = _scene()
        field = FlowField(particles=(), gradient_stops=("#336699",))
        surface = DrawingSurface(settings.width, settings.height)
        render_frame(surface, settings, profile, field, 0, settings.total_frames)
        self.assertGreater(surface.pixels[..., 2].mean(), surface.pixels[..., 0].mean())

    def test_light_alpha_is_clamped(self):
        from flowreel.procedural.renderer import light_alpha

        self.assertAlmostEqual(light_alpha(0.0), 150 / 255)
        self.assertAlmostEqual(light_alpha(1.0), 200 / 255)
        self.assertAlmostEqual(light_alpha(-1.0), 100 / 255)
        self.assertEqual(light_alpha(3.0), 1.0)
        self.assertEqual(light_alpha(-4.0), 0.0)


if __name__ == "__main__":
    unittest.main()
