"""
Prompt → scene profile builder, profile files, YAML config, and the one-call pipeline.
Run from project root: python -m pytest tests/ -v
"""
import sys
import tempfile
import unittest
from pathlib import Path

ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


class TestBuildProfile(unittest.TestCase):
    def test_keywords_pick_palette(self):
        from flowreel.procedural.data.palettes import PALETTES
        from flowreel.procedural.profiles import build_profile

        profile = build_profile("A calm ocean at dawn", "cinematic")
        background, accents = PALETTES["ocean"]
        self.assertEqual(profile.palette.background, background)
        self.assertEqual(profile.palette.accents, accents)
        self.assertEqual(profile.motion.curve, "slow")
        self.assertEqual(profile.theme, "A calm ocean at dawn")

    def test_style_default_palette_without_keywords(self):
        from flowreel.procedural.data.palettes import PALETTES
        from flowreel.procedural.profiles import STYLE_DEFAULT_PALETTE, build_profile
        from flowreel.procedural.schema import VideoStyle

        for style in VideoStyle:
            profile = build_profile("something unremarkable", style)
            self.assertEqual(profile.palette.accents, PALETTES[STYLE_DEFAULT_PALETTE[style]][1])
            profile.validate()

    def test_styles_shape_motion(self):
        from flowreel.procedural.profiles import build_profile

        cyber = build_profile("drift", "cyberpunk")
        sketch = build_profile("drift", "sketch")
        self.assertGreater(cyber.motion.turbulence, sketch.motion.turbulence)
        self.assertGreater(cyber.density, sketch.density)

    def test_empty_prompt(self):
        from flowreel.procedural.profiles import build_profile

        profile = build_profile("   ")
        self.assertEqual(profile.theme, "Untitled scene")
        self.assertEqual(profile.mood, "contemplative")
        profile.validate()

    def test_deterministic(self):
        from flowreel.procedural.profiles import build_profile

        self.assertEqual(build_profile("neon city rain", "cyberpunk"), build_profile("neon city rain", "cyberpunk"))

    def test_unknown_style_rejected(self):
        from flowreel.procedural.profiles import build_profile

        with self.assertRaises(ValueError):
            build_profile("x", "anime")


class TestProfileFiles(unittest.TestCase):
    def test_load_profile_yaml(self):
        from flowreel.procedural.profiles import load_profile

        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "profile.yaml"
            path.write_text(
                "theme: Glass harbor\n"
                "mood: serene\n"
                "lighting: moonlit\n"
                "texture: film\n"
                "density: 0.4\n"
                "motion: {curve: wave, amplitude: 0.6, frequency: 0.3, turbulence: 0.2, drift: 0.1}\n"
                "palette:\n"
                "  background: ['#0a0a1e', '#3c2864']\n"
                "  accents: ['#f0e6ff']\n",
                encoding="utf-8",
            )
            profile = load_profile(path)
        self.assertEqual(profile.theme, "Glass harbor")
        self.assertEqual(profile.motion.amplitude, 0.6)
        self.assertEqual(profile.palette.accents, ("#f0e6ff",))

    def test_invalid_profile_rejected(self):
        from flowreel.procedural.errors import PreconditionError
        from flowreel.procedural.profiles import load_profile

        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "bad.yaml"
            path.write_text("density: 0.5\npalette: {background: ['#000'], accents: ['not-a-color']}\n", encoding="utf-8")
            with self.assertRaises(PreconditionError) as cm:
                load_profile(path)
        self.assertEqual(cm.exception.field, "palette")

    def test_round_trip_dict(self):
        from flowreel.procedural.profiles import build_profile
        from flowreel.procedural.schema import SceneProfile

        profile = build_profile("forest fog", "documentary")
        self.assertEqual(SceneProfile.from_dict(profile.to_dict()), profile)


class TestConfig(unittest.TestCase):
    def test_missing_file_gives_defaults(self):
        from flowreel.config import load_config

        config = load_config(Path("/nonexistent/flowreel.yaml"))
        self.assertEqual(config["output"]["width"], 512)
        self.assertEqual(config["generation"]["refresh_rate"], 0)
        self.assertEqual(config["encoder"]["bitrate"], "4M")

    def test_yaml_merges_over_defaults(self):
        from flowreel.config import load_config

        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "c.yaml"
            path.write_text("output:\n  fps: 30\ngeneration:\n  seed: 7\n", encoding="utf-8")
            config = load_config(path)
        self.assertEqual(config["output"]["fps"], 30)
        self.assertEqual(config["output"]["width"], 512)
        self.assertEqual(config["generation"]["seed"], 7)
        self.assertEqual(config["generation"]["style"], "cinematic")

    def test_quality_preset(self):
        from flowreel.config import resolve_output_config

        out = resolve_output_config({"output": {"width": 10, "height": 10, "fps": 1, "quality": "high"}})
        self.assertEqual((out["width"], out["height"], out["fps"]), (1080, 608, 30))

    def test_repo_default_config_loads(self):
        from flowreel.config import load_config

        config = load_config()
        self.assertEqual(config["output"]["filename_prefix"], "flowreel")
        self.assertIsNone(config["generation"]["codec_preference"])


class TestPipeline(unittest.TestCase):
    def test_generate_video_writes_artifact_and_poster(self):
        from fakes import FakeEncoderFactory, all_formats

        from flowreel.config import load_config
        from flowreel.pipeline import build_settings, generate_video
        from flowreel.procedural import ProceduralVideoGenerator

        config = load_config(Path("/nonexistent.yaml"))
        factory = FakeEncoderFactory()
        generator = ProceduralVideoGenerator(config, encoder_factory=factory, format_probe=all_formats)
        statuses = []
        with tempfile.TemporaryDirectory() as tmp:
            path = generate_video(
                "calm ocean",
                1.0,
                seed=3,
                width=16,
                height=16,
                fps=4,
                config=config,
                output_path=Path(tmp) / "clip",
                poster_path=Path(tmp) / "poster.png",
                generator=generator,
                listener=lambda name, value: statuses.append(value) if name == "status" else None,
            )
            self.assertEqual(path.suffix, ".webm")
            self.assertEqual(path.read_bytes(), b"F000;F001;F002;F003;END")
            self.assertTrue((Path(tmp) / "poster.png").exists())
        self.assertEqual(statuses[-1], "complete")
        # The pipeline tears down after writing; no handle outlives the call
        self.assertEqual(generator.store.live_handles(), [])

        settings = build_settings(config, duration_seconds=2.0, style="sketch")
        self.assertEqual(settings.total_frames, 48)
        self.assertEqual(settings.seed, 42)

    def test_generated_event_logs_settings(self):
        """The structured completion record carries the full run settings."""
        import json

        from fakes import FakeEncoderFactory, all_formats

        from flowreel.config import load_config
        from flowreel.pipeline import generate_video
        from flowreel.procedural import ProceduralVideoGenerator

        config = load_config(Path("/nonexistent.yaml"))
        generator = ProceduralVideoGenerator(config, encoder_factory=FakeEncoderFactory(), format_probe=all_formats)
        with tempfile.TemporaryDirectory() as tmp:
            with self.assertLogs("flowreel.workflow_utils", level="INFO") as logs:
                generate_video(
                    "calm ocean",
                    1.0,
                    style="sketch",
                    seed=9,
                    width=16,
                    height=16,
                    fps=4,
                    config=config,
                    output_path=Path(tmp) / "clip.webm",
                    generator=generator,
                )
        records = [json.loads(r.getMessage()) for r in logs.records if r.getMessage().startswith("{")]
        event = next(r for r in records if r.get("event") == "video_generated")
        self.assertEqual(event["frames"], 4)
        self.assertEqual(
            event["settings"],
            {"width": 16, "height": 16, "fps": 4, "duration": 1.0, "seed": 9, "style": "sketch"},
        )


if __name__ == "__main__":
    unittest.main()
