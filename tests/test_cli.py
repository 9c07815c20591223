"""Tests for the command-line renderer.

These call render_scene() directly; main() re-initializes Taichi, which
would invalidate the fields allocated by earlier tests.
"""

import json
import os
import tempfile

import pytest


class TestParseArgs:
    """Tests for argument parsing."""

    def test_defaults(self):
        """Test the default options."""
        from rmtracer.cli import parse_args

        args = parse_args([])

        assert args.scene is None
        assert args.output == "buffer.ppm"
        assert args.batch_size == 4
        assert args.arch == "cpu"
        assert not args.clamp
        assert not args.exact_scanlines

    def test_overrides(self):
        """Test that numeric overrides are parsed."""
        from rmtracer.cli import parse_args

        args = parse_args(["--width", "10", "--height", "5", "--samples", "2", "--seed", "3"])

        assert (args.width, args.height, args.samples, args.seed) == (10, 5, 2, 3)


class TestRenderScene:
    """Tests for render_scene."""

    def test_render_default_scene(self, capsys):
        """Test rendering the built-in scene to a PPM file."""
        from rmtracer.cli import parse_args, render_scene

        with tempfile.TemporaryDirectory() as tmpdir:
            output = os.path.join(tmpdir, "buffer.ppm")
            args = parse_args(
                ["--width", "6", "--height", "4", "--samples", "2", "--seed", "1",
                 "--output", output]
            )
            path = render_scene(args)

            with open(path, encoding="ascii") as f:
                lines = f.read().splitlines()

        assert lines[:3] == ["P3", "6 4", "255"]
        assert len(lines) == 3 + 5 * 6
        assert "Saved to:" in capsys.readouterr().out

    def test_quiet_and_exact_scanlines(self, capsys):
        """Test that --quiet prints nothing and --exact-scanlines drops the extra row."""
        from rmtracer.cli import parse_args, render_scene

        with tempfile.TemporaryDirectory() as tmpdir:
            output = os.path.join(tmpdir, "exact.ppm")
            args = parse_args(
                ["--width", "6", "--height", "4", "--samples", "1", "--quiet",
                 "--exact-scanlines", "--output", output]
            )
            path = render_scene(args)

            with open(path, encoding="ascii") as f:
                lines = f.read().splitlines()

        assert len(lines) == 3 + 4 * 6
        assert capsys.readouterr().out == ""

    def test_render_scene_file(self):
        """Test rendering a JSON scene file."""
        from rmtracer.cli import parse_args, render_scene

        scene = {
            "width": 4,
            "height": 4,
            "samplesPerPixel": 1,
            "seed": 0,
            "objects": [
                {"type": "sphere", "center": [0, 0, -1], "radius": 0.5, "color": [1, 0, 0]}
            ],
        }
        with tempfile.TemporaryDirectory() as tmpdir:
            scene_path = os.path.join(tmpdir, "scene.json")
            with open(scene_path, "w", encoding="utf-8") as f:
                json.dump(scene, f)
            output = os.path.join(tmpdir, "scene.ppm")

            render_scene(parse_args(["--scene", scene_path, "--quiet", "--output", output]))

            with open(output, encoding="ascii") as f:
                header = f.read().splitlines()[:3]

        assert header == ["P3", "4 4", "255"]

    def test_zero_samples_is_configuration_error(self):
        """Test that --samples 0 is rejected before rendering."""
        from rmtracer.cli import parse_args, render_scene
        from rmtracer.errors import ConfigurationError

        with tempfile.TemporaryDirectory() as tmpdir:
            output = os.path.join(tmpdir, "never.ppm")
            args = parse_args(["--samples", "0", "--quiet", "--output", output])

            with pytest.raises(ConfigurationError):
                render_scene(args)

            assert not os.path.exists(output)
