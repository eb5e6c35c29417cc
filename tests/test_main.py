"""Tests for the command line entry point."""

import pytest
from PIL import Image

from main import main


class TestMain:

    def test_renders_basic_scene(self, tmp_path):
        output = tmp_path / "out" / "basic.png"
        status = main([
            '--width', '8', '--height', '4', '--samples', '1', '--depth', '3',
            '--workers', '2', '--seed', '1', '--output', str(output)
        ])
        assert status == 0
        with Image.open(output) as image:
            assert image.size == (8, 4)

    def test_random_scene(self, tmp_path):
        output = tmp_path / "random.png"
        status = main([
            '--scene', 'random', '--width', '4', '--height', '3', '--samples', '1',
            '--depth', '2', '--workers', '1', '--seed', '2', '--no-gamma', '--output', str(output)
        ])
        assert status == 0
        assert output.exists()

    def test_scene_file(self, tmp_path):
        scene = tmp_path / "scene.yaml"
        scene.write_text(
            "render: {width: 5, height: 5, samples: 1, max_depth: 2, workers: 1}\n"
            "objects:\n"
            "  - {center: [0, 0, -1], radius: 0.5, material: {type: lambertian}}\n"
        )
        output = tmp_path / "scene.png"
        assert main(['--scene-file', str(scene), '--output', str(output)]) == 0
        with Image.open(output) as image:
            assert image.size == (5, 5)

    def test_missing_scene_file(self, tmp_path, capsys):
        assert main(['--scene-file', str(tmp_path / "missing.yaml")]) == 1
        assert "Error" in capsys.readouterr().err

    @pytest.mark.parametrize("content", [
        "objects: [1]\n",
        "materials: [glass]\n",
        "objects:\n  - {radius: null}\n",
        "camera: {vfov: null}\n",
    ])
    def test_malformed_scene_file(self, tmp_path, capsys, content):
        scene = tmp_path / "broken.yaml"
        scene.write_text(content)
        assert main(['--scene-file', str(scene), '--output', str(tmp_path / "x.png")]) == 1
        assert "Error" in capsys.readouterr().err
        assert not (tmp_path / "x.png").exists()

    def test_invalid_settings(self, capsys):
        assert main(['--width', '0']) == 1
