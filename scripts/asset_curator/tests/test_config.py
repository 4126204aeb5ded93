"""
Tests for configuration loading and validation.
"""

import json
import pytest

from asset_curator.config import CuratorConfig, ENV_PREFIX
from asset_curator.core_assets import CORE_ASSETS


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    import os
    for key in list(os.environ):
        if key.startswith(ENV_PREFIX):
            monkeypatch.delenv(key, raising=False)


class TestCuratorConfig:
    """Test configuration defaults, files and overrides."""

    def test_defaults(self):
        config = CuratorConfig()
        assert config.source_dir == "public/assets"
        assert config.target_dir == "public/assets-curated"
        assert config.max_image_width == 1920
        assert config.webp_quality == 85
        assert config.jpeg_quality == 85
        assert config.target_size_mb == 40.0
        assert config.preserve_original_quality == ["svg", "ico"]
        assert config.core_assets == list(CORE_ASSETS)
        assert config.validate() == []

    def test_derived_paths(self):
        config = CuratorConfig(target_dir="out")
        assert config.essentials_dir.replace("\\", "/") == "out/essentials"
        assert config.curated_manual_picks_dir.replace("\\", "/") == "out/manual-picks"

    def test_image_quality_follows_format(self):
        config = CuratorConfig(webp_quality=70, jpeg_quality=60)
        assert config.image_quality == 70
        assert config.image_suffix == ".webp"
        config.image_format = "jpeg"
        assert config.image_quality == 60
        assert config.image_suffix == ".jpg"

    def test_from_toml(self, tmp_path):
        path = tmp_path / "asset_curator.toml"
        path.write_text(
            """
[paths]
source_dir = "media/src"
target_dir = "media/out"

[scan]
extensions = [".tsx"]

[images]
max_width = 1280
webp_quality = 70
preserve_original_quality = ["svg"]

[video]
timeout = 30
mutations = false
seed = 7

[budget]
target_size_mb = 25

[assets]
core = ["/assets/a/images/x.png"]
extra = ["/assets/b/audio/y.mp3"]

[execution]
workers = 4
""",
            encoding="utf-8",
        )

        config = CuratorConfig.from_file(path)

        assert config.source_dir == "media/src"
        assert config.target_dir == "media/out"
        assert config.scan_extensions == [".tsx"]
        assert config.max_image_width == 1280
        assert config.webp_quality == 70
        assert config.preserve_original_quality == ["svg"]
        assert config.ffmpeg_timeout == 30.0
        assert config.mutations_enabled is False
        assert config.mutation_seed == 7
        assert config.target_size_mb == 25.0
        assert config.core_assets == ["/assets/a/images/x.png"]
        assert config.extra_assets == ["/assets/b/audio/y.mp3"]
        assert config.workers == 4

    def test_from_json(self, tmp_path):
        path = tmp_path / "asset_curator.json"
        path.write_text(json.dumps({"images": {"format": "jpeg", "jpeg_quality": 80}}), encoding="utf-8")

        config = CuratorConfig.from_file(path)

        assert config.image_format == "jpeg"
        assert config.image_quality == 80

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            CuratorConfig.from_file(tmp_path / "missing.toml")

    def test_unsupported_format(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("a: 1", encoding="utf-8")
        with pytest.raises(ValueError):
            CuratorConfig.from_file(path)

    def test_env_overrides(self, monkeypatch):
        monkeypatch.setenv("ASSET_CURATOR_TARGET_DIR", "dist/assets")
        monkeypatch.setenv("ASSET_CURATOR_MAX_IMAGE_WIDTH", "1024")
        monkeypatch.setenv("ASSET_CURATOR_TARGET_SIZE_MB", "12.5")
        monkeypatch.setenv("ASSET_CURATOR_MUTATIONS", "false")
        monkeypatch.setenv("ASSET_CURATOR_MUTATION_SEED", "3")
        monkeypatch.setenv("ASSET_CURATOR_PRESERVE_ORIGINAL_QUALITY", ".SVG, ico,gif")
        monkeypatch.setenv("ASSET_CURATOR_SCAN_EXTENSIONS", ".js,.ts")

        config = CuratorConfig.from_env()

        assert config.target_dir == "dist/assets"
        assert config.max_image_width == 1024
        assert config.target_size_mb == 12.5
        assert config.mutations_enabled is False
        assert config.mutation_seed == 3
        assert config.preserve_original_quality == ["svg", "ico", "gif"]
        assert config.scan_extensions == [".js", ".ts"]

    def test_validate_reports_every_problem(self):
        config = CuratorConfig(
            max_image_width=0,
            webp_quality=0,
            jpeg_quality=101,
            image_format="png",
            target_size_mb=0,
            ffmpeg_timeout=-1,
            workers=0,
            asset_prefix="assets",
        )

        errors = config.validate()

        assert len(errors) == 8
        assert any("max_image_width" in e for e in errors)
        assert any("image_format" in e for e in errors)
        assert any("asset_prefix" in e for e in errors)
