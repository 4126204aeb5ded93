"""
Integration tests for the complete curation pipeline.
Runs end-to-end over a temporary public tree with a fake video filter runner.
"""

import json
import random
import tempfile
import shutil
from pathlib import Path

import pytest
from PIL import Image

from asset_curator.config import CuratorConfig
from asset_curator.pipeline import CurationPipeline, PipelineError, PipelineStep
from asset_curator.processing.video import VideoFilterRunner


class FakeRunner(VideoFilterRunner):
    """Writes a small derivative instead of calling ffmpeg."""

    def __init__(self):
        self.calls = []

    def apply(self, filter_expr, source, destination):
        self.calls.append(filter_expr)
        data = Path(source).read_bytes()[:4] + filter_expr.encode("utf-8")
        Path(destination).write_bytes(data)
        return len(data)


class TestCurationPipeline:
    """Integration tests for CurationPipeline."""

    def setup_method(self):
        self.temp_dir = Path(tempfile.mkdtemp())
        public = self.temp_dir / "public"
        self.config = CuratorConfig(
            public_dir=str(public),
            source_dir=str(public / "assets"),
            target_dir=str(public / "assets-curated"),
            manual_picks_dir=str(public / "assets-curated" / "manual-picks"),
            scan_dir=str(self.temp_dir / "src" / "mutations"),
            core_assets=[],
        )
        self.source = Path(self.config.source_dir)
        self.target = Path(self.config.target_dir)
        self.scan_dir = Path(self.config.scan_dir)
        self.scan_dir.mkdir(parents=True)
        self.runner = FakeRunner()

    def teardown_method(self):
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def _asset(self, relative: str, data: bytes = b"asset") -> Path:
        path = self.source / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
        return path

    def _image(self, relative: str, size=(3000, 100)) -> Path:
        path = self.source / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        Image.new("RGB", size, (200, 40, 90)).save(path, "PNG")
        return path

    def _reference(self, *references: str, name: str = "Mutation.jsx") -> None:
        lines = [f"const asset{i} = '{ref}';" for i, ref in enumerate(references)]
        (self.scan_dir / name).write_text("\n".join(lines) + "\n", encoding="utf-8")

    def _pipeline(self, **kwargs) -> CurationPipeline:
        return CurationPipeline(self.config, runner=self.runner, rng=random.Random(7), **kwargs)

    def test_image_is_downscaled_and_converted(self):
        self._image("a/images/x.png")
        self._reference("/assets/a/images/x.png")

        report = self._pipeline().run()

        [result] = report.manifest.essentials
        assert result.original == "/assets/a/images/x.png"
        assert result.curated == "/assets-curated/essentials/a/images/x.webp"
        written = self.target / "essentials" / "a" / "images" / "x.webp"
        with Image.open(written) as image:
            assert image.format == "WEBP"
            assert image.width <= 1920
        assert result.size == written.stat().st_size
        assert report.manifest.stats.by_type["images"].count == 1

    def test_missing_reference_is_skipped(self):
        self._asset("a/audio/beat.mp3")
        self._reference("/assets/a/audio/beat.mp3", "/assets/a/audio/ghost.mp3")

        report = self._pipeline().run()

        originals = [r.original for r in report.manifest.essentials]
        assert originals == ["/assets/a/audio/beat.mp3"]
        assert report.state.assets_requested == 2
        assert report.state.assets_curated == 1
        assert report.manifest_path.exists()

    def test_core_and_extra_assets_are_included(self):
        self._asset("chaos-manifest.json", b"{}")
        self._asset("b/data/level.json", b"[]")
        self.config.core_assets = ["/assets/chaos-manifest.json"]
        self.config.extra_assets = ["/assets/b/data/level.json"]

        report = self._pipeline().run()

        originals = sorted(r.original for r in report.manifest.essentials)
        assert originals == ["/assets/b/data/level.json", "/assets/chaos-manifest.json"]

    def test_video_gets_mutations(self):
        self._asset("vibetales/video/clip.mp4", b"\x00\x00\x00\x18ftypmp42")
        self._reference("/assets/vibetales/video/clip.mp4")

        report = self._pipeline().run()

        [result] = report.manifest.essentials
        assert 1 <= len(result.mutations) <= 2
        assert len(self.runner.calls) == len(result.mutations)
        assert report.state.mutations_created == len(result.mutations)
        for mutation in result.mutations:
            assert mutation.path.startswith("/assets-curated/essentials/vibetales/video/clip_")
        assert (self.target / "essentials" / "vibetales" / "video" / "clip.mp4").exists()

    def test_mutations_disabled(self):
        self._asset("vibetales/video/clip.mp4")
        self._reference("/assets/vibetales/video/clip.mp4")
        self.config.mutations_enabled = False

        report = self._pipeline().run()

        assert report.manifest.essentials[0].mutations == []
        assert self.runner.calls == []

    def test_total_size_sums_essentials_and_picks(self):
        self._image("a/images/x.png", size=(64, 64))
        self._asset("a/audio/beat.mp3", b"b" * 300)
        self._reference("/assets/a/images/x.png", "/assets/a/audio/beat.mp3")
        picks = Path(self.config.manual_picks_dir)
        (picks / "audio").mkdir(parents=True)
        (picks / "audio" / "fav.mp3").write_bytes(b"f" * 123)

        report = self._pipeline().run()

        manifest = report.manifest
        expected = sum(r.size for r in manifest.essentials) + sum(p.size for p in manifest.manual_picks.assets)
        assert manifest.stats.total_size == expected
        assert manifest.stats.total_assets == 3
        assert manifest.stats.by_type["audio"].count == 2
        assert set(manifest.stats.by_project) == {"a"}
        assert manifest.stats.by_project["a"].count == 2

    def test_manifest_file_contents(self):
        self._asset("a/audio/beat.mp3", b"beat")
        self._reference("/assets/a/audio/beat.mp3")

        report = self._pipeline().run()

        data = json.loads(report.manifest_path.read_text(encoding="utf-8"))
        assert report.manifest_path == self.target / "manifest.json"
        assert data["version"] == "1.0.0"
        assert data["stats"]["totalSize"] == 4
        assert data["stats"]["withinBudget"] is True
        assert data["essentials"][0]["curated"] == "/assets-curated/essentials/a/audio/beat.mp3"
        assert data["manualPicks"]["assets"] == []

    def test_readme_created_and_not_listed(self):
        report = self._pipeline().run()

        readme = Path(self.config.manual_picks_dir) / "README.md"
        assert readme.exists()
        assert "manual-picks/" in readme.read_text(encoding="utf-8")
        assert report.manifest.manual_picks.assets == []

    def test_existing_readme_is_preserved(self):
        picks = Path(self.config.manual_picks_dir)
        picks.mkdir(parents=True)
        (picks / "README.md").write_text("my notes\n", encoding="utf-8")

        self._pipeline().run()

        assert (picks / "README.md").read_text(encoding="utf-8") == "my notes\n"

    def test_manual_picks_manifest_written(self):
        picks = Path(self.config.manual_picks_dir)
        (picks / "images").mkdir(parents=True)
        (picks / "images" / "logo.png").write_bytes(b"logo")

        report = self._pipeline().run()

        data = json.loads(report.manual_picks_manifest_path.read_text(encoding="utf-8"))
        assert [a["path"] for a in data["assets"]] == ["images/logo.png"]
        assert data["assets"][0]["priority"] == "high"

    def test_manual_picks_mirrored_when_outside_target(self):
        external = self.temp_dir / "picks"
        (external / "audio").mkdir(parents=True)
        (external / "audio" / "song.mp3").write_bytes(b"song")
        self.config.manual_picks_dir = str(external)

        report = self._pipeline().run()

        mirrored = self.target / "manual-picks" / "audio" / "song.mp3"
        assert mirrored.read_bytes() == b"song"
        assert (external / "README.md").exists()
        assert not (self.target / "manual-picks" / "README.md").exists()
        assert [p.path for p in report.manifest.manual_picks.assets] == ["audio/song.mp3"]

    def test_over_budget_still_completes(self):
        self._asset("a/audio/big.mp3", b"x" * 4096)
        self._reference("/assets/a/audio/big.mp3")
        self.config.target_size_mb = 0.001

        report = self._pipeline().run()

        assert not report.within_budget
        assert report.manifest_path.exists()
        assert PipelineStep.MANIFEST in report.state.completed_steps

    def test_parallel_workers_match_sequential(self):
        refs = []
        for i in range(6):
            self._asset(f"p/audio/t{i}.mp3", bytes([i]) * (i + 1))
            refs.append(f"/assets/p/audio/t{i}.mp3")
        self._reference(*refs)

        sequential = [r.to_dict() for r in self._pipeline().run().manifest.essentials]
        self.config.workers = 3
        parallel = [r.to_dict() for r in self._pipeline().run().manifest.essentials]

        assert parallel == sequential

    def test_colliding_images_are_listed_once(self):
        self._image("a/images/x.png", size=(300, 100))
        webp = self.source / "a" / "images" / "x.webp"
        Image.new("RGB", (50, 50), (1, 2, 3)).save(webp, "WEBP")
        self._reference("/assets/a/images/x.png", "/assets/a/images/x.webp")
        self.config.workers = 2

        report = self._pipeline().run()

        [result] = report.manifest.essentials
        assert result.original == "/assets/a/images/x.png"
        written = self.target / "essentials" / "a" / "images" / "x.webp"
        assert report.manifest.stats.total_size == written.stat().st_size
        with Image.open(written) as image:
            assert image.width == 300

    def test_seeded_run_is_reproducible_with_workers(self):
        refs = []
        for i in range(5):
            self._asset(f"v/video/clip{i}.mp4", b"video")
            refs.append(f"/assets/v/video/clip{i}.mp4")
        self._reference(*refs)
        self.config.mutation_seed = 11

        def mutations(workers):
            self.config.workers = workers
            pipeline = CurationPipeline(self.config, runner=FakeRunner())
            return [[m.mutation for m in r.mutations] for r in pipeline.run().manifest.essentials]

        assert mutations(1) == mutations(4)

    def test_progress_callback(self):
        self._asset("a/audio/one.mp3")
        self._asset("a/audio/two.mp3")
        self._reference("/assets/a/audio/one.mp3", "/assets/a/audio/two.mp3")
        seen = []

        self._pipeline(on_asset=lambda done, total, ref: seen.append((done, total))).run()

        assert seen == [(1, 2), (2, 2)]

    def test_unwritable_target_fails_in_prepare(self):
        self.target.parent.mkdir(parents=True, exist_ok=True)
        self.target.write_text("not a directory", encoding="utf-8")

        with pytest.raises(PipelineError) as excinfo:
            self._pipeline().run()

        assert excinfo.value.step == PipelineStep.PREPARE

    def test_missing_scan_dir_still_runs(self):
        shutil.rmtree(self.scan_dir)
        self._asset("chaos-manifest.json", b"{}")
        self.config.core_assets = ["/assets/chaos-manifest.json"]

        report = self._pipeline().run()

        assert [r.original for r in report.manifest.essentials] == ["/assets/chaos-manifest.json"]
