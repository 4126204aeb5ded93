"""
Curation pipeline coordinator.
Runs discovery, essential asset curation, manual-pick inventory and manifest
generation as one linear pass from the source tree to the target tree.
"""

import time
import random
import logging
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Set
from dataclasses import dataclass, field

from .config import CuratorConfig
from .scaffold import ReadmeScaffolder
from .scanner import ReferenceScanner, build_essential_set
from .utils.files import copy_verbatim, ensure_directory
from .processing.copier import AssetCopier, AssetResult, ESSENTIALS, ProgressCallback
from .processing.transcoder import ImageTranscoder
from .processing.video import FFmpegFilterRunner, VideoFilterRunner, VideoMutationEngine
from .processing.manual_picks import ManualPicksInventory, ManualPicksScanner
from .processing.manifest import Manifest, ManifestAggregator, write_manifest

MANIFEST_NAME = "manifest.json"


class PipelineStep(Enum):
    """Enumeration of pipeline steps."""
    PREPARE = "prepare"
    SCAN = "scan"
    ESSENTIALS = "essentials"
    MANUAL_PICKS = "manual_picks"
    MANIFEST = "manifest"


@dataclass
class StepResult:
    """Result of a pipeline step execution."""
    step: PipelineStep
    success: bool
    duration: float
    message: str
    data: Dict[str, Any] = field(default_factory=dict)


@dataclass
class CurationState:
    """Current state of the pipeline execution."""
    current_step: Optional[PipelineStep] = None
    completed_steps: List[PipelineStep] = field(default_factory=list)
    step_results: Dict[PipelineStep, StepResult] = field(default_factory=dict)
    start_time: Optional[float] = None
    assets_requested: int = 0
    assets_curated: int = 0
    mutations_created: int = 0


@dataclass
class CurationReport:
    """Everything a caller needs after a run."""
    manifest: Manifest
    manifest_path: Path
    manual_picks_manifest_path: Path
    state: CurationState

    @property
    def within_budget(self) -> bool:
        return self.manifest.stats.within_budget


class PipelineError(Exception):
    """Unrecoverable pipeline failure."""
    def __init__(self, message: str, step: Optional[PipelineStep] = None):
        super().__init__(message)
        self.step = step


class CurationPipeline:
    """
    Main pipeline coordinator.

    Every per-asset, per-file and per-mutation failure is absorbed by the
    components and logged; only failures of the pipeline's own I/O (creating
    the target tree, writing the manifest) raise PipelineError.
    """

    def __init__(self, config: CuratorConfig,
                 runner: Optional[VideoFilterRunner] = None,
                 rng: Optional[random.Random] = None,
                 on_asset: Optional[ProgressCallback] = None):
        """
        Initialize the curation pipeline.

        Args:
            config: Curator configuration
            runner: Video filter runner, ffmpeg by default
            rng: Random source for mutation selection, seeded from the config by default
            on_asset: Called after each essential asset with (done, total, reference)
        """
        self.config = config
        self.state = CurationState()
        self.logger = self._setup_logging()
        self.on_asset = on_asset

        runner = runner or FFmpegFilterRunner(config.ffmpeg_binary, config.ffmpeg_timeout)
        rng = rng or random.Random(config.mutation_seed)

        self.scanner = ReferenceScanner(config.asset_prefix, config.scan_extensions)
        self.copier = AssetCopier(
            config,
            transcoder=ImageTranscoder.from_config(config),
            mutation_engine=VideoMutationEngine(
                runner, rng=rng, enabled=config.mutations_enabled, seed=config.mutation_seed
            ),
        )
        self.picks_scanner = ManualPicksScanner(config.manual_picks_dir)
        self.aggregator = ManifestAggregator(
            asset_prefix=config.asset_prefix,
            target_size_mb=config.target_size_mb,
            version=config.manifest_version,
        )
        self.scaffolder = ReadmeScaffolder()

    def _setup_logging(self) -> logging.Logger:
        """Set up logging for the pipeline."""
        logger = logging.getLogger("asset_curator")
        logger.setLevel(logging.INFO)

        if not logger.handlers:
            handler = logging.StreamHandler()
            formatter = logging.Formatter(
                '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
            )
            handler.setFormatter(formatter)
            logger.addHandler(handler)

        return logger

    def run(self) -> CurationReport:
        """
        Run the complete curation pass.

        Returns:
            CurationReport with the manifest and where it was written

        Raises:
            PipelineError: If the target tree or a manifest cannot be written
        """
        self.logger.info("Starting asset curation")
        self.logger.info(f"Target size: {self.config.target_size_mb}MB")
        self.state.start_time = time.time()

        self._run_step(PipelineStep.PREPARE, self.prepare_directories)
        essentials = self._run_step(PipelineStep.SCAN, self.collect_essentials)
        results = self._run_step(PipelineStep.ESSENTIALS, lambda: self.curate_essentials(essentials))
        inventory = self._run_step(PipelineStep.MANUAL_PICKS, self.collect_manual_picks)
        manifest = self._run_step(PipelineStep.MANIFEST, lambda: self.aggregator.aggregate(results, inventory))

        manifest_path = Path(self.config.target_dir) / MANIFEST_NAME
        try:
            write_manifest(manifest, manifest_path)
        except OSError as e:
            raise PipelineError(f"Cannot write manifest {manifest_path}: {e}", PipelineStep.MANIFEST)

        self._log_summary(manifest)
        return CurationReport(
            manifest=manifest,
            manifest_path=manifest_path,
            manual_picks_manifest_path=Path(self.config.manual_picks_dir) / MANIFEST_NAME,
            state=self.state,
        )

    def _run_step(self, step: PipelineStep, handler: Callable[[], Any]) -> Any:
        self.state.current_step = step
        self.logger.info(f"Executing step: {step.value}")
        start_time = time.time()

        try:
            result = handler()
        except PipelineError:
            raise
        except Exception as e:
            duration = time.time() - start_time
            self.state.step_results[step] = StepResult(step, False, duration, f"Step {step.value} failed: {e}")
            self.logger.error(f"Step {step.value} failed after {duration:.2f}s: {e}")
            raise PipelineError(f"Pipeline execution failed: {e}", step)

        duration = time.time() - start_time
        self.state.step_results[step] = StepResult(
            step, True, duration, f"Step {step.value} completed successfully",
            data={"items": len(result)} if isinstance(result, (list, set)) else {},
        )
        self.state.completed_steps.append(step)
        self.logger.info(f"Step {step.value} completed in {duration:.2f}s")
        return result

    def prepare_directories(self) -> None:
        """Create the target tree and the manual-picks README."""
        for directory in (self.config.target_dir, self.config.essentials_dir, self.config.manual_picks_dir):
            ensure_directory(directory)
        try:
            self.scaffolder.ensure_readme(self.config.manual_picks_dir, self.config.target_size_mb)
        except OSError as e:
            self.logger.warning(f"Cannot create manual picks README: {e}")

    def collect_essentials(self) -> Set[str]:
        """Scanned references merged with the core and extra asset lists."""
        scanned = self.scanner.scan_directory(self.config.scan_dir)
        essentials = build_essential_set(scanned, self.config.core_assets, self.config.extra_assets)
        self.state.assets_requested = len(essentials)
        self.logger.info(f"Essential set: {len(scanned)} scanned + core = {len(essentials)} assets")
        return essentials

    def curate_essentials(self, essentials: Set[str]) -> List[AssetResult]:
        results = self.copier.copy_all(
            essentials, ESSENTIALS, workers=self.config.workers, on_progress=self.on_asset
        )
        self.state.assets_curated = len(results)
        self.state.mutations_created = sum(len(r.mutations) for r in results)
        skipped = len(essentials) - len(results)
        if skipped:
            self.logger.warning(f"{skipped} essential assets were skipped")
        return results

    def collect_manual_picks(self) -> ManualPicksInventory:
        inventory = self.picks_scanner.scan()
        try:
            self.picks_scanner.write_manifest(inventory)
        except OSError as e:
            self.logger.error(f"Cannot write manual picks manifest: {e}")
        self._mirror_manual_picks(inventory)
        return inventory

    def _mirror_manual_picks(self, inventory: ManualPicksInventory) -> None:
        """Copy picks into ``<target>/manual-picks`` when they live elsewhere."""
        source_root = Path(self.config.manual_picks_dir).resolve()
        target_root = Path(self.config.curated_manual_picks_dir).resolve()
        if source_root == target_root:
            return

        for entry in inventory.assets:
            try:
                copy_verbatim(source_root / entry.path, target_root / entry.path)
            except OSError as e:
                self.logger.error(f"Cannot mirror manual pick {entry.path}: {e}")

    def _log_summary(self, manifest: Manifest) -> None:
        stats = manifest.stats
        self.logger.info(f"Curation complete: {stats.total_assets} assets, {stats.total_size_mb}MB")
        if not stats.within_budget:
            self.logger.warning(
                f"Total size ({stats.total_size_mb}MB) exceeds target ({self.config.target_size_mb}MB)"
            )
