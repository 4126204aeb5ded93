"""
Asset copier that places each essential asset into the curated tree.
"""

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Optional, Set, Tuple, Union

from ..classifier import classify_path
from ..config import CuratorConfig
from ..errors import MissingSourceError, WriteError
from ..utils.files import copy_verbatim, file_size, to_posix_relative
from .transcoder import ImageTranscoder
from .video import VideoMutationEngine

logger = logging.getLogger(__name__)

ESSENTIALS = "essentials"
MANUAL_PICKS = "manual-picks"

ProgressCallback = Callable[[int, int, str], None]


@dataclass
class CuratedMutation:
    """A video mutation as listed in the manifest."""
    mutation: str
    path: str
    size: int


@dataclass
class AssetResult:
    """Curated copy of one essential asset."""
    original: str
    curated: str
    size: int
    type: str
    mutations: List[CuratedMutation] = field(default_factory=list)

    @property
    def total_variations(self) -> int:
        return 1 + len(self.mutations)

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "original": self.original,
            "curated": self.curated,
            "size": self.size,
            "type": self.type,
        }
        if self.mutations:
            data["mutations"] = [
                {"path": m.path, "mutation": m.mutation, "size": m.size}
                for m in self.mutations
            ]
            data["totalVariations"] = self.total_variations
        return data


class AssetCopier:
    """
    Copies referenced assets into ``<target>/<tier>/``.

    Images headed for the essentials tier are transcoded, videos get
    mutations, and everything else is copied byte for byte. Missing sources
    and write failures are logged and produce no result.
    """

    def __init__(self, config: CuratorConfig,
                 transcoder: Optional[ImageTranscoder] = None,
                 mutation_engine: Optional[VideoMutationEngine] = None):
        self.config = config
        self.transcoder = transcoder or ImageTranscoder.from_config(config)
        self.mutation_engine = mutation_engine
        self.source_root = Path(config.source_dir)
        self.target_root = Path(config.target_dir)
        self.public_root = Path(config.public_dir)

    def relative_path(self, reference: str) -> str:
        """Strip the asset prefix: ``/assets/a/images/x.png`` -> ``a/images/x.png``."""
        prefix = self.config.asset_prefix
        relative = reference[len(prefix):] if reference.startswith(prefix) else reference.lstrip("/")
        path = Path(relative)
        if not relative or relative.startswith(("/", "\\")) or path.is_absolute() or path.drive:
            raise ValueError(f"Invalid asset reference: {reference}")
        if ".." in path.parts:
            raise ValueError(f"Invalid asset reference: {reference}")
        return relative

    def resolve(self, reference: str, tier: str = ESSENTIALS) -> Tuple[Path, Path]:
        """
        Return the (source, destination) pair for ``reference``.

        Raises:
            ValueError: If the destination would land outside the tier directory
        """
        relative = self.relative_path(reference)
        tier_root = self.target_root / tier
        source = self.source_root / relative
        destination = tier_root / relative
        if not destination.resolve().is_relative_to(tier_root.resolve()):
            raise ValueError(f"Invalid asset reference: {reference}")
        return source, destination

    def display_path(self, path: Union[str, Path]) -> str:
        return to_posix_relative(path, self.public_root)

    def claimed_paths(self, reference: str, tier: str = ESSENTIALS) -> Set[Path]:
        """
        Every file ``reference`` may write: its destination and, for images
        that get transcoded, the converted file name as well.

        Raises:
            ValueError: If the reference is invalid
        """
        source, destination = self.resolve(reference, tier)
        paths = {destination}
        if tier == ESSENTIALS and classify_path(source) == "images":
            paths.add(Path(self.transcoder.output_path(source, destination)))
        return paths

    def copy_asset(self, reference: str, tier: str = ESSENTIALS) -> Optional[AssetResult]:
        """
        Curate a single asset.

        Args:
            reference: Asset reference such as ``/assets/<project>/<category>/<file>``
            tier: Destination tier

        Returns:
            AssetResult, or None when the source is missing or cannot be written
        """
        try:
            return self._curate(reference, tier)
        except (ValueError, MissingSourceError) as e:
            logger.warning(str(e))
        except WriteError as e:
            logger.error(str(e))
        return None

    def _curate(self, reference: str, tier: str) -> AssetResult:
        source, destination = self.resolve(reference, tier)
        if not source.is_file():
            raise MissingSourceError(f"Asset not found: {reference}", str(source))

        category = classify_path(source)
        mutations = []

        try:
            if category == "images" and tier == ESSENTIALS:
                written = self.transcoder.transcode(source, destination)
            elif category == "video" and tier == ESSENTIALS and self.mutation_engine is not None:
                logger.info(f"Processing video with mutations: {source.name}")
                video = self.mutation_engine.process(
                    source, destination.parent, destination.stem, key=reference
                )
                written = video.original
                mutations = video.mutations
            else:
                written = copy_verbatim(source, destination)
        except OSError as e:
            raise WriteError(f"Cannot write {destination}: {e}", str(destination))

        if mutations:
            logger.info(f"Created {len(mutations)} video mutations for {source.name}")
        return AssetResult(
            original=reference,
            curated=self.display_path(written),
            size=file_size(written),
            type=category,
            mutations=[
                CuratedMutation(mutation=m.mutation, path=self.display_path(m.path), size=m.size)
                for m in mutations
            ],
        )

    def copy_all(self, references: Iterable[str], tier: str = ESSENTIALS,
                 workers: int = 1, on_progress: Optional[ProgressCallback] = None) -> List[AssetResult]:
        """
        Curate many assets, optionally on a bounded thread pool.

        Output paths are reserved in sorted reference order before anything
        is written; a reference whose output is already claimed (``x.png``
        and ``x.webp`` both becoming ``x.webp``) is skipped. A failure in one
        asset is logged and never affects the others. Results come back in
        sorted reference order regardless of completion order.
        """
        ordered = sorted(set(references))
        total = len(ordered)
        results: Dict[str, AssetResult] = {}
        done = 0

        def record(reference: str, result: Optional[AssetResult]) -> None:
            nonlocal done
            done += 1
            if result is not None:
                results[reference] = result
            if on_progress:
                on_progress(done, total, reference)

        claimed: Dict[Path, str] = {}
        scheduled = []
        for reference in ordered:
            try:
                self._claim(reference, tier, claimed)
            except WriteError as e:
                logger.error(str(e))
                record(reference, None)
                continue
            scheduled.append(reference)

        if workers <= 1:
            for reference in scheduled:
                record(reference, self._copy_isolated(reference, tier))
        else:
            with ThreadPoolExecutor(max_workers=workers) as pool:
                futures = {pool.submit(self._copy_isolated, ref, tier): ref for ref in scheduled}
                for future in as_completed(futures):
                    record(futures[future], future.result())

        return [results[ref] for ref in ordered if ref in results]

    def _claim(self, reference: str, tier: str, claimed: Dict[Path, str]) -> None:
        try:
            source, _ = self.resolve(reference, tier)
            if not source.is_file():
                return
            paths = self.claimed_paths(reference, tier)
        except ValueError:
            # copy_asset reports it
            return

        for path in paths:
            owner = claimed.get(path)
            if owner is not None:
                raise WriteError(
                    f"Skipping {reference}: {self.display_path(path)} is already written by {owner}",
                    str(path),
                )
        for path in paths:
            claimed[path] = reference

    def _copy_isolated(self, reference: str, tier: str) -> Optional[AssetResult]:
        try:
            return self.copy_asset(reference, tier)
        except Exception as e:
            logger.error(f"Unexpected error curating {reference}: {e}")
            return None
