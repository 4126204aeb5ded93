"""
Video mutation engine that derives filtered variants of curated videos.

The original video is always copied untouched. One or two randomly chosen
filter chains are then rendered next to it through a ``VideoFilterRunner``.
"""

import random
import logging
import subprocess
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Sequence, Union

from ..errors import MutationError
from ..utils.files import copy_verbatim, ensure_directory, file_size

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VideoMutation:
    """A named ffmpeg filter chain."""
    name: str
    filter: str
    suffix: str


VIDEO_MUTATIONS = (
    VideoMutation("invert", "negate", "_inverted"),
    VideoMutation("stretch_wide", "scale=1920:540:force_original_aspect_ratio=ignore", "_stretched"),
    VideoMutation("speed_chaos", "setpts=0.5*PTS", "_2x"),
    VideoMutation("mirror_chaos", "crop=iw/2:ih:0:0,split[left][tmp];[tmp]hflip[right];[left][right]hstack", "_mirror"),
    VideoMutation("color_chaos", "hue=h=180:s=1.5", "_colorshift"),
    VideoMutation("glitch_chaos", "noise=alls=20:allf=t+u", "_glitch"),
)

MAX_MUTATIONS_PER_VIDEO = 2


@dataclass
class MutationResult:
    """A derivative video that was rendered successfully."""
    mutation: str
    path: Path
    size: int


@dataclass
class VideoResult:
    """Outcome of processing one video."""
    original: Path
    size: int
    mutations: List[MutationResult] = field(default_factory=list)

    @property
    def total_files(self) -> int:
        return 1 + len(self.mutations)


class VideoFilterRunner(ABC):
    """Applies a filter expression to a video file."""

    @abstractmethod
    def apply(self, filter_expr: str, source: Path, destination: Path) -> int:
        """
        Render ``source`` through ``filter_expr`` into ``destination``.

        Returns:
            Size of the written file in bytes

        Raises:
            MutationError: If the filter could not be applied
        """
        pass


class FFmpegFilterRunner(VideoFilterRunner):
    """Runs filter chains through the ffmpeg executable."""

    def __init__(self, binary: str = "ffmpeg", timeout: Optional[float] = 300.0):
        self.binary = binary
        self.timeout = timeout

    def build_command(self, filter_expr: str, source: Path, destination: Path) -> List[str]:
        return [
            self.binary,
            "-hide_banner", "-loglevel", "error",
            "-i", str(source),
            "-vf", filter_expr,
            "-c:a", "copy",
            "-y", str(destination),
        ]

    def apply(self, filter_expr: str, source: Path, destination: Path) -> int:
        cmd = self.build_command(filter_expr, source, destination)
        logger.debug(f"Running: {' '.join(cmd)}")
        try:
            # run() kills the child process when the timeout expires
            proc = subprocess.run(
                cmd,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                timeout=self.timeout,
            )
        except FileNotFoundError:
            raise MutationError(f"{self.binary} not found", str(source))
        except subprocess.TimeoutExpired:
            raise MutationError(f"{self.binary} timed out after {self.timeout}s", str(source))
        except OSError as e:
            raise MutationError(f"Cannot run {self.binary}: {e}", str(source))

        if proc.returncode != 0:
            stderr = (proc.stderr or "").strip().splitlines()
            detail = stderr[-1] if stderr else f"exit status {proc.returncode}"
            raise MutationError(f"{self.binary} failed: {detail}", str(source))

        if not destination.exists():
            raise MutationError(f"{self.binary} produced no output", str(source))

        return file_size(destination)


class VideoMutationEngine:
    """
    Copies videos and renders randomly selected mutations beside them.

    With a ``seed`` every video draws from its own generator seeded with
    ``"<seed>:<key>"``, so the selection for a video does not depend on how
    many videos were processed before it or on which thread runs it.
    """

    def __init__(self, runner: VideoFilterRunner,
                 catalog: Sequence[VideoMutation] = VIDEO_MUTATIONS,
                 rng: Optional[random.Random] = None,
                 enabled: bool = True,
                 seed: Optional[int] = None):
        if not catalog:
            raise ValueError("Mutation catalog cannot be empty")
        self.runner = runner
        self.catalog = tuple(catalog)
        self.rng = rng or random.Random()
        self.enabled = enabled
        self.seed = seed

    def rng_for(self, key: Optional[str] = None) -> random.Random:
        if self.seed is None or key is None:
            return self.rng
        return random.Random(f"{self.seed}:{key}")

    def select_mutations(self, rng: Optional[random.Random] = None) -> List[VideoMutation]:
        """Pick one or two distinct mutations uniformly at random."""
        rng = rng or self.rng
        count = rng.randint(1, min(MAX_MUTATIONS_PER_VIDEO, len(self.catalog)))
        return rng.sample(self.catalog, count)

    def process(self, source: Union[str, Path], dest_dir: Union[str, Path],
                base_name: str, key: Optional[str] = None) -> VideoResult:
        """
        Copy ``source`` to ``<dest_dir>/<base_name><ext>`` and render mutations.

        Args:
            source: Source video
            dest_dir: Directory receiving the copy and its derivatives
            base_name: File name stem for all outputs
            key: Stable identifier of the video, used to derive its generator when seeded

        Returns:
            VideoResult with the verbatim copy and the mutations that succeeded

        Raises:
            OSError: If the verbatim copy cannot be written
        """
        source = Path(source)
        dest_dir = ensure_directory(dest_dir)
        ext = source.suffix

        original = copy_verbatim(source, dest_dir / f"{base_name}{ext}")
        result = VideoResult(original=original, size=file_size(original))

        if not self.enabled:
            return result

        for mutation in self.select_mutations(self.rng_for(key)):
            output = dest_dir / f"{base_name}{mutation.suffix}{ext}"
            mutated = self._apply(mutation, source, output)
            if mutated is not None:
                result.mutations.append(mutated)

        return result

    def _apply(self, mutation: VideoMutation, source: Path, output: Path) -> Optional[MutationResult]:
        logger.info(f"Mutating video {source.name}: {mutation.name}")
        try:
            size = self.runner.apply(mutation.filter, source, output)
        except Exception as e:
            logger.warning(f"Video mutation {mutation.name} failed for {source.name}: {e}")
            if output.exists():
                output.unlink()
            return None
        return MutationResult(mutation=mutation.name, path=output, size=size)

