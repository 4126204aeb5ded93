"""
Asset Curator

Shrinks a large, mixed pool of media assets (images, audio, video, models,
text, fonts) into a size-bounded deployable bundle: referenced assets are
discovered from source code, images are re-encoded, videos gain filtered
variants, hand-picked assets are inventoried, and everything is summarized in
a manifest.
"""

__version__ = "0.1.0"

from .config import CuratorConfig
from .classifier import classify_extension, classify_path
from .scanner import ReferenceScanner, build_essential_set
from .processing.transcoder import ImageTranscoder
from .processing.video import VideoMutationEngine, VideoFilterRunner, FFmpegFilterRunner
from .processing.copier import AssetCopier, AssetResult
from .processing.manual_picks import ManualPicksScanner
from .processing.manifest import ManifestAggregator, Manifest
from .pipeline import CurationPipeline, CurationReport, PipelineError

__all__ = [
    "CuratorConfig",
    "classify_extension",
    "classify_path",
    "ReferenceScanner",
    "build_essential_set",
    "ImageTranscoder",
    "VideoMutationEngine",
    "VideoFilterRunner",
    "FFmpegFilterRunner",
    "AssetCopier",
    "AssetResult",
    "ManualPicksScanner",
    "ManifestAggregator",
    "Manifest",
    "CurationPipeline",
    "CurationReport",
    "PipelineError",
]
