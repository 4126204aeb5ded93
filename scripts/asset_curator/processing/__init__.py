"""
Asset processing modules for transcoding, video mutation, copying, manual picks and manifest aggregation.
"""

from .transcoder import ImageTranscoder
from .video import (
    VideoMutation,
    VideoMutationEngine,
    VideoFilterRunner,
    FFmpegFilterRunner,
    MutationResult,
    VideoResult,
    VIDEO_MUTATIONS,
)
from .copier import AssetCopier, AssetResult, CuratedMutation, ESSENTIALS, MANUAL_PICKS
from .manual_picks import ManualPicksScanner, ManualPicksInventory, ManualPickEntry, default_exclusion
from .manifest import ManifestAggregator, Manifest, ManifestStats, CategoryStats, write_manifest

__all__ = [
    "ImageTranscoder",
    "VideoMutation",
    "VideoMutationEngine",
    "VideoFilterRunner",
    "FFmpegFilterRunner",
    "MutationResult",
    "VideoResult",
    "VIDEO_MUTATIONS",
    "AssetCopier",
    "AssetResult",
    "CuratedMutation",
    "ESSENTIALS",
    "MANUAL_PICKS",
    "ManualPicksScanner",
    "ManualPicksInventory",
    "ManualPickEntry",
    "default_exclusion",
    "ManifestAggregator",
    "Manifest",
    "ManifestStats",
    "CategoryStats",
    "write_manifest",
]
