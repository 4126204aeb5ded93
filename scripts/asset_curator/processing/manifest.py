"""
Manifest aggregation for curated essentials and manual picks.
"""

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Sequence, Union

from ..utils.files import write_json
from ..utils.timestamps import utc_timestamp
from .copier import AssetResult
from .manual_picks import ManualPicksInventory

BYTES_PER_MB = 1024 * 1024


@dataclass
class CategoryStats:
    count: int = 0
    size: int = 0

    def add(self, size: int) -> None:
        self.count += 1
        self.size += size

    def to_dict(self) -> Dict[str, int]:
        return {"count": self.count, "size": self.size}


@dataclass
class ManifestStats:
    """Summary statistics over everything that was curated."""
    total_assets: int = 0
    total_size: int = 0
    target_size_mb: float = 40.0
    by_type: Dict[str, CategoryStats] = field(default_factory=dict)
    by_project: Dict[str, CategoryStats] = field(default_factory=dict)

    @property
    def total_size_mb(self) -> str:
        return f"{self.total_size / BYTES_PER_MB:.2f}"

    @property
    def within_budget(self) -> bool:
        return self.total_size / BYTES_PER_MB <= self.target_size_mb

    def to_dict(self) -> Dict[str, Any]:
        return {
            "totalAssets": self.total_assets,
            "totalSize": self.total_size,
            "totalSizeMB": self.total_size_mb,
            "targetSizeMB": self.target_size_mb,
            "withinBudget": self.within_budget,
            "byType": {name: stats.to_dict() for name, stats in self.by_type.items()},
            "byProject": {name: stats.to_dict() for name, stats in self.by_project.items()},
        }


@dataclass
class Manifest:
    version: str
    generated: str
    stats: ManifestStats
    essentials: List[AssetResult]
    manual_picks: ManualPicksInventory

    def to_dict(self) -> Dict[str, Any]:
        return {
            "version": self.version,
            "generated": self.generated,
            "stats": self.stats.to_dict(),
            "essentials": [result.to_dict() for result in self.essentials],
            "manualPicks": self.manual_picks.to_dict(),
        }


class ManifestAggregator:
    """
    Builds the final manifest from per-asset results.

    Pure aggregation: nothing is read from disk. Totals and the per-type
    breakdown cover essentials and manual picks alike; the per-project
    breakdown only covers essentials whose original path has a project
    segment right after the asset prefix.
    """

    def __init__(self, asset_prefix: str = "/assets/", target_size_mb: float = 40.0,
                 version: str = "1.0.0", clock: Callable[[], str] = utc_timestamp):
        self.target_size_mb = target_size_mb
        self.version = version
        self.clock = clock
        self._project_pattern = re.compile(re.escape(asset_prefix) + r"([^/]+)/")

    def project_of(self, original: str) -> Optional[str]:
        match = self._project_pattern.search(original)
        return match.group(1) if match else None

    def aggregate(self, essentials: Sequence[AssetResult],
                  manual_picks: ManualPicksInventory) -> Manifest:
        stats = ManifestStats(
            total_assets=len(essentials) + len(manual_picks.assets),
            target_size_mb=self.target_size_mb,
        )

        for asset in essentials:
            size = asset.size or 0
            stats.total_size += size
            stats.by_type.setdefault(asset.type, CategoryStats()).add(size)

            project = self.project_of(asset.original)
            if project:
                stats.by_project.setdefault(project, CategoryStats()).add(size)

        for pick in manual_picks.assets:
            size = pick.size or 0
            stats.total_size += size
            stats.by_type.setdefault(pick.type, CategoryStats()).add(size)

        return Manifest(
            version=self.version,
            generated=self.clock(),
            stats=stats,
            essentials=list(essentials),
            manual_picks=manual_picks,
        )


def write_manifest(manifest: Manifest, path: Union[str, Path]) -> Path:
    """Persist ``manifest`` as JSON."""
    return write_json(path, manifest.to_dict())
