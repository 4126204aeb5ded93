"""
Inventory of hand-picked assets dropped into the manual-picks directory.

Manual picks bypass discovery and transcoding entirely: every file found is
listed with high priority and shipped as-is.
"""

import os
import logging
from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath
from typing import Any, Callable, Dict, List, Union

from ..classifier import classify_path
from ..errors import ScanError
from ..utils.files import write_json
from ..utils.timestamps import utc_timestamp

logger = logging.getLogger(__name__)

MANIFEST_NAME = "manifest.json"
README_NAME = "README.md"
HIDDEN_MARKER = "."
HIGH_PRIORITY = "high"

ExclusionPredicate = Callable[[PurePosixPath], bool]


def default_exclusion(relative: PurePosixPath) -> bool:
    """
    Skip hidden entries, README files and the inventory written by a previous run.

    Args:
        relative: Entry path relative to the scanned root
    """
    name = relative.name
    if name.startswith(HIDDEN_MARKER) or name == README_NAME:
        return True
    return relative == PurePosixPath(MANIFEST_NAME)


@dataclass
class ManualPickEntry:
    name: str
    path: str
    type: str
    size: int
    priority: str = HIGH_PRIORITY

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "path": self.path,
            "type": self.type,
            "size": self.size,
            "priority": self.priority,
        }


@dataclass
class ManualPicksInventory:
    timestamp: str
    assets: List[ManualPickEntry] = field(default_factory=list)

    @property
    def total_size(self) -> int:
        return sum(entry.size for entry in self.assets)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "timestamp": self.timestamp,
            "assets": [entry.to_dict() for entry in self.assets],
        }


class ManualPicksScanner:
    """Recursively lists every file under the manual-picks root."""

    def __init__(self, root: Union[str, Path],
                 exclude: ExclusionPredicate = default_exclusion,
                 clock: Callable[[], str] = utc_timestamp):
        self.root = Path(root)
        self.exclude = exclude
        self.clock = clock

    def scan(self) -> ManualPicksInventory:
        """Walk the root and build the inventory; unreadable directories are skipped."""
        inventory = ManualPicksInventory(timestamp=self.clock())
        if not self.root.is_dir():
            logger.warning(f"Manual picks directory not found: {self.root}")
            return inventory

        self._scan_dir(self.root, PurePosixPath(), inventory.assets)
        logger.info(f"Found {len(inventory.assets)} manual picks")
        return inventory

    def _scan_dir(self, directory: Path, relative: PurePosixPath,
                  entries: List[ManualPickEntry]) -> None:
        try:
            children = self._list(directory)
        except ScanError as e:
            logger.error(str(e))
            return

        for child in children:
            child_relative = relative / child.name
            if self.exclude(child_relative):
                continue
            if child.is_dir(follow_symlinks=False):
                self._scan_dir(Path(child.path), child_relative, entries)
            elif child.is_file():
                entries.append(self._entry(child, child_relative))

    def _list(self, directory: Path) -> List[os.DirEntry]:
        try:
            with os.scandir(directory) as it:
                return sorted(it, key=lambda entry: entry.name)
        except OSError as e:
            raise ScanError(f"Error scanning {directory}: {e}", str(directory))

    def _entry(self, child: os.DirEntry, relative: PurePosixPath) -> ManualPickEntry:
        try:
            size = child.stat().st_size
        except OSError as e:
            logger.warning(f"Cannot stat {child.path}: {e}")
            size = 0
        return ManualPickEntry(
            name=child.name,
            path=relative.as_posix(),
            type=classify_path(child.name),
            size=size,
        )

    def write_manifest(self, inventory: ManualPicksInventory) -> Path:
        """Persist the inventory as ``manifest.json`` inside the scanned root."""
        return write_json(self.root / MANIFEST_NAME, inventory.to_dict())
