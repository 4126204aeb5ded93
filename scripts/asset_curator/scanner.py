"""
Reference scanner that discovers asset paths used by source files.
"""

import re
import logging
from pathlib import Path
from typing import Iterable, Optional, Set, Union

from .errors import ScanError

logger = logging.getLogger(__name__)

DEFAULT_SCAN_EXTENSIONS = (".js", ".jsx")


def asset_reference_pattern(prefix: str = "/assets/") -> "re.Pattern[str]":
    """Build the regex matching a quoted literal that starts with ``prefix``."""
    return re.compile(r"""['"`](""" + re.escape(prefix) + r"""[^'"`]+)['"`]""")


class ReferenceScanner:
    """Extracts asset path literals from scannable source files."""

    def __init__(self, prefix: str = "/assets/",
                 extensions: Iterable[str] = DEFAULT_SCAN_EXTENSIONS):
        self.prefix = prefix
        self.extensions = {e.lower() if e.startswith('.') else '.' + e.lower() for e in extensions}
        self._pattern = asset_reference_pattern(prefix)

    def is_scannable(self, path: Path) -> bool:
        return path.is_file() and path.suffix.lower() in self.extensions

    def extract_references(self, text: str) -> Set[str]:
        """Return every asset path literal found in ``text``."""
        return {match.group(1) for match in self._pattern.finditer(text)}

    def scan_file(self, path: Union[str, Path]) -> Set[str]:
        """
        Scan a single source file.

        Raises:
            ScanError: If the file cannot be read or decoded
        """
        path = Path(path)
        try:
            content = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise ScanError(f"Cannot read {path}: {e}", str(path))
        return self.extract_references(content)

    def scan_directory(self, directory: Union[str, Path]) -> Set[str]:
        """
        Scan every scannable file directly inside ``directory``.

        Unreadable files are logged and skipped. A missing directory yields an
        empty set.

        Returns:
            Deduplicated set of asset references
        """
        directory = Path(directory)
        references: Set[str] = set()

        if not directory.is_dir():
            logger.error(f"Scan directory not found: {directory}")
            return references

        try:
            candidates = sorted(directory.iterdir())
        except OSError as e:
            logger.error(f"Cannot list scan directory {directory}: {e}")
            return references

        for path in candidates:
            if not self.is_scannable(path):
                continue
            try:
                references |= self.scan_file(path)
            except ScanError as e:
                logger.warning(str(e))

        logger.info(f"Found {len(references)} unique asset references in {directory}")
        return references


def build_essential_set(scanned: Iterable[str], *fixed: Optional[Iterable[str]]) -> Set[str]:
    """Union of scanned references and any number of fixed asset lists."""
    essentials = set(scanned)
    for assets in fixed:
        if assets:
            essentials.update(assets)
    return essentials
