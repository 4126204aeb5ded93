"""
Exception hierarchy for the asset curator.

None of these are fatal to a curation run on their own: each is raised inside
a component and caught at the per-asset, per-file or per-mutation boundary.
"""

from typing import Optional


class CurationError(Exception):
    """Base exception for curation errors."""

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message)
        self.path = path


class MissingSourceError(CurationError):
    """Referenced asset does not exist on disk."""
    pass


class TranscodeError(CurationError):
    """Image could not be decoded, resized or re-encoded."""
    pass


class MutationError(CurationError):
    """A video filter chain could not be applied."""

    def __init__(self, message: str, path: Optional[str] = None, mutation: Optional[str] = None):
        super().__init__(message, path)
        self.mutation = mutation


class ScanError(CurationError):
    """A source file or directory could not be read."""
    pass


class WriteError(CurationError):
    """Destination directory or file could not be written."""
    pass
