"""
Utility modules for image handling and filesystem operations.
"""

from .image import ImageUtils
from .files import ensure_directory, copy_verbatim, file_size, write_json, to_posix_relative
from .timestamps import utc_timestamp

__all__ = [
    "ImageUtils",
    "ensure_directory",
    "copy_verbatim",
    "file_size",
    "write_json",
    "to_posix_relative",
    "utc_timestamp",
]
