"""
Extension based classification of assets into media categories.
"""

from pathlib import Path
from typing import Dict, Tuple, Union

OTHER = "other"

# Order matters: an extension listed under several categories resolves to the first.
ASSET_TYPES: Dict[str, Tuple[str, ...]] = {
    "images": (".png", ".jpg", ".jpeg", ".webp", ".gif", ".svg", ".ico"),
    "audio": (".mp3", ".wav", ".webm", ".ogg", ".m4a"),
    "video": (".mp4", ".webm", ".mov"),
    "models": (".glb", ".gltf"),
    "data": (".json",),
    "code": (".js", ".jsx", ".ts", ".tsx", ".css"),
    "text": (".md", ".txt"),
    "fonts": (".ttf", ".otf", ".woff", ".woff2"),
}


def normalize_extension(ext: str) -> str:
    """Lower-case an extension and make sure it starts with a dot."""
    ext = ext.strip().lower()
    if ext and not ext.startswith("."):
        ext = "." + ext
    return ext


def classify_extension(ext: str) -> str:
    """
    Map a file extension to its media category.

    Args:
        ext: Extension with or without the leading dot, any case

    Returns:
        Category name, or ``"other"`` for unknown extensions
    """
    ext = normalize_extension(ext)
    for category, extensions in ASSET_TYPES.items():
        if ext in extensions:
            return category
    return OTHER


def classify_path(path: Union[str, Path]) -> str:
    """Classify a path by its suffix."""
    return classify_extension(Path(path).suffix)
