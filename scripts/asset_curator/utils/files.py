"""
Filesystem helpers shared by the curation components.
"""

import json
import shutil
from pathlib import Path
from typing import Any, Union


def ensure_directory(path: Union[str, Path]) -> Path:
    """Create ``path`` and its parents; safe when siblings are created concurrently."""
    path = Path(path)
    path.mkdir(parents=True, exist_ok=True)
    return path


def copy_verbatim(source: Union[str, Path], destination: Union[str, Path]) -> Path:
    """Copy file bytes unchanged, creating the destination directory."""
    destination = Path(destination)
    ensure_directory(destination.parent)
    shutil.copyfile(source, destination)
    return destination


def file_size(path: Union[str, Path]) -> int:
    """Size in bytes, 0 when the file does not exist."""
    try:
        return Path(path).stat().st_size
    except OSError:
        return 0


def write_json(path: Union[str, Path], data: Any) -> Path:
    """Write pretty-printed UTF-8 JSON."""
    path = Path(path)
    ensure_directory(path.parent)
    with open(path, 'w', encoding='utf-8') as f:
        json.dump(data, f, indent=2, ensure_ascii=False)
        f.write('\n')
    return path


def to_posix_relative(path: Union[str, Path], root: Union[str, Path]) -> str:
    """
    Express ``path`` as a web-style path rooted at ``root``.

    ``public/assets-curated/essentials/x.webp`` relative to ``public`` becomes
    ``/assets-curated/essentials/x.webp``. Paths outside ``root`` are returned
    as absolute POSIX paths.
    """
    path = Path(path).resolve()
    root = Path(root).resolve()
    try:
        return "/" + path.relative_to(root).as_posix()
    except ValueError:
        return path.as_posix()
