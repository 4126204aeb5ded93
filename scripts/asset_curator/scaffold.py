"""
Scaffolding for the manual-picks drop zone.
"""

import logging
from pathlib import Path
from typing import Optional, Sequence, Union

from jinja2 import Environment, FileSystemLoader

from .processing.manual_picks import README_NAME

logger = logging.getLogger(__name__)

README_TEMPLATE = "manual_picks_readme.md.j2"


class ReadmeScaffolder:
    """Renders the manual-picks README from a Jinja2 template."""

    def __init__(self, template_dir: Optional[Union[str, Path]] = None):
        if template_dir is None:
            template_dir = Path(__file__).parent / "templates"
        self.template_dir = Path(template_dir)
        self.env = Environment(
            loader=FileSystemLoader(str(self.template_dir)),
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
            autoescape=False
        )

    def render(self, folder_name: str, target_size_mb: float,
               categories: Sequence[str] = ("images", "audio", "video"),
               command: str = "curate-assets curate") -> str:
        template = self.env.get_template(README_TEMPLATE)
        return template.render(
            folder_name=folder_name,
            target_size_mb=f"{target_size_mb:g}",
            categories=list(categories),
            command=command,
        )

    def ensure_readme(self, directory: Union[str, Path], target_size_mb: float) -> Optional[Path]:
        """
        Write the README unless one already exists.

        Returns:
            Path of the created README, or None if one was already present
        """
        directory = Path(directory)
        readme = directory / README_NAME
        if readme.exists():
            return None

        directory.mkdir(parents=True, exist_ok=True)
        readme.write_text(self.render(directory.name, target_size_mb), encoding="utf-8")
        logger.info(f"Created {readme}")
        return readme
