"""
Image transcoder that shrinks and re-encodes raster images for deployment.
"""

import logging
from pathlib import Path
from typing import Iterable, Union

from ..config import CuratorConfig
from ..errors import TranscodeError
from ..utils.files import copy_verbatim, ensure_directory
from ..utils.image import ImageUtils

logger = logging.getLogger(__name__)

# Formats that are always converted to the target lossy format.
CONVERTIBLE_EXTENSIONS = ('.png', '.jpg', '.jpeg')

# Single-frame decoding would drop every frame but the first.
ANIMATED_EXTENSIONS = ('.gif',)

TARGET_SUFFIXES = {
    'webp': ('.webp',),
    'jpeg': ('.jpg', '.jpeg'),
}


class ImageTranscoder:
    """
    Converts PNG/JPEG images to a lossy target format with a bounded width.

    Vector and icon formats listed in ``preserve_original_quality``, animated
    images and any unrecognized format are copied byte for byte.
    Files already in the target format are re-encoded as well.
    """

    def __init__(self, max_width: int = 1920, quality: int = 85, image_format: str = 'webp',
                 preserve_original_quality: Iterable[str] = ('svg', 'ico'),
                 resample_method: str = 'lanczos'):
        self.max_width = max_width
        self.quality = quality
        self.image_format = image_format.lower()
        if self.image_format not in TARGET_SUFFIXES:
            raise ValueError(f"Unsupported target image format: {image_format}")
        self.preserve_original_quality = {e.lower().lstrip('.') for e in preserve_original_quality}
        self.resample_method = resample_method

    @classmethod
    def from_config(cls, config: CuratorConfig) -> "ImageTranscoder":
        return cls(
            max_width=config.max_image_width,
            quality=config.image_quality,
            image_format=config.image_format,
            preserve_original_quality=config.preserve_original_quality,
        )

    @property
    def target_suffix(self) -> str:
        return TARGET_SUFFIXES[self.image_format][0]

    def is_exempt(self, path: Union[str, Path]) -> bool:
        return Path(path).suffix.lower().lstrip('.') in self.preserve_original_quality

    def should_transcode(self, path: Union[str, Path]) -> bool:
        """True when ``path`` goes through decode/resize/re-encode."""
        ext = Path(path).suffix.lower()
        if self.is_exempt(path) or ext in ANIMATED_EXTENSIONS:
            return False
        return ext in CONVERTIBLE_EXTENSIONS or ext in TARGET_SUFFIXES[self.image_format]

    def output_path(self, source: Union[str, Path], destination: Union[str, Path]) -> Path:
        """Where a successful transcode of ``source`` will be written."""
        destination = Path(destination)
        if self.should_transcode(source):
            return destination.with_suffix(self.target_suffix)
        return destination

    def transcode(self, source: Union[str, Path], destination: Union[str, Path]) -> Path:
        """
        Transcode or copy ``source`` into ``destination``.

        Args:
            source: Source image path
            destination: Destination path using the source file name

        Returns:
            Path of the file actually written. Its suffix differs from
            ``destination`` when the image was converted.

        Raises:
            OSError: If even the verbatim copy cannot be written
        """
        source = Path(source)
        destination = Path(destination)

        if not self.should_transcode(source):
            return copy_verbatim(source, destination)

        output = self.output_path(source, destination)
        try:
            return self._encode(source, destination, output)
        except TranscodeError as e:
            logger.warning(f"{e}; copying original instead")
            if output != destination and output.exists():
                output.unlink()
            return copy_verbatim(source, destination)

    def _encode(self, source: Path, destination: Path, output: Path) -> Path:
        ensure_directory(output.parent)
        try:
            image = ImageUtils.load_image(source)
        except ValueError as e:
            raise TranscodeError(f"Error optimizing {source}: {e}", str(source))
        try:
            if ImageUtils.is_animated(image):
                logger.debug(f"Keeping animated image as-is: {source}")
                return copy_verbatim(source, destination)

            target_size = ImageUtils.fit_width(image.size, self.max_width)
            resized = ImageUtils.resize_with_quality(image, target_size, self.resample_method)
            prepared = ImageUtils.prepare_for_format(resized, self.image_format)
            ImageUtils.save_image(prepared, output, format=self.image_format.upper(), quality=self.quality)
        except Exception as e:
            raise TranscodeError(f"Error optimizing {source}: {e}", str(source))
        finally:
            image.close()

        logger.debug(f"Transcoded {source} -> {output} ({target_size[0]}x{target_size[1]})")
        return output
