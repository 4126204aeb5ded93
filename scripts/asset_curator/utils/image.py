"""
Image processing utilities for the asset curator.
"""

from pathlib import Path
from typing import Tuple, Union
from PIL import Image


class ImageUtils:
    """Utility class for common image processing operations."""

    @staticmethod
    def load_image(path: Union[str, Path]) -> Image.Image:
        """
        Open an image and force its pixel data to load.

        Args:
            path: Image file path

        Returns:
            PIL Image object

        Raises:
            ValueError: If the file cannot be decoded as an image
        """
        try:
            image = Image.open(path)
            image.load()
            return image
        except Exception as e:
            raise ValueError(f"Cannot load image from path '{path}': {e}")

    @staticmethod
    def is_animated(image: Image.Image) -> bool:
        """True for multi-frame images (animated GIF, WebP, APNG)."""
        return bool(getattr(image, "is_animated", False)) and getattr(image, "n_frames", 1) > 1

    @staticmethod
    def fit_width(size: Tuple[int, int], max_width: int) -> Tuple[int, int]:
        """
        Compute the size that fits ``max_width`` while keeping the aspect ratio.

        Never upscales: sizes already within the bound are returned unchanged.
        """
        width, height = size
        if width <= max_width:
            return size
        scale = max_width / width
        return max_width, max(1, round(height * scale))

    @staticmethod
    def resize_with_quality(image: Image.Image, target_size: Tuple[int, int],
                            method: str = 'lanczos') -> Image.Image:
        """
        Resize image with quality preservation.

        Args:
            image: Source image
            target_size: Target (width, height)
            method: Resampling method ('lanczos', 'bicubic', 'bilinear')

        Returns:
            Resized image, or the source image when the size already matches
        """
        if image.size == tuple(target_size):
            return image

        if method == 'bicubic':
            resample = Image.Resampling.BICUBIC
        elif method == 'bilinear':
            resample = Image.Resampling.BILINEAR
        else:
            resample = Image.Resampling.LANCZOS

        return image.resize(target_size, resample)

    @staticmethod
    def prepare_for_format(image: Image.Image, format: str) -> Image.Image:
        """Convert the image mode to one the target encoder accepts."""
        format = format.upper()
        if format == 'JPEG':
            if image.mode in ('RGBA', 'LA') or (image.mode == 'P' and 'transparency' in image.info):
                rgba = image.convert('RGBA')
                background = Image.new('RGB', rgba.size, (255, 255, 255))
                background.paste(rgba, mask=rgba.getchannel('A'))
                return background
            if image.mode != 'RGB':
                return image.convert('RGB')
            return image
        if format == 'WEBP' and image.mode not in ('RGB', 'RGBA'):
            has_alpha = image.mode in ('LA', 'PA') or 'transparency' in image.info
            return image.convert('RGBA' if has_alpha else 'RGB')
        return image

    @staticmethod
    def save_image(image: Image.Image, path: Union[str, Path], format: str = 'WEBP', **kwargs) -> None:
        """
        Save image with lossy compression settings.

        Args:
            image: Image to save
            path: Output file path
            format: Image format (WEBP or JPEG)
            **kwargs: Additional save parameters
        """
        save_kwargs = {}

        if format.upper() == 'WEBP':
            save_kwargs.update({
                'quality': kwargs.pop('quality', 85),
                'method': kwargs.pop('method', 4),
            })
        elif format.upper() in ['JPEG', 'JPG']:
            format = 'JPEG'
            save_kwargs.update({
                'quality': kwargs.pop('quality', 85),
                'optimize': True,
                'progressive': kwargs.pop('progressive', True),
            })

        save_kwargs.update(kwargs)

        image.save(path, format=format, **save_kwargs)
