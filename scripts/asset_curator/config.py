"""
Configuration management system for the asset curator.
Supports TOML and JSON configuration files with validation.
"""

import os
import sys
import json
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Any, Union
from pathlib import Path

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

from .core_assets import CORE_ASSETS

ENV_PREFIX = "ASSET_CURATOR_"

SUPPORTED_IMAGE_FORMATS = ("webp", "jpeg")


@dataclass
class CuratorConfig:
    """Main configuration class for the asset curator."""

    # Paths
    public_dir: str = "public"
    source_dir: str = "public/assets"
    target_dir: str = "public/assets-curated"
    manual_picks_dir: str = "public/assets-curated/manual-picks"
    scan_dir: str = "src/mutations"

    # Reference scanning
    asset_prefix: str = "/assets/"
    scan_extensions: List[str] = field(default_factory=lambda: [".js", ".jsx"])

    # Image settings
    max_image_width: int = 1920
    webp_quality: int = 85
    jpeg_quality: int = 85
    image_format: str = "webp"
    preserve_original_quality: List[str] = field(default_factory=lambda: ["svg", "ico"])

    # Video settings
    ffmpeg_binary: str = "ffmpeg"
    ffmpeg_timeout: float = 300.0
    mutations_enabled: bool = True
    mutation_seed: Optional[int] = None

    # Budget
    target_size_mb: float = 40.0

    # Asset lists
    core_assets: List[str] = field(default_factory=lambda: list(CORE_ASSETS))
    extra_assets: List[str] = field(default_factory=list)

    # Execution
    workers: int = 1
    manifest_version: str = "1.0.0"

    @property
    def essentials_dir(self) -> str:
        return str(Path(self.target_dir) / "essentials")

    @property
    def curated_manual_picks_dir(self) -> str:
        return str(Path(self.target_dir) / "manual-picks")

    @property
    def image_quality(self) -> int:
        """Quality level of the encoder selected by ``image_format``."""
        if self.image_format.lower() == "jpeg":
            return self.jpeg_quality
        return self.webp_quality

    @property
    def image_suffix(self) -> str:
        return ".jpg" if self.image_format.lower() == "jpeg" else ".webp"

    @classmethod
    def from_file(cls, config_path: Union[str, Path]) -> "CuratorConfig":
        """Load configuration from TOML or JSON file."""
        config_path = Path(config_path)

        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        if config_path.suffix.lower() == '.toml':
            return cls._from_toml(config_path)
        elif config_path.suffix.lower() == '.json':
            return cls._from_json(config_path)
        else:
            raise ValueError(f"Unsupported configuration format: {config_path.suffix}")

    @classmethod
    def _from_toml(cls, config_path: Path) -> "CuratorConfig":
        """Load configuration from TOML file."""
        with open(config_path, 'rb') as f:
            data = tomllib.load(f)
        return cls._from_dict(data)

    @classmethod
    def _from_json(cls, config_path: Path) -> "CuratorConfig":
        """Load configuration from JSON file."""
        with open(config_path, 'r', encoding='utf-8') as f:
            data = json.load(f)
        return cls._from_dict(data)

    @classmethod
    def _from_dict(cls, data: Dict[str, Any]) -> "CuratorConfig":
        """Create configuration from dictionary."""
        config_data = {}

        if 'paths' in data:
            paths = data['paths']
            for key in ('public_dir', 'source_dir', 'target_dir', 'manual_picks_dir', 'scan_dir'):
                if key in paths:
                    config_data[key] = str(paths[key])

        if 'scan' in data:
            scan = data['scan']
            if 'asset_prefix' in scan:
                config_data['asset_prefix'] = scan['asset_prefix']
            if 'extensions' in scan:
                config_data['scan_extensions'] = list(scan['extensions'])

        if 'images' in data:
            images = data['images']
            config_data['max_image_width'] = images.get('max_width', 1920)
            config_data['webp_quality'] = images.get('webp_quality', 85)
            config_data['jpeg_quality'] = images.get('jpeg_quality', 85)
            config_data['image_format'] = images.get('format', 'webp')
            if 'preserve_original_quality' in images:
                config_data['preserve_original_quality'] = list(images['preserve_original_quality'])

        if 'video' in data:
            video = data['video']
            config_data['ffmpeg_binary'] = video.get('ffmpeg', 'ffmpeg')
            config_data['ffmpeg_timeout'] = float(video.get('timeout', 300.0))
            config_data['mutations_enabled'] = video.get('mutations', True)
            config_data['mutation_seed'] = video.get('seed')

        if 'budget' in data:
            config_data['target_size_mb'] = float(data['budget'].get('target_size_mb', 40.0))

        if 'assets' in data:
            assets = data['assets']
            if 'core' in assets:
                config_data['core_assets'] = list(assets['core'])
            config_data['extra_assets'] = list(assets.get('extra', []))

        if 'execution' in data:
            execution = data['execution']
            config_data['workers'] = int(execution.get('workers', 1))
            config_data['manifest_version'] = execution.get('manifest_version', '1.0.0')

        return cls(**config_data)

    @classmethod
    def default(cls) -> "CuratorConfig":
        """Create default configuration with environment variable overrides."""
        config = cls()
        return cls._apply_env_overrides(config)

    @classmethod
    def from_env(cls) -> "CuratorConfig":
        """Create configuration from environment variables only."""
        config = cls()
        return cls._apply_env_overrides(config)

    @classmethod
    def _apply_env_overrides(cls, config: "CuratorConfig") -> "CuratorConfig":
        """Apply environment variable overrides to configuration."""

        def env(name: str) -> Optional[str]:
            return os.getenv(ENV_PREFIX + name)

        # Paths
        if env('PUBLIC_DIR'):
            config.public_dir = env('PUBLIC_DIR')
        if env('SOURCE_DIR'):
            config.source_dir = env('SOURCE_DIR')
        if env('TARGET_DIR'):
            config.target_dir = env('TARGET_DIR')
        if env('MANUAL_PICKS_DIR'):
            config.manual_picks_dir = env('MANUAL_PICKS_DIR')
        if env('SCAN_DIR'):
            config.scan_dir = env('SCAN_DIR')

        # Scanning
        if env('ASSET_PREFIX'):
            config.asset_prefix = env('ASSET_PREFIX')
        if env('SCAN_EXTENSIONS'):
            config.scan_extensions = [e.strip() for e in env('SCAN_EXTENSIONS').split(',') if e.strip()]

        # Images
        if env('MAX_IMAGE_WIDTH'):
            config.max_image_width = int(env('MAX_IMAGE_WIDTH'))
        if env('WEBP_QUALITY'):
            config.webp_quality = int(env('WEBP_QUALITY'))
        if env('JPEG_QUALITY'):
            config.jpeg_quality = int(env('JPEG_QUALITY'))
        if env('IMAGE_FORMAT'):
            config.image_format = env('IMAGE_FORMAT').lower()
        if env('PRESERVE_ORIGINAL_QUALITY'):
            config.preserve_original_quality = [
                e.strip().lstrip('.').lower()
                for e in env('PRESERVE_ORIGINAL_QUALITY').split(',') if e.strip()
            ]

        # Video
        if env('FFMPEG'):
            config.ffmpeg_binary = env('FFMPEG')
        if env('FFMPEG_TIMEOUT'):
            config.ffmpeg_timeout = float(env('FFMPEG_TIMEOUT'))
        if env('MUTATIONS'):
            config.mutations_enabled = env('MUTATIONS').lower() == 'true'
        if env('MUTATION_SEED'):
            config.mutation_seed = int(env('MUTATION_SEED'))

        # Budget
        if env('TARGET_SIZE_MB'):
            config.target_size_mb = float(env('TARGET_SIZE_MB'))

        # Execution
        if env('WORKERS'):
            config.workers = int(env('WORKERS'))

        return config

    def validate(self) -> List[str]:
        """Validate configuration and return list of errors."""
        errors = []

        if self.max_image_width <= 0:
            errors.append("max_image_width must be positive")

        if not 1 <= self.webp_quality <= 100:
            errors.append("webp_quality must be between 1 and 100")

        if not 1 <= self.jpeg_quality <= 100:
            errors.append("jpeg_quality must be between 1 and 100")

        if self.image_format.lower() not in SUPPORTED_IMAGE_FORMATS:
            errors.append(f"image_format must be one of {', '.join(SUPPORTED_IMAGE_FORMATS)}")

        if self.target_size_mb <= 0:
            errors.append("target_size_mb must be positive")

        if self.ffmpeg_timeout <= 0:
            errors.append("ffmpeg_timeout must be positive")

        if self.workers < 1:
            errors.append("workers must be at least 1")

        if not self.asset_prefix.startswith('/') or not self.asset_prefix.endswith('/'):
            errors.append("asset_prefix must start and end with '/'")

        return errors
