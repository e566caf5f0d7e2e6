"""
Configuration for reading and writing atlas files.
Supports TOML and JSON configuration files with validation.
"""

import json
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Union

from .model.base import Origin


DEFAULT_METADATA_ENTRY = "coordinate_charts.json"
DEFAULT_IMAGE_ENTRY = "atlas.png"

COMPRESSION_METHODS = ("stored", "deflated")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class AtlasConfig:
    """Options shared by the container, descriptor and image stages."""

    # Container settings
    metadata_entry: str = DEFAULT_METADATA_ENTRY
    image_entry: str = DEFAULT_IMAGE_ENTRY
    allow_extra_entries: bool = False
    compression: str = "stored"

    # Descriptor settings
    case_sensitive_names: bool = True
    indent: int = 2

    # Image settings
    origin: Origin = Origin.TOP_LEFT
    warn_non_power_of_two: bool = True
    compress_level: int = 6

    # Logging
    log_level: str = "INFO"
    log_to_console: bool = False

    @classmethod
    def from_file(cls, config_path: Union[str, Path]) -> "AtlasConfig":
        """Load configuration from TOML or JSON file."""
        config_path = Path(config_path)

        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        if config_path.suffix.lower() == '.toml':
            with open(config_path, 'rb') as f:
                data = tomllib.load(f)
        elif config_path.suffix.lower() == '.json':
            with open(config_path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        else:
            raise ValueError(f"Unsupported configuration format: {config_path.suffix}")

        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AtlasConfig":
        """Create configuration from a sectioned dictionary."""
        config_data = {}

        if 'container' in data:
            container = data['container']
            config_data['metadata_entry'] = container.get('metadata_entry', DEFAULT_METADATA_ENTRY)
            config_data['image_entry'] = container.get('image_entry', DEFAULT_IMAGE_ENTRY)
            config_data['allow_extra_entries'] = container.get('allow_extra_entries', False)
            config_data['compression'] = container.get('compression', 'stored')

        if 'descriptor' in data:
            descriptor = data['descriptor']
            config_data['case_sensitive_names'] = descriptor.get('case_sensitive_names', True)
            config_data['indent'] = descriptor.get('indent', 2)

        if 'image' in data:
            image = data['image']
            if 'origin' in image:
                try:
                    config_data['origin'] = Origin(image['origin'])
                except ValueError:
                    raise ValueError(f"Unknown origin: {image['origin']!r}")
            config_data['warn_non_power_of_two'] = image.get('warn_non_power_of_two', True)
            config_data['compress_level'] = image.get('compress_level', 6)

        if 'logging' in data:
            logging_section = data['logging']
            config_data['log_level'] = logging_section.get('level', 'INFO')
            config_data['log_to_console'] = logging_section.get('console', False)

        return cls(**config_data)

    @classmethod
    def default(cls) -> "AtlasConfig":
        """Create default configuration."""
        return cls()

    def validate(self) -> List[str]:
        """Validate configuration and return list of errors."""
        errors = []

        if not self.metadata_entry:
            errors.append("metadata_entry must not be empty")

        if not self.image_entry:
            errors.append("image_entry must not be empty")

        if self.metadata_entry == self.image_entry:
            errors.append("metadata_entry and image_entry must differ")

        if self.compression not in COMPRESSION_METHODS:
            errors.append(f"compression must be one of {', '.join(COMPRESSION_METHODS)}")

        if self.indent < 0:
            errors.append("indent must not be negative")

        if not 0 <= self.compress_level <= 9:
            errors.append("compress_level must be between 0 and 9")

        if self.log_level.upper() not in LOG_LEVELS:
            errors.append(f"log_level must be one of {', '.join(LOG_LEVELS)}")

        return errors
