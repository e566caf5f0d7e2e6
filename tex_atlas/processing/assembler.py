"""
Cross-validation of a descriptor against a decoded pixel buffer.
"""

import logging
from typing import List, Optional

from ..config import AtlasConfig
from ..model.base import (
    AtlasDescriptor,
    AtlasWarning,
    DimensionMismatch,
    DuplicateFrameName,
    FrameOutOfBounds,
    Origin,
    name_key,
)
from ..utils.image import PixelBuffer
from .atlas import Atlas


logger = logging.getLogger(__name__)


def is_power_of_two(n: int) -> bool:
    """Check if number is a power of two."""
    return n > 0 and (n & (n - 1)) == 0


class AtlasAssembler:
    """Validates descriptor and pixels together and builds an Atlas."""

    def __init__(self, config: Optional[AtlasConfig] = None):
        """Initialize assembler with configuration."""
        self.config = config or AtlasConfig()

    def assemble(self, descriptor: AtlasDescriptor, pixels: PixelBuffer,
                 origin: Optional[Origin] = None) -> Atlas:
        """
        Build an immutable Atlas, failing on the first violation.

        Args:
            descriptor: Decoded metadata
            pixels: Decoded image, rows already ordered from ``origin``
            origin: Buffer origin; defaults to the configured origin

        Returns:
            Assembled Atlas owning a snapshot of the descriptor

        Raises:
            DimensionMismatch: If declared and actual image sizes differ
            FrameOutOfBounds: If a frame extends beyond the image
            DuplicateFrameName: If two frame names collide
        """
        if origin is None:
            origin = self.config.origin

        self.validate_dimensions(descriptor, pixels)
        self.validate_frame_bounds(descriptor)
        self.validate_unique_names(descriptor)

        warnings = self.collect_warnings(descriptor)
        for warning in warnings:
            logger.warning(
                f"Atlas {descriptor.width}x{descriptor.height}: {warning.value.replace('_', ' ')}"
            )

        return Atlas(descriptor, pixels, origin=origin, warnings=tuple(warnings))

    def validate_dimensions(self, descriptor: AtlasDescriptor, pixels: PixelBuffer) -> None:
        if descriptor.size != pixels.size:
            raise DimensionMismatch(declared=descriptor.size, actual=pixels.size)

    def validate_frame_bounds(self, descriptor: AtlasDescriptor) -> None:
        for name, frame in descriptor.frames.items():
            if not frame.fits_within(descriptor.width, descriptor.height):
                raise FrameOutOfBounds(name, frame.rect, descriptor.size)

    def validate_unique_names(self, descriptor: AtlasDescriptor) -> None:
        seen = {}
        for name, frame in descriptor.frames.items():
            if name != frame.name:
                raise DuplicateFrameName(frame.name, name)
            key = name_key(name, self.config.case_sensitive_names)
            if key in seen:
                raise DuplicateFrameName(name, seen[key])
            seen[key] = name

    def collect_warnings(self, descriptor: AtlasDescriptor) -> List[AtlasWarning]:
        warnings = []
        if self.config.warn_non_power_of_two and not (
                is_power_of_two(descriptor.width) and is_power_of_two(descriptor.height)):
            warnings.append(AtlasWarning.DIMENSIONS_NOT_POWER_OF_TWO)
        return warnings


def assemble(descriptor: AtlasDescriptor, pixels: PixelBuffer,
             origin: Origin = Origin.TOP_LEFT) -> Atlas:
    """Assemble with the default configuration."""
    return AtlasAssembler().assemble(descriptor, pixels, origin=origin)
