"""
Loading and saving of atlas files.
Coordinates the container, descriptor codec, image codec and assembler.
"""

import logging
import time
from typing import Optional

from .config import AtlasConfig
from .model.base import Origin
from .processing.assembler import AtlasAssembler
from .processing.atlas import Atlas
from .processing.container import AtlasContainer
from .processing.descriptor import DescriptorCodec
from .utils.image import PixelBuffer, decode_image, encode_image
from .utils.sources import ByteSink, ByteSource, is_path, read_source, write_sink


class AtlasLoader:
    """
    Reads and writes ``.atlas`` files.

    Loading runs container extraction, descriptor decoding, image decoding
    and assembly in that order; any failure aborts the load and no partial
    atlas is returned.
    """

    def __init__(self, config: Optional[AtlasConfig] = None):
        """Initialize loader with configuration."""
        self.config = config or AtlasConfig()

        errors = self.config.validate()
        if errors:
            raise ValueError(f"Invalid atlas configuration: {'; '.join(errors)}")

        self.container = AtlasContainer(self.config)
        self.codec = DescriptorCodec(self.config)
        self.assembler = AtlasAssembler(self.config)
        self.logger = self._setup_logging()

    def _setup_logging(self) -> logging.Logger:
        """Set up logging for the loader."""
        logger = logging.getLogger("tex_atlas")

        if self.config.log_to_console:
            logger.setLevel(getattr(logging, self.config.log_level.upper()))
            if not logger.handlers:
                handler = logging.StreamHandler()
                formatter = logging.Formatter(
                    '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
                )
                handler.setFormatter(formatter)
                logger.addHandler(handler)

        return logger

    def load(self, source: ByteSource) -> Atlas:
        """
        Load an atlas from a path, bytes, or readable binary stream.

        Args:
            source: Where to read the container from

        Returns:
            Assembled Atlas

        Raises:
            AtlasFormatError: If the file is structurally invalid
            OSError: If a path cannot be read
        """
        start_time = time.time()
        label = str(source) if is_path(source) else type(source).__name__
        self.logger.info(f"Loading atlas from {label}")

        atlas = self.from_bytes(read_source(source))

        duration = time.time() - start_time
        self.logger.info(
            f"Loaded atlas {atlas.width}x{atlas.height} with {atlas.frame_count()} frames "
            f"in {duration:.3f}s"
        )
        return atlas

    def from_bytes(self, data: bytes) -> Atlas:
        entries = self.container.read(data)
        descriptor = self.codec.decode(entries.descriptor)
        pixels = decode_image(entries.image)

        if self.config.origin is Origin.BOTTOM_LEFT:
            pixels = pixels.flipped()

        return self.assembler.assemble(descriptor, pixels, origin=self.config.origin)

    def to_bytes(self, atlas: Atlas) -> bytes:
        """Serialize an atlas into container bytes."""
        descriptor_bytes = self.codec.encode(atlas.descriptor)
        image_bytes = encode_image(self._image_space_pixels(atlas),
                                   compress_level=self.config.compress_level)

        self.logger.debug(
            f"Encoded {len(descriptor_bytes)} descriptor bytes and {len(image_bytes)} image bytes"
        )
        return self.container.write(descriptor_bytes, image_bytes)

    def save(self, atlas: Atlas, sink: ByteSink) -> None:
        """Write an atlas to a path or writable binary stream."""
        data = self.to_bytes(atlas)
        write_sink(sink, data)
        self.logger.info(f"Saved atlas with {atlas.frame_count()} frames ({len(data)} bytes)")

    def _image_space_pixels(self, atlas: Atlas) -> PixelBuffer:
        """Pixels in top-to-bottom row order, as stored in the image entry."""
        if atlas.origin is Origin.BOTTOM_LEFT:
            return atlas.pixels.flipped()
        return atlas.pixels


def load_atlas(source: ByteSource, config: Optional[AtlasConfig] = None) -> Atlas:
    """Load an atlas from a path, bytes, or readable binary stream."""
    return AtlasLoader(config).load(source)


def save_atlas(atlas: Atlas, sink: ByteSink, config: Optional[AtlasConfig] = None) -> None:
    """Save an atlas to a path or writable binary stream."""
    AtlasLoader(config).save(atlas, sink)


def atlas_to_bytes(atlas: Atlas, config: Optional[AtlasConfig] = None) -> bytes:
    """Serialize an atlas into container bytes."""
    return AtlasLoader(config).to_bytes(atlas)
