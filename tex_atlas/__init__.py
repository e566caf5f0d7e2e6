"""
Texture atlas container format.

An ``.atlas`` file is a zip archive holding a JSON frame catalog and a PNG
image. This package reads, validates, queries and writes such files for
graphics and game-engine code.
"""

__version__ = "0.1.0"

from .config import AtlasConfig
from .model.base import (
    Origin,
    EntryKind,
    AtlasWarning,
    FrameRecord,
    UVBoundingBox,
    AtlasDescriptor,
    AtlasError,
    AtlasFormatError,
    AtlasQueryError,
    NotAnArchive,
    MissingEntry,
    UnexpectedEntryCount,
    MalformedDescriptor,
    DuplicateFrameName,
    ImageDecodeFailure,
    DimensionMismatch,
    FrameOutOfBounds,
    UnknownFrame,
    IndexOutOfRange,
)
from .utils.image import RGBA, PixelBuffer, decode_image, encode_image
from .processing.descriptor import DescriptorCodec, decode_descriptor, encode_descriptor
from .processing.container import AtlasContainer, read_container, write_container
from .processing.assembler import AtlasAssembler, assemble
from .processing.atlas import Atlas
from .loader import AtlasLoader, load_atlas, save_atlas, atlas_to_bytes

__all__ = [
    "AtlasConfig",
    "Origin",
    "EntryKind",
    "AtlasWarning",
    "FrameRecord",
    "UVBoundingBox",
    "AtlasDescriptor",
    "AtlasError",
    "AtlasFormatError",
    "AtlasQueryError",
    "NotAnArchive",
    "MissingEntry",
    "UnexpectedEntryCount",
    "MalformedDescriptor",
    "DuplicateFrameName",
    "ImageDecodeFailure",
    "DimensionMismatch",
    "FrameOutOfBounds",
    "UnknownFrame",
    "IndexOutOfRange",
    "RGBA",
    "PixelBuffer",
    "decode_image",
    "encode_image",
    "DescriptorCodec",
    "decode_descriptor",
    "encode_descriptor",
    "AtlasContainer",
    "read_container",
    "write_container",
    "AtlasAssembler",
    "assemble",
    "Atlas",
    "AtlasLoader",
    "load_atlas",
    "save_atlas",
    "atlas_to_bytes",
]
