"""
Descriptor model and error taxonomy.
"""

from .base import (
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

__all__ = [
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
]
