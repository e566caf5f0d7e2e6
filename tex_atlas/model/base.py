"""
Core data model for texture atlas descriptors.
Defines frame records, the atlas descriptor document, and the error taxonomy
shared by every stage of loading and saving.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable, List, Optional, Tuple


class Origin(Enum):
    """Which corner of the atlas image the pixel buffer starts from."""
    TOP_LEFT = "top_left"
    BOTTOM_LEFT = "bottom_left"


class EntryKind(Enum):
    """The two members of an atlas container."""
    METADATA = "metadata"
    IMAGE = "image"


class AtlasWarning(Enum):
    """Non-fatal observations made while assembling an atlas."""
    DIMENSIONS_NOT_POWER_OF_TWO = "dimensions_not_power_of_two"


def is_strict_int(value) -> bool:
    """True for ints that are not bools."""
    return isinstance(value, int) and not isinstance(value, bool)


def name_key(name: str, case_sensitive: bool = True) -> str:
    """Key used to detect frame-name collisions."""
    return name if case_sensitive else name.casefold()


@dataclass(frozen=True)
class FrameRecord:
    """One named sub-rectangle of the atlas image, in image (y-down) pixels."""
    name: str
    x: int
    y: int
    width: int
    height: int

    def __post_init__(self):
        """Validate frame fields after initialization."""
        if not isinstance(self.name, str) or not self.name:
            raise MalformedDescriptor(f"Frame name must be a non-empty string, got {self.name!r}")

        try:
            self.name.encode("utf-8")
        except UnicodeEncodeError:
            raise MalformedDescriptor(f"Frame name {self.name!r} is not valid Unicode text") from None

        for attr in ("x", "y", "width", "height"):
            value = getattr(self, attr)
            if not is_strict_int(value):
                raise MalformedDescriptor(
                    f"Frame '{self.name}' field '{attr}' must be an integer, got {type(value).__name__}"
                )

        if self.x < 0 or self.y < 0:
            raise MalformedDescriptor(
                f"Frame '{self.name}' has negative offset: ({self.x}, {self.y})"
            )

        if self.width <= 0 or self.height <= 0:
            raise MalformedDescriptor(
                f"Frame '{self.name}' has invalid size: {self.width}x{self.height}"
            )

    @property
    def offset(self) -> Tuple[int, int]:
        return (self.x, self.y)

    @property
    def size(self) -> Tuple[int, int]:
        return (self.width, self.height)

    @property
    def right(self) -> int:
        return self.x + self.width

    @property
    def bottom(self) -> int:
        return self.y + self.height

    @property
    def rect(self) -> Tuple[int, int, int, int]:
        """(x, y, width, height) tuple."""
        return (self.x, self.y, self.width, self.height)

    def fits_within(self, width: int, height: int) -> bool:
        """Check if the rectangle lies inside an image of the given size."""
        return self.right <= width and self.bottom <= height


@dataclass(frozen=True)
class UVBoundingBox:
    """Frame rectangle normalised to the unit square."""
    u: float
    v: float
    width: float
    height: float


@dataclass
class AtlasDescriptor:
    """
    The metadata document of an atlas: declared image size plus frames.

    Frames are kept in insertion order so that serialization is deterministic.
    """
    width: int
    height: int
    frames: Dict[str, FrameRecord] = field(default_factory=dict)

    def __post_init__(self):
        """Validate declared dimensions and frame keys."""
        for attr in ("width", "height"):
            value = getattr(self, attr)
            if not is_strict_int(value):
                raise MalformedDescriptor(
                    f"Atlas {attr} must be an integer, got {type(value).__name__}"
                )
            if value <= 0:
                raise MalformedDescriptor(f"Atlas {attr} must be positive, got {value}")

        frames = dict(self.frames)
        for key, frame in frames.items():
            if not isinstance(frame, FrameRecord):
                raise MalformedDescriptor(f"Frame '{key}' is not a FrameRecord")
            if frame.name != key:
                raise MalformedDescriptor(
                    f"Frame key '{key}' does not match frame name '{frame.name}'"
                )
        self.frames = frames

    @classmethod
    def from_frames(cls, width: int, height: int, frames: Iterable[FrameRecord],
                    case_sensitive: bool = True) -> "AtlasDescriptor":
        """Build a descriptor from frame records, rejecting duplicate names."""
        descriptor = cls(width, height)
        for frame in frames:
            descriptor.add_frame(frame, case_sensitive=case_sensitive)
        return descriptor

    @property
    def size(self) -> Tuple[int, int]:
        return (self.width, self.height)

    def add_frame(self, frame: FrameRecord, case_sensitive: bool = True) -> None:
        """
        Append a frame to the descriptor.

        Args:
            frame: Frame record to insert
            case_sensitive: Whether names differing only by case are distinct

        Raises:
            DuplicateFrameName: If a frame with a colliding name already exists
        """
        existing = self.find_collision(frame.name, case_sensitive)
        if existing is not None:
            raise DuplicateFrameName(frame.name, existing)
        self.frames[frame.name] = frame

    def find_collision(self, name: str, case_sensitive: bool = True) -> Optional[str]:
        """Return the existing name that collides with ``name``, if any."""
        if name in self.frames:
            return name
        if not case_sensitive:
            key = name_key(name, case_sensitive)
            for existing in self.frames:
                if name_key(existing, case_sensitive) == key:
                    return existing
        return None


class AtlasError(Exception):
    """Base exception for texture atlas errors."""

    def __init__(self, message: str, recoverable: bool = False):
        super().__init__(message)
        self.message = message
        self.recoverable = recoverable


class AtlasFormatError(AtlasError):
    """A structural problem with an atlas file or its parts."""

    def __init__(self, message: str):
        super().__init__(message, recoverable=False)


class NotAnArchive(AtlasFormatError):
    """The byte stream is not a readable archive."""


class MissingEntry(AtlasFormatError):
    """An expected archive member is absent."""

    def __init__(self, kind: EntryKind, entry_name: str):
        super().__init__(f"Atlas container is missing its {kind.value} entry '{entry_name}'")
        self.kind = kind
        self.entry_name = entry_name


class UnexpectedEntryCount(AtlasFormatError):
    """The archive holds members beyond the metadata and image entries."""

    def __init__(self, entries: List[str], expected: int = 2):
        super().__init__(
            f"Atlas container has {len(entries)} entries, expected {expected}: {', '.join(entries)}"
        )
        self.entries = list(entries)
        self.expected = expected


class MalformedDescriptor(AtlasFormatError):
    """The metadata document does not follow the descriptor schema."""


class DuplicateFrameName(AtlasFormatError):
    """Two frames share a name."""

    def __init__(self, name: str, existing: Optional[str] = None):
        if existing is None or existing == name:
            message = f"Duplicate frame name '{name}'"
        else:
            message = f"Frame name '{name}' collides with '{existing}'"
        super().__init__(message)
        self.name = name
        self.existing = existing if existing is not None else name


class ImageDecodeFailure(AtlasFormatError):
    """The image entry could not be decoded."""


class DimensionMismatch(AtlasFormatError):
    """Declared atlas size differs from the decoded image size."""

    def __init__(self, declared: Tuple[int, int], actual: Tuple[int, int]):
        super().__init__(
            f"Descriptor declares {declared[0]}x{declared[1]} but image is {actual[0]}x{actual[1]}"
        )
        self.declared = declared
        self.actual = actual


class FrameOutOfBounds(AtlasFormatError):
    """A frame rectangle extends beyond the atlas image."""

    def __init__(self, name: str, rect: Tuple[int, int, int, int], atlas_size: Tuple[int, int]):
        x, y, w, h = rect
        super().__init__(
            f"Frame '{name}' at ({x}, {y}) size {w}x{h} extends beyond atlas "
            f"{atlas_size[0]}x{atlas_size[1]}"
        )
        self.name = name
        self.rect = rect
        self.atlas_size = atlas_size


class AtlasQueryError(AtlasError):
    """A lookup against an assembled atlas failed."""

    def __init__(self, message: str):
        super().__init__(message, recoverable=True)


class UnknownFrame(AtlasQueryError, LookupError):
    """No frame with the requested name."""

    def __init__(self, name: str):
        super().__init__(f"Unknown frame '{name}'")
        self.name = name


class IndexOutOfRange(AtlasQueryError, IndexError):
    """Frame index outside ``0 <= index < count``."""

    def __init__(self, index: int, count: int):
        super().__init__(f"Frame index {index} out of range for atlas with {count} frames")
        self.index = index
        self.count = count
