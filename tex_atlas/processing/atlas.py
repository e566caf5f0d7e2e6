"""
Assembled, immutable texture atlas and its query API.
"""

import operator
from types import MappingProxyType
from typing import Iterator, KeysView, Mapping, Tuple

from ..model.base import (
    AtlasDescriptor,
    AtlasWarning,
    FrameRecord,
    IndexOutOfRange,
    Origin,
    UnknownFrame,
    UVBoundingBox,
)
from ..utils.image import PixelBuffer


class Atlas:
    """
    A validated pixel buffer together with its frame index.

    Instances are only produced by the assembler and are never mutated
    afterwards, so they can be shared between threads without locking.
    Frame records hold image-space (top-left, y-down) coordinates whatever
    the origin of the stored pixel buffer.
    """

    __slots__ = ("_width", "_height", "_pixels", "_frames", "_order", "_origin", "_warnings")

    def __init__(self, descriptor: AtlasDescriptor, pixels: PixelBuffer,
                 origin: Origin = Origin.TOP_LEFT,
                 warnings: Tuple[AtlasWarning, ...] = ()):
        self._width = descriptor.width
        self._height = descriptor.height
        self._pixels = pixels
        self._frames = MappingProxyType(dict(descriptor.frames))
        self._order = tuple(self._frames.values())
        self._origin = origin
        self._warnings = tuple(warnings)

    def __repr__(self) -> str:
        return (f"Atlas({self._width}x{self._height}, frames={len(self._order)}, "
                f"origin={self._origin.value})")

    def __len__(self) -> int:
        return len(self._order)

    def __contains__(self, name) -> bool:
        return name in self._frames

    def __iter__(self) -> Iterator[FrameRecord]:
        return iter(self._order)

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def origin(self) -> Origin:
        return self._origin

    @property
    def pixels(self) -> PixelBuffer:
        """The whole pixel buffer, rows ordered from the configured origin."""
        return self._pixels

    @property
    def warnings(self) -> Tuple[AtlasWarning, ...]:
        return self._warnings

    @property
    def descriptor(self) -> AtlasDescriptor:
        """A fresh descriptor snapshot; editing it does not affect the atlas."""
        return AtlasDescriptor(self._width, self._height, dict(self._frames))

    def has_no_warnings(self) -> bool:
        return not self._warnings

    def dimensions(self) -> Tuple[int, int]:
        return (self._width, self._height)

    def frame_count(self) -> int:
        return len(self._order)

    def frame_names(self) -> KeysView:
        """Frame names in descriptor order; iterable any number of times."""
        return self._frames.keys()

    def coordinate_charts(self) -> Mapping[str, FrameRecord]:
        """Read-only name to frame mapping in descriptor order."""
        return self._frames

    def get_frame(self, name: str) -> FrameRecord:
        """
        Look up a frame by name.

        Raises:
            UnknownFrame: If no frame has that name
        """
        try:
            return self._frames[name]
        except (KeyError, TypeError):
            raise UnknownFrame(name) from None

    def get_frame_at(self, index: int) -> FrameRecord:
        """
        Look up a frame by position in descriptor order.

        Raises:
            IndexOutOfRange: If ``index`` is negative or not below the frame count
        """
        count = len(self._order)
        if isinstance(index, bool):
            raise IndexOutOfRange(index, count)
        try:
            position = operator.index(index)
        except TypeError:
            raise IndexOutOfRange(index, count) from None
        if not 0 <= position < count:
            raise IndexOutOfRange(index, count)
        return self._order[position]

    def get_frame_uv(self, name: str) -> UVBoundingBox:
        """Frame rectangle normalised to the unit square, ``v`` measured from the origin."""
        return self._to_uv(self.get_frame(name))

    def get_frame_uv_at(self, index: int) -> UVBoundingBox:
        return self._to_uv(self.get_frame_at(index))

    def extract_pixels(self, name: str) -> PixelBuffer:
        """
        Copy the pixels of a frame out of the atlas.

        The result has the frame's size and the same row order as ``pixels``.

        Raises:
            UnknownFrame: If no frame has that name
        """
        frame = self.get_frame(name)
        return self._pixels.crop(frame.x, self._buffer_row(frame), frame.width, frame.height)

    def _buffer_row(self, frame: FrameRecord) -> int:
        """First buffer row covered by a frame."""
        if self._origin is Origin.BOTTOM_LEFT:
            return self._height - frame.bottom
        return frame.y

    def _to_uv(self, frame: FrameRecord) -> UVBoundingBox:
        return UVBoundingBox(
            u=frame.x / self._width,
            v=self._buffer_row(frame) / self._height,
            width=frame.width / self._width,
            height=frame.height / self._height,
        )
