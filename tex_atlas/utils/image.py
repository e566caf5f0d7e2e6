"""
Pixel buffer and image codec utilities.

Pillow decodes and encodes the PNG image entry; numpy provides row-major
views for cropping and flipping.
"""

import io
from typing import NamedTuple, Tuple

import numpy as np
from PIL import Image, UnidentifiedImageError

from ..model.base import ImageDecodeFailure


CHANNELS = 4
PIXEL_MODE = "RGBA"


class RGBA(NamedTuple):
    """A single 8-bit-per-channel pixel."""
    r: int
    g: int
    b: int
    a: int

    @classmethod
    def from_u32(cls, value: int) -> "RGBA":
        """Unpack a 0xRRGGBBAA integer."""
        return cls(
            (value & 0xFF000000) >> 24,
            (value & 0x00FF0000) >> 16,
            (value & 0x0000FF00) >> 8,
            value & 0x000000FF,
        )

    def to_u32(self) -> int:
        return (self.r << 24) | (self.g << 16) | (self.b << 8) | self.a


class PixelBuffer:
    """
    Immutable row-major RGBA pixel data.

    The raw byte length is always ``width * height * 4``.
    """

    __slots__ = ("_width", "_height", "_data")

    def __init__(self, width: int, height: int, data: bytes):
        if width <= 0 or height <= 0:
            raise ValueError(f"Pixel buffer has invalid dimensions: {width}x{height}")

        data = bytes(data)
        expected = width * height * CHANNELS
        if len(data) != expected:
            raise ValueError(
                f"Pixel buffer of {width}x{height} needs {expected} bytes, got {len(data)}"
            )

        self._width = width
        self._height = height
        self._data = data

    @classmethod
    def from_image(cls, image: Image.Image) -> "PixelBuffer":
        """Build a buffer from a Pillow image, converting to RGBA."""
        if image.mode != PIXEL_MODE:
            image = image.convert(PIXEL_MODE)
        return cls(image.width, image.height, image.tobytes())

    @classmethod
    def from_array(cls, array: np.ndarray) -> "PixelBuffer":
        """Build a buffer from a ``(height, width, 4)`` uint8 array."""
        if array.ndim != 3 or array.shape[2] != CHANNELS:
            raise ValueError(f"Expected array of shape (h, w, 4), got {array.shape}")
        height, width = array.shape[:2]
        return cls(width, height, np.ascontiguousarray(array, dtype=np.uint8).tobytes())

    @classmethod
    def filled(cls, width: int, height: int, color: RGBA) -> "PixelBuffer":
        """Buffer with every pixel set to ``color``."""
        array = np.empty((height, width, CHANNELS), dtype=np.uint8)
        array[:, :] = tuple(color)
        return cls.from_array(array)

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def size(self) -> Tuple[int, int]:
        return (self._width, self._height)

    @property
    def channels(self) -> int:
        return CHANNELS

    @property
    def mode(self) -> str:
        return PIXEL_MODE

    def __len__(self) -> int:
        return len(self._data)

    def __eq__(self, other) -> bool:
        if not isinstance(other, PixelBuffer):
            return NotImplemented
        return self.size == other.size and self._data == other._data

    def __hash__(self) -> int:
        return hash((self._width, self._height, self._data))

    def __repr__(self) -> str:
        return f"PixelBuffer({self._width}x{self._height}, {PIXEL_MODE})"

    def as_bytes(self) -> bytes:
        return self._data

    def as_array(self) -> np.ndarray:
        """Zero-copy read-only ``(height, width, 4)`` view."""
        return np.frombuffer(self._data, dtype=np.uint8).reshape(
            self._height, self._width, CHANNELS
        )

    def pixel(self, x: int, y: int) -> RGBA:
        """Pixel at column ``x`` and row ``y`` of the stored buffer."""
        if not (0 <= x < self._width and 0 <= y < self._height):
            raise IndexError(f"Pixel ({x}, {y}) outside {self._width}x{self._height} buffer")
        offset = (y * self._width + x) * CHANNELS
        return RGBA(*self._data[offset:offset + CHANNELS])

    def crop(self, x: int, y: int, width: int, height: int) -> "PixelBuffer":
        """Copy a rectangle of rows ``y..y+height`` and columns ``x..x+width``."""
        if x < 0 or y < 0 or x + width > self._width or y + height > self._height:
            raise ValueError(
                f"Crop ({x}, {y}, {width}, {height}) outside {self._width}x{self._height} buffer"
            )
        return PixelBuffer.from_array(self.as_array()[y:y + height, x:x + width])

    def flipped(self) -> "PixelBuffer":
        """Copy with the row order reversed."""
        return PixelBuffer.from_array(self.as_array()[::-1])

    def to_image(self) -> Image.Image:
        return Image.frombytes(PIXEL_MODE, self.size, self._data)


def decode_image(data: bytes) -> PixelBuffer:
    """
    Decode PNG bytes into an RGBA pixel buffer.

    Args:
        data: Encoded image bytes

    Returns:
        PixelBuffer in top-to-bottom row order

    Raises:
        ImageDecodeFailure: If the bytes are not a decodable PNG image
    """
    try:
        image = Image.open(io.BytesIO(data))
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError) as e:
        raise ImageDecodeFailure(f"Cannot identify atlas image: {e}") from e

    with image:
        if image.format != "PNG":
            raise ImageDecodeFailure(f"Atlas image must be PNG, got {image.format}")
        try:
            image.load()
            return PixelBuffer.from_image(image)
        except Exception as e:
            raise ImageDecodeFailure(f"Cannot decode atlas image: {e}") from e


def encode_image(pixels: PixelBuffer, compress_level: int = 6) -> bytes:
    """Encode a pixel buffer as PNG bytes."""
    output = io.BytesIO()
    pixels.to_image().save(output, format="PNG", compress_level=compress_level)
    return output.getvalue()
