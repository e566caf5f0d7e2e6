"""
Tests for pixel buffers and the PNG image codec.
"""

import io
import struct
import unittest
import zlib

import numpy as np
from PIL import Image

from ..model.base import ImageDecodeFailure
from ..utils.image import RGBA, PixelBuffer, decode_image, encode_image
from .samples import BLACK, BLUE, GREEN, RED, png_bytes, sample_image


def png_chunk(chunk_type: bytes, payload: bytes) -> bytes:
    crc = zlib.crc32(chunk_type + payload) & 0xFFFFFFFF
    return struct.pack(">I", len(payload)) + chunk_type + payload + struct.pack(">I", crc)


def png_header(width: int, height: int) -> bytes:
    """PNG signature, IHDR and IEND with no pixel data."""
    ihdr = struct.pack(">IIBBBBB", width, height, 8, 6, 0, 0, 0)
    return b"\x89PNG\r\n\x1a\n" + png_chunk(b"IHDR", ihdr) + png_chunk(b"IEND", b"")


class TestRGBA(unittest.TestCase):
    """Test the RGBA pixel helper."""

    def test_u32_to_rgba_conversion(self):
        """Test unpacking a 0xRRGGBBAA integer."""
        self.assertEqual(RGBA.from_u32(0x12345678), RGBA(0x12, 0x34, 0x56, 0x78))

    def test_rgba_to_u32(self):
        """Test packing a pixel into a 0xRRGGBBAA integer."""
        self.assertEqual(RGBA(0xFF, 0x00, 0x00, 0xFF).to_u32(), 0xFF0000FF)


class TestPixelBuffer(unittest.TestCase):
    """Test PixelBuffer construction and views."""

    def setUp(self):
        self.pixels = PixelBuffer.from_image(sample_image())

    def test_length_matches_dimensions(self):
        """Test that the byte length is width times height times four."""
        self.assertEqual(self.pixels.size, (16, 16))
        self.assertEqual(len(self.pixels), 16 * 16 * 4)

    def test_wrong_length_rejected(self):
        """Test that data of the wrong length is rejected."""
        with self.assertRaises(ValueError):
            PixelBuffer(2, 2, b"\x00" * 15)

    def test_pixel_lookup(self):
        """Test reading single pixels from each quadrant."""
        self.assertEqual(self.pixels.pixel(0, 0), BLUE)
        self.assertEqual(self.pixels.pixel(15, 0), BLACK)
        self.assertEqual(self.pixels.pixel(0, 15), RED)
        self.assertEqual(self.pixels.pixel(15, 15), GREEN)

        with self.assertRaises(IndexError):
            self.pixels.pixel(16, 0)

    def test_as_array_is_read_only_view(self):
        """Test that the numpy view has the right shape and is read-only."""
        array = self.pixels.as_array()

        self.assertEqual(array.shape, (16, 16, 4))
        self.assertFalse(array.flags.writeable)

    def test_crop_copies_region(self):
        """Test cropping one quadrant."""
        region = self.pixels.crop(8, 8, 8, 8)

        self.assertEqual(region.size, (8, 8))
        self.assertEqual(region, PixelBuffer.filled(8, 8, GREEN))

    def test_crop_outside_rejected(self):
        """Test that a crop beyond the buffer is rejected."""
        with self.assertRaises(ValueError):
            self.pixels.crop(10, 10, 8, 8)

    def test_flipped(self):
        """Test that flipping reverses row order."""
        flipped = self.pixels.flipped()

        self.assertEqual(flipped.pixel(0, 0), RED)
        self.assertEqual(flipped.flipped(), self.pixels)

    def test_converts_non_rgba_images(self):
        """Test conversion of RGB images to RGBA."""
        image = Image.new('RGB', (3, 2), (10, 20, 30))

        pixels = PixelBuffer.from_image(image)

        self.assertEqual(pixels.pixel(2, 1), RGBA(10, 20, 30, 255))

    def test_from_array_shape_checked(self):
        """Test that arrays without four channels are rejected."""
        with self.assertRaises(ValueError):
            PixelBuffer.from_array(np.zeros((4, 4, 3), dtype=np.uint8))


class TestImageCodec(unittest.TestCase):
    """Test PNG decode and encode."""

    def test_decode_png(self):
        """Test decoding the sample PNG."""
        pixels = decode_image(png_bytes(sample_image()))

        self.assertEqual(pixels.size, (16, 16))
        self.assertEqual(pixels.pixel(0, 0), BLUE)

    def test_decode_garbage(self):
        """Test that unidentifiable bytes are rejected with a cause."""
        with self.assertRaises(ImageDecodeFailure) as ctx:
            decode_image(b"definitely not an image")

        self.assertIsNotNone(ctx.exception.__cause__)

    def test_decode_truncated_png(self):
        """Test that a truncated PNG is rejected."""
        data = png_bytes(sample_image())

        with self.assertRaises(ImageDecodeFailure):
            decode_image(data[:len(data) // 2])

    def test_decode_rejects_non_png(self):
        """Test that other image formats are rejected."""
        output = io.BytesIO()
        sample_image().convert('RGB').save(output, format="BMP")

        with self.assertRaises(ImageDecodeFailure):
            decode_image(output.getvalue())

    def test_decode_oversized_header(self):
        """Test that a PNG declaring a huge canvas is rejected."""
        data = png_header(20000, 20000)

        with self.assertRaises(ImageDecodeFailure) as ctx:
            decode_image(data)

        self.assertIsInstance(ctx.exception.__cause__, Image.DecompressionBombError)

    def test_encode_decode_preserves_pixels(self):
        """Test that encoding then decoding keeps every pixel."""
        pixels = PixelBuffer.from_image(sample_image())

        self.assertEqual(decode_image(encode_image(pixels)), pixels)


if __name__ == '__main__':
    unittest.main()
