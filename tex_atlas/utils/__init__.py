"""
Utility modules for pixel buffers and byte sources.
"""

from .image import RGBA, PixelBuffer, decode_image, encode_image
from .sources import read_source, write_sink, open_source, open_sink, atlas_path

__all__ = [
    "RGBA",
    "PixelBuffer",
    "decode_image",
    "encode_image",
    "read_source",
    "write_sink",
    "open_source",
    "open_sink",
    "atlas_path",
]
