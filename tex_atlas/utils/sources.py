"""
Byte sources and sinks for atlas files.

A source is a filesystem path, an in-memory buffer, or a readable binary
stream. A sink is a filesystem path or a writable binary stream. Files opened
here are closed on every exit path; caller-provided streams are left open.
"""

import os
from contextlib import contextmanager
from pathlib import Path
from typing import BinaryIO, Iterator, Union


ATLAS_SUFFIX = ".atlas"

ByteSource = Union[str, os.PathLike, bytes, bytearray, memoryview, BinaryIO]
ByteSink = Union[str, os.PathLike, BinaryIO]


def is_path(value) -> bool:
    return isinstance(value, (str, os.PathLike))


def read_source(source: ByteSource) -> bytes:
    """
    Read every byte from a source.

    Args:
        source: Path, bytes-like object, or readable binary stream

    Returns:
        The complete contents as bytes

    Raises:
        TypeError: If the source is none of the supported kinds
        OSError: If a path cannot be opened
    """
    if isinstance(source, (bytes, bytearray, memoryview)):
        return bytes(source)

    with open_source(source) as stream:
        return stream.read()


@contextmanager
def open_source(source: ByteSource) -> Iterator[BinaryIO]:
    """Yield a readable binary stream for a path or stream source."""
    if is_path(source):
        with open(source, 'rb') as f:
            yield f
    elif hasattr(source, 'read'):
        yield source
    else:
        raise TypeError(f"Unsupported atlas source type: {type(source).__name__}")


def atlas_path(path: Union[str, os.PathLike]) -> Path:
    """Append the ``.atlas`` suffix to paths that have none."""
    path = Path(path)
    if not path.suffix:
        path = path.with_suffix(ATLAS_SUFFIX)
    return path


@contextmanager
def open_sink(sink: ByteSink) -> Iterator[BinaryIO]:
    """Yield a writable binary stream for a path or stream sink."""
    if is_path(sink):
        with open(atlas_path(sink), 'wb') as f:
            yield f
    elif hasattr(sink, 'write'):
        yield sink
    else:
        raise TypeError(f"Unsupported atlas sink type: {type(sink).__name__}")


def write_sink(sink: ByteSink, data: bytes) -> None:
    """Write all bytes to a sink."""
    with open_sink(sink) as stream:
        stream.write(data)
