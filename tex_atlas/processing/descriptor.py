"""
JSON codec for the atlas metadata entry.

Schema::

    {
      "width": 16,
      "height": 16,
      "frames": {
        "red": {"x": 0, "y": 8, "width": 8, "height": 8}
      }
    }
"""

import json
import logging
from typing import Any, Dict, Optional

from ..config import AtlasConfig
from ..model.base import (
    AtlasDescriptor,
    FrameRecord,
    MalformedDescriptor,
    is_strict_int,
)


logger = logging.getLogger(__name__)

FRAME_FIELDS = ("x", "y", "width", "height")


class _JsonObject(list):
    """Key/value pairs of a JSON object in document order, duplicates kept."""


def _parse_json(text: str) -> Any:
    try:
        return json.loads(text, object_pairs_hook=_JsonObject)
    except ValueError as e:
        raise MalformedDescriptor(f"Descriptor is not valid JSON: {e}") from e


def _unique_fields(pairs: _JsonObject, where: str) -> Dict[str, Any]:
    """Collapse an object's pairs into a dict, rejecting repeated keys."""
    fields = {}
    for key, value in pairs:
        if key in fields:
            raise MalformedDescriptor(f"Repeated key '{key}' in {where}")
        fields[key] = value
    return fields


def _require_int(fields: Dict[str, Any], key: str, where: str, minimum: int) -> int:
    if key not in fields:
        raise MalformedDescriptor(f"Missing required field '{key}' in {where}")

    value = fields[key]
    if not is_strict_int(value):
        raise MalformedDescriptor(
            f"Field '{key}' in {where} must be an integer, got {type(value).__name__}"
        )
    if value < minimum:
        qualifier = "positive" if minimum > 0 else "non-negative"
        raise MalformedDescriptor(f"Field '{key}' in {where} must be {qualifier}, got {value}")
    return value


def _decode_frame(name: str, value: Any) -> FrameRecord:
    where = f"frame '{name}'"
    if not isinstance(value, _JsonObject):
        raise MalformedDescriptor(f"Entry for {where} must be an object")

    fields = _unique_fields(value, where)
    x = _require_int(fields, "x", where, 0)
    y = _require_int(fields, "y", where, 0)
    width = _require_int(fields, "width", where, 1)
    height = _require_int(fields, "height", where, 1)

    ignored = set(fields) - set(FRAME_FIELDS)
    if ignored:
        logger.debug(f"Ignoring unknown fields in {where}: {sorted(ignored)}")

    return FrameRecord(name, x, y, width, height)


def decode_descriptor(data: bytes, case_sensitive: bool = True) -> AtlasDescriptor:
    """
    Parse metadata entry bytes into an AtlasDescriptor.

    Args:
        data: UTF-8 encoded JSON document
        case_sensitive: When False, names equal under casefold collide

    Returns:
        Descriptor with frames in document order

    Raises:
        MalformedDescriptor: If the document does not follow the schema
        DuplicateFrameName: If two frame entries share a name
    """
    try:
        text = bytes(data).decode("utf-8")
    except UnicodeDecodeError as e:
        raise MalformedDescriptor(f"Descriptor is not valid UTF-8: {e}") from e

    root = _parse_json(text)
    if not isinstance(root, _JsonObject):
        raise MalformedDescriptor("Descriptor top level must be an object")

    top = _unique_fields(root, "descriptor")
    width = _require_int(top, "width", "descriptor", 1)
    height = _require_int(top, "height", "descriptor", 1)

    if "frames" not in top:
        raise MalformedDescriptor("Missing required field 'frames' in descriptor")
    frames = top["frames"]
    if not isinstance(frames, _JsonObject):
        raise MalformedDescriptor("Field 'frames' in descriptor must be an object")

    descriptor = AtlasDescriptor(width, height)
    for name, value in frames:
        if not name:
            raise MalformedDescriptor("Frame name must not be empty")
        descriptor.add_frame(_decode_frame(name, value), case_sensitive=case_sensitive)

    logger.debug(f"Decoded descriptor {width}x{height} with {len(descriptor.frames)} frames")
    return descriptor


def descriptor_to_dict(descriptor: AtlasDescriptor) -> Dict[str, Any]:
    """Plain-dict form of a descriptor, frames in insertion order."""
    return {
        "width": descriptor.width,
        "height": descriptor.height,
        "frames": {
            name: {
                "x": frame.x,
                "y": frame.y,
                "width": frame.width,
                "height": frame.height,
            }
            for name, frame in descriptor.frames.items()
        },
    }


def encode_descriptor(descriptor: AtlasDescriptor, indent: Optional[int] = 2) -> bytes:
    """Serialize a descriptor as deterministic UTF-8 JSON."""
    text = json.dumps(descriptor_to_dict(descriptor), indent=indent, ensure_ascii=False)
    return (text + "\n").encode("utf-8")


class DescriptorCodec:
    """Descriptor codec bound to a configuration."""

    def __init__(self, config: Optional[AtlasConfig] = None):
        self.config = config or AtlasConfig()

    def decode(self, data: bytes) -> AtlasDescriptor:
        return decode_descriptor(data, case_sensitive=self.config.case_sensitive_names)

    def encode(self, descriptor: AtlasDescriptor) -> bytes:
        return encode_descriptor(descriptor, indent=self.config.indent)
