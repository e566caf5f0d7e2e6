"""
Tests for the descriptor JSON codec.
"""

import json
import unittest

from ..config import AtlasConfig
from ..model.base import AtlasDescriptor, DuplicateFrameName, FrameRecord, MalformedDescriptor
from ..processing.descriptor import DescriptorCodec, decode_descriptor, encode_descriptor
from .samples import sample_descriptor, sample_descriptor_json


def frame_doc(**overrides):
    """Frame object with default fields."""
    frame = {"x": 0, "y": 0, "width": 4, "height": 4}
    frame.update(overrides)
    return frame


def document(frames=None, **overrides):
    doc = {"width": 10, "height": 10, "frames": frames if frames is not None else {}}
    doc.update(overrides)
    return json.dumps(doc).encode("utf-8")


class TestDecodeDescriptor(unittest.TestCase):
    """Test decoding of the metadata entry."""

    def test_decode_sample(self):
        """Test decoding the four-quadrant sample descriptor."""
        descriptor = decode_descriptor(sample_descriptor_json())

        self.assertEqual(descriptor, sample_descriptor())
        self.assertEqual(list(descriptor.frames), ["red", "green", "blue", "black"])

    def test_decode_hero_frame(self):
        """Test decoding a single frame with explicit dimensions."""
        descriptor = decode_descriptor(document(
            {"hero": frame_doc(width=32, height=32)}, width=64, height=64
        ))

        self.assertEqual(descriptor.frames["hero"], FrameRecord("hero", 0, 0, 32, 32))

    def test_empty_frames_allowed(self):
        """Test that an empty frames object is valid."""
        descriptor = decode_descriptor(document({}))

        self.assertEqual(descriptor.frames, {})

    def test_top_level_must_be_object(self):
        """Test that a non-object document is rejected."""
        with self.assertRaises(MalformedDescriptor):
            decode_descriptor(b"[1, 2, 3]")

    def test_invalid_json(self):
        """Test that unparseable JSON is rejected."""
        with self.assertRaises(MalformedDescriptor):
            decode_descriptor(b"{not json")

    def test_invalid_utf8(self):
        """Test that bytes which are not UTF-8 are rejected."""
        with self.assertRaises(MalformedDescriptor):
            decode_descriptor(b"\xff\xfe{}")

    def test_missing_required_fields(self):
        """Test that each required top-level field is named when missing."""
        for field_name in ("width", "height", "frames"):
            doc = {"width": 10, "height": 10, "frames": {}}
            del doc[field_name]
            with self.subTest(field=field_name):
                with self.assertRaises(MalformedDescriptor) as ctx:
                    decode_descriptor(json.dumps(doc).encode("utf-8"))
                self.assertIn(field_name, str(ctx.exception))

    def test_wrong_types(self):
        """Test rejection of fields with the wrong JSON type."""
        cases = [
            document(width="10"),
            document(height=10.0),
            document(width=True),
            document(frames=[]),
            document({"a": [0, 0, 4, 4]}),
            document({"a": frame_doc(x="0")}),
        ]
        for data in cases:
            with self.subTest(data=data):
                with self.assertRaises(MalformedDescriptor):
                    decode_descriptor(data)

    def test_non_positive_dimensions(self):
        """Test rejection of zero or negative atlas dimensions."""
        with self.assertRaises(MalformedDescriptor):
            decode_descriptor(document(width=0))
        with self.assertRaises(MalformedDescriptor):
            decode_descriptor(document(height=-5))

    def test_frame_numeric_constraints(self):
        """Test rejection of negative offsets and empty sizes."""
        cases = [frame_doc(x=-1), frame_doc(y=-1), frame_doc(width=0), frame_doc(height=0)]
        for frame in cases:
            with self.subTest(frame=frame):
                with self.assertRaises(MalformedDescriptor):
                    decode_descriptor(document({"a": frame}))

    def test_frame_missing_field(self):
        """Test that a missing frame field is named in the error."""
        frame = frame_doc()
        del frame["height"]

        with self.assertRaises(MalformedDescriptor) as ctx:
            decode_descriptor(document({"a": frame}))

        self.assertIn("height", str(ctx.exception))

    def test_empty_frame_name(self):
        """Test that an empty frame name is rejected."""
        with self.assertRaises(MalformedDescriptor):
            decode_descriptor(document({"": frame_doc()}))

    def test_literal_duplicate_frame_keys(self):
        """Test that repeated frame keys in the document are detected."""
        data = (b'{"width": 10, "height": 10, "frames": {'
                b'"a": {"x": 0, "y": 0, "width": 1, "height": 1}, '
                b'"a": {"x": 1, "y": 1, "width": 1, "height": 1}}}')

        with self.assertRaises(DuplicateFrameName) as ctx:
            decode_descriptor(data)

        self.assertEqual(ctx.exception.name, "a")

    def test_repeated_top_level_key(self):
        """Test that a repeated top-level key is rejected."""
        data = b'{"width": 10, "width": 12, "height": 10, "frames": {}}'

        with self.assertRaises(MalformedDescriptor):
            decode_descriptor(data)

    def test_case_insensitive_names(self):
        """Test case-insensitive name collision detection."""
        data = document({"Hero": frame_doc(), "hero": frame_doc()})

        self.assertEqual(len(decode_descriptor(data).frames), 2)
        with self.assertRaises(DuplicateFrameName):
            decode_descriptor(data, case_sensitive=False)

    def test_unknown_fields_ignored(self):
        """Test that unknown keys are ignored."""
        data = document({"a": frame_doc(rotated=False)}, meta={"app": "packer"})

        descriptor = decode_descriptor(data)

        self.assertEqual(descriptor.frames["a"], FrameRecord("a", 0, 0, 4, 4))

    def test_lone_surrogate_name_rejected(self):
        """Test that an escaped lone surrogate frame name is rejected."""
        data = b'{"width": 16, "height": 16, "frames": {"\\ud800": {"x": 0, "y": 0, "width": 1, "height": 1}}}'

        with self.assertRaises(MalformedDescriptor):
            decode_descriptor(data)


class TestEncodeDescriptor(unittest.TestCase):
    """Test encoding of the metadata entry."""

    def test_encode_is_deterministic_and_ordered(self):
        """Test that encoding is repeatable and keeps frame order."""
        descriptor = AtlasDescriptor(32, 32)
        for name in ("zeta", "alpha", "mid"):
            descriptor.add_frame(FrameRecord(name, 0, 0, 8, 8))

        first = encode_descriptor(descriptor)
        second = encode_descriptor(
            AtlasDescriptor.from_frames(32, 32, descriptor.frames.values())
        )

        self.assertEqual(first, second)
        self.assertEqual(list(json.loads(first)["frames"]), ["zeta", "alpha", "mid"])

    def test_round_trip(self):
        """Test that a decoded encoding equals the original descriptor."""
        descriptor = AtlasDescriptor(100, 50)
        descriptor.add_frame(FrameRecord("héros", 3, 4, 5, 6))
        descriptor.add_frame(FrameRecord("b", 0, 0, 100, 50))

        decoded = decode_descriptor(encode_descriptor(descriptor))

        self.assertEqual(decoded, descriptor)
        self.assertEqual(list(decoded.frames), list(descriptor.frames))

    def test_encoded_schema(self):
        """Test the key layout of the encoded document."""
        data = json.loads(encode_descriptor(sample_descriptor()))

        self.assertEqual(list(data), ["width", "height", "frames"])
        self.assertEqual(data["frames"]["green"], {"x": 8, "y": 8, "width": 8, "height": 8})


class TestDescriptorCodec(unittest.TestCase):
    """Test the configured codec wrapper."""

    def test_codec_uses_config(self):
        """Test that the codec applies name case and indent settings."""
        codec = DescriptorCodec(AtlasConfig(case_sensitive_names=False, indent=4))
        data = document({"A": frame_doc(), "a": frame_doc()})

        with self.assertRaises(DuplicateFrameName):
            codec.decode(data)

        encoded = codec.encode(sample_descriptor()).decode("utf-8")
        self.assertIn('\n    "width": 16', encoded)


if __name__ == '__main__':
    unittest.main()
