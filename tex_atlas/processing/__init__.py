"""
Processing stages: descriptor codec, container, assembler and the atlas query layer.
"""

from .descriptor import DescriptorCodec, decode_descriptor, encode_descriptor
from .container import AtlasContainer, ContainerEntries, read_container, write_container
from .assembler import AtlasAssembler, assemble
from .atlas import Atlas

__all__ = [
    "DescriptorCodec",
    "decode_descriptor",
    "encode_descriptor",
    "AtlasContainer",
    "ContainerEntries",
    "read_container",
    "write_container",
    "AtlasAssembler",
    "assemble",
    "Atlas",
]
