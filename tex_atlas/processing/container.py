"""
Zip container holding the metadata and image entries of an atlas file.
"""

import io
import logging
import zipfile
import zlib
from dataclasses import dataclass
from typing import List, Optional, Tuple

from ..config import AtlasConfig, DEFAULT_IMAGE_ENTRY, DEFAULT_METADATA_ENTRY
from ..model.base import EntryKind, MissingEntry, NotAnArchive, UnexpectedEntryCount


logger = logging.getLogger(__name__)

# Fixed timestamp and permissions keep written archives byte-identical.
ENTRY_DATE_TIME = (1980, 1, 1, 0, 0, 0)
ENTRY_PERMISSIONS = 0o644 << 16

COMPRESSION = {
    "stored": zipfile.ZIP_STORED,
    "deflated": zipfile.ZIP_DEFLATED,
}


@dataclass(frozen=True)
class ContainerEntries:
    """Raw bytes of the two atlas entries."""
    descriptor: bytes
    image: bytes

    def __iter__(self):
        return iter((self.descriptor, self.image))


class AtlasContainer:
    """Reads and writes the two-entry atlas archive."""

    def __init__(self, config: Optional[AtlasConfig] = None):
        self.config = config or AtlasConfig()

    def read(self, data: bytes) -> ContainerEntries:
        """
        Extract the metadata and image entries from container bytes.

        Args:
            data: Complete container bytes

        Returns:
            ContainerEntries with the raw descriptor and image bytes

        Raises:
            NotAnArchive: If the bytes are not a readable zip archive, or a member
                is encrypted or uses an unsupported compression method
            MissingEntry: If either expected entry is absent
            UnexpectedEntryCount: If extra entries exist and are not allowed
        """
        metadata_name = self.config.metadata_entry
        image_name = self.config.image_entry

        try:
            with zipfile.ZipFile(io.BytesIO(data), 'r') as archive:
                names = archive.namelist()
                logger.debug(f"Container entries: {names}")

                if metadata_name not in names:
                    raise MissingEntry(EntryKind.METADATA, metadata_name)
                if image_name not in names:
                    raise MissingEntry(EntryKind.IMAGE, image_name)

                self._check_extra_entries(names)

                descriptor_bytes = archive.read(metadata_name)
                image_bytes = archive.read(image_name)

        except (zipfile.BadZipFile, zlib.error, EOFError) as e:
            raise NotAnArchive(f"Invalid atlas container: {e}") from e
        except (NotImplementedError, RuntimeError) as e:
            raise NotAnArchive(f"Unsupported atlas container: {e}") from e

        logger.debug(
            f"Read {len(descriptor_bytes)} descriptor bytes and {len(image_bytes)} image bytes"
        )
        return ContainerEntries(descriptor_bytes, image_bytes)

    def write(self, descriptor_bytes: bytes, image_bytes: bytes) -> bytes:
        """Pack the two entries, metadata first, into container bytes."""
        output = io.BytesIO()
        compress_type = COMPRESSION[self.config.compression]

        with zipfile.ZipFile(output, 'w', compression=compress_type) as archive:
            for name, payload in ((self.config.metadata_entry, descriptor_bytes),
                                  (self.config.image_entry, image_bytes)):
                info = zipfile.ZipInfo(name, date_time=ENTRY_DATE_TIME)
                info.compress_type = compress_type
                info.external_attr = ENTRY_PERMISSIONS
                archive.writestr(info, payload)

        return output.getvalue()

    def _check_extra_entries(self, names: List[str]) -> None:
        expected = {self.config.metadata_entry, self.config.image_entry}
        extras = [name for name in names if name not in expected]
        if not extras and len(names) == len(expected):
            return

        if self.config.allow_extra_entries:
            logger.warning(f"Ignoring extra container entries: {', '.join(extras)}")
            return

        raise UnexpectedEntryCount(names, expected=len(expected))


def read_container(data: bytes,
                   metadata_entry: str = DEFAULT_METADATA_ENTRY,
                   image_entry: str = DEFAULT_IMAGE_ENTRY) -> Tuple[bytes, bytes]:
    """Return ``(descriptor_bytes, image_bytes)`` from container bytes."""
    config = AtlasConfig(metadata_entry=metadata_entry, image_entry=image_entry)
    return tuple(AtlasContainer(config).read(data))


def write_container(descriptor_bytes: bytes, image_bytes: bytes,
                    metadata_entry: str = DEFAULT_METADATA_ENTRY,
                    image_entry: str = DEFAULT_IMAGE_ENTRY) -> bytes:
    """Pack descriptor and image bytes into container bytes."""
    config = AtlasConfig(metadata_entry=metadata_entry, image_entry=image_entry)
    return AtlasContainer(config).write(descriptor_bytes, image_bytes)
