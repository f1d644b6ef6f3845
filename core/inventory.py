"""
Inventory building for a directory of mod jars.

The listing and the metadata fetch are supplied by the caller, so the same
code serves the local filesystem and a remote host over SSH.
"""
import logging
from dataclasses import dataclass
from pathlib import PurePosixPath
from typing import Callable, Iterable, Iterator, Optional

from core.exceptions import FetchError, MetadataParseError
from core.jar_name import ARCHIVE_SUFFIX, HeuristicIdentity, parse_jar_name
from core.mods_toml import ModDescriptor, parse_mod_metadata

logger = logging.getLogger(__name__)

# full_path -> raw mods.toml bytes; raises FetchError
MetadataFetcher = Callable[[str], bytes]


@dataclass(frozen=True)
class ArchiveRecord:
    """One scanned jar and whatever identity could be extracted for it."""
    file_name: str
    full_path: str
    mods: tuple[ModDescriptor, ...] = ()
    parsed_identity: Optional[HeuristicIdentity] = None

    @property
    def has_identity(self) -> bool:
        return bool(self.mods) or self.parsed_identity is not None

    def identity_keys(self) -> Iterator[str]:
        """Matching keys: declared mod ids first, then the heuristic name."""
        for mod in self.mods:
            yield mod.mod_id
        if self.parsed_identity is not None:
            yield self.parsed_identity.name

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "file_name": self.file_name,
            "full_path": self.full_path,
            "mods": [mod.model_dump() for mod in self.mods],
            "parsed_identity": self.parsed_identity.to_dict() if self.parsed_identity else None,
        }


def is_archive_name(name: str, extension: str = ARCHIVE_SUFFIX) -> bool:
    return PurePosixPath(name).suffix == extension


def build_record(file_name: str, full_path: str, fetch_metadata: MetadataFetcher) -> ArchiveRecord:
    """
    Build the record for one archive.

    Structured metadata wins. When it cannot be fetched or parsed the
    filename heuristic is tried; a heuristic without a name leaves the
    record with no identity at all.
    """
    try:
        metadata = parse_mod_metadata(fetch_metadata(full_path))
    except (FetchError, MetadataParseError) as e:
        logger.warning(f"Error parsing {full_path}: {e}")
    else:
        return ArchiveRecord(file_name=file_name, full_path=full_path, mods=metadata.mods)

    identity = parse_jar_name(file_name)
    if not identity.name:
        logger.warning(f"Error parsing {file_name}: no usable mod name in filename")
        return ArchiveRecord(file_name=file_name, full_path=full_path)

    return ArchiveRecord(file_name=file_name, full_path=full_path, parsed_identity=identity)


def build_inventory(
    listing: Iterable[tuple[str, str]],
    fetch_metadata: MetadataFetcher,
    extension: str = ARCHIVE_SUFFIX
) -> list[ArchiveRecord]:
    """
    Build archive records for every jar in a directory listing.

    Args:
        listing: (file_name, full_path) pairs in enumeration order
        fetch_metadata: Returns the raw mods.toml of the archive at full_path
        extension: Only entries with exactly this extension are scanned

    Returns:
        One ArchiveRecord per archive, in listing order
    """
    records = []
    for file_name, full_path in listing:
        if not is_archive_name(file_name, extension):
            continue
        records.append(build_record(file_name, full_path, fetch_metadata))

    logger.info(f"Built inventory of {len(records)} archives")
    return records
