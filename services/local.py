"""
Local mods directory scanning.

Reads mods.toml straight out of each jar with zipfile.
"""
import logging
import os
import zipfile
import zlib
from pathlib import Path

from core.exceptions import FetchError
from core.inventory import ArchiveRecord, build_inventory
from core.jar_name import ARCHIVE_SUFFIX
from core.mods_toml import MODS_TOML_ENTRY

logger = logging.getLogger(__name__)


def list_local_dir(dir_path: str) -> list[str]:
    """
    List regular files in a directory, in filesystem enumeration order.

    Raises:
        FileNotFoundError: Directory does not exist
    """
    path = Path(dir_path)
    if not path.is_dir():
        raise FileNotFoundError(f"Mods directory not found: {dir_path}")

    with os.scandir(path) as it:
        return [entry.name for entry in it if entry.is_file()]


def read_local_metadata(jar_path: str, entry: str = MODS_TOML_ENTRY) -> bytes:
    """
    Read a metadata entry from a local jar.

    Raises:
        FetchError: Entry missing, archive corrupt or unreadable
    """
    try:
        with zipfile.ZipFile(jar_path, "r") as zf:
            return zf.read(entry)
    except KeyError as e:
        raise FetchError(f"{entry} not found in {jar_path}") from e
    except (zipfile.BadZipFile, zlib.error, EOFError, NotImplementedError, OSError) as e:
        raise FetchError(f"cannot read {jar_path}: {e}") from e


def scan_local_dir(
    dir_path: str,
    metadata_entry: str = MODS_TOML_ENTRY,
    extension: str = ARCHIVE_SUFFIX
) -> list[ArchiveRecord]:
    """Build the inventory of a local mods directory."""
    logger.info(f"Scanning local directory: {dir_path}")

    root = Path(dir_path).resolve()
    listing = [(name, str(root / name)) for name in list_local_dir(dir_path)]

    return build_inventory(
        listing,
        lambda full_path: read_local_metadata(full_path, metadata_entry),
        extension
    )
