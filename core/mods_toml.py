"""
Forge mods.toml metadata extraction.

Jar archives built for Forge declare their mods in META-INF/mods.toml.
Only the identity part of that file is needed here, so dependency tables
are dropped and comments stripped before the text is handed to tomllib.
"""
import logging
import tomllib
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from core.exceptions import MetadataParseError

logger = logging.getLogger(__name__)

MODS_TOML_ENTRY = "META-INF/mods.toml"

DEPENDENCIES_MARKER = "[[dependencies"
COMMENT_MARKER = "#"


class ModDescriptor(BaseModel):
    """One [[mods]] entry of a mods.toml file."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    mod_id: str = Field(alias="modId")
    version: str
    display_name: str = Field(alias="displayName")
    description: str
    authors: Optional[str] = None
    logo_file: Optional[str] = Field(default=None, alias="logoFile")


class ArchiveMetadata(BaseModel):
    """Top-level mods.toml block: loader info plus declared mods."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    mod_loader: str = Field(alias="modLoader")
    loader_version: str = Field(alias="loaderVersion")
    license: str
    mods: tuple[ModDescriptor, ...]


def clean_mods_toml(text: str) -> str:
    """
    Reduce a mods.toml document to the part needed for mod identity.

    - Everything from the first [[dependencies table on is dropped.
    - Blank lines and full-line comments are dropped.
    - Trailing comments are cut at the first '#' of the line. This does
      not look at quoting, so a '#' inside a string value truncates it.
    """
    dependencies_start = text.find(DEPENDENCIES_MARKER)
    if dependencies_start != -1:
        text = text[:dependencies_start]

    cleaned = []
    for line in text.split("\n"):
        trimmed = line.strip()
        if not trimmed or trimmed.startswith(COMMENT_MARKER):
            continue

        hash_pos = trimmed.find(COMMENT_MARKER)
        if hash_pos != -1:
            trimmed = trimmed[:hash_pos]

        cleaned.append(trimmed.rstrip() + "\n")

    return "".join(cleaned)


def parse_mod_metadata(raw: Union[bytes, str]) -> ArchiveMetadata:
    """
    Parse raw mods.toml content into ArchiveMetadata.

    Args:
        raw: File content as read from the archive

    Returns:
        ArchiveMetadata with mods in declaration order

    Raises:
        MetadataParseError: TOML syntax error or missing/invalid mandatory field
    """
    if isinstance(raw, bytes):
        raw = raw.decode("utf-8", errors="ignore")

    cleaned = clean_mods_toml(raw)

    try:
        data = tomllib.loads(cleaned)
    except tomllib.TOMLDecodeError as e:
        raise MetadataParseError(f"invalid TOML: {e}") from e

    try:
        return ArchiveMetadata.model_validate(data)
    except ValidationError as e:
        fields = ", ".join(
            ".".join(str(part) for part in err["loc"]) for err in e.errors()
        )
        raise MetadataParseError(f"invalid mods.toml ({fields})") from e
