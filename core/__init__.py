# Modsync v1.0.2
"""
Core package for Modsync.
Contains mod identity extraction and inventory reconciliation.
"""
from core.exceptions import (
    ModsyncError,
    MetadataParseError,
    FetchError,
    ConfigError
)
from core.mods_toml import (
    parse_mod_metadata,
    clean_mods_toml,
    ModDescriptor,
    ArchiveMetadata,
    MODS_TOML_ENTRY
)
from core.jar_name import (
    parse_jar_name,
    split_name_tokens,
    HeuristicIdentity
)
from core.inventory import (
    build_inventory,
    build_record,
    is_archive_name,
    ArchiveRecord
)
from core.matching import (
    reconcile,
    name_similarity,
    levenshtein_distance,
    MatchResult,
    ReconciliationReport,
    FUZZY_MATCH_THRESHOLD
)

__all__ = [
    "ModsyncError",
    "MetadataParseError",
    "FetchError",
    "ConfigError",
    "parse_mod_metadata",
    "clean_mods_toml",
    "ModDescriptor",
    "ArchiveMetadata",
    "MODS_TOML_ENTRY",
    "parse_jar_name",
    "split_name_tokens",
    "HeuristicIdentity",
    "build_inventory",
    "build_record",
    "is_archive_name",
    "ArchiveRecord",
    "reconcile",
    "name_similarity",
    "levenshtein_distance",
    "MatchResult",
    "ReconciliationReport",
    "FUZZY_MATCH_THRESHOLD"
]
