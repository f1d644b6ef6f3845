"""
Error types raised by the scanning and configuration layers.

The reconciliation engine itself raises none of these; an archive that
could not be identified simply ends up unmatched.
"""


class ModsyncError(Exception):
    """Base class for modsync errors."""


class MetadataParseError(ModsyncError):
    """Embedded mods.toml is malformed or misses mandatory fields."""


class FetchError(ModsyncError):
    """Archive metadata or a directory listing could not be fetched."""


class ConfigError(ModsyncError):
    """Configuration file is unreadable or invalid."""
