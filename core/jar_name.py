"""
Filename heuristics for mod jars.

Used when a jar carries no readable mods.toml. Jar names follow loose
conventions such as:

    1.20.1-maid_storage_manager-1.14.5-all.jar
    modernfix-forge-5.26.2+mc1.20.1.jar
    Endermod1.3.jar

The parser guesses a mod name and version from those. The name only has
to be stable enough to serve as a matching key.
"""
import re
from dataclasses import dataclass
from typing import Optional

ARCHIVE_SUFFIX = ".jar"

NAME_DELIMITERS = re.compile(r"[-+]")

# Loader/packaging words that never name the mod itself
NOISE_TOKENS = frozenset({"forge", "all"})

SEMVER_PATTERN = re.compile(r"(0|[1-9][0-9]*)\.(0|[1-9][0-9]*)\.(0|[1-9][0-9]*)")

# A digit-and-dot run holding at least one "." followed by a digit
VERSION_LIKE_PATTERN = re.compile(r"[0-9][0-9.]*\.[0-9][0-9.]*")

_DIGITS = "0123456789"


@dataclass(frozen=True)
class HeuristicIdentity:
    """Name and version guessed from a jar filename."""
    name: str
    version: Optional[str] = None

    def to_dict(self) -> dict:
        return {"name": self.name, "version": self.version}


def split_name_tokens(name: str) -> list[str]:
    """Split on '-' and '+', keeping empty tokens between adjacent delimiters."""
    return NAME_DELIMITERS.split(name)


def is_semantic_version(token: str) -> bool:
    return SEMVER_PATTERN.fullmatch(token) is not None


def is_minecraft_marker(token: str) -> bool:
    """Tokens like mc1.20.1 carry the game version, not the mod's."""
    # Digit read straight after "mc"
    return token.startswith("mc") and len(token) > 2 and token[2] in _DIGITS


def strip_version_like(token: str) -> tuple[str, Optional[str]]:
    """
    Remove embedded version runs from a token.

    Returns the stripped token and the first removed run (trailing dots
    dropped), e.g. "Endermod1.3" -> ("Endermod", "1.3").
    """
    first_match = VERSION_LIKE_PATTERN.search(token)
    if first_match is None:
        return token, None
    stripped = VERSION_LIKE_PATTERN.sub("", token)
    return stripped, first_match.group(0).rstrip(".")


def parse_jar_name(file_name: str) -> HeuristicIdentity:
    """
    Guess the mod identity from a jar filename.

    Tokens equal to a noise word or shaped like an mcX marker are skipped.
    A MAJOR.MINOR.PATCH token becomes the version (last one wins). The first
    other token, with embedded versions removed, becomes the name. Without
    any such token the whole filename minus ".jar" is the name.
    """
    name = file_name
    if name.endswith(ARCHIVE_SUFFIX):
        name = name[:-len(ARCHIVE_SUFFIX)]

    version = None
    embedded_version = None
    res_name = None

    for token in split_name_tokens(name):
        if token in NOISE_TOKENS:
            continue

        if is_minecraft_marker(token):
            continue

        if is_semantic_version(token):
            version = token
        elif res_name is None:
            res_name, embedded_version = strip_version_like(token)

    if res_name is None:
        res_name = name

    return HeuristicIdentity(name=res_name, version=version or embedded_version)
