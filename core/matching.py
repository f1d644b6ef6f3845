"""
Mod Inventory Reconciliation Engine

Pairs local archives with remote archives in two phases:

1. Exact keys - a declared modId (or heuristic name) present on both sides.
2. Fuzzy names - leftover archives paired by filename similarity, greedily,
   walking the leftover local archives from last to first.

Every input archive ends up either in a match or in its side's unmatched
list, never both.
"""
from dataclasses import dataclass, field
from typing import Optional, Sequence

from core.inventory import ArchiveRecord

FUZZY_MATCH_THRESHOLD = 0.5
EXACT_MATCH_SIMILARITY = 1.0


@dataclass(frozen=True)
class MatchResult:
    """A local archive paired with a remote archive."""
    local: ArchiveRecord
    remote: ArchiveRecord
    similarity: float = EXACT_MATCH_SIMILARITY

    @property
    def is_exact(self) -> bool:
        return self.similarity == EXACT_MATCH_SIMILARITY

    def to_dict(self) -> dict:
        return {
            "local": self.local.file_name,
            "remote": self.remote.file_name,
            "similarity": self.similarity,
        }


@dataclass(frozen=True)
class ReconciliationReport:
    """Matched pairs plus what is left over on each side."""
    matches: tuple[MatchResult, ...] = field(default_factory=tuple)
    unmatched_local: tuple[ArchiveRecord, ...] = field(default_factory=tuple)
    unmatched_remote: tuple[ArchiveRecord, ...] = field(default_factory=tuple)

    @property
    def match_count(self) -> int:
        return len(self.matches)

    @property
    def is_fully_matched(self) -> bool:
        return not self.unmatched_local and not self.unmatched_remote

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "match_count": self.match_count,
            "is_fully_matched": self.is_fully_matched,
            "matches": [m.to_dict() for m in self.matches],
            "unmatched_local": [r.to_dict() for r in self.unmatched_local],
            "unmatched_remote": [r.to_dict() for r in self.unmatched_remote],
        }


def levenshtein_distance(a: str, b: str) -> int:
    """Edit distance with unit cost insert/delete/substitute, two-row DP."""
    if len(a) > len(b):
        a, b = b, a

    prev_row = list(range(len(b) + 1))
    for i, c1 in enumerate(a):
        curr_row = [i + 1]
        for j, c2 in enumerate(b):
            cost = 0 if c1 == c2 else 1
            curr_row.append(min(
                curr_row[j] + 1,      # insertion
                prev_row[j + 1] + 1,  # deletion
                prev_row[j] + cost    # substitution
            ))
        prev_row = curr_row

    return prev_row[-1]


def name_similarity(a: str, b: str) -> float:
    """
    Length-normalized edit similarity in [0, 1].

    Equal strings (two empty ones included) score 1.0 without computing
    a distance.
    """
    if a == b:
        return 1.0
    return 1.0 - levenshtein_distance(a, b) / max(len(a), len(b))


def _match_exact_keys(
    local_records: Sequence[ArchiveRecord],
    remote_records: Sequence[ArchiveRecord]
) -> tuple[list[MatchResult], list[ArchiveRecord], list[ArchiveRecord]]:
    """Phase 1: returns matches and the pending local/remote pools."""
    # key -> position in remote_records; later registrations overwrite
    remote_index: dict[str, int] = {}
    for i, remote in enumerate(remote_records):
        for key in remote.identity_keys():
            remote_index[key] = i

    claimed = [False] * len(remote_records)
    matches = []
    pending_local = []

    for local in local_records:
        found = False
        for key in local.identity_keys():
            i = remote_index.get(key)
            if i is None or claimed[i]:
                continue
            matches.append(MatchResult(local=local, remote=remote_records[i]))
            claimed[i] = True
            found = True

        if not found:
            pending_local.append(local)

    pending_remote = [r for r, taken in zip(remote_records, claimed) if not taken]
    return matches, pending_local, pending_remote


def _best_candidate(local: ArchiveRecord, candidates: Sequence[ArchiveRecord]) -> tuple[Optional[int], float]:
    """Index and score of the most similar candidate filename; first wins ties."""
    best_index = None
    best_score = 0.0
    for j, remote in enumerate(candidates):
        score = name_similarity(local.file_name, remote.file_name)
        if score > best_score:
            best_score = score
            best_index = j
    return best_index, best_score


def reconcile(
    local_records: Sequence[ArchiveRecord],
    remote_records: Sequence[ArchiveRecord],
    threshold: float = FUZZY_MATCH_THRESHOLD
) -> ReconciliationReport:
    """
    Main entry point for reconciling two inventories.

    Args:
        local_records: Local archives in scan order
        remote_records: Remote archives in scan order
        threshold: Minimum filename similarity (inclusive) for a fuzzy match

    Returns:
        ReconciliationReport covering every input record exactly once
    """
    matches, pending_local, pending_remote = _match_exact_keys(local_records, remote_records)

    # Phase 2 walks the local pool backwards; ties and pool order depend on it
    i = len(pending_local)
    while i > 0:
        i -= 1
        local = pending_local[i]
        best_index, best_score = _best_candidate(local, pending_remote)

        if best_index is not None and best_score >= threshold:
            matches.append(MatchResult(
                local=local,
                remote=pending_remote[best_index],
                similarity=best_score
            ))
            del pending_local[i]
            del pending_remote[best_index]

    return ReconciliationReport(
        matches=tuple(matches),
        unmatched_local=tuple(pending_local),
        unmatched_remote=tuple(pending_remote)
    )
