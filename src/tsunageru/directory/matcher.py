"""Exact and script-insensitive lookups against the person directory.

Directories are small (tens of records), so every lookup is a linear scan in
insertion order. When a name search matches several people the first one in
directory order becomes the primary candidate and the total count is returned
so the operator can be told that others exist.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, Optional, Tuple

from tsunageru.directory.models import PersonRecord
from tsunageru.normalization.script import normalize_script

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NameSearchResult:
    """Outcome of :func:`search_by_name`.

    Attributes:
        primary: First matching record in directory order, or ``None``.
        match_count: Total number of matching records.
        candidates: Every matching record, in directory order.
    """

    primary: Optional[PersonRecord]
    match_count: int
    candidates: Tuple[PersonRecord, ...] = field(default_factory=tuple)

    @property
    def is_ambiguous(self) -> bool:
        return self.match_count > 1


def find_by_id(directory: Iterable[PersonRecord], person_id: str | None) -> Optional[PersonRecord]:
    """Return the record whose ``id`` equals ``person_id`` exactly (case-sensitive)."""
    if not person_id:
        return None
    for record in directory:
        if record.id == person_id:
            return record
    return None


def _matches(record: PersonRecord, query: str, folded_query: str) -> bool:
    if record.name and query in record.name:
        return True
    return bool(folded_query) and folded_query in normalize_script(record.phonetic_name)


def search_by_name(directory: Iterable[PersonRecord], query: str | None) -> NameSearchResult:
    """Find people whose name or phonetic name contains ``query``.

    The display name is compared as typed; the phonetic name is compared after
    both sides are folded with :func:`normalize_script`, so katakana and
    hiragana queries hit the same records. An empty query matches everyone.
    """
    needle = (query or "").strip()
    if not needle:
        candidates = tuple(directory)
    else:
        folded = normalize_script(needle)
        candidates = tuple(record for record in directory if _matches(record, needle, folded))

    logger.debug("Name search %r matched %s record(s)", needle, len(candidates))
    return NameSearchResult(
        primary=candidates[0] if candidates else None,
        match_count=len(candidates),
        candidates=candidates,
    )


def describe_search(result: NameSearchResult) -> str:
    """Return the operator prompt for a name search outcome."""
    if result.primary is None:
        return "No matching person found"
    label = f"{result.primary.name} (ID: {result.primary.id})"
    if result.match_count == 1:
        return f"Selected {label}"
    others = result.match_count - 1
    if others == 1:
        return f"Selected {label}; 1 other candidate also matches"
    return f"Selected {label}; {others} other candidates also match"


__all__ = ["NameSearchResult", "describe_search", "find_by_id", "search_by_name"]
