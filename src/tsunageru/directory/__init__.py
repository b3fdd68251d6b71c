"""Known-person directory: record model and lookups."""

from .matcher import NameSearchResult, describe_search, find_by_id, search_by_name
from .models import DirectorySource, PersonRecord, StaticDirectory

__all__ = [
    "DirectorySource",
    "NameSearchResult",
    "PersonRecord",
    "StaticDirectory",
    "describe_search",
    "find_by_id",
    "search_by_name",
]
