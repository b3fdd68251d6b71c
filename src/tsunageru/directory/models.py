"""Pydantic models for the known-person directory."""

from __future__ import annotations

import re
from typing import Any, Iterable, Protocol, Sequence, Tuple

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

_LIST_SPLIT_RE = re.compile(r"[,、，]")


def _coerce_string_list(value: Any) -> Tuple[str, ...]:
    """Accept a list or a comma separated string and return trimmed entries."""

    if value is None:
        return ()
    if isinstance(value, str):
        items: Iterable[Any] = _LIST_SPLIT_RE.split(value)
    elif isinstance(value, (list, tuple, set)):
        items = value
    else:
        items = [value]
    result = []
    for item in items:
        if item is None:
            continue
        stripped = str(item).strip()
        if stripped:
            result.append(stripped)
    return tuple(result)


class PersonRecord(BaseModel):
    """A directory entry for one staff member.

    The directory collaborator owns these records; the engine only reads them.
    Legacy export keys (``blood``, ``meds``, ``doctor``, ``contactRel``,
    ``contactTel`` and friends) are accepted alongside the canonical names.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    id: str
    name: str = ""
    phonetic_name: str = Field(default="", validation_alias=AliasChoices("phonetic_name", "phoneticName", "kana"))
    affiliation: str = Field(default="", validation_alias=AliasChoices("affiliation", "department"))
    birthday: str = ""
    blood_type: str = Field(default="", validation_alias=AliasChoices("blood_type", "bloodType", "blood"))
    history: Tuple[str, ...] = ()
    medications: Tuple[str, ...] = Field(default=(), validation_alias=AliasChoices("medications", "meds"))
    allergies: Tuple[str, ...] = ()
    physician: str = Field(default="", validation_alias=AliasChoices("physician", "doctor"))
    emergency_contact_relation: str = Field(
        default="",
        validation_alias=AliasChoices("emergency_contact_relation", "emergencyContactRelation", "contactRel"),
    )
    emergency_contact_phone: str = Field(
        default="",
        validation_alias=AliasChoices("emergency_contact_phone", "emergencyContactPhone", "contactTel"),
    )

    @field_validator("history", "medications", "allergies", mode="before")
    @classmethod
    def _normalize_lists(cls, value: Any) -> Tuple[str, ...]:
        return _coerce_string_list(value)

    @field_validator(
        "name",
        "phonetic_name",
        "affiliation",
        "birthday",
        "blood_type",
        "physician",
        "emergency_contact_relation",
        "emergency_contact_phone",
        mode="before",
    )
    @classmethod
    def _none_to_empty(cls, value: Any) -> Any:
        if value is None:
            return ""
        return value.strip() if isinstance(value, str) else value

    @field_validator("id", mode="before")
    @classmethod
    def _require_id(cls, value: Any) -> str:
        text = "" if value is None else str(value).strip()
        if not text:
            raise ValueError("person id must not be empty")
        return text


class DirectorySource(Protocol):
    """Anything that can hand the engine the current directory snapshot."""

    def records(self) -> Sequence[PersonRecord]:  # pragma: no cover - interface only
        ...


class StaticDirectory:
    """Read-only in-memory directory built from a fixed sequence of records."""

    def __init__(self, records: Iterable[PersonRecord]) -> None:
        self._records: Tuple[PersonRecord, ...] = tuple(records)
        seen: set[str] = set()
        for record in self._records:
            if record.id in seen:
                raise ValueError(f"duplicate person id in directory: {record.id}")
            seen.add(record.id)

    def records(self) -> Sequence[PersonRecord]:
        return self._records

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self):
        return iter(self._records)

    @classmethod
    def from_payload(cls, payload: Any) -> "StaticDirectory":
        """Build a directory from an exported JSON payload.

        Accepts either a bare list of person mappings or an object carrying
        them under ``staff``.
        """

        if isinstance(payload, dict):
            payload = payload.get("staff")
        if not isinstance(payload, list):
            raise ValueError("directory payload must be a list or an object with a 'staff' list")
        return cls(PersonRecord.model_validate(item) for item in payload)


__all__ = ["DirectorySource", "PersonRecord", "StaticDirectory"]
