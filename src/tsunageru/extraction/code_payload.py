"""Decoding of scanned-code payloads into person and location fields.

Helmet and site codes are printed by different teams, so the same
information arrives in several shapes:

* a JSON object: ``{"staffId": "S001", "name": "佐藤 一郎"}``
* labelled text: ``職員ID: S001`` / ``場所: A棟``
* pipe separated segments: ``STAFF|S002|高橋 花子``
* plain text: ``S003 山田 太郎`` or ``A棟 搬入口``

Each payload class is resolved by an ordered tuple of small strategy
functions. Strategies are pure, return ``None`` when they do not apply and
never raise; the first one returning a non-empty value wins.
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

logger = logging.getLogger(__name__)

PERSON_ID_KEYS = ("id", "staffId", "staff_id", "employeeId", "employee_id", "empId", "emp_id", "職員ID")
PERSON_NAME_KEYS = ("name", "fullName", "full_name", "staffName", "氏名", "名前")
LOCATION_KEYS = ("location", "place", "loc", "area", "name", "場所", "場所名")

_SEP = r"[^\S\n]*[:：=][^\S\n]*"
_BARE_ID_RE = re.compile(r"(?<![A-Za-z0-9])([A-Za-z]\d{3,6})(?![0-9])", re.IGNORECASE)
_BARE_ID_FULL_RE = re.compile(r"^[A-Za-z]\d{3,6}$", re.IGNORECASE)
_LABELLED_ID_RE = re.compile(
    r"(?:職員ID|職員番号|社員ID|社員番号|(?<![A-Za-z])(?:Employee\s*ID|Staff\s*ID|EmpID|ID))"
    + _SEP
    + r"([A-Za-z0-9_-]+)",
    re.IGNORECASE,
)
_LABELLED_NAME_RE = re.compile(r"(?:氏名|名前|(?<![A-Za-z])Name)" + _SEP + r"([^\n|｜]+)", re.IGNORECASE)
_LABELLED_LOCATION_RE = re.compile(
    r"(?:場所名|場所|地点|(?<![A-Za-z])Location|(?<![A-Za-z])Place|(?<![A-Za-z])Loc)" + _SEP + r"([^\n|｜]+)",
    re.IGNORECASE,
)
_LOCATION_PREFIX_RE = re.compile(r"^(?:LOCATION|LOC|PLACE)[\s:：_|\-]+", re.IGNORECASE)
_PIPE_RE = re.compile(r"[|｜]")
_DELIMITERS_RE = re.compile(r"[|｜,、，]")
_WHITESPACE_RE = re.compile(r"\s+")
_SEPARATOR_RE = re.compile(r"[:：=]")


@dataclass(frozen=True)
class PersonCode:
    """Identifier and display name read from a person code."""

    id: str
    name: str = ""


@dataclass(frozen=True)
class LocationCode:
    """Location name read from a location code."""

    name: str = ""


def preprocess_payload(raw: Optional[str]) -> str:
    """Normalise spacing and line breaks of a decoded payload."""
    if not raw:
        return ""
    text = str(raw).replace("　", " ")
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    return text.strip()


# ---------------------------------------------------------------------------
# Shared helpers
# ---------------------------------------------------------------------------


def _load_object(text: str) -> Optional[Dict[str, Any]]:
    if not (text.startswith("{") and text.endswith("}")):
        return None
    try:
        data = json.loads(text)
    except (ValueError, RecursionError):
        logger.debug("Payload looks like JSON but does not decode; trying other formats")
        return None
    return data if isinstance(data, dict) else None


def _first_key(data: Dict[str, Any], keys: Sequence[str]) -> Optional[str]:
    for key in keys:
        value = data.get(key)
        if value is None or isinstance(value, (dict, list)):
            continue
        text = str(value).strip()
        if text:
            return text
    return None


def _segments(text: str) -> List[str]:
    return [part.strip() for part in _PIPE_RE.split(text) if part.strip()]


def _id_segment_index(segments: Sequence[str]) -> Optional[int]:
    for index, segment in enumerate(segments):
        if _BARE_ID_FULL_RE.match(segment):
            return index
    return None


def _first_non_empty(strategies: Sequence[Callable[..., Optional[str]]], *args: Any) -> Optional[str]:
    for strategy in strategies:
        value = strategy(*args)
        if value:
            logger.debug("Payload resolved by %s", strategy.__name__)
            return value
    return None


# ---------------------------------------------------------------------------
# Person identifier strategies
# ---------------------------------------------------------------------------


def id_from_object(text: str) -> Optional[str]:
    data = _load_object(text)
    return _first_key(data, PERSON_ID_KEYS) if data else None


def id_from_bare_pattern(text: str) -> Optional[str]:
    match = _BARE_ID_RE.search(text)
    return match.group(1).upper() if match else None


def id_from_label(text: str) -> Optional[str]:
    match = _LABELLED_ID_RE.search(text)
    return match.group(1) if match else None


def id_from_segments(text: str) -> Optional[str]:
    segments = _segments(text)
    if len(segments) < 2:
        return None
    index = _id_segment_index(segments)
    return segments[index].upper() if index is not None else None


PERSON_ID_STRATEGIES: Tuple[Callable[[str], Optional[str]], ...] = (
    id_from_object,
    id_from_bare_pattern,
    id_from_label,
    id_from_segments,
)


# ---------------------------------------------------------------------------
# Person name strategies (given the text and the resolved identifier)
# ---------------------------------------------------------------------------


def name_from_object(text: str, person_id: str) -> Optional[str]:
    data = _load_object(text)
    return _first_key(data, PERSON_NAME_KEYS) if data else None


def name_from_segments(text: str, person_id: str) -> Optional[str]:
    segments = _segments(text)
    if len(segments) < 2:
        return None
    index = _id_segment_index(segments)
    if index is not None:
        trailing = " ".join(segments[index + 1 :])
        return trailing or None
    if len(segments) >= 3:
        return segments[-1]
    return None


def name_from_label(text: str, person_id: str) -> Optional[str]:
    match = _LABELLED_NAME_RE.search(text)
    return match.group(1).strip() if match else None


def name_after_id(text: str, person_id: str) -> Optional[str]:
    if not person_id:
        return None
    lines = [_WHITESPACE_RE.sub(" ", _DELIMITERS_RE.sub(" ", line)).strip() for line in text.split("\n")]
    lines = [line for line in lines if line]
    if not lines:
        return None
    head = lines[0]
    if head.upper() == person_id.upper():
        # A bare id line may be followed by the name, but never by another label.
        following = lines[1] if len(lines) > 1 else ""
        return following if following and not _SEPARATOR_RE.search(following) else None
    prefix = f"{person_id} "
    if head.upper().startswith(prefix.upper()):
        return head[len(prefix) :].strip() or None
    return None


PERSON_NAME_STRATEGIES: Tuple[Callable[[str, str], Optional[str]], ...] = (
    name_from_object,
    name_from_segments,
    name_from_label,
    name_after_id,
)


def parse_person_code(raw: Optional[str]) -> PersonCode:
    """Read an identifier and name from a person code payload.

    When no identifier can be found the whole payload is returned as the
    identifier so the caller can still try it as a literal value.
    """
    text = preprocess_payload(raw)
    if not text:
        return PersonCode(id="")

    person_id = _first_non_empty(PERSON_ID_STRATEGIES, text)
    if not person_id:
        logger.debug("No identifier pattern in person code; using the literal payload")
        return PersonCode(id=text)

    name = _first_non_empty(PERSON_NAME_STRATEGIES, text, person_id) or ""
    return PersonCode(id=person_id, name=name)


# ---------------------------------------------------------------------------
# Location strategies
# ---------------------------------------------------------------------------


def location_from_object(text: str) -> Optional[str]:
    data = _load_object(text)
    return _first_key(data, LOCATION_KEYS) if data else None


def location_from_label(text: str) -> Optional[str]:
    match = _LABELLED_LOCATION_RE.search(text)
    return match.group(1).strip() if match else None


def location_from_segments(text: str) -> Optional[str]:
    segments = _segments(text)
    return segments[-1] if len(segments) >= 2 else None


def location_from_plain_text(text: str) -> Optional[str]:
    if "\n" in text:
        return None
    return text or None


LOCATION_STRATEGIES: Tuple[Callable[[str], Optional[str]], ...] = (
    location_from_object,
    location_from_label,
    location_from_segments,
    location_from_plain_text,
)


def strip_location_prefix(name: str) -> str:
    """Drop a leading ``PLACE``/``LOC``/``LOCATION`` tag and its separator."""
    return _LOCATION_PREFIX_RE.sub("", name, count=1).strip()


def parse_location_code(raw: Optional[str]) -> LocationCode:
    """Read a location name from a location code payload (``""`` when none)."""
    text = preprocess_payload(raw)
    if not text:
        return LocationCode()
    name = _first_non_empty(LOCATION_STRATEGIES, text)
    return LocationCode(name=strip_location_prefix(name) if name else "")


__all__ = [
    "LOCATION_STRATEGIES",
    "LocationCode",
    "PERSON_ID_STRATEGIES",
    "PERSON_NAME_STRATEGIES",
    "PersonCode",
    "parse_location_code",
    "parse_person_code",
    "preprocess_payload",
    "strip_location_prefix",
]
