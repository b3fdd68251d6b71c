"""
Rule-based extraction of incident fields from free-text notices.

Each field is introduced by a fixed label followed by a colon (half-width
or full-width), e.g.

    連絡時間: 2025-01-01 12:00
    職員ID: S001
    場所: A棟
    状態1: 意識なし
    状態2: 呼吸なし
    事故種別: 挟まれ

Labels are searched independently, so fields may appear in any order or be
missing altogether. Missing fields come back as empty strings.
"""

import re
from typing import Dict, Optional, Tuple

from tsunageru.reconciliation.models import IncidentReport

FIELD_LABELS: Dict[str, Tuple[str, ...]] = {
    "contact_time": ("連絡時間", "Contact Time"),
    "employee_id_hint": ("職員ID", "Employee ID", "Staff ID"),
    "location": ("場所", "Location"),
    "status1": ("状態1", "Status 1", "Status1"),
    "status2": ("状態2", "Status 2", "Status2"),
    "accident_type": ("事故種別", "Accident Type"),
}

# Horizontal whitespace only; a label with no value must not swallow the next line.
_GAP = r"[^\S\r\n]*"
_ID_TOKEN_RE = re.compile(r"^[A-Za-z0-9_-]{2,}$")
_TOKEN_SEPARATORS_RE = re.compile(r"[\r\n,、，]")


def _label_pattern(labels: Tuple[str, ...]) -> re.Pattern:
    alternatives = "|".join(re.escape(label) for label in labels)
    return re.compile(rf"(?:{alternatives}){_GAP}[：:]+{_GAP}([^\r\n]+)", re.IGNORECASE)


_FIELD_PATTERNS: Dict[str, re.Pattern] = {name: _label_pattern(labels) for name, labels in FIELD_LABELS.items()}


def extract_field(text: str, field_name: str) -> str:
    """Return the trimmed value following ``field_name``'s label, or ``""``."""
    match = _FIELD_PATTERNS[field_name].search(text)
    return match.group(1).strip() if match else ""


def extract_incident_report(message: Optional[str]) -> IncidentReport:
    """Pull the six labelled incident fields out of ``message``."""
    if not message:
        return IncidentReport()
    return IncidentReport(**{name: extract_field(message, name) for name in FIELD_LABELS})


def extract_identifier_hint(message: Optional[str]) -> str:
    """Best-effort identifier for messages without an ID label.

    Line breaks and commas (half-width and ideographic) act as separators
    alongside whitespace. The first token made of two or more letters,
    digits, underscores or hyphens wins.
    """
    if not message:
        return ""
    for token in _TOKEN_SEPARATORS_RE.sub(" ", message).split():
        if _ID_TOKEN_RE.match(token):
            return token
    return ""


def resolve_identifier_hint(message: Optional[str], report: Optional[IncidentReport] = None) -> str:
    """Labelled identifier when present, otherwise the token fallback."""
    report = report if report is not None else extract_incident_report(message)
    return report.employee_id_hint or extract_identifier_hint(message)
