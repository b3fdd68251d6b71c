"""Render reconciled records as ordered (label, value) rows."""

from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

from tsunageru.directory.models import PersonRecord
from tsunageru.reconciliation.models import IncidentReport
from tsunageru.settings import Settings, get_settings

DisplayRow = Tuple[str, str]

INCIDENT_LABELS: Tuple[Tuple[str, str], ...] = (
    ("contact_time", "Contact time"),
    ("employee_id_hint", "Employee ID"),
    ("location", "Location"),
    ("status1", "Status 1"),
    ("status2", "Status 2"),
    ("accident_type", "Accident type"),
)

PERSON_LABELS: Tuple[Tuple[str, str], ...] = (
    ("name", "Name"),
    ("birthday", "Birthday"),
    ("blood_type", "Blood type"),
    ("history", "Medical history"),
    ("medications", "Medications"),
    ("allergies", "Allergies"),
    ("physician", "Physician"),
    ("emergency_contact_relation", "Emergency contact (relation)"),
    ("emergency_contact_phone", "Emergency contact (phone)"),
)

# Hidden from the crew-facing showcase view.
SHOWCASE_HIDDEN = frozenset({"employee_id_hint", "birthday"})


def display_value(value: object, settings: Settings | None = None) -> str:
    """Text for one field; empties become the unknown placeholder."""
    resolved = settings or get_settings()
    if isinstance(value, (list, tuple)):
        text = resolved.display.list_separator.join(str(item) for item in value if str(item).strip())
    else:
        text = "" if value is None else str(value).strip()
    return text or resolved.display.unknown_placeholder


def _rows(
    source: object,
    labels: Sequence[Tuple[str, str]],
    hidden: frozenset,
    settings: Settings,
) -> List[DisplayRow]:
    return [
        (label, display_value(getattr(source, field, None), settings))
        for field, label in labels
        if field not in hidden
    ]


def render_incident(
    report: Optional[IncidentReport],
    *,
    showcase: bool = False,
    settings: Settings | None = None,
) -> List[DisplayRow]:
    resolved = settings or get_settings()
    hidden = SHOWCASE_HIDDEN if showcase else frozenset()
    return _rows(report or IncidentReport(), INCIDENT_LABELS, hidden, resolved)


def render_person(
    person: Optional[PersonRecord],
    *,
    showcase: bool = False,
    settings: Settings | None = None,
) -> List[DisplayRow]:
    if person is None:
        return []
    resolved = settings or get_settings()
    hidden = SHOWCASE_HIDDEN if showcase else frozenset()
    return _rows(person, PERSON_LABELS, hidden, resolved)


__all__ = ["DisplayRow", "display_value", "render_incident", "render_person"]
