"""Mutable state combining the current incident report and matched person.

The session is driven from the single UI event thread; it performs no
locking. The directory is always passed in explicitly and is never mutated.
Invariant: whenever both a report and a person are held,
``report.employee_id_hint == person.id``.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, List, Mapping, Optional, Sequence

from pydantic import BaseModel

from tsunageru.directory.matcher import find_by_id
from tsunageru.directory.models import PersonRecord
from tsunageru.extraction.message_fields import extract_incident_report, resolve_identifier_hint
from tsunageru.observability import Observability, get_observability
from tsunageru.reconciliation.display import DisplayRow, render_incident, render_person
from tsunageru.reconciliation.models import INCIDENT_FIELDS, IncidentReport
from tsunageru.settings import Settings, get_settings


class MatchStatus(str, Enum):
    """Result of resolving the report's identifier hint against the directory."""

    MATCHED = "matched"
    NO_HINT = "no_hint"
    NOT_FOUND = "not_found"


class MergedRecord(BaseModel):
    """Snapshot of the session handed to the presentation layer."""

    report: Optional[IncidentReport] = None
    person: Optional[PersonRecord] = None
    committed: bool = False


class ReconciliationSession:
    """Holds at most one incident report and at most one matched person."""

    def __init__(
        self,
        *,
        settings: Settings | None = None,
        observability: Observability | None = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._obs = observability or get_observability(component="reconciliation", settings=self._settings)
        self._report: Optional[IncidentReport] = None
        self._person: Optional[PersonRecord] = None
        self._committed = False

    @property
    def report(self) -> Optional[IncidentReport]:
        return self._report

    @property
    def person(self) -> Optional[PersonRecord]:
        return self._person

    @property
    def committed(self) -> bool:
        return self._committed

    def start_from_extraction(self, report: IncidentReport, directory: Sequence[PersonRecord]) -> MatchStatus:
        """Adopt ``report`` and try to resolve its identifier hint.

        The extracted fields are kept even when no person matches, so the
        operator can correct the hint without re-entering everything.
        """
        self._report = report.model_copy()
        self._person = None
        self._committed = False

        hint = self._report.employee_id_hint
        if not hint:
            self._obs.emit_event("session.started", status=MatchStatus.NO_HINT.value)
            return MatchStatus.NO_HINT

        record = find_by_id(directory, hint)
        if record is None:
            self._obs.emit_event("session.started", status=MatchStatus.NOT_FOUND.value, hint=hint)
            return MatchStatus.NOT_FOUND

        self.attach_person(record)
        self._obs.emit_event("session.started", status=MatchStatus.MATCHED.value, person_id=record.id)
        return MatchStatus.MATCHED

    def start_from_message(self, message: str, directory: Sequence[PersonRecord]) -> MatchStatus:
        """Extract fields from ``message`` and resolve the person it names."""
        report = extract_incident_report(message)
        hint = resolve_identifier_hint(message, report)
        if hint != report.employee_id_hint:
            report = report.model_copy(update={"employee_id_hint": hint})
        return self.start_from_extraction(report, directory)

    def attach_person(self, record: PersonRecord) -> None:
        """Set the matched person and overwrite the report's identifier hint."""
        if self._report is None:
            self._report = IncidentReport()
        self._person = record
        self._committed = False
        self._report.employee_id_hint = record.id

    def detach_person(self) -> None:
        """Drop the matched person together with the identifier linkage."""
        self._person = None
        self._committed = False
        if self._report is not None:
            self._report.employee_id_hint = ""

    def edit_report(
        self,
        fields: Mapping[str, Any],
        directory: Sequence[PersonRecord] | None = None,
    ) -> Optional[PersonRecord]:
        """Replace the given report fields wholesale.

        Unknown field names raise ``ValueError``. If the identifier hint is
        changed away from the attached person's id, the person is detached;
        when ``directory`` is supplied the new hint is looked up again.

        Returns:
            The person attached after the edit, if any.
        """
        unknown = sorted(set(fields) - set(INCIDENT_FIELDS))
        if unknown:
            raise ValueError(f"Unknown incident field(s): {', '.join(unknown)}")

        base = self._report or IncidentReport()
        self._report = IncidentReport.model_validate({**base.model_dump(), **dict(fields)})
        self._committed = False

        hint = self._report.employee_id_hint
        if self._person is not None and hint != self._person.id:
            self._person = None
        if self._person is None and directory is not None and hint:
            record = find_by_id(directory, hint)
            if record is not None:
                self.attach_person(record)

        self._obs.emit_event("session.report_edited", fields=sorted(fields))
        return self._person

    def commit(self) -> bool:
        """Mark the merged record as presented; needs both report and person."""
        if self._report is None or self._person is None:
            return False
        self._committed = True
        self._obs.emit_event("session.committed", person_id=self._person.id)
        return True

    def reset(self) -> None:
        """Clear report, person and committed flag together."""
        self._report = None
        self._person = None
        self._committed = False
        self._obs.emit_event("session.reset")

    def merged_record(self) -> MergedRecord:
        return MergedRecord(
            report=self._report.model_copy() if self._report is not None else None,
            person=self._person,
            committed=self._committed,
        )

    def display_rows(self, *, showcase: bool = False) -> List[DisplayRow]:
        """Ordered rows for rendering.

        The operator view lists incident rows then person rows. The showcase
        view, handed to the responding crew, lists the person first and hides
        the employee id and birthday.
        """
        incident = render_incident(self._report, showcase=showcase, settings=self._settings)
        person = render_person(self._person, showcase=showcase, settings=self._settings)
        return person + incident if showcase else incident + person


__all__ = ["MatchStatus", "MergedRecord", "ReconciliationSession"]
