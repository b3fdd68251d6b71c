"""Incident report model shared by the extractors and the session."""

from __future__ import annotations

from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

INCIDENT_FIELDS = (
    "contact_time",
    "employee_id_hint",
    "location",
    "status1",
    "status2",
    "accident_type",
)


class IncidentReport(BaseModel):
    """Structured fields pulled out of an incident notice.

    Every field is a plain string; an empty string means the field was not
    found. Display code is responsible for rendering empties as "unknown".
    """

    model_config = ConfigDict(populate_by_name=True, validate_assignment=True, extra="forbid")

    contact_time: str = Field(default="", validation_alias=AliasChoices("contact_time", "contactTime"))
    employee_id_hint: str = Field(
        default="",
        validation_alias=AliasChoices("employee_id_hint", "employeeIdHint", "empId"),
    )
    location: str = ""
    status1: str = ""
    status2: str = ""
    accident_type: str = Field(default="", validation_alias=AliasChoices("accident_type", "accidentType", "accident"))

    @field_validator(*INCIDENT_FIELDS, mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> str:
        if value is None:
            return ""
        return str(value).strip()

    def is_empty(self) -> bool:
        return not any(getattr(self, name) for name in INCIDENT_FIELDS)


__all__ = ["INCIDENT_FIELDS", "IncidentReport"]
