"""Unit tests for display row rendering."""

from __future__ import annotations

from tsunageru.directory.models import PersonRecord
from tsunageru.reconciliation.display import display_value, render_incident, render_person
from tsunageru.reconciliation.models import IncidentReport
from tsunageru.settings.config import Settings


def test_display_value_joins_lists_and_fills_blanks() -> None:
    """List fields use the configured separator; blanks show the placeholder."""

    settings = Settings(env="test", display={"unknown_placeholder": "不明", "list_separator": " / "})

    assert display_value(("卵", " ", "乳"), settings) == "卵 / 乳"
    assert display_value((), settings) == "不明"
    assert display_value("  ", settings) == "不明"
    assert display_value(None, settings) == "不明"


def test_incident_rows_follow_field_order_even_without_report() -> None:
    rows = render_incident(None, settings=Settings(env="test"))

    assert [label for label, _ in rows] == [
        "Contact time",
        "Employee ID",
        "Location",
        "Status 1",
        "Status 2",
        "Accident type",
    ]
    assert {value for _, value in rows} == {"unknown"}


def test_showcase_hides_identifier_and_birthday_only() -> None:
    settings = Settings(env="test")
    report = IncidentReport(employee_id_hint="S001", accident_type="挟まれ")
    person = PersonRecord(id="S001", name="佐藤 一郎", birthday="1970-04-01")

    incident_labels = [label for label, _ in render_incident(report, showcase=True, settings=settings)]
    person_labels = [label for label, _ in render_person(person, showcase=True, settings=settings)]

    assert "Employee ID" not in incident_labels
    assert "Accident type" in incident_labels
    assert "Birthday" not in person_labels
    assert len(person_labels) == 8


def test_missing_person_renders_no_rows() -> None:
    assert render_person(None, settings=Settings(env="test")) == []
