"""Unit tests for labelled incident field extraction."""

from __future__ import annotations

import pytest

from tsunageru.extraction.message_fields import (
    extract_identifier_hint,
    extract_incident_report,
    resolve_identifier_hint,
)

FULL_MESSAGE = "連絡時間: 2025-01-01 12:00\n職員ID: S001\n場所: A棟\n状態1: 意識なし\n状態2: 呼吸なし\n事故種別: 挟まれ"


def test_extracts_all_japanese_labels() -> None:
    """Every Japanese label maps onto its report field."""

    report = extract_incident_report(FULL_MESSAGE)

    assert report.contact_time == "2025-01-01 12:00"
    assert report.employee_id_hint == "S001"
    assert report.location == "A棟"
    assert report.status1 == "意識なし"
    assert report.status2 == "呼吸なし"
    assert report.accident_type == "挟まれ"


def test_only_contact_time_present_leaves_other_fields_empty() -> None:
    """Unlabelled fields stay empty; no token fallback is applied here."""

    report = extract_incident_report("Contact Time: 2025-01-01 12:00")

    assert report.contact_time == "2025-01-01 12:00"
    assert report.employee_id_hint == ""
    assert report.location == ""
    assert report.status1 == ""
    assert report.status2 == ""
    assert report.accident_type == ""


def test_field_order_does_not_matter_and_full_width_colon_is_accepted() -> None:
    message = "事故種別：転落\r\n場所：：B棟 2F\r\n連絡時間：09:15"
    report = extract_incident_report(message)

    assert report.accident_type == "転落"
    assert report.location == "B棟 2F"
    assert report.contact_time == "09:15"


def test_label_without_value_does_not_capture_next_line() -> None:
    report = extract_incident_report("職員ID:\n場所: A棟")

    assert report.employee_id_hint == ""
    assert report.location == "A棟"


def test_english_labels_are_case_insensitive() -> None:
    report = extract_incident_report("staff id: S002\nSTATUS 1: conscious\nstatus2: breathing\nAccident Type: fall")

    assert report.employee_id_hint == "S002"
    assert report.status1 == "conscious"
    assert report.status2 == "breathing"
    assert report.accident_type == "fall"


@pytest.mark.parametrize("message", [None, "", "   "])
def test_empty_messages_give_empty_report(message: str | None) -> None:
    assert extract_incident_report(message).is_empty()


@pytest.mark.parametrize(
    "message,expected",
    [
        ("至急 S001 倒れています", "S001"),
        ("緊急、emp_7，場所不明", "emp_7"),
        ("A\nB-2 C", "B-2"),
        ("x y z", ""),
        ("お願いします", ""),
    ],
)
def test_identifier_hint_fallback_returns_first_qualifying_token(message: str, expected: str) -> None:
    """Commas and line breaks split tokens; single characters never qualify."""

    assert extract_identifier_hint(message) == expected


def test_resolve_identifier_prefers_labelled_value() -> None:
    message = "AB 職員ID: S005"
    assert resolve_identifier_hint(message) == "S005"


def test_resolve_identifier_falls_back_to_first_token() -> None:
    assert resolve_identifier_hint("S004 が倒れた") == "S004"
