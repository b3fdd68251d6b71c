"""
Command line access to the extraction and reconciliation engine.

Examples:

    tsunageru extract "連絡時間: 12:00
    職員ID: S001"
    tsunageru parse-person "STAFF|S002|高橋 花子"
    tsunageru search タカハシ
    echo "職員ID: S003" | tsunageru reconcile
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import asdict
from pathlib import Path
from typing import Any, Optional, Sequence

from tsunageru.directory.matcher import describe_search, find_by_id, search_by_name
from tsunageru.directory.models import DirectorySource, PersonRecord, StaticDirectory
from tsunageru.directory.reference_data import DEMO_DIRECTORY
from tsunageru.extraction.code_payload import parse_location_code, parse_person_code
from tsunageru.extraction.message_fields import extract_incident_report, resolve_identifier_hint
from tsunageru.observability import configure_logging
from tsunageru.reconciliation.session import ReconciliationSession

LOGGER = logging.getLogger("tsunageru.cli")


def _read_text(value: Optional[str]) -> str:
    if value is None or value == "-":
        return sys.stdin.read()
    return value


def _load_directory(path: Optional[Path]) -> DirectorySource:
    if path is None:
        return DEMO_DIRECTORY
    with path.open(encoding="utf-8") as handle:
        payload = json.load(handle)
    directory = StaticDirectory.from_payload(payload)
    LOGGER.info("Loaded %s directory record(s) from %s", len(directory.records()), path)
    return directory


def _person_payload(person: Optional[PersonRecord]) -> Optional[dict[str, Any]]:
    return person.model_dump(mode="json") if person is not None else None


def _emit(payload: Any) -> None:
    print(json.dumps(payload, ensure_ascii=False, indent=2))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="tsunageru", description="Offline incident notice reconciliation.")
    parser.add_argument(
        "--directory",
        type=Path,
        default=None,
        help="JSON directory export ({'staff': [...]} or a list). Defaults to the demo staff.",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    extract = sub.add_parser("extract", help="Extract labelled incident fields from a message.")
    extract.add_argument("text", nargs="?", help="Message text, or '-' / omitted for stdin.")

    person = sub.add_parser("parse-person", help="Decode a person code payload.")
    person.add_argument("text", nargs="?")

    location = sub.add_parser("parse-location", help="Decode a location code payload.")
    location.add_argument("text", nargs="?")

    find = sub.add_parser("find", help="Look up a person by exact id.")
    find.add_argument("person_id")

    search = sub.add_parser("search", help="Search people by (phonetic) name fragment.")
    search.add_argument("query", nargs="?", default="")

    reconcile = sub.add_parser("reconcile", help="Extract a message and match it against the directory.")
    reconcile.add_argument("text", nargs="?")
    reconcile.add_argument("--showcase", action="store_true", help="Render the crew-facing view.")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    configure_logging()
    args = build_parser().parse_args(argv)

    if args.command == "extract":
        text = _read_text(args.text)
        report = extract_incident_report(text)
        payload = report.model_dump()
        payload["identifier_hint"] = resolve_identifier_hint(text, report)
        _emit(payload)
        return 0

    if args.command == "parse-person":
        _emit(asdict(parse_person_code(_read_text(args.text))))
        return 0

    if args.command == "parse-location":
        _emit(asdict(parse_location_code(_read_text(args.text))))
        return 0

    directory = _load_directory(args.directory)

    if args.command == "find":
        person = find_by_id(directory.records(), args.person_id)
        _emit(_person_payload(person))
        return 0 if person is not None else 1

    if args.command == "search":
        result = search_by_name(directory.records(), args.query)
        _emit(
            {
                "message": describe_search(result),
                "match_count": result.match_count,
                "primary": _person_payload(result.primary),
                "candidates": [record.id for record in result.candidates],
            }
        )
        return 0 if result.primary is not None else 1

    session = ReconciliationSession()
    status = session.start_from_message(_read_text(args.text), directory.records())
    _emit(
        {
            "status": status.value,
            "rows": [{"label": label, "value": value} for label, value in session.display_rows(showcase=args.showcase)],
        }
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
