"""Unit tests for the single active scan loop."""

from __future__ import annotations

import queue
import threading
import time

import pytest

from tsunageru.extraction.code_payload import LocationCode, PersonCode
from tsunageru.scanning.scan_session import ScanController
from tsunageru.settings.config import Settings


def _controller() -> ScanController:
    return ScanController(settings=Settings(env="test"))


def test_person_scan_delivers_first_parsed_payload_and_stops() -> None:
    """Blank frames are skipped and the loop ends after the first result."""

    controller = _controller()
    results = []

    session = controller.open(["", "   ", "STAFF|S002|高橋 花子", "S003"], "person", results.append)
    session.wait(timeout=5)

    assert results == [PersonCode(id="S002", name="高橋 花子")]
    assert session.results_delivered == 1
    assert not session.active


def test_location_scan_can_keep_running_until_exhausted() -> None:
    controller = _controller()
    results = []

    session = controller.open(
        ["PLACE:正門", "first\nsecond", "場所: A棟"],
        "location",
        results.append,
        stop_after_first=False,
    )
    session.wait(timeout=5)

    assert results == [LocationCode(name="正門"), LocationCode(name="A棟")]


def test_opening_new_scan_stops_previous_one() -> None:
    """The new loop only decodes once the previous loop has finished."""

    controller = _controller()
    feed = queue.Queue()
    first_results = []
    started = threading.Event()

    def blocking_source():
        started.set()
        while True:
            item = feed.get()
            if item is None:
                return
            yield item

    first = controller.open(blocking_source(), "person", first_results.append, stop_after_first=False)
    started.wait(timeout=5)

    # Unblock the first loop so it can observe the stop request.
    feed.put("S001")
    feed.put(None)
    second_results = []
    second = controller.open(["PLACE:B棟"], "location", second_results.append)
    second.wait(timeout=5)

    assert not first.active
    assert controller.current is second
    assert second_results == [LocationCode(name="B棟")]


def test_close_stops_and_forgets_current_scan() -> None:
    controller = _controller()
    session = controller.open([], "person", lambda result: None)
    controller.close()

    assert controller.current is None
    assert not session.active


def test_callback_may_close_while_another_thread_is_closing() -> None:
    """close() joins the scan thread without holding the controller lock."""

    controller = _controller()
    delivered = threading.Event()

    def on_result(result: PersonCode) -> None:
        delivered.set()
        time.sleep(0.3)
        controller.close()

    session = controller.open(["S001"], "person", on_result)
    assert delivered.wait(timeout=5)

    closer = threading.Thread(target=controller.close)
    closer.start()
    closer.join(timeout=3)

    assert not closer.is_alive()
    assert session.wait(timeout=3)
    assert controller.current is None


def test_callback_may_open_the_next_scan() -> None:
    controller = _controller()
    follow_up = []
    opened = []

    def on_person(result: PersonCode) -> None:
        opened.append(controller.open(["場所: C棟"], "location", follow_up.append))

    first = controller.open(["S004"], "person", on_person)
    assert first.wait(timeout=5)
    assert opened and opened[0].wait(timeout=5)

    assert follow_up == [LocationCode(name="C棟")]
    assert controller.current is opened[0]


def test_failing_callback_does_not_escape_the_thread(caplog: pytest.LogCaptureFixture) -> None:
    controller = _controller()

    def explode(result):
        raise RuntimeError("display gone")

    with caplog.at_level("ERROR"):
        session = controller.open(["S001"], "person", explode)
        session.wait(timeout=5)

    assert "failed" in caplog.text
    assert not session.active
