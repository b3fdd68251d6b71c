"""Single active decode loop feeding scanned payloads into the parsers.

The camera collaborator owns frame capture and decoding; it hands over an
iterable of decoded strings. :class:`ScanController` runs one background
thread over that iterable, parses each payload, and delivers the parsed
value to a callback. Opening a new scan always stops the previous one first,
so at most one decode loop is ever active. Stopping only stops feeding new
payloads; results already delivered stay delivered.

Callbacks run on the scan thread. Callers that touch a
:class:`~tsunageru.reconciliation.session.ReconciliationSession` must hand
the result back to their UI thread first.
"""

from __future__ import annotations

import logging
import threading
import uuid
from typing import Callable, Iterable, Literal, Optional, Union

from tsunageru.extraction.code_payload import LocationCode, PersonCode, parse_location_code, parse_person_code
from tsunageru.observability import Observability, get_observability
from tsunageru.settings import Settings, get_settings

logger = logging.getLogger(__name__)

ScanKind = Literal["person", "location"]
ScanResult = Union[PersonCode, LocationCode]

_PARSERS: dict[str, Callable[[str], ScanResult]] = {
    "person": parse_person_code,
    "location": parse_location_code,
}


class ScanSession:
    """One decode loop; created and owned by :class:`ScanController`."""

    def __init__(
        self,
        decoded: Iterable[str],
        kind: ScanKind,
        on_result: Callable[[ScanResult], None],
        *,
        stop_after_first: bool,
        observability: Observability,
        predecessor: Optional["ScanSession"] = None,
    ) -> None:
        if kind not in _PARSERS:
            raise ValueError(f"Unsupported scan kind: {kind!r}")
        self.session_id = str(uuid.uuid4())
        self.kind = kind
        self.results_delivered = 0
        self._decoded = decoded
        self._parse = _PARSERS[kind]
        self._on_result = on_result
        self._stop_after_first = stop_after_first
        self._obs = observability
        self._predecessor = predecessor
        self._stop = threading.Event()
        self._thread = threading.Thread(target=self._run, name=f"scan-{kind}", daemon=True)

    @property
    def active(self) -> bool:
        return self._thread.is_alive()

    def start(self) -> None:
        self._obs.emit_event("scan.started", session_id=self.session_id, kind=self.kind)
        self._thread.start()

    def wait(self, timeout: float | None = None) -> bool:
        """Block until the loop ends on its own; True when it has finished."""
        self._thread.join(timeout)
        return not self._thread.is_alive()

    def request_stop(self) -> None:
        """Ask the loop to stop without waiting for it."""
        self._stop.set()

    def stop(self) -> None:
        """Signal the loop to stop and wait for it to finish."""
        self.request_stop()
        if self._thread.is_alive() and self._thread is not threading.current_thread():
            self._thread.join()

    def _result_is_empty(self, result: ScanResult) -> bool:
        if isinstance(result, PersonCode):
            return not result.id
        return not result.name

    def _await_predecessor(self) -> None:
        # The previous loop must be finished before this one decodes anything.
        predecessor, self._predecessor = self._predecessor, None
        if predecessor is None:
            return
        predecessor.request_stop()
        while not predecessor.wait(timeout=0.05):
            if self._stop.is_set():
                return

    def _run(self) -> None:
        try:
            self._await_predecessor()
            for raw in self._decoded:
                if self._stop.is_set():
                    break
                if not raw or not str(raw).strip():
                    continue
                result = self._parse(raw)
                if self._result_is_empty(result):
                    logger.debug("Scan %s produced no usable %s payload", self.session_id, self.kind)
                    continue
                if self._stop.is_set():
                    break
                self.results_delivered += 1
                self._on_result(result)
                if self._stop_after_first:
                    break
        except Exception:
            logger.exception("Scan session %s failed", self.session_id)
        finally:
            self._stop.set()
            self._obs.emit_event(
                "scan.stopped",
                session_id=self.session_id,
                kind=self.kind,
                results=self.results_delivered,
            )


class ScanController:
    """Guarantees that only one :class:`ScanSession` runs at a time."""

    def __init__(self, *, settings: Settings | None = None, observability: Observability | None = None) -> None:
        self._settings = settings or get_settings()
        self._obs = observability or get_observability(component="scanning", settings=self._settings)
        self._lock = threading.Lock()
        self._current: Optional[ScanSession] = None

    @property
    def current(self) -> Optional[ScanSession]:
        return self._current

    def open(
        self,
        decoded: Iterable[str],
        kind: ScanKind,
        on_result: Callable[[ScanResult], None],
        *,
        stop_after_first: bool | None = None,
    ) -> ScanSession:
        """Stop any running scan, then start a new one over ``decoded``.

        The new session stops its predecessor on its own thread before it
        decodes anything, so callbacks may call back into the controller.
        """
        if stop_after_first is None:
            stop_after_first = self._settings.scanning.stop_after_first
        with self._lock:
            previous = self._current
            if previous is not None:
                logger.info("Stopping scan %s before opening a new one", previous.session_id)
                previous.request_stop()
            session = ScanSession(
                decoded,
                kind,
                on_result,
                stop_after_first=stop_after_first,
                observability=self._obs,
                predecessor=previous,
            )
            self._current = session
            session.start()
            return session

    def close(self) -> None:
        """Stop the running scan, if any."""
        with self._lock:
            session, self._current = self._current, None
        if session is not None:
            session.stop()


__all__ = ["ScanController", "ScanKind", "ScanResult", "ScanSession"]
