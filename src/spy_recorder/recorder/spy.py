"""Call recorder and the spy double base class built on top of it."""

from __future__ import annotations

from collections import deque
from typing import Any

from spy_recorder.config import DEFAULT_SETTINGS, RecorderSettings
from spy_recorder.recorder.logging_utils import DEFAULT_LOGGER, LoggingManager
from spy_recorder.recorder.types import CallLog, CallRecord, operation_tag_of


class CallRecorder:
    """Append-only log of intercepted calls plus optional stubbed returns.

    A recorder belongs to exactly one test case. It never fails on
    ``record``; mismatches only surface when a test compares
    :meth:`call_log` against an expected sequence.
    """

    def __init__(
        self,
        name: str = "spy",
        *,
        settings: RecorderSettings = DEFAULT_SETTINGS,
        logger: LoggingManager = DEFAULT_LOGGER,
    ) -> None:
        self.name = name
        self.settings = settings
        self.logger = logger
        self._calls: list[CallRecord] = []
        self._persistent_returns: dict[str, Any] = {}
        self._queued_returns: dict[str, deque[Any]] = {}

    def record(self, call_record: CallRecord) -> None:
        """Append one call to the log."""
        if not isinstance(call_record, CallRecord):
            raise TypeError(f"{self.name}: expected a CallRecord, got {call_record!r}")
        self._calls.append(call_record)
        if self.settings.log_calls:
            self.logger.debug(f"[{self.name}] call #{len(self._calls)}: {call_record!r}")

    def call_log(self) -> CallLog:
        """Return a read-only snapshot of the calls recorded so far."""
        return CallLog(self._calls)

    def configure_return(
        self,
        operation: str | type[CallRecord],
        value: Any,
        *,
        once: bool = False,
    ) -> None:
        """Register the value returned when ``operation`` is invoked.

        ``once=True`` queues the value for the next matching invocation only;
        queued values are consumed in the order they were configured before
        the persistent value is used.
        """
        tag = operation_tag_of(operation)
        if once:
            self._queued_returns.setdefault(tag, deque()).append(value)
        else:
            self._persistent_returns[tag] = value

    def stub_value(self, operation: str | type[CallRecord], default: Any = None) -> Any:
        """Resolve the value an invocation of ``operation`` should return."""
        tag = operation_tag_of(operation)
        queued = self._queued_returns.get(tag)
        if queued:
            return queued.popleft()
        return self._persistent_returns.get(tag, default)

    def __repr__(self) -> str:
        return f"CallRecorder(name={self.name!r}, calls={len(self._calls)})"


class SpyDouble:
    """Base class for spies standing in for a capability interface.

    Subclass it together with the interface and route every interface
    method through :meth:`_record`::

        class AnalyticsSpy(SpyDouble, AnalyticsTracker):
            def track_screen_view(self) -> None:
                self._record(TrackScreenView())
    """

    def __init__(
        self,
        recorder: CallRecorder | None = None,
        *,
        settings: RecorderSettings = DEFAULT_SETTINGS,
        logger: LoggingManager = DEFAULT_LOGGER,
    ) -> None:
        if recorder is None:
            recorder = CallRecorder(type(self).__name__, settings=settings, logger=logger)
        self.recorder = recorder

    def _record(self, call_record: CallRecord, default: Any = None) -> Any:
        self.recorder.record(call_record)
        return self.recorder.stub_value(call_record.operation, default)

    def call_log(self) -> CallLog:
        """Return a read-only snapshot of the calls made on this spy."""
        return self.recorder.call_log()

    def configure_return(
        self,
        operation: str | type[CallRecord],
        value: Any,
        *,
        once: bool = False,
    ) -> None:
        """Stub the return value of ``operation`` without recording a call."""
        self.recorder.configure_return(operation, value, once=once)
