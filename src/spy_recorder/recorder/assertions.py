"""Compare recorded call logs with expectations and report differences."""

from __future__ import annotations

import dataclasses
import enum
import io
from collections.abc import Sequence

from rich.console import Console
from rich.table import Table

from spy_recorder.config import DEFAULT_SETTINGS, RecorderSettings
from spy_recorder.recorder.spy import CallRecorder, SpyDouble
from spy_recorder.recorder.types import CallLog, CallRecord


class MismatchKind(enum.Enum):
    DIFFERENT_OPERATION = "different_operation"
    DIFFERENT_ARGUMENTS = "different_arguments"
    MISSING = "missing"
    UNEXPECTED = "unexpected"


MISMATCH_LABELS: dict[MismatchKind, str] = {
    MismatchKind.DIFFERENT_OPERATION: "Different operation",
    MismatchKind.DIFFERENT_ARGUMENTS: "Different arguments",
    MismatchKind.MISSING: "Expected call missing",
    MismatchKind.UNEXPECTED: "Unexpected call",
}


@dataclasses.dataclass(frozen=True)
class CallLogMismatch:
    """A single position where the recorded log differs from the expectation."""

    index: int
    kind: MismatchKind
    expected: CallRecord | None
    actual: CallRecord | None


class CallLogAssertionError(AssertionError):
    """Raised when a recorded call log does not match the expected calls."""

    def __init__(self, message: str, mismatches: list[CallLogMismatch]) -> None:
        super().__init__(message)
        self.mismatches = mismatches


def _operation_of(record: object) -> object:
    return getattr(record, "operation", record)


def diff_call_logs(
    actual: Sequence[CallRecord],
    expected: Sequence[CallRecord],
) -> list[CallLogMismatch]:
    """Return every position where ``actual`` and ``expected`` disagree."""

    mismatches: list[CallLogMismatch] = []
    for index in range(max(len(actual), len(expected))):
        if index >= len(actual):
            mismatches.append(CallLogMismatch(index, MismatchKind.MISSING, expected[index], None))
            continue
        if index >= len(expected):
            mismatches.append(CallLogMismatch(index, MismatchKind.UNEXPECTED, None, actual[index]))
            continue

        recorded, wanted = actual[index], expected[index]
        if recorded == wanted:
            continue
        kind = (
            MismatchKind.DIFFERENT_ARGUMENTS
            if type(recorded) is type(wanted) and _operation_of(recorded) == _operation_of(wanted)
            else MismatchKind.DIFFERENT_OPERATION
        )
        mismatches.append(CallLogMismatch(index, kind, wanted, recorded))
    return mismatches


def _render(record: CallRecord | None) -> str:
    return "-" if record is None else repr(record)


def mismatch_table(mismatches: Sequence[CallLogMismatch]) -> Table:
    """Build a Rich table listing the given mismatches."""

    table = Table(show_lines=False, expand=False)
    table.add_column("#", justify="right")
    table.add_column("Problem")
    table.add_column("Expected", overflow="fold")
    table.add_column("Recorded", overflow="fold")
    for mismatch in mismatches:
        table.add_row(
            str(mismatch.index),
            MISMATCH_LABELS[mismatch.kind],
            _render(mismatch.expected),
            _render(mismatch.actual),
        )
    return table


def describe_mismatches(
    mismatches: Sequence[CallLogMismatch],
    *,
    actual_length: int,
    expected_length: int,
    report_all: bool = False,
    limit: int = DEFAULT_SETTINGS.max_reported_mismatches,
) -> list[str]:
    """Render a plain-text report of the first (or all) mismatches."""

    if not mismatches:
        return []

    shown = list(mismatches[:limit]) if report_all else [mismatches[0]]
    lines = [
        f"Call log differs from expectation: {actual_length} calls recorded, "
        f"{expected_length} expected, {len(mismatches)} positions differ."
    ]

    buffer = io.StringIO()
    console = Console(file=buffer, width=240, force_terminal=False, color_system=None)
    console.print(mismatch_table(shown))
    lines.extend(line.rstrip() for line in buffer.getvalue().splitlines() if line.strip())

    hidden = len(mismatches) - len(shown)
    if hidden:
        lines.append(f"... {hidden} more differing positions not shown.")
    return lines


def resolve_call_log(source: CallLog | CallRecorder | SpyDouble | Sequence[CallRecord]) -> CallLog:
    """Return the call log held by a recorder, spy or plain sequence."""

    if isinstance(source, CallLog):
        return source
    if isinstance(source, (CallRecorder, SpyDouble)):
        return source.call_log()
    if isinstance(source, (list, tuple)):
        return CallLog(source)
    raise TypeError(f"cannot read a call log from {source!r}")


def _settings_of(source: object) -> RecorderSettings:
    if isinstance(source, SpyDouble):
        return source.recorder.settings
    if isinstance(source, CallRecorder):
        return source.settings
    return DEFAULT_SETTINGS


def assert_call_log(
    source: CallLog | CallRecorder | SpyDouble | Sequence[CallRecord],
    expected: Sequence[CallRecord],
    *,
    report_all: bool | None = None,
    settings: RecorderSettings | None = None,
) -> None:
    """Fail unless the recorded calls equal ``expected`` position by position."""

    actual = resolve_call_log(source)
    mismatches = diff_call_logs(actual, expected)
    if not mismatches:
        return

    settings = settings or _settings_of(source)
    lines = describe_mismatches(
        mismatches,
        actual_length=len(actual),
        expected_length=len(expected),
        report_all=settings.report_all_mismatches if report_all is None else report_all,
        limit=settings.max_reported_mismatches,
    )
    raise CallLogAssertionError("\n".join(lines), mismatches)


def assert_not_called(source: CallLog | CallRecorder | SpyDouble | Sequence[CallRecord]) -> None:
    """Fail if any call was recorded."""

    assert_call_log(source, [])
