"""Tests for the call recorder and hand-written spies."""

import pytest

from spy_recorder.config import RecorderSettings
from spy_recorder.recorder.assertions import CallLogAssertionError, assert_call_log, assert_not_called
from spy_recorder.recorder.spy import CallRecorder
from spy_recorder.recorder.types import Call
from tests.helpers import (
    Address,
    AddressListPresenter,
    AnalyticsSpy,
    AnalyticsTracker,
    RecordingLogger,
    TrackAddressDeletion,
    TrackAddressHighlight,
    TrackScreenView,
)


class _StubStore:
    def __init__(self, addresses: list[Address], deletes: bool = True):
        self.addresses = addresses
        self.deletes = deletes

    def fetch_addresses(self, user_id: str, *, limit: int = 10) -> list[Address]:  # noqa: ARG002
        return list(self.addresses)

    def delete_address(self, address: Address) -> bool:  # noqa: ARG002
        return self.deletes


HOME = Address("Main St", 1)
WORK = Address("Side St", 2)


def test_log_matches_invocations_in_order():
    """Given a presenter, when it loads and highlights, then both calls are logged in order."""

    tracker = AnalyticsSpy()
    presenter = AddressListPresenter(tracker, _StubStore([HOME, WORK]))

    presenter.load()
    presenter.highlight(1)

    assert tracker.call_log() == [TrackScreenView(), TrackAddressHighlight(WORK)]


def test_repeated_calls_are_logged_twice():
    tracker = AnalyticsSpy()

    tracker.track_screen_view()
    tracker.track_screen_view()

    assert tracker.call_log() == [TrackScreenView(), TrackScreenView()]
    assert tracker.call_log().count(TrackScreenView()) == 2


def test_order_is_significant():
    tracker = AnalyticsSpy()

    tracker.track_screen_view()
    tracker.track_address_deletion()

    assert_call_log(tracker, [TrackScreenView(), TrackAddressDeletion()])
    with pytest.raises(CallLogAssertionError):
        assert_call_log(tracker, [TrackAddressDeletion(), TrackScreenView()])


def test_untouched_spy_has_empty_log():
    tracker = AnalyticsSpy()

    assert tracker.call_log() == []
    assert_not_called(tracker)
    with pytest.raises(CallLogAssertionError):
        assert_call_log(tracker, [TrackScreenView()])


def test_argument_values_are_compared():
    """A matching case with a different address still fails the assertion."""

    tracker = AnalyticsSpy()

    tracker.track_address_highlight(HOME)

    assert tracker.call_log() == [TrackAddressHighlight(HOME)]
    with pytest.raises(CallLogAssertionError):
        assert_call_log(tracker, [TrackAddressHighlight(WORK)])


def test_failed_deletion_is_not_tracked():
    tracker = AnalyticsSpy()
    presenter = AddressListPresenter(tracker, _StubStore([HOME], deletes=False))

    presenter.load()
    presenter.delete(0)

    assert tracker.call_log() == [TrackScreenView()]
    assert presenter.addresses == [HOME]


def test_spies_never_share_history():
    first = AnalyticsSpy()
    second = AnalyticsSpy()

    first.track_screen_view()

    assert first.call_log() == [TrackScreenView()]
    assert second.call_log() == []


def test_spy_satisfies_interface():
    assert isinstance(AnalyticsSpy(), AnalyticsTracker)


def test_snapshot_does_not_see_later_calls():
    recorder = CallRecorder()
    recorder.record(Call.of("first"))

    snapshot = recorder.call_log()
    recorder.record(Call.of("second"))

    assert snapshot == [Call.of("first")]
    assert recorder.call_log() == [Call.of("first"), Call.of("second")]


def test_record_rejects_non_records():
    recorder = CallRecorder("strict")

    with pytest.raises(TypeError, match="strict"):
        recorder.record("track_screen_view")  # type: ignore[arg-type]


def test_configure_return_does_not_record():
    recorder = CallRecorder()

    recorder.configure_return("fetch", [HOME])

    assert recorder.call_log() == []
    assert recorder.stub_value("fetch") == [HOME]
    assert recorder.stub_value("fetch") == [HOME]


def test_one_shot_returns_are_consumed_in_order():
    recorder = CallRecorder()
    recorder.configure_return("fetch", "always")
    recorder.configure_return("fetch", "first", once=True)
    recorder.configure_return("fetch", "second", once=True)

    assert [recorder.stub_value("fetch") for _ in range(3)] == ["first", "second", "always"]


def test_stub_value_falls_back_to_default():
    recorder = CallRecorder()
    recorder.configure_return(TrackScreenView, None)

    assert recorder.stub_value("unknown", default=7) == 7
    assert recorder.stub_value("track_screen_view", default=7) is None


def test_spy_returns_configured_value_through_record():
    tracker = AnalyticsSpy()
    tracker.configure_return(TrackAddressHighlight, "ok", once=True)

    assert tracker._record(TrackAddressHighlight(HOME)) == "ok"
    assert tracker._record(TrackAddressHighlight(HOME), default="fallback") == "fallback"
    assert tracker.call_log() == [TrackAddressHighlight(HOME), TrackAddressHighlight(HOME)]


def test_log_calls_setting_emits_debug_lines():
    logger = RecordingLogger()
    recorder = CallRecorder("tracker", settings=RecorderSettings(log_calls=True), logger=logger)

    recorder.record(TrackScreenView())

    assert logger.messages == ["DEBUG:[tracker] call #1: TrackScreenView()"]


def test_calls_are_not_logged_by_default():
    logger = RecordingLogger()
    recorder = CallRecorder("tracker", logger=logger)

    recorder.record(TrackScreenView())

    assert logger.messages == []
