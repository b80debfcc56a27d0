"""pytest fixtures creating fresh spies per test and explaining log mismatches."""

from __future__ import annotations

from collections.abc import Iterator
from typing import TypeVar

import pytest

from spy_recorder.config import RecorderSettings, SettingsError, resolve_settings
from spy_recorder.recorder.assertions import describe_mismatches, diff_call_logs
from spy_recorder.recorder.auto import spy_for
from spy_recorder.recorder.logging_utils import DEFAULT_LOGGER
from spy_recorder.recorder.spy import CallRecorder, SpyDouble
from spy_recorder.recorder.types import CallLog

INI_OPTION = "spy_recorder_config"
SETTINGS_KEY = pytest.StashKey[RecorderSettings]()

InterfaceT = TypeVar("InterfaceT")


def pytest_addoption(parser: pytest.Parser) -> None:
    parser.addini(
        INI_OPTION,
        help="Path to a spy recorder YAML settings file (relative to the rootdir).",
        default="",
    )


def pytest_configure(config: pytest.Config) -> None:
    """Load recorder settings once per session."""
    configured = config.getini(INI_OPTION)
    path = str(config.rootpath / configured) if configured else None
    try:
        config.stash[SETTINGS_KEY] = resolve_settings(path)
    except SettingsError as exc:
        raise pytest.UsageError(f"invalid spy recorder settings: {exc}") from exc


def _settings(config: pytest.Config) -> RecorderSettings:
    return config.stash.get(SETTINGS_KEY, RecorderSettings())


@pytest.fixture(scope="session")
def spy_recorder_settings(pytestconfig: pytest.Config) -> RecorderSettings:
    """Settings resolved from the ini option or ``$SPY_RECORDER_CONFIG``."""
    return _settings(pytestconfig)


@pytest.fixture
def call_recorder(request: pytest.FixtureRequest, spy_recorder_settings: RecorderSettings) -> Iterator[CallRecorder]:
    """A recorder owned by the requesting test and dropped afterwards."""
    recorder = CallRecorder(request.node.name, settings=spy_recorder_settings)
    yield recorder
    DEFAULT_LOGGER.debug(f"Discarding {recorder!r}")


class SpyFactory:
    """Create auto spies bound to the lifetime of one test."""

    def __init__(self, owner: str, settings: RecorderSettings) -> None:
        self.owner = owner
        self.settings = settings
        self.spies: list[SpyDouble] = []

    def __call__(self, interface: type[InterfaceT]) -> InterfaceT:
        spy_class = spy_for(interface)
        spy = spy_class(CallRecorder(f"{self.owner}:{interface.__name__}", settings=self.settings))
        self.spies.append(spy)
        return spy  # type: ignore[return-value]

    def close(self) -> None:
        DEFAULT_LOGGER.debug(f"Discarding {len(self.spies)} spies created by {self.owner}")
        self.spies.clear()


@pytest.fixture
def spy_factory(request: pytest.FixtureRequest, spy_recorder_settings: RecorderSettings) -> Iterator[SpyFactory]:
    """Callable building a fresh auto spy for an interface: ``spy_factory(Tracker)``."""
    factory = SpyFactory(request.node.name, spy_recorder_settings)
    yield factory
    factory.close()


def pytest_assertrepr_compare(config: pytest.Config, op: str, left: object, right: object) -> list[str] | None:
    """Explain failing ``CallLog == [...]`` comparisons position by position."""
    if op != "==":
        return None

    if isinstance(left, CallLog) and isinstance(right, (CallLog, list, tuple)):
        actual, expected = left, right
    elif isinstance(right, CallLog) and isinstance(left, (list, tuple)):
        actual, expected = right, left
    else:
        return None

    mismatches = diff_call_logs(actual, expected)
    if not mismatches:
        return None

    settings = _settings(config)
    return ["recorded call log == expected calls"] + describe_mismatches(
        mismatches,
        actual_length=len(actual),
        expected_length=len(expected),
        report_all=settings.report_all_mismatches,
        limit=settings.max_reported_mismatches,
    )
