"""Load and validate spy recorder settings from a YAML file."""

from __future__ import annotations

import dataclasses
import os
from collections.abc import Mapping
from typing import Any

import yaml
from yaml import YAMLError

from spy_recorder.recorder.logging_utils import DEFAULT_LOGGER, LoggingManager

CONFIG_ENV_VAR = "SPY_RECORDER_CONFIG"


@dataclasses.dataclass(frozen=True)
class RecorderSettings:
    """Knobs controlling how call logs are reported and logged."""

    report_all_mismatches: bool = False
    max_reported_mismatches: int = 10
    log_calls: bool = False


DEFAULT_SETTINGS = RecorderSettings()

_BOOL_KEYS = ("report_all_mismatches", "log_calls")
_POSITIVE_INT_KEYS = ("max_reported_mismatches",)
_KNOWN_KEYS = {field.name for field in dataclasses.fields(RecorderSettings)}


class SettingsError(ValueError):
    """Raised when a settings file cannot be read or holds invalid values."""

    def __init__(self, source: str, issues: list[str]) -> None:
        self.source = source
        self.issues = issues
        super().__init__(f"{source}: " + "; ".join(issues))


def _log_issue(issue: str, logger: LoggingManager | None) -> None:
    """Log a configuration issue when a logger is provided."""

    if logger:
        logger.log(f"[FAIL] {issue}")


def validate_settings_mapping(
    data: object,
    source: str,
    logger: LoggingManager | None = None,
) -> list[str]:
    """Return issues for a parsed settings document."""

    if data is None:
        return []

    if not isinstance(data, Mapping):
        issue = f"{source}: expected a mapping at the top level, got {type(data).__name__}"
        _log_issue(issue, logger)
        return [issue]

    issues: list[str] = []
    for key in sorted(str(key) for key in data if str(key) not in _KNOWN_KEYS):
        issue = f"{source}: unknown key '{key}' (expected one of {sorted(_KNOWN_KEYS)})"
        issues.append(issue)
        _log_issue(issue, logger)

    for key in _BOOL_KEYS:
        if key in data and not isinstance(data[key], bool):
            issue = f"{source}: {key} should be true or false, got {data[key]!r}"
            issues.append(issue)
            _log_issue(issue, logger)

    for key in _POSITIVE_INT_KEYS:
        if key not in data:
            continue
        value = data[key]
        if isinstance(value, bool) or not isinstance(value, int) or value < 1:
            issue = f"{source}: {key} should be a positive integer, got {value!r}"
            issues.append(issue)
            _log_issue(issue, logger)

    return issues


def settings_from_mapping(
    data: Mapping[str, Any] | None,
    source: str = "<mapping>",
    logger: LoggingManager | None = DEFAULT_LOGGER,
) -> RecorderSettings:
    """Build settings from a parsed document, raising on any issue."""

    issues = validate_settings_mapping(data, source, logger)
    if issues:
        raise SettingsError(source, issues)
    if not data:
        return DEFAULT_SETTINGS
    return dataclasses.replace(DEFAULT_SETTINGS, **dict(data))


def read_settings_document(path: str) -> object:
    """Parse ``path`` as YAML, wrapping read and syntax errors."""

    try:
        with open(path, encoding="utf-8") as handle:
            return yaml.safe_load(handle)
    except OSError as exc:
        raise SettingsError(path, [f"failed to read ({exc})"]) from exc
    except YAMLError as exc:
        raise SettingsError(path, [f"invalid YAML ({exc})"]) from exc


def load_settings(path: str, logger: LoggingManager | None = DEFAULT_LOGGER) -> RecorderSettings:
    """Load settings from a YAML file; an empty file yields the defaults."""

    document = read_settings_document(path)
    settings = settings_from_mapping(document, source=path, logger=logger)  # type: ignore[arg-type]
    if logger:
        logger.debug(f"Loaded recorder settings from {path}: {settings}")
    return settings


def resolve_settings(
    path: str | None = None,
    environ: Mapping[str, str] | None = None,
    logger: LoggingManager | None = DEFAULT_LOGGER,
) -> RecorderSettings:
    """Load settings from ``path``, else ``$SPY_RECORDER_CONFIG``, else defaults."""

    env = os.environ if environ is None else environ
    candidate = path or env.get(CONFIG_ENV_VAR)
    if not candidate:
        return DEFAULT_SETTINGS
    return load_settings(candidate, logger=logger)
