"""Spy doubles that record every intercepted call in one ordered log."""

__version__ = "0.1.0"
