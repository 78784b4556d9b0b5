"""Exceptions raised by the loader and the repository."""

from __future__ import annotations


class CovidStatsError(Exception):
    """Base class for every error raised by the engine."""


class LoadError(CovidStatsError):
    """The source could not be read or is structurally malformed."""


class NotLoadedError(CovidStatsError):
    """A query ran before the repository finished loading."""


class WindowNotSetError(CovidStatsError):
    """A window-scoped query ran before the window was ever recomputed."""


class IncompleteRangeError(CovidStatsError):
    """The window was recomputed while a date bound was still unset."""


class NoKnownValueError(CovidStatsError):
    """Every candidate record carries the unknown sentinel (or there were none)."""
