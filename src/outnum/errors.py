"""Errors raised by outline numbering operations."""

from __future__ import annotations


class OutnumError(Exception):
    """Base class for outline numbering errors."""


class HeadingPatternError(OutnumError, ValueError):
    """
    The configured heading pattern cannot support the requested operation,
    e.g. it lacks the `whole` group, or promotion needs the `last` group and
    the pattern did not capture it.
    """


class ScanStalledError(OutnumError, RuntimeError):
    """A heading scan failed to move its cursor forward past a match."""
