"""Exception hierarchy for tai."""

from __future__ import annotations


class TaiError(Exception):
    """Base class for all tai errors."""


class ConfigError(TaiError):
    """Raised when a config file contains a value of the wrong type."""


class HistoryError(TaiError):
    """Raised when the answer history cannot be read or written."""


class SessionFinishedError(TaiError):
    """Raised when a finished stream session is appended to or rendered."""


class RenderError(TaiError):
    """Raised when writing to the output surface fails.

    The underlying exception is chained as ``__cause__``.  Session state is
    left untouched, so the failed call can simply be retried.
    """


class TranscriptError(TaiError):
    """Raised when a recorded stream transcript is malformed."""
