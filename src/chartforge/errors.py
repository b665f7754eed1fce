"""Exception hierarchy for chartforge.

All errors raised by the library derive from :class:`ChartError` so callers
can catch a single type.  Option problems are also ``ValueError`` instances
because they describe bad arguments.
"""

from __future__ import annotations


class ChartError(Exception):
    """Base class for every error raised while building or encoding a chart."""


class InvalidOptionsError(ChartError, ValueError):
    """Raised when chart options can not be rendered.

    The message names the offending field, e.g. ``"invalid y-axis index"``.
    Validation happens before any drawing so nothing is emitted on failure.
    """


class FormatError(ChartError):
    """Raised when a user supplied value or label formatter fails."""


class BackendError(ChartError):
    """Raised when a drawing back-end fails to encode its output."""


__all__ = ["ChartError", "InvalidOptionsError", "FormatError", "BackendError"]
