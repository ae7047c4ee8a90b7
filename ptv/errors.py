"""Exceptions raised while reading or writing ptvoice data."""

from __future__ import annotations


class PtvError(ValueError):
    """Base class for every ptvoice codec failure."""


class UnsupportedError(PtvError):
    """The data declares a format version newer than this codec understands."""


class InvalidError(PtvError):
    """The data is malformed or contains an illegal value."""


class OverMaxError(PtvError):
    """An in-memory value or collection is too large to encode."""


class PtvIOError(PtvError):
    """The underlying stream failed or ended early.

    The platform error, when there is one, is chained as ``__cause__``.
    """
