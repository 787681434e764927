"""
BurnPath Errors

Exception and warning types raised by the importers, the scene model and
the toolpath emitter.
"""


class BurnPathError(Exception):
    """Base class for all BurnPath errors."""


class ParseError(BurnPathError):
    """The source document is malformed. No partial result is returned."""


class EmptyResultError(BurnPathError):
    """The source parsed cleanly but produced no usable shapes."""


class DegenerateGeometryError(BurnPathError):
    """
    A curve or segment has no extent (zero length, zero radius).

    Raised by the curve sampler; importers catch it and skip the element.
    """


class LayerRoutingError(BurnPathError, ValueError):
    """An item was placed on a layer whose printing method cannot lower it."""


class UnsupportedEntityWarning(UserWarning):
    """A recognized source entity kind has no converter and was skipped."""
