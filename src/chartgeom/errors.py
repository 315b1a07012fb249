"""Precondition violations.

Data content never raises: empty or degenerate input yields empty geometry.
These exceptions are reserved for programming misuse.
"""


class ChartGeomError(ValueError):
    """Base class for chartgeom precondition errors."""


class InvalidExtentError(ChartGeomError):
    """A width or height is negative."""


class InvalidRadiusError(ChartGeomError):
    """A hex radius is zero or negative."""


class InvalidScaleError(ChartGeomError):
    """A scale was built with an unusable range (e.g. an empty palette)."""
