"""
Exceptions raised by attendance_figure.

- FigureError: base class for everything this package raises itself.
- DataSchemaError: the restaurant table is missing columns or holds values the
  walkthrough cannot use (BYOB outside 0/1, non-constant city population, ...).
- LayoutError: the panel layout matrix and the supplied panels disagree.
- ExportError: a written raster does not have the declared size or resolution.

Errors coming from pandas (network, parsing) and matplotlib are not wrapped.
"""

from __future__ import annotations


class FigureError(Exception):
    """Base class for attendance_figure errors."""


class DataSchemaError(FigureError):
    """Raised when the restaurant table does not match the expected schema."""


class LayoutError(FigureError):
    """
    Raised when a layout matrix cannot be composed from the given panels.

    Examples:
        - A panel id appears in the matrix but no panel was supplied.
        - A panel was supplied but the matrix never references it.
        - A panel's cells do not form a rectangle.
    """


class ExportError(FigureError):
    """Raised when an exported image does not match its declared canvas."""
