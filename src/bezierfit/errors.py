"""Exceptions raised while fitting and handling curve paths."""

from __future__ import annotations


class FitError(Exception):
    """Base exception for curve fitting errors."""


class InvalidInputError(FitError, ValueError):
    """Raised for malformed input data or undefined parameter combinations."""


class DegenerateGeometryError(FitError):
    """Raised when two consecutive vertices coincide (zero-length segment)."""

    def __init__(self, segment_index: int, point: object = None):
        self.segment_index = segment_index
        self.point = point
        message = f"Segment {segment_index} has zero length"
        if point is not None:
            message += f" (vertex {point} repeats)"
        super().__init__(message)


class NumericalInstabilityError(FitError):
    """Raised when the tridiagonal elimination hits a (near) zero pivot."""

    def __init__(self, row: int, pivot: float):
        self.row = row
        self.pivot = pivot
        super().__init__(f"Pivot in row {row} is (near) zero: {pivot!r}")
