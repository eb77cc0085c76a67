"""Exceptions raised by the percolation model."""


class InvalidArgument(ValueError):
    """Raised for non-positive sizes or coordinates outside the grid."""


class OutOfRange(IndexError):
    """Raised when a union-find index falls outside its universe."""
