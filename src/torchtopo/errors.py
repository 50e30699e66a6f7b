"""Exceptions raised by torchtopo.

Each exception subclasses the built-in exception that describes the same
failure, so callers may catch either the specific class or the built-in one.
"""


class InvalidPermutation(ValueError):
    """The half-edge ``next`` array is not a valid permutation.

    Raised for odd-length or out-of-range input, and when an orbit trace
    fails to return to its seed (the array is not a bijection).
    """


class IndexOutOfRange(IndexError):
    """A row or simplex index lies outside the known shape."""


class ShapeMismatch(ValueError):
    """Two connection matrices do not share the index space they must share."""


class UnsortedInputViolation(ValueError):
    """Column indices within a row of a connection matrix are not ascending."""


class UnsupportedOperation(NotImplementedError):
    """The requested operation has no defined semantics."""
