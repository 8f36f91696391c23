"""Exception hierarchy for building and querying a MIP index.

Callers can catch ``MipsError`` for any failure raised by this package, or
one of the subclasses to react to a specific condition: bad caller input,
a failed nearest-neighbour index build, use before build, or a broken
contract between the reduction and its nearest-neighbour collaborator.
"""

__all__ = [
    "MipsError",
    "InvalidInputError",
    "BuildError",
    "NotBuiltError",
    "InternalInconsistencyError",
    "AlreadyBuiltError",
]


class MipsError(RuntimeError):
    """Base exception for MIP index failures."""


class InvalidInputError(MipsError, ValueError):
    """Raised when vectors, dimensions, ratios or top-k values are invalid."""


class BuildError(MipsError):
    """Raised when the nearest-neighbour index cannot be constructed."""


class NotBuiltError(MipsError):
    """Raised when an index is used outside its Unbuilt -> Built lifecycle."""


class InternalInconsistencyError(MipsError):
    """Raised when the nearest-neighbour index returns an invalid candidate."""

    def __init__(self, message, candidate_id=None, count=None):
        super().__init__(message)
        self.candidate_id = candidate_id
        self.count = count


class AlreadyBuiltError(MipsError):
    """Raised on a second build; an index is built exactly once."""
