"""Centralized error taxonomy for grid operations.

Two families of failure exist:

- ``GridError`` subclasses: the caller asked for something the grid cannot
  provide (unknown variable, year outside the period, malformed bounds...).
- ``ContractViolation``: a grid does not satisfy its own structural
  invariants. This indicates a bug in a producer or in a subsetting routine.

Both fail fast. There are no retries and no partial results.
"""


class ContractViolation(RuntimeError):
    """Raised when a grid invariant is violated.

    Key distinction:
    - GridError: bad request against a well-formed grid (caller error)
    - ContractViolation: malformed grid (programmer error)
    """
    pass


class GridError(ValueError):
    """Base class for invalid subsetting or rescaling requests."""
    pass


class NotFoundError(GridError):
    """Requested variable name(s) absent from the grid."""
    pass


class OutOfBoundsError(GridError):
    """Requested member (or index) position outside the valid range."""
    pass


class NoMatchError(GridError):
    """Requested years do not intersect the years available in the grid."""
    pass


class OutOfRangeError(GridError):
    """Requested year or spatial bound outside the grid extent."""
    pass


class OutOfExtentError(OutOfRangeError):
    """Spatial bound outside the coordinate extent of one axis."""
    pass


class InvalidSeasonError(GridError):
    """Requested month is not part of the grid's season."""
    pass


class InvalidBoundsError(GridError):
    """Malformed spatial bound (wrong arity or type)."""
    pass


class DimensionMismatchError(GridError):
    """Predictor, reference and simulation grids are not compatible."""
    pass
