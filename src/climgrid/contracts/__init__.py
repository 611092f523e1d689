"""Grid contracts: error taxonomy and fail-fast invariant checks.

Contracts fail immediately and loudly when a grid does not hold its
promised structure, or when a request cannot be satisfied by a grid.

Key principle:
- Pydantic validates config correctness
- Contracts validate grid structure and request validity
- Subsetters and the rescaler compute on grids that passed them
"""

from climgrid.contracts.failure import (
    ContractViolation,
    GridError,
    NotFoundError,
    OutOfBoundsError,
    NoMatchError,
    OutOfRangeError,
    OutOfExtentError,
    InvalidSeasonError,
    InvalidBoundsError,
    DimensionMismatchError,
)
from climgrid.contracts.base import require
from climgrid.contracts.grid import assert_grid
from climgrid.contracts.rescaling import assert_rescalable

__all__ = [
    "ContractViolation",
    "GridError",
    "NotFoundError",
    "OutOfBoundsError",
    "NoMatchError",
    "OutOfRangeError",
    "OutOfExtentError",
    "InvalidSeasonError",
    "InvalidBoundsError",
    "DimensionMismatchError",
    "require",
    "assert_grid",
    "assert_rescalable",
]
