"""Grid structure contract.

Enforces the guarantee that a grid's auxiliary structures are synchronized
with its data array. Called by the grid producer and at the end of the
composite subsetting and rescaling operations.
"""

from typing import TYPE_CHECKING

import numpy as np

from climgrid.contracts.base import require
from climgrid.core.dimensions import Dim, is_canonical

if TYPE_CHECKING:
    from climgrid.core.grid import Grid


def _strictly_increasing(values: np.ndarray) -> bool:
    return values.size < 2 or bool(np.all(np.diff(values) > 0))


def assert_grid(grid: "Grid") -> None:
    """Enforce grid structure contract.

    Parameters
    ----------
    grid : Grid
        Grid to verify.

    Raises
    ------
    ContractViolation
        If any invariant is violated
    """
    dims = tuple(grid.data.dims)
    require(
        is_canonical(dims),
        f"Grid contract violated: dimensions {dims} are not in canonical order"
    )
    require(
        grid.data.ndim == len(dims),
        f"Grid contract violated: rank {grid.data.ndim} != {len(dims)} dimension names"
    )

    # Variables
    n_var = grid.size_of(Dim.VAR)
    require(
        len(grid.variable.names) == n_var,
        f"Grid contract violated: {len(grid.variable.names)} variable names for {n_var} variable(s)"
    )
    require(
        len(grid.variable.levels) == len(grid.variable.names),
        "Grid contract violated: variable levels not synchronized with names"
    )
    for key, values in grid.variable.extra.items():
        require(
            len(values) == len(grid.variable.names),
            f"Grid contract violated: variable attribute '{key}' not synchronized with names"
        )

    # Dates
    require(
        grid.dates.per_variable == grid.is_multigrid,
        "Grid contract violated: per-variable dates require (and only go with) a 'var' dimension"
    )
    if grid.dates.per_variable:
        require(
            len(grid.dates.series) == n_var,
            f"Grid contract violated: {len(grid.dates.series)} date series for {n_var} variables"
        )
    n_time = grid.size_of(Dim.TIME)
    for series in grid.dates.all_series():
        require(
            len(series) == n_time,
            f"Grid contract violated: {len(series)} dates for {n_time} time steps"
        )

    # Coordinates
    for dim, coords, axis in ((Dim.LON, grid.xy_coords.x, "x"), (Dim.LAT, grid.xy_coords.y, "y")):
        n = grid.size_of(dim)
        require(
            coords.size == n,
            f"Grid contract violated: {coords.size} {axis} coordinates for '{dim.value}' of size {n}"
        )
        require(
            _strictly_increasing(coords),
            f"Grid contract violated: {axis} coordinates are not strictly increasing"
        )

    # Members
    if grid.is_multimember:
        require(
            grid.members is not None and len(grid.members) == grid.size_of(Dim.MEMBER),
            "Grid contract violated: member labels not synchronized with 'member' dimension"
        )
    if grid.init_dates is not None:
        require(
            grid.members is not None,
            "Grid contract violated: initialization dates without members"
        )
        if grid.init_dates.lagged:
            require(
                len(grid.init_dates.per_member) == len(grid.members),
                "Grid contract violated: lagged initialization dates not synchronized with members"
            )
