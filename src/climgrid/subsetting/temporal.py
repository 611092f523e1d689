"""Year and season subsetters (time dimension).

The time dimension is always retained, even when a single time step is
selected. Both the flat and the per-variable date shapes are handled here,
so these subsetters do not depend on being called after ``subset_var``.
"""

import logging
from typing import Sequence, Union

import numpy as np

from climgrid.contracts import InvalidSeasonError, NoMatchError, OutOfRangeError, require
from climgrid.core.dimensions import Dim
from climgrid.core.grid import Grid
from climgrid.core.labeled import take
from climgrid.core.temporal import get_season, get_years_as_index

__all__ = ['subset_years', 'subset_season']

logger = logging.getLogger(__name__)


def subset_years(grid: Grid, years: Union[int, Sequence[int]]) -> Grid:
    """Select whole (possibly non-contiguous) years.

    Parameters
    ----------
    grid : Grid
        Input grid, possibly a multimember multigrid.
    years : int or sequence of int
        Years to keep. For year-crossing seasons a year refers to the
        January/February year (DJF 2000 = Dec 1999, Jan and Feb 2000).

    Returns
    -------
    Grid
        Time subset in original chronological order; ``dates`` tagged
        ``"year-subset"``.

    Raises
    ------
    NoMatchError
        If none of the years is available in the grid, or years are not integers.
    OutOfRangeError
        If any year lies outside the grid's first and last year.
    """
    requested = np.atleast_1d(np.asarray(years)).ravel()
    require(
        requested.size > 0 and np.issubdtype(requested.dtype, np.integer),
        f"No valid years for subsetting: {requested.tolist()} (integer years expected)",
        error=NoMatchError,
    )
    all_years = get_years_as_index(grid)
    require(
        np.intersect1d(requested, all_years).size > 0,
        f"No valid years for subsetting: {requested.tolist()} not in "
        f"{all_years.min()}-{all_years.max()}",
        error=NoMatchError,
    )
    require(
        bool(np.all((requested >= all_years.min()) & (requested <= all_years.max()))),
        f"Some subset time boundaries outside the current grid extent "
        f"({all_years.min()}-{all_years.max()}): {requested.tolist()}",
        error=OutOfRangeError,
    )

    time_idx = np.flatnonzero(np.isin(all_years, requested))
    logger.debug("subset_years: %s -> %d of %d time steps", requested.tolist(), time_idx.size, all_years.size)

    changes = {
        "data": take(grid.data, time_idx, Dim.TIME),
        "dates": grid.dates.take(time_idx).tagged("year-subset"),
    }
    if grid.init_dates is not None:
        # Position of each selected year among the unique years, chronologically
        unique_years = list(dict.fromkeys(all_years.tolist()))
        year_pos = [i for i, y in enumerate(unique_years) if y in set(requested.tolist())]
        changes["init_dates"] = grid.init_dates.take_years(year_pos)

    return grid.replace(**changes)


def subset_season(grid: Grid, season: Union[int, Sequence[int]]) -> Grid:
    """Select calendar months from the grid's existing season.

    Parameters
    ----------
    grid : Grid
        Input grid, possibly a multimember multigrid.
    season : int or sequence of int
        Months (1-12) to keep; each must already be part of the grid.

    Returns
    -------
    Grid
        Time subset; ``dates`` tagged ``"season-subset"``.

    Raises
    ------
    InvalidSeasonError
        If a month is not an integer or not part of the grid's season.
    """
    months = np.atleast_1d(np.asarray(season)).ravel()
    require(
        months.size > 0 and np.issubdtype(months.dtype, np.integer),
        f"Month selection {months.tolist()} is not a list of integer months",
        error=InvalidSeasonError,
    )
    season0 = get_season(grid)
    require(
        bool(np.all(np.isin(months, season0))),
        f"Month selection {months.tolist()} outside original season values {list(season0)}",
        error=InvalidSeasonError,
    )

    time_idx = np.flatnonzero(np.isin(grid.dates.reference.months, months))
    logger.debug("subset_season: months %s -> %d time steps", months.tolist(), time_idx.size)

    return grid.replace(
        data=take(grid.data, time_idx, Dim.TIME),
        dates=grid.dates.take(time_idx).tagged("season-subset"),
    )
