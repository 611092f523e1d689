"""Composite subsetting along several dimensions in one call.

The subsetters are applied in a fixed order:

    variable -> member -> year -> season -> spatial

Variable selection runs first so that the date shape (flat or per
variable) seen by the time subsetters is already final.
"""

import logging
from typing import Optional, Sequence, Union

import numpy as np

from climgrid.contracts import assert_grid
from climgrid.core.grid import Grid
from climgrid.subsetting.dimensions import subset_members, subset_var
from climgrid.subsetting.spatial import Bound, subset_spatial
from climgrid.subsetting.temporal import subset_season, subset_years

__all__ = ['subset_grid']

logger = logging.getLogger(__name__)


def _given(arg) -> bool:
    """True for a non-empty argument (scalars count as given)."""
    if arg is None:
        return False
    if isinstance(arg, str):
        return len(arg) > 0
    return np.ndim(arg) == 0 or len(arg) > 0


def subset_grid(
    grid: Grid,
    var: Optional[Union[str, Sequence[str]]] = None,
    members: Optional[Union[int, Sequence[int]]] = None,
    years: Optional[Union[int, Sequence[int]]] = None,
    season: Optional[Union[int, Sequence[int]]] = None,
    lon_lim: Optional[Bound] = None,
    lat_lim: Optional[Bound] = None,
) -> Grid:
    """Select an arbitrary subset of a grid along one or more dimensions.

    Parameters
    ----------
    grid : Grid
        Input grid, multigrid or multimember (multi)grid.
    var : str or sequence of str, optional
        Variable(s) to extract from a multigrid (order-insensitive).
    members : int or sequence of int, optional
        1-based member positions.
    years : int or sequence of int, optional
        Years to keep (season-aware for year-crossing seasons).
    season : int or sequence of int, optional
        Months to keep.
    lon_lim, lat_lim : float or (float, float), optional
        Single point or bounding-box limits.

    Returns
    -------
    Grid
        A new grid; arguments left as None (or empty) are not applied.

    Examples
    --------
    >>> sub = subset_grid(forecast, members=[3, 7], lon_lim=(-10, 5), lat_lim=(36, 44))
    >>> winter = subset_grid(multigrid, var="tas", season=[12, 1, 2], years=range(1991, 2001))
    """
    if _given(var):
        grid = subset_var(grid, var)
    if _given(members):
        grid = subset_members(grid, members)
    if _given(years):
        grid = subset_years(grid, years)
    if _given(season):
        grid = subset_season(grid, season)
    if _given(lon_lim) or _given(lat_lim):
        grid = subset_spatial(
            grid,
            lon_lim if _given(lon_lim) else None,
            lat_lim if _given(lat_lim) else None,
        )

    assert_grid(grid)
    logger.debug("subset_grid: result dims=%s, shape=%s", grid.dims, grid.data.shape)
    return grid
