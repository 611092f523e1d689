"""Season and year helpers for grid time axes.

- ``get_season``: months present in the grid, in seasonal order
- ``get_years_as_index``: season-aware year label of every time step
- ``get_coordinates``: spatial coordinate accessor

Year-crossing seasons (e.g. DJF) are labelled with the year of their
January/February months, so that Dec 1999, Jan 2000 and Feb 2000 all belong
to the winter of 2000.
"""

import logging
from typing import TYPE_CHECKING, Tuple

import numpy as np

if TYPE_CHECKING:
    from climgrid.core.grid import Grid, XYCoords

__all__ = ['get_season', 'get_years_as_index', 'get_coordinates', 'season_order']

logger = logging.getLogger(__name__)


def season_order(months) -> Tuple[int, ...]:
    """Order a set of calendar months the way the season runs.

    The season starts right after the largest cyclic gap between present
    months, so {12, 1, 2} becomes (12, 1, 2) and {6, 7, 8} stays (6, 7, 8).
    A full year is always (1, ..., 12).

    Examples
    --------
    >>> season_order([1, 2, 12])
    (12, 1, 2)
    >>> season_order([11, 12, 1, 2, 3])
    (11, 12, 1, 2, 3)
    """
    present = sorted({int(m) for m in months})
    if len(present) <= 1 or len(present) == 12:
        return tuple(present)

    # Gap after each month, wrapping December into January
    gaps = [(present[(i + 1) % len(present)] - m) % 12 for i, m in enumerate(present)]
    if gaps[-1] == max(gaps):
        return tuple(present)
    start = int(np.argmax(gaps)) + 1
    return tuple(present[start:] + present[:start])


def get_season(grid: "Grid") -> Tuple[int, ...]:
    """Months (1-12) present in the grid, in seasonal order.

    Months are read from the start timestamps of the reference date series
    (the first variable's series for multigrids).
    """
    return season_order(np.unique(grid.dates.reference.months))


def get_years_as_index(grid: "Grid") -> np.ndarray:
    """Season-aware year label of every time step.

    Parameters
    ----------
    grid : Grid
        Any grid; flat and per-variable dates are both handled.

    Returns
    -------
    np.ndarray
        Integer year per time step. For year-crossing seasons, months that
        precede the wrap to January are moved to the following year.

    Examples
    --------
    >>> # DJF grid with dates Dec-1999, Jan-2000, Feb-2000, Dec-2000
    >>> get_years_as_index(grid)
    array([2000, 2000, 2000, 2001])
    """
    reference = grid.dates.reference
    years = reference.years.astype(int).copy()
    season = get_season(grid)
    if list(season) != sorted(season):
        wrap = next(i for i in range(1, len(season)) if season[i] < season[i - 1])
        shifted = np.isin(reference.months, season[:wrap])
        years[shifted] += 1
        logger.debug("Year-crossing season %s: %d time steps moved to the next year",
                     season, int(shifted.sum()))
    return years


def get_coordinates(grid: "Grid") -> "XYCoords":
    """Spatial coordinates (``x`` longitudes, ``y`` latitudes) of the grid."""
    return grid.xy_coords
