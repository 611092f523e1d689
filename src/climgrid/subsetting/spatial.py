"""Spatial (bounding box / single point) subsetter.

Bounds are resolved to the nearest grid coordinate (minimum absolute
difference); there is no interpolation. A scalar bound selects a single
grid point and collapses that axis; a 2-element bound selects the
inclusive index range between the two nearest points.
"""

import logging
from typing import Optional, Sequence, Tuple, Union

import numpy as np

from climgrid.contracts import InvalidBoundsError, OutOfExtentError, require
from climgrid.core.dimensions import Dim
from climgrid.core.grid import Grid
from climgrid.core.labeled import take
from climgrid.core.temporal import get_coordinates

__all__ = ['subset_spatial', 'nearest_index']

logger = logging.getLogger(__name__)

Bound = Union[float, Sequence[float]]


def nearest_index(coords: np.ndarray, value: float) -> int:
    """Index of the coordinate closest to ``value`` (first one on ties)."""
    return int(np.argmin(np.abs(np.asarray(coords) - value)))


def _parse_bound(lim: Bound, axis_name: str) -> np.ndarray:
    try:
        values = np.asarray(lim, dtype=float)
    except (TypeError, ValueError):
        raise InvalidBoundsError(f"Invalid {axis_name} boundary definition: {lim!r}") from None
    require(
        values.ndim <= 1 and 1 <= values.size <= 2 and bool(np.all(np.isfinite(values))),
        f"Invalid {axis_name} boundary definition: {lim!r} (expected a number or a 2-element range)",
        error=InvalidBoundsError,
    )
    return values.ravel()


def _axis_indices(coords: np.ndarray, lim: Bound, axis_name: str) -> Tuple[np.ndarray, bool]:
    """Resolve a bound into coordinate indices and whether the axis collapses."""
    bounds = _parse_bound(lim, axis_name)
    lo, hi = float(coords.min()), float(coords.max())
    for b in bounds:
        require(
            lo <= b <= hi,
            f"Subset {axis_name} boundaries outside the current grid extent: "
            f"{bounds.tolist()} not within ({lo}, {hi})",
            error=OutOfExtentError,
        )

    first = nearest_index(coords, bounds[0])
    if bounds.size == 1:
        return np.array([first]), True
    second = nearest_index(coords, bounds[1])
    return np.arange(min(first, second), max(first, second) + 1), False


def subset_spatial(grid: Grid, lon_lim: Optional[Bound] = None, lat_lim: Optional[Bound] = None) -> Grid:
    """Spatial subset of a grid.

    Parameters
    ----------
    grid : Grid
        Input grid, possibly a multimember multigrid.
    lon_lim : float or (float, float), optional
        Longitude of a single point, or (min, max) of the bounding box.
        If None, the longitude axis is untouched.
    lat_lim : float or (float, float), optional
        Same as ``lon_lim`` for latitude.

    Returns
    -------
    Grid
        Spatial subset; ``xy_coords`` tagged ``"spatial-subset"``.

    Raises
    ------
    InvalidBoundsError
        If a bound is not a number or a 2-element range.
    OutOfExtentError
        If a bound lies outside the axis extent (an ``OutOfRangeError``).

    Examples
    --------
    >>> box = subset_spatial(grid, lon_lim=(-10, 5), lat_lim=(36, 44))
    >>> point = subset_spatial(grid, lon_lim=-3.21, lat_lim=41.087)
    >>> "lon" in point.dims
    False
    """
    data = grid.data
    coords = get_coordinates(grid)

    # Longitude first: a collapsed lon axis shifts the lat axis position,
    # so take() re-resolves positions from the current dims on each pass.
    if lon_lim is not None:
        lon_idx, drop = _axis_indices(coords.x, lon_lim, "longitude")
        data = take(data, lon_idx, Dim.LON, drop=drop)
        coords = coords.take_x(lon_idx)
        logger.debug("subset_spatial: lon %s -> %d point(s), dims=%s", lon_lim, lon_idx.size, data.dims)

    if lat_lim is not None:
        lat_idx, drop = _axis_indices(coords.y, lat_lim, "latitude")
        data = take(data, lat_idx, Dim.LAT, drop=drop)
        coords = coords.take_y(lat_idx)
        logger.debug("subset_spatial: lat %s -> %d point(s), dims=%s", lat_lim, lat_idx.size, data.dims)

    return grid.replace(data=data, xy_coords=coords.tagged("spatial-subset"))
