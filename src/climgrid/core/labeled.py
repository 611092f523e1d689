"""Slicing primitive and reshaping helpers for labeled grid arrays.

Grid data is an ``xarray.DataArray`` whose ``dims`` are the dimension-tag
list. ``take`` is the one place where a dimension is either kept or
collapsed; every subsetter goes through it.
"""

import logging
from typing import Sequence, Tuple

import numpy as np
import xarray as xr

from climgrid.contracts.base import require
from climgrid.core.dimensions import Dim, position_of

__all__ = ['take', 'array3d_to_mat2d', 'mat2d_to_array3d']

logger = logging.getLogger(__name__)


def take(data: xr.DataArray, indices: Sequence[int], dim: str, drop: bool = False) -> xr.DataArray:
    """Extract ``indices`` along the named dimension ``dim``.

    Parameters
    ----------
    data : xr.DataArray
        Labeled array; ``data.dims`` is the dimension-tag list.

    indices : sequence of int
        0-based positions along ``dim``, in the order they should appear.

    dim : str
        Dimension name (``var``, ``member``, ``time``, ``lat`` or ``lon``).

    drop : bool, default False
        If True and exactly one index is given, the dimension is removed
        from both the array rank and the tag list. Otherwise rank and tags
        are preserved, even for a single index.

    Returns
    -------
    xr.DataArray
        The sub-array. Basic (single index) selections may share memory
        with ``data``.

    Raises
    ------
    ContractViolation
        If ``dim`` is not one of the array's dimensions or no index is given.

    Examples
    --------
    >>> take(da, [0, 2], "var").dims          # ('var', 'time', 'lat', 'lon')
    >>> take(da, [1], "var", drop=True).dims  # ('time', 'lat', 'lon')
    """
    dim = Dim(dim).value
    axis = position_of(data.dims, dim)
    require(
        axis is not None,
        f"Slicing contract violated: dimension '{dim}' not in {tuple(data.dims)}"
    )
    idx = np.asarray(indices, dtype=int).ravel()
    require(idx.size > 0, f"Slicing contract violated: no indices given for '{dim}'")

    if drop and idx.size == 1:
        out = data.isel({dim: int(idx[0])}, drop=True)
    else:
        out = data.isel({dim: idx})

    logger.debug("take: dim=%s, n=%d, drop=%s, dims %s -> %s",
                 dim, idx.size, drop, data.dims, out.dims)
    return out


def array3d_to_mat2d(arr: np.ndarray) -> np.ndarray:
    """Flatten a (time, lat, lon) array into a (time, lat*lon) matrix.

    Space is flattened in C order, so ``mat2d_to_array3d`` with the same
    spatial shape is its exact inverse. Arrays with fewer spatial axes
    (point series) are accepted and become (time, n) matrices.
    """
    arr = np.asarray(arr)
    require(arr.ndim >= 1, "Reshape contract violated: array has no time axis")
    return arr.reshape(arr.shape[0], -1)


def mat2d_to_array3d(mat: np.ndarray, spatial_shape: Tuple[int, ...]) -> np.ndarray:
    """Inverse of ``array3d_to_mat2d`` for a (time, space) matrix."""
    mat = np.asarray(mat)
    require(
        mat.ndim == 2 and mat.shape[1] == int(np.prod(spatial_shape, dtype=int)),
        f"Reshape contract violated: matrix {mat.shape} does not match spatial shape {tuple(spatial_shape)}"
    )
    return mat.reshape((mat.shape[0],) + tuple(spatial_shape))
