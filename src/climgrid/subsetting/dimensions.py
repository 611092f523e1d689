"""Variable, member and generic-dimension subsetters.

Each subsetter slices the data array through ``take`` and re-slices the
matching metadata so that every auxiliary structure stays synchronized.
Requests against a grid lacking the dimension are logged and ignored.
"""

import logging
from typing import Optional, Sequence, Union

import numpy as np

from climgrid.contracts import NotFoundError, OutOfBoundsError, assert_grid, require
from climgrid.core.dimensions import Dim
from climgrid.core.grid import Grid
from climgrid.core.labeled import take

__all__ = ['subset_var', 'subset_members', 'subset_dimension']

logger = logging.getLogger(__name__)


def subset_var(grid: Grid, var: Union[str, Sequence[str]]) -> Grid:
    """Extract one or several variables from a multigrid.

    Parameters
    ----------
    grid : Grid
        Input grid, possibly a multimember multigrid.
    var : str or sequence of str
        Variable name(s), matched exactly. Order is irrelevant: variables
        are always returned in the grid's internal order.

    Returns
    -------
    Grid
        A grid (single variable selected) or a multigrid. The ``variable``
        metadata is tagged ``"variable-subset"``.

    Raises
    ------
    NotFoundError
        If none, or only some, of the requested variables exist.

    Examples
    --------
    >>> sub = subset_var(multigrid, ["tp", "tasmax"])
    >>> sub.variable.names  # internal order kept
    ('tasmax', 'tp')
    """
    if not grid.is_multigrid:
        logger.warning("Argument 'var' was ignored: input grid is not a multigrid object")
        return grid

    requested = {var} if isinstance(var, str) else set(var)
    var_idx = [i for i, name in enumerate(grid.variable.names) if name in requested]
    require(
        len(var_idx) > 0,
        f"Variables indicated in argument 'var' not found: {sorted(requested)}",
        error=NotFoundError,
    )
    require(
        len(var_idx) >= len(requested),
        f"Some variables indicated in argument 'var' not found: "
        f"{sorted(requested - set(grid.variable.names))}",
        error=NotFoundError,
    )

    data = take(grid.data, var_idx, Dim.VAR, drop=True)
    keep_dim = Dim.VAR.value in data.dims
    logger.debug("subset_var: %s -> positions %s (multigrid=%s)", sorted(requested), var_idx, keep_dim)

    return grid.replace(
        data=data,
        variable=grid.variable.take(var_idx).tagged("variable-subset"),
        dates=grid.dates.select_variables(var_idx, keep_dim=keep_dim),
    )


def subset_members(grid: Grid, members: Union[int, Sequence[int]]) -> Grid:
    """Select ensemble members by position.

    Parameters
    ----------
    grid : Grid
        Input multimember grid (possibly a multigrid).
    members : int or sequence of int
        1-based positions of the members to keep (not labels).

    Returns
    -------
    Grid
        Member subset; a single member collapses the ``member`` dimension.
        ``members`` is tagged ``"member-subset"``.

    Raises
    ------
    OutOfBoundsError
        If any position is outside ``[1, n_members]``.
    """
    if not grid.is_multimember:
        logger.warning("Argument 'members' was ignored: input grid is not a multimember grid object")
        return grid

    positions = np.atleast_1d(np.asarray(members)).ravel()
    n_mem = grid.size_of(Dim.MEMBER)
    require(
        positions.size > 0
        and np.issubdtype(positions.dtype, np.integer)
        and bool(np.all((positions >= 1) & (positions <= n_mem))),
        f"'members' dimension subscript out of bounds: {positions.tolist()} (valid: 1..{n_mem})",
        error=OutOfBoundsError,
    )
    mem_idx = positions - 1

    init_dates = grid.init_dates
    if init_dates is not None:
        init_dates = init_dates.take_members(mem_idx)

    return grid.replace(
        data=take(grid.data, mem_idx, Dim.MEMBER, drop=True),
        members=grid.members.take(mem_idx).tagged("member-subset"),
        init_dates=init_dates,
    )


def subset_dimension(grid: Grid, dimension: str, indices: Optional[Sequence[int]] = None) -> Grid:
    """Select arbitrary positions along one named dimension.

    Unlike the semantic subsetters, the dimension is always kept, even for a
    single index.

    Parameters
    ----------
    grid : Grid
        Input grid.
    dimension : str
        One of ``var``, ``member``, ``time``, ``lat``, ``lon``.
    indices : sequence of int, optional
        0-based positions along ``dimension``. If None, the grid is returned
        unchanged with a warning.

    Returns
    -------
    Grid
        Subset grid; the synchronized structure is tagged ``"dimension-subset"``.

    Raises
    ------
    OutOfBoundsError
        If an index is outside the dimension, or ``lon``/``lat`` indices
        are not strictly increasing.

    Examples
    --------
    >>> sub = subset_dimension(grid, "member", [0, 2])
    >>> sub.dims == grid.dims
    True
    """
    if indices is None:
        logger.warning("Argument 'indices' is None and no subsetting has been applied. "
                       "The same input grid is returned.")
        return grid

    dim = Dim(dimension)
    idx = np.atleast_1d(np.asarray(indices, dtype=int)).ravel()
    size = grid.size_of(dim)
    require(
        grid.has_dim(dim) and bool(np.all((idx >= 0) & (idx < size))),
        f"'{dim.value}' dimension subscript out of bounds: {idx.tolist()} (size {size})",
        error=OutOfBoundsError,
    )
    if dim in (Dim.LON, Dim.LAT):
        require(
            bool(np.all(np.diff(idx) > 0)),
            f"'{dim.value}' indices must be strictly increasing to keep coordinates ordered: {idx.tolist()}",
            error=OutOfBoundsError,
        )

    changes = {"data": take(grid.data, idx, dim, drop=False)}
    tag = "dimension-subset"
    if dim is Dim.TIME:
        changes["dates"] = grid.dates.take(idx).tagged(tag)
    elif dim is Dim.LON:
        changes["xy_coords"] = grid.xy_coords.take_x(idx).tagged(tag)
    elif dim is Dim.LAT:
        changes["xy_coords"] = grid.xy_coords.take_y(idx).tagged(tag)
    elif dim is Dim.MEMBER:
        changes["members"] = grid.members.take(idx).tagged(tag)
        if grid.init_dates is not None:
            changes["init_dates"] = grid.init_dates.take_members(idx)
    elif dim is Dim.VAR:
        changes["variable"] = grid.variable.take(idx).tagged(tag)
        changes["dates"] = grid.dates.select_variables(idx, keep_dim=True)

    out = grid.replace(**changes)
    assert_grid(out)
    return out
