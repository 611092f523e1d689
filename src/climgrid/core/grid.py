"""Grid data model.

A ``Grid`` bundles a labeled array with the coordinate and metadata
structures that must be re-sliced in lockstep with it:

- ``variable``: per-variable names, vertical levels and extra attributes
- ``xy_coords``: longitude (x) and latitude (y) vectors
- ``dates``: per-time-step start/end timestamps, flat or per variable
- ``members`` / ``init_dates``: ensemble labels and initialization dates

Every structure is an immutable value. Subsetters build new values with
``take``-style methods and ``Grid.replace``; nothing is modified in place.
Each substructure carries a ``provenance`` tag naming the last subsetting
operation that touched it.
"""

import dataclasses
import logging
import types
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Sequence, Tuple, Union

import numpy as np
import pandas as pd
import xarray as xr

from climgrid.contracts.base import require
from climgrid.contracts.grid import assert_grid
from climgrid.core.dimensions import Dim, position_of

__all__ = [
    'DateRange', 'FlatDates', 'PerVariableDates', 'GridDates',
    'FlatInitDates', 'LaggedInitDates', 'InitDates',
    'VariableInfo', 'XYCoords', 'Members', 'Grid', 'make_grid',
]

logger = logging.getLogger(__name__)


def _positions(indices: Sequence[int]) -> np.ndarray:
    return np.asarray(indices, dtype=int).ravel()


class _Tagged:
    """Provenance stamping for immutable metadata values."""

    def tagged(self, provenance: str):
        return dataclasses.replace(self, provenance=provenance)


# =============================================================================
# Dates
# =============================================================================

@dataclass(frozen=True, eq=False)
class DateRange:
    """Start and end timestamps of every time step."""
    start: pd.DatetimeIndex
    end: pd.DatetimeIndex

    def __post_init__(self):
        object.__setattr__(self, "start", pd.DatetimeIndex(self.start))
        object.__setattr__(self, "end", pd.DatetimeIndex(self.end))
        require(
            len(self.start) == len(self.end),
            f"Dates contract violated: {len(self.start)} start vs {len(self.end)} end timestamps"
        )

    def __len__(self) -> int:
        return len(self.start)

    @property
    def months(self) -> np.ndarray:
        return np.asarray(self.start.month)

    @property
    def years(self) -> np.ndarray:
        return np.asarray(self.start.year)

    def take(self, indices: Sequence[int]) -> "DateRange":
        idx = _positions(indices)
        return DateRange(self.start[idx], self.end[idx])

    def equals(self, other: "DateRange") -> bool:
        return self.start.equals(other.start) and self.end.equals(other.end)


@dataclass(frozen=True, eq=False)
class FlatDates(_Tagged):
    """Single date series, used when the grid has no ``var`` dimension."""
    series: DateRange
    provenance: Optional[str] = None

    per_variable = False

    @property
    def reference(self) -> DateRange:
        return self.series

    def all_series(self) -> Tuple[DateRange, ...]:
        return (self.series,)

    def take(self, indices: Sequence[int]) -> "FlatDates":
        """Time slice."""
        return FlatDates(self.series.take(indices), self.provenance)

    def select_variables(self, indices: Sequence[int], keep_dim: bool) -> "FlatDates":
        # A flat series is shared by all variables
        return self

    def equals(self, other) -> bool:
        return isinstance(other, FlatDates) and self.series.equals(other.series)


@dataclass(frozen=True, eq=False)
class PerVariableDates(_Tagged):
    """One date series per variable of a multigrid.

    Series may hold different timestamps (variables loaded from different
    sources) but always share the length of the ``time`` dimension.
    """
    series: Tuple[DateRange, ...]
    provenance: Optional[str] = None

    per_variable = True

    def __post_init__(self):
        object.__setattr__(self, "series", tuple(self.series))

    @property
    def reference(self) -> DateRange:
        """Series used to derive months and years (the first variable's)."""
        return self.series[0]

    def all_series(self) -> Tuple[DateRange, ...]:
        return self.series

    def take(self, indices: Sequence[int]) -> "PerVariableDates":
        """Time slice applied to every variable's series."""
        return PerVariableDates(tuple(s.take(indices) for s in self.series), self.provenance)

    def select_variables(self, indices: Sequence[int], keep_dim: bool) -> Union["PerVariableDates", FlatDates]:
        """Variable slice; unwraps to ``FlatDates`` when the dimension collapses."""
        idx = _positions(indices)
        if keep_dim:
            return PerVariableDates(tuple(self.series[i] for i in idx), self.provenance)
        return FlatDates(self.series[idx[0]], self.provenance)

    def equals(self, other) -> bool:
        return (
            isinstance(other, PerVariableDates)
            and len(self.series) == len(other.series)
            and all(a.equals(b) for a, b in zip(self.series, other.series))
        )


GridDates = Union[FlatDates, PerVariableDates]


# =============================================================================
# Initialization dates
# =============================================================================

@dataclass(frozen=True, eq=False)
class FlatInitDates:
    """One initialization date per year (season), shared by all members."""
    values: pd.DatetimeIndex

    lagged = False

    def __post_init__(self):
        object.__setattr__(self, "values", pd.DatetimeIndex(self.values))

    def take_years(self, positions: Sequence[int]) -> "FlatInitDates":
        return FlatInitDates(self.values[_positions(positions)])

    def take_members(self, positions: Sequence[int]) -> "FlatInitDates":
        # Shared by every member: nothing to slice
        return self

    def equals(self, other) -> bool:
        return isinstance(other, FlatInitDates) and self.values.equals(other.values)


@dataclass(frozen=True, eq=False)
class LaggedInitDates:
    """Lagged-runtime ensembles: one list of per-year init dates per member."""
    per_member: Tuple[pd.DatetimeIndex, ...]

    lagged = True

    def __post_init__(self):
        object.__setattr__(self, "per_member", tuple(pd.DatetimeIndex(v) for v in self.per_member))

    def take_years(self, positions: Sequence[int]) -> "LaggedInitDates":
        idx = _positions(positions)
        return LaggedInitDates(tuple(v[idx] for v in self.per_member))

    def take_members(self, positions: Sequence[int]) -> "LaggedInitDates":
        return LaggedInitDates(tuple(self.per_member[i] for i in _positions(positions)))

    def equals(self, other) -> bool:
        return (
            isinstance(other, LaggedInitDates)
            and len(self.per_member) == len(other.per_member)
            and all(a.equals(b) for a, b in zip(self.per_member, other.per_member))
        )


InitDates = Union[FlatInitDates, LaggedInitDates]


# =============================================================================
# Variable, coordinates, members
# =============================================================================

@dataclass(frozen=True, eq=False)
class VariableInfo(_Tagged):
    """Per-variable metadata, ordered like the ``var`` dimension."""
    names: Tuple[str, ...]
    levels: Tuple[Any, ...]
    extra: Mapping[str, Tuple[Any, ...]] = field(default_factory=dict)
    provenance: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, "names", tuple(self.names))
        object.__setattr__(self, "levels", tuple(self.levels))
        object.__setattr__(self, "extra", types.MappingProxyType({k: tuple(v) for k, v in self.extra.items()}))

    def __len__(self) -> int:
        return len(self.names)

    def take(self, indices: Sequence[int]) -> "VariableInfo":
        idx = _positions(indices)
        return VariableInfo(
            names=tuple(self.names[i] for i in idx),
            levels=tuple(self.levels[i] for i in idx),
            extra={k: tuple(v[i] for i in idx) for k, v in self.extra.items()},
            provenance=self.provenance,
        )

    def equals(self, other) -> bool:
        return (
            isinstance(other, VariableInfo)
            and self.names == other.names
            and self.levels == other.levels
            and dict(self.extra) == dict(other.extra)
        )


@dataclass(frozen=True, eq=False)
class XYCoords(_Tagged):
    """Longitude (x) and latitude (y) vectors, strictly increasing and read-only."""
    x: np.ndarray
    y: np.ndarray
    provenance: Optional[str] = None

    def __post_init__(self):
        for axis in ("x", "y"):
            values = np.atleast_1d(np.array(getattr(self, axis), dtype=float))
            values.flags.writeable = False
            object.__setattr__(self, axis, values)

    def take_x(self, indices: Sequence[int]) -> "XYCoords":
        return XYCoords(self.x[_positions(indices)], self.y.copy(), self.provenance)

    def take_y(self, indices: Sequence[int]) -> "XYCoords":
        return XYCoords(self.x.copy(), self.y[_positions(indices)], self.provenance)

    def equals(self, other) -> bool:
        return (
            isinstance(other, XYCoords)
            and np.array_equal(self.x, other.x)
            and np.array_equal(self.y, other.y)
        )


@dataclass(frozen=True, eq=False)
class Members(_Tagged):
    """Ensemble member labels, ordered like the ``member`` dimension."""
    labels: Tuple[str, ...]
    provenance: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, "labels", tuple(self.labels))

    def __len__(self) -> int:
        return len(self.labels)

    def take(self, indices: Sequence[int]) -> "Members":
        return Members(tuple(self.labels[i] for i in _positions(indices)), self.provenance)

    def equals(self, other) -> bool:
        return isinstance(other, Members) and self.labels == other.labels


# =============================================================================
# Grid
# =============================================================================

@dataclass(frozen=True, eq=False)
class Grid:
    """Gridded climate dataset.

    Attributes
    ----------
    data : xr.DataArray
        Values with dims drawn from ``var, member, time, lat, lon`` in that
        relative order. ``data.dims`` is the dimension-tag list.
    variable : VariableInfo
        Length 1 unless a ``var`` dimension exists.
    xy_coords : XYCoords
        Spatial coordinates, synchronized with ``lon`` / ``lat``.
    dates : FlatDates or PerVariableDates
        Per-variable only when a ``var`` dimension exists.
    members : Members, optional
        Present for multimember grids.
    init_dates : FlatInitDates or LaggedInitDates, optional
        Present only alongside ``members``.
    attrs : mapping
        Free-form annotations (e.g. rescaling parameters), stored read-only.
    """
    data: xr.DataArray
    variable: VariableInfo
    xy_coords: XYCoords
    dates: GridDates
    members: Optional[Members] = None
    init_dates: Optional[InitDates] = None
    attrs: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "attrs", types.MappingProxyType(dict(self.attrs)))

    @property
    def dims(self) -> Tuple[str, ...]:
        return tuple(self.data.dims)

    def has_dim(self, name: str) -> bool:
        return position_of(self.dims, name) is not None

    def size_of(self, name: str) -> int:
        """Length of dimension ``name``; 1 if the dimension is absent."""
        name = Dim(name).value
        return int(self.data.sizes[name]) if self.has_dim(name) else 1

    @property
    def is_multigrid(self) -> bool:
        return self.has_dim(Dim.VAR)

    @property
    def is_multimember(self) -> bool:
        return self.has_dim(Dim.MEMBER)

    def replace(self, **changes) -> "Grid":
        """Return a new Grid with the given fields replaced."""
        return dataclasses.replace(self, **changes)

    def equals(self, other: "Grid") -> bool:
        """Value equality of data, coordinates, dates and members (provenance ignored)."""
        if not isinstance(other, Grid):
            return False
        if not self.data.equals(other.data):
            return False
        if not (self.variable.equals(other.variable)
                and self.xy_coords.equals(other.xy_coords)
                and self.dates.equals(other.dates)):
            return False
        if (self.members is None) != (other.members is None):
            return False
        if self.members is not None and not self.members.equals(other.members):
            return False
        if (self.init_dates is None) != (other.init_dates is None):
            return False
        return self.init_dates is None or self.init_dates.equals(other.init_dates)


def make_grid(
    data,
    dims: Sequence[str],
    x,
    y,
    start,
    end=None,
    var_names: Sequence[str] = ("var",),
    levels: Optional[Sequence[Any]] = None,
    var_dates: Optional[Sequence[Tuple[Any, Any]]] = None,
    members: Optional[Sequence[str]] = None,
    init_dates=None,
    extra: Optional[Dict[str, Sequence[Any]]] = None,
) -> Grid:
    """Build and validate a Grid from plain arrays.

    This is the in-memory producer used by loaders and tests.

    Parameters
    ----------
    data : array-like
        Numeric values; copied into a new DataArray.
    dims : sequence of str
        Dimension names of ``data`` in canonical order.
    x, y : array-like
        Longitude and latitude vectors.
    start, end : array-like
        Start/end timestamps of each time step. ``end`` defaults to ``start``.
    var_names, levels : sequence
        Per-variable names and vertical levels (``None`` levels by default).
    var_dates : sequence of (start, end), optional
        Distinct date series per variable. Defaults to ``(start, end)``
        repeated for each variable of a multigrid.
    members : sequence of str, optional
        Member labels; defaults to ``Member_1..n`` when a ``member`` dim exists.
    init_dates : sequence or list of sequences, optional
        Flat (per year) or lagged (per member, per year) initialization dates.
    extra : dict, optional
        Additional per-variable metadata arrays.

    Returns
    -------
    Grid

    Raises
    ------
    ContractViolation
        If the assembled grid breaks any structural invariant.
    """
    da = xr.DataArray(np.array(data), dims=tuple(Dim(d).value for d in dims))
    names = tuple(var_names)
    levels = tuple(levels) if levels is not None else (None,) * len(names)

    series = DateRange(start, start if end is None else end)
    if Dim.VAR.value in da.dims:
        if var_dates is None:
            dates = PerVariableDates(tuple(series for _ in names))
        else:
            dates = PerVariableDates(tuple(DateRange(s, e) for s, e in var_dates))
    else:
        dates = FlatDates(series)

    member_info = None
    init = None
    if Dim.MEMBER.value in da.dims:
        n_mem = int(da.sizes[Dim.MEMBER.value])
        labels = members if members is not None else [f"Member_{i + 1}" for i in range(n_mem)]
        member_info = Members(tuple(labels))
        if init_dates is not None:
            if len(init_dates) > 0 and isinstance(init_dates[0], (list, tuple, np.ndarray, pd.Index)):
                init = LaggedInitDates(tuple(init_dates))
            else:
                init = FlatInitDates(init_dates)

    grid = Grid(
        data=da,
        variable=VariableInfo(names, levels, extra or {}),
        xy_coords=XYCoords(x, y),
        dates=dates,
        members=member_info,
        init_dates=init,
    )
    assert_grid(grid)
    logger.debug("Grid created: dims=%s, shape=%s, variables=%s", grid.dims, da.shape, names)
    return grid
