"""Rescaling input contract.

Enforces that predictor, reference and simulation grids can be combined
by the monthly-mean rescaler. Each check is a distinct failure.
"""

from typing import TYPE_CHECKING

from climgrid.contracts.base import require
from climgrid.contracts.failure import DimensionMismatchError
from climgrid.core.dimensions import Dim
from climgrid.core.temporal import get_season

if TYPE_CHECKING:
    from climgrid.core.grid import Grid


def assert_rescalable(pred: "Grid", sim: "Grid", ref: "Grid") -> None:
    """Enforce rescaler preconditions.

    Parameters
    ----------
    pred : Grid
        Predictor grid (target climatology).
    sim : Grid
        Simulation grid to be corrected.
    ref : Grid
        Reference grid (``pred`` when no explicit reference is used).

    Raises
    ------
    DimensionMismatchError
        If dimensions, seasons, variables or dimension sizes disagree.
    """
    require(
        ref.dims == sim.dims,
        f"Input and reference grid dimensions do not match: {ref.dims} vs {sim.dims}",
        error=DimensionMismatchError,
    )

    season = get_season(pred)
    require(
        get_season(ref) == season and get_season(sim) == season,
        f"Season of input and reference grids do not match: pred={season}, "
        f"ref={get_season(ref)}, sim={get_season(sim)}",
        error=DimensionMismatchError,
    )

    names = ref.variable.names
    require(
        sim.variable.names == names and pred.variable.names == names,
        "Variable(s) of predictor and simulation grids do not match",
        error=DimensionMismatchError,
    )

    for dim in (Dim.VAR, Dim.MEMBER, Dim.LAT, Dim.LON):
        require(
            ref.size_of(dim) == sim.size_of(dim),
            f"Spatial and/or ensemble dimensions of sim and reference grids do not match "
            f"('{dim.value}': {ref.size_of(dim)} vs {sim.size_of(dim)})",
            error=DimensionMismatchError,
        )

    # Members are averaged out of the predictor climatology
    for dim in (Dim.VAR, Dim.LAT, Dim.LON):
        require(
            pred.size_of(dim) == sim.size_of(dim),
            f"Spatial and/or variable dimensions of predictor and sim grids do not match "
            f"('{dim.value}': {pred.size_of(dim)} vs {sim.size_of(dim)})",
            error=DimensionMismatchError,
        )
