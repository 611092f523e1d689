"""Annual cycle (monthly-mean) rescaling of simulation grids.

The simulation is corrected, per grid cell and calendar month, as::

    sim' = sim - mu_ref + mu_pred

where ``mu`` is the monthly climatological mean over the training period.
``ref`` is usually the control run of a GCM (climate change applications)
or the hindcast of the training period (seasonal forecasting). Without an
explicit reference the predictor itself is used.

Climatologies are built by repeatedly subsetting the grids by variable,
member and month; centering is then applied month by month and the
corrected time steps are put back in their original chronological order.
"""

import logging
from typing import TYPE_CHECKING, Dict, List, Optional, Tuple

import numpy as np
import xarray as xr

from climgrid.contracts import assert_grid, assert_rescalable, require
from climgrid.core.dimensions import Dim
from climgrid.core.grid import Grid
from climgrid.core.labeled import array3d_to_mat2d, mat2d_to_array3d
from climgrid.core.temporal import get_season
from climgrid.schemas import resolve_config
from climgrid.subsetting import subset_members, subset_season, subset_var

if TYPE_CHECKING:
    from climgrid.schemas import InternalConfig

__all__ = ['MonthlyMeanRescaler', 'rescale_monthly_means', 'MONTH_ABBR']

logger = logging.getLogger(__name__)

MONTH_ABBR = ("Jan", "Feb", "Mar", "Apr", "May", "Jun",
              "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")

# variable name -> month -> flattened spatial mean field
Climatology = Dict[str, Dict[int, np.ndarray]]


class MonthlyMeanRescaler:
    """Rescale simulation data to the monthly climatology of the predictors.

    Reference climatologies are computed in one of four ways:

    1. **No reference**: the predictor climatology is reused, so the
       correction is zero wherever ``sim`` matches ``pred``.
    2. **Multimember reference, ensemble=True**: one ensemble-mean
       climatology shared by all members.
    3. **Multimember reference, ensemble=False**: one climatology per
       member; members are corrected independently.
    4. **Single-member reference**: one climatology.

    The predictor climatology is always averaged over members and is the
    same for every member of the simulation.

    Configuration
    =============
    - `rescaler.ensemble` : bool
        Mode 2 instead of mode 3 for multimember references.
    - `rescaler.skipna` : bool
        Ignore missing values in climatological means.

    Examples
    --------
    >>> from climgrid.schemas import resolve_config
    >>> rescaler = MonthlyMeanRescaler(resolve_config())
    >>> corrected = rescaler.rescale(pred, sim, ref=hindcast)
    >>> corrected.attrs["scale_center"]["tas"][0]["Jan"]  # offset removed in January
    """

    def __init__(self, config: "InternalConfig"):
        self.config = config
        self.ensemble = config.rescaler.ensemble
        self.skipna = config.rescaler.skipna

        logger.info("MonthlyMeanRescaler initialized: ensemble=%s, skipna=%s",
                    self.ensemble, self.skipna)

    def rescale(self, pred: Grid, sim: Grid, ref: Optional[Grid] = None) -> Grid:
        """Rescale ``sim`` with respect to ``pred``.

        Parameters
        ----------
        pred : Grid
            Predictor grid (target climatology).
        sim : Grid
            Simulation (test) grid to be corrected.
        ref : Grid, optional
            Reference grid providing the climatology removed from ``sim``.
            Defaults to ``pred``.

        Returns
        -------
        Grid
            ``sim`` with corrected data, same dims and time order. The
            offsets actually subtracted (``mu_ref - mu_pred``) are stored in
            ``attrs["scale_center"]`` as ``{variable: [{month: field}, ...]}``
            with one dict per member.

        Raises
        ------
        DimensionMismatchError
            If the three grids are not compatible.
        """
        use_ref = ref is not None
        if ref is None:
            ref = pred
        assert_rescalable(pred, sim, ref)

        season = get_season(pred)
        months = sim.dates.reference.months
        n_mem = ref.size_of(Dim.MEMBER)

        logger.info("Calculating centering parameters...")
        pred_clim = self._climatology(pred, season)
        if not use_ref:
            ref_clim = [pred_clim] * n_mem
        elif n_mem > 1:
            if self.ensemble:
                ref_clim = [self._climatology(ref, season)] * n_mem
            else:
                ref_clim = [self._climatology(subset_members(ref, m + 1), season)
                            for m in range(n_mem)]
        else:
            ref_clim = [self._climatology(ref, season)]

        logger.info("Rescaling %d variable(s) x %d member(s), season %s...",
                    len(sim.variable.names), n_mem, list(season))
        var_blocks = []
        params: Dict[str, List[Dict[str, np.ndarray]]] = {}
        for name in sim.variable.names:
            sim_var = self._select_var(sim, name)
            member_blocks = []
            params[name] = []
            for m in range(n_mem):
                cube = subset_members(sim_var, m + 1).data if sim_var.is_multimember else sim_var.data
                centered, centers = self._center(cube, months, season,
                                                 ref_clim[m][name], pred_clim[name])
                member_blocks.append(centered)
                params[name].append(centers)
            var_blocks.append(np.stack(member_blocks) if sim.is_multimember else member_blocks[0])

        arr = np.stack(var_blocks) if sim.is_multigrid else var_blocks[0]
        data = xr.DataArray(arr, dims=sim.dims, attrs=dict(sim.data.attrs))
        out = sim.replace(data=data, attrs={**sim.attrs, "scale_center": params})
        assert_grid(out)
        logger.info("Done.")
        return out

    def _select_var(self, grid: Grid, name: str) -> Grid:
        return subset_var(grid, [name]) if grid.is_multigrid else grid

    def _climatology(self, grid: Grid, season: Tuple[int, ...]) -> Climatology:
        """Monthly spatial mean fields of every variable (members averaged)."""
        clim = {}
        for name in grid.variable.names:
            single = self._select_var(grid, name)
            clim[name] = {month: self._monthly_mean(subset_season(single, month).data)
                          for month in season}
        return clim

    def _monthly_mean(self, data: xr.DataArray) -> np.ndarray:
        """Mean over members, then over time, flattened over space."""
        if Dim.MEMBER.value in data.dims:
            data = data.mean(dim=Dim.MEMBER.value, skipna=self.skipna)
        return np.asarray(data.mean(dim=Dim.TIME.value, skipna=self.skipna).values).reshape(-1)

    def _center(self, cube: xr.DataArray, months: np.ndarray, season: Tuple[int, ...],
                ref_clim: Dict[int, np.ndarray], pred_clim: Dict[int, np.ndarray]):
        """Center one (time, lat, lon) cube month by month.

        The months are processed as contiguous groups, stacked, and the rows
        are then scattered back to their original time positions.
        """
        spatial_shape = cube.shape[1:]
        mat = array3d_to_mat2d(cube.values).astype(float)

        groups, blocks, centers = [], [], {}
        for month in season:
            rows = np.flatnonzero(months == month)
            center = ref_clim[month] - pred_clim[month]
            groups.append(rows)
            blocks.append(mat[rows] - center)
            centers[MONTH_ABBR[month - 1]] = center.reshape(spatial_shape)

        index = np.concatenate(groups)
        require(
            index.size == mat.shape[0],
            f"Rescaling contract violated: {index.size} of {mat.shape[0]} time steps fall in season {list(season)}"
        )
        restored = np.empty_like(mat)
        restored[index] = np.vstack(blocks)
        return mat2d_to_array3d(restored, spatial_shape), centers


def rescale_monthly_means(pred: Grid, sim: Grid, ref: Optional[Grid] = None,
                          ensemble: bool = False) -> Grid:
    """Functional shortcut for ``MonthlyMeanRescaler(...).rescale``.

    Uses default configuration with ``rescaler.ensemble`` set to ``ensemble``.
    """
    config = resolve_config(None, {"ENSEMBLE": ensemble})
    return MonthlyMeanRescaler(config).rescale(pred, sim, ref)
