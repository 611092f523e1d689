"""Tests for generic single-dimension subsetting."""

import logging

import numpy as np
import pytest

from climgrid.contracts import OutOfBoundsError
from climgrid.core.grid import PerVariableDates
from climgrid.subsetting import subset_dimension

pytestmark = pytest.mark.unit


class TestSubsetDimension:

    def test_time(self, simple_grid):
        sub = subset_dimension(simple_grid, "time", [0, 2])

        assert sub.dims == simple_grid.dims
        np.testing.assert_array_equal(sub.dates.reference.years, [2000, 2001])
        assert sub.dates.provenance == "dimension-subset"

    def test_single_index_never_drops(self, simple_grid):
        sub = subset_dimension(simple_grid, "lon", [4])

        assert sub.dims == simple_grid.dims
        assert sub.data.shape == (4, 3, 1)
        np.testing.assert_array_equal(sub.xy_coords.x, [10.0])
        assert sub.xy_coords.provenance == "dimension-subset"

    def test_lat(self, simple_grid):
        sub = subset_dimension(simple_grid, "lat", [1, 2])

        np.testing.assert_array_equal(sub.xy_coords.y, [40.0, 45.0])
        np.testing.assert_array_equal(sub.xy_coords.x, simple_grid.xy_coords.x)
        np.testing.assert_array_equal(sub.data.values, simple_grid.data.values[:, 1:3])

    def test_member_with_lagged_init_dates(self, lagged_grid):
        sub = subset_dimension(lagged_grid, "member", [2])

        assert sub.dims == lagged_grid.dims
        assert sub.members.labels == ("r3i1p1",)
        assert sub.members.provenance == "dimension-subset"
        assert len(sub.init_dates.per_member) == 1
        assert sub.init_dates.per_member[0].equals(lagged_grid.init_dates.per_member[2])

    def test_member_with_flat_init_dates(self, ensemble_grid):
        sub = subset_dimension(ensemble_grid, "member", [0, 3])
        assert sub.init_dates.equals(ensemble_grid.init_dates)

    def test_var(self, multigrid):
        sub = subset_dimension(multigrid, "var", [2])

        assert sub.dims == multigrid.dims
        assert sub.variable.names == ("psl",)
        assert isinstance(sub.dates, PerVariableDates)
        assert len(sub.dates.series) == 1

    def test_out_of_bounds(self, simple_grid):
        with pytest.raises(OutOfBoundsError, match="'lat' dimension subscript"):
            subset_dimension(simple_grid, "lat", [3])

    @pytest.mark.parametrize("dim,indices", [("lon", [2, 0]), ("lat", [1, 1]), ("lon", [3, 3, 4])])
    def test_spatial_indices_must_increase(self, simple_grid, dim, indices):
        with pytest.raises(OutOfBoundsError, match="strictly increasing"):
            subset_dimension(simple_grid, dim, indices)

    def test_time_indices_may_be_reordered(self, simple_grid):
        sub = subset_dimension(simple_grid, "time", [3, 0])
        np.testing.assert_array_equal(sub.dates.reference.years, [2001, 2000])

    def test_absent_dimension(self, simple_grid):
        with pytest.raises(OutOfBoundsError):
            subset_dimension(simple_grid, "member", [0])

    def test_missing_indices_pass_through(self, simple_grid, caplog):
        with caplog.at_level(logging.WARNING):
            out = subset_dimension(simple_grid, "time")

        assert out is simple_grid
        assert "no subsetting has been applied" in caplog.text


class TestFullIndexRoundTrip:
    """Selecting every position along every dimension changes nothing."""

    def test_every_dimension(self, ensemble_grid):
        grid = ensemble_grid
        for dim in grid.dims:
            grid = subset_dimension(grid, dim, np.arange(grid.size_of(dim)))

        assert grid.equals(ensemble_grid)

    def test_semantic_subsetters(self, ensemble_grid):
        from climgrid.subsetting import (
            subset_members, subset_season, subset_spatial, subset_var, subset_years,
        )

        grid = subset_var(ensemble_grid, ["tas", "pr"])
        grid = subset_members(grid, [1, 2, 3, 4])
        grid = subset_years(grid, [2000, 2001, 2002])
        grid = subset_season(grid, [12, 1, 2])
        grid = subset_spatial(grid, lon_lim=(-10, 10), lat_lim=(35, 45))

        assert grid.equals(ensemble_grid)

    def test_lagged_grid(self, lagged_grid):
        grid = subset_dimension(lagged_grid, "member", [0, 1, 2])
        assert grid.equals(lagged_grid)
