"""Tests for monthly-mean (annual cycle) rescaling."""

import logging

import numpy as np
import pytest

from climgrid.contracts import DimensionMismatchError
from climgrid.rescaling import MonthlyMeanRescaler, rescale_monthly_means
from tests.helpers.fake_grid import make_fake_grid, season_dates

pytestmark = pytest.mark.unit


def monthly_values(years, season, by_month, member_offsets=None):
    """(member?, time, 1, 1) values that only depend on the month (and member)."""
    months = np.asarray(season_dates(years, season).month)
    series = np.array([by_month[m] for m in months], dtype=float)
    if member_offsets is None:
        return series[:, None, None]
    return np.asarray(member_offsets, dtype=float)[:, None, None, None] + series[None, :, None, None]


class TestRescalerInit:

    def test_defaults(self, internal_config):
        rescaler = MonthlyMeanRescaler(internal_config)

        assert rescaler.ensemble is False
        assert rescaler.skipna is True

    def test_custom_config(self, make_config):
        rescaler = MonthlyMeanRescaler(make_config(ENSEMBLE=True, SKIPNA=False))

        assert rescaler.ensemble is True
        assert rescaler.skipna is False


class TestSingleMember:

    @pytest.fixture
    def grids(self):
        years, season = (2000, 2001), (1, 2)
        pred = make_fake_grid(years=years, season=season,
                              values=monthly_values(years, season, {1: 10, 2: 20}))
        ref = make_fake_grid(years=years, season=season,
                             values=monthly_values(years, season, {1: 15, 2: 25}))
        return pred, ref

    def test_known_offsets(self, grids, internal_config):
        """Jan: 10 - 15 + 10 = 5, Feb: 20 - 25 + 20 = 15."""
        pred, ref = grids
        out = MonthlyMeanRescaler(internal_config).rescale(pred, pred, ref)

        months = out.dates.reference.months
        assert np.all(out.data.values[months == 1] == 5.0)
        assert np.all(out.data.values[months == 2] == 15.0)

    def test_offsets_recorded(self, grids, internal_config):
        pred, ref = grids
        out = MonthlyMeanRescaler(internal_config).rescale(pred, pred, ref)

        centers = out.attrs["scale_center"]["tas"]
        assert len(centers) == 1
        assert set(centers[0]) == {"Jan", "Feb"}
        assert centers[0]["Jan"].shape == (3, 5)
        assert np.all(centers[0]["Jan"] == 5.0)

    def test_without_reference_sim_equal_to_pred_is_unchanged(self, grids):
        pred, _ = grids
        out = rescale_monthly_means(pred, pred)

        np.testing.assert_allclose(out.data.values, pred.data.values)
        assert np.all(out.attrs["scale_center"]["tas"][0]["Feb"] == 0.0)

    def test_metadata_of_sim_kept(self, grids):
        pred, ref = grids
        out = rescale_monthly_means(pred, pred, ref)

        assert out.dims == pred.dims
        assert out.dates.equals(pred.dates)
        assert out.xy_coords.equals(pred.xy_coords)
        assert "scale_center" not in pred.attrs


class TestTimeOrder:

    def test_output_follows_sim_time_axis(self, internal_config):
        """Months are interleaved in time; corrected steps go back to their own slot."""
        years, season = (2000, 2001, 2002), (12, 1, 2)
        pred = make_fake_grid(years=years, season=season,
                              values=monthly_values(years, season, {12: 0, 1: 0, 2: 0}))
        ref = make_fake_grid(years=years, season=season,
                             values=monthly_values(years, season, {12: 3, 1: 1, 2: 2}))
        sim = make_fake_grid(years=years, season=season)

        out = MonthlyMeanRescaler(internal_config).rescale(pred, sim, ref)

        delta = {12: 3.0, 1: 1.0, 2: 2.0}
        for t, month in enumerate(sim.dates.reference.months):
            np.testing.assert_allclose(out.data.values[t], sim.data.values[t] - delta[month])


class TestMultimember:

    YEARS, SEASON = (2000, 2001), (1, 2)

    def _grid(self, by_month, offsets, var_names=("tas",)):
        return make_fake_grid(var_names=var_names, n_members=len(offsets),
                              years=self.YEARS, season=self.SEASON,
                              values=monthly_values(self.YEARS, self.SEASON, by_month, offsets))

    @pytest.fixture
    def pred(self):
        return self._grid({1: 10, 2: 20}, [0, 0])

    def test_each_member_uses_its_own_climatology(self, pred):
        ref = self._grid({1: 10, 2: 20}, [5, 10])
        out = rescale_monthly_means(pred, pred, ref, ensemble=False)

        months = out.dates.reference.months
        np.testing.assert_allclose(out.data.values[0][months == 1], 5.0)
        np.testing.assert_allclose(out.data.values[1][months == 1], 0.0)

        centers = out.attrs["scale_center"]["tas"]
        assert np.all(centers[0]["Jan"] == 5.0)
        assert np.all(centers[1]["Jan"] == 10.0)

    def test_swapping_reference_members_swaps_corrections(self, pred):
        ref = self._grid({1: 10, 2: 20}, [5, 10])
        swapped = self._grid({1: 10, 2: 20}, [10, 5])

        out = rescale_monthly_means(pred, pred, ref).data.values
        out_swapped = rescale_monthly_means(pred, pred, swapped).data.values

        np.testing.assert_allclose(out[0], out_swapped[1])
        np.testing.assert_allclose(out[1], out_swapped[0])
        assert not np.allclose(out[0], out[1])

    def test_ensemble_mean_reference(self, pred):
        ref = self._grid({1: 10, 2: 20}, [5, 10])
        out = rescale_monthly_means(pred, pred, ref, ensemble=True)

        months = out.dates.reference.months
        np.testing.assert_allclose(out.data.values[:, months == 1], 2.5)
        np.testing.assert_allclose(out.data.values[:, months == 2], 12.5)

    def test_predictor_climatology_averages_members(self):
        pred = self._grid({1: 10, 2: 20}, [0, 4])
        ref = self._grid({1: 12, 2: 22}, [0, 0])
        out = rescale_monthly_means(pred, ref, ref)

        months = out.dates.reference.months
        # Each member: own value - 12 + mean(10, 14)
        np.testing.assert_allclose(out.data.values[0][months == 1], 12.0)
        np.testing.assert_allclose(out.data.values[1][months == 1], 12.0)

    def test_multigrid(self):
        pred = self._grid({1: 10, 2: 20}, [0, 0], var_names=("tas", "pr"))
        ref = self._grid({1: 11, 2: 22}, [0, 0], var_names=("tas", "pr"))
        out = rescale_monthly_means(pred, pred, ref)

        assert out.dims == ("var", "member", "time", "lat", "lon")
        assert set(out.attrs["scale_center"]) == {"tas", "pr"}
        months = out.dates.reference.months
        np.testing.assert_allclose(out.data.values[:, :, months == 2], 18.0)


class TestMissingValues:

    @pytest.fixture
    def grids(self):
        years, season = (2000, 2001), (1, 2)
        pred = make_fake_grid(years=years, season=season,
                              values=monthly_values(years, season, {1: 10, 2: 20}))
        ref_values = np.broadcast_to(monthly_values(years, season, {1: 15, 2: 25}), (4, 3, 5)).copy()
        ref_values[0, 0, 0] = np.nan
        ref = make_fake_grid(years=years, season=season, values=ref_values)
        return pred, ref

    def test_skipna(self, grids, internal_config):
        pred, ref = grids
        out = MonthlyMeanRescaler(internal_config).rescale(pred, pred, ref)
        assert not np.isnan(out.data.values).any()

    def test_propagate_nan(self, grids, make_config):
        pred, ref = grids
        out = MonthlyMeanRescaler(make_config(SKIPNA=False)).rescale(pred, pred, ref)

        months = out.dates.reference.months
        assert np.isnan(out.data.values[months == 1][:, 0, 0]).all()
        assert not np.isnan(out.data.values[months == 2]).any()


class TestPreconditions:

    def test_dimension_mismatch(self):
        pred = make_fake_grid()
        sim = make_fake_grid(n_members=2)
        with pytest.raises(DimensionMismatchError, match="dimensions do not match"):
            rescale_monthly_means(pred, sim, pred)

    def test_season_mismatch(self):
        pred = make_fake_grid(season=(1, 2))
        sim = make_fake_grid(season=(12, 1, 2))
        with pytest.raises(DimensionMismatchError, match="Season"):
            rescale_monthly_means(pred, sim)

    def test_variable_mismatch(self):
        pred = make_fake_grid(var_names=("tas",))
        sim = make_fake_grid(var_names=("pr",))
        with pytest.raises(DimensionMismatchError, match="Variable"):
            rescale_monthly_means(pred, sim)

    def test_spatial_mismatch(self):
        pred = make_fake_grid()
        sim = make_fake_grid(lat=(35.0, 40.0))
        with pytest.raises(DimensionMismatchError, match="'lat'"):
            rescale_monthly_means(pred, sim)

    def test_point_predictor_against_field_reference(self):
        """A 1x1 predictor must not broadcast over the reference field."""
        pred = make_fake_grid(lon=(0.0,), lat=(40.0,), values=10.0)
        sim = make_fake_grid(values=15.0)
        with pytest.raises(DimensionMismatchError, match="predictor and sim"):
            rescale_monthly_means(pred, sim, sim)

    def test_predictor_spatial_mismatch(self):
        pred = make_fake_grid(lat=(35.0, 40.0))
        sim = make_fake_grid()
        with pytest.raises(DimensionMismatchError, match="'lat': 2 vs 3"):
            rescale_monthly_means(pred, sim, sim)

    def test_predictor_member_count_may_differ(self):
        """The predictor climatology is averaged over its members."""
        pred = make_fake_grid(n_members=3, values=10.0)
        sim = make_fake_grid(n_members=2, values=12.0)
        out = rescale_monthly_means(pred, sim, sim)

        np.testing.assert_allclose(out.data.values, 10.0)

    def test_progress_logged(self, caplog):
        pred = make_fake_grid()
        with caplog.at_level(logging.INFO, logger="climgrid"):
            rescale_monthly_means(pred, pred)

        assert "Calculating centering parameters" in caplog.text
