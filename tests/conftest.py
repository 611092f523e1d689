"""Root-level pytest fixtures for the climgrid test suite.

Provides shared configuration fixtures and small synthetic grids.
All tests must use these fixtures instead of creating raw dict configs.
"""

import logging

import pytest

from climgrid.schemas import ParamConfig, UserConfig, resolve_config
from tests.helpers.fake_grid import make_fake_grid


# =============================================================================
# Configuration Fixtures (Pydantic-based)
# =============================================================================

@pytest.fixture
def param_config():
    """Expert configuration with all defaults."""
    return ParamConfig()


@pytest.fixture
def internal_config(param_config):
    """Fully validated runtime configuration (no overrides).

    Examples
    --------
    >>> def test_rescaler_init(internal_config):
    ...     rescaler = MonthlyMeanRescaler(internal_config)
    ...     assert rescaler.ensemble is False
    """
    return resolve_config(param_config, None)


@pytest.fixture
def make_config(param_config):
    """Factory fixture for creating custom test configs.

    Returns a callable that accepts UserConfig-compatible kwargs.

    Examples
    --------
    >>> def test_ensemble_mode(make_config):
    ...     config = make_config(ENSEMBLE=True)
    ...     assert config.rescaler.ensemble is True
    """
    def _make(**user_overrides):
        """Create InternalConfig with user overrides."""
        if user_overrides:
            return resolve_config(param_config, UserConfig(**user_overrides))
        return resolve_config(param_config, None)

    return _make


# =============================================================================
# Grid Fixtures
# =============================================================================

@pytest.fixture
def simple_grid():
    """Single variable, no members: time=4 (Jan/Feb 2000-2001), lat=3, lon=5."""
    return make_fake_grid()


@pytest.fixture
def multigrid():
    """Three variables, internal order (tas, pr, psl), no members."""
    return make_fake_grid(var_names=("tas", "pr", "psl"))


@pytest.fixture
def ensemble_grid():
    """Two variables x 4 members, DJF 2000-2002, flat init dates."""
    return make_fake_grid(var_names=("tas", "pr"), n_members=4,
                          years=(2000, 2001, 2002), season=(12, 1, 2))


@pytest.fixture
def lagged_grid():
    """Single variable x 3 members with lagged init dates, DJF 2000-2002."""
    return make_fake_grid(n_members=3, years=(2000, 2001, 2002),
                          season=(12, 1, 2), lagged=True)


@pytest.fixture
def djf_grid():
    """Single variable, DJF 2000-2001 (Dec 1999 ... Feb 2001)."""
    return make_fake_grid(years=(2000, 2001), season=(12, 1, 2))


# =============================================================================
# Logging Fixtures
# =============================================================================

@pytest.fixture
def root_logger():
    """Root logger; handlers installed by setup_logging are closed afterwards."""
    root = logging.getLogger()
    level = root.level
    yield root
    for h in root.handlers[:]:
        if type(h) in (logging.StreamHandler, logging.FileHandler):
            h.close()
            root.removeHandler(h)
    root.setLevel(level)
