"""Dimension-aware subsetting.

- dimensions: Variable, member and generic-dimension subsetters
- temporal: Year and season subsetters
- spatial: Bounding-box / nearest-point subsetter
- orchestrator: subset_grid, applying several subsetters in fixed order
"""

from climgrid.subsetting.dimensions import subset_var, subset_members, subset_dimension
from climgrid.subsetting.temporal import subset_years, subset_season
from climgrid.subsetting.spatial import subset_spatial
from climgrid.subsetting.orchestrator import subset_grid

__all__ = [
    "subset_var",
    "subset_members",
    "subset_dimension",
    "subset_years",
    "subset_season",
    "subset_spatial",
    "subset_grid",
]
