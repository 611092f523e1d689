"""`climgrid` - dimension-aware subsetting and rescaling of climate grids.

Subpackages:
- core: Grid data model, slicing primitive, temporal helpers
- subsetting: Variable, member, year, season, spatial and generic subsets
- rescaling: Monthly-mean (annual cycle) rescaling
- contracts: Error taxonomy and fail-fast invariant checks
- schemas: Pydantic configuration
"""

__version__ = "0.1.0"
