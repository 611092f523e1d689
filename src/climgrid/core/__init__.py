"""Core grid infrastructure.

- dimensions: Dimension vocabulary and lookups
- labeled: Slicing primitive and time/space reshaping
- temporal: Season and season-aware year helpers
- grid: Grid data model (import from ``climgrid.core.grid``)
"""

from climgrid.core.dimensions import Dim, CANONICAL_DIMS, position_of
from climgrid.core.labeled import take, array3d_to_mat2d, mat2d_to_array3d
from climgrid.core.temporal import get_season, get_years_as_index, get_coordinates

__all__ = [
    'Dim',
    'CANONICAL_DIMS',
    'position_of',
    'take',
    'array3d_to_mat2d',
    'mat2d_to_array3d',
    'get_season',
    'get_years_as_index',
    'get_coordinates',
]
