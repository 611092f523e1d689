"""Fixed dimension vocabulary of climate grids.

Grid arrays carry an ordered subset of ``var, member, time, lat, lon``.
Lookups are exact name matches; there is no partial matching.
"""

from enum import Enum
from typing import Iterable, Optional, Sequence, Tuple

__all__ = ['Dim', 'CANONICAL_DIMS', 'position_of', 'canonical_order', 'is_canonical']


class Dim(str, Enum):
    """Semantic dimension names, declared in canonical order."""
    VAR = "var"
    MEMBER = "member"
    TIME = "time"
    LAT = "lat"
    LON = "lon"


CANONICAL_DIMS: Tuple[str, ...] = tuple(d.value for d in Dim)


def position_of(dims: Sequence[str], name: str) -> Optional[int]:
    """Return the axis position of ``name`` in ``dims``, or None if absent."""
    name = Dim(name).value
    for i, d in enumerate(dims):
        if d == name:
            return i
    return None


def canonical_order(dims: Iterable[str]) -> Tuple[str, ...]:
    """Sort dimension names into canonical relative order."""
    present = {Dim(d).value for d in dims}
    return tuple(d for d in CANONICAL_DIMS if d in present)


def is_canonical(dims: Sequence[str]) -> bool:
    """True if ``dims`` are known names, unique, and in canonical order."""
    if any(d not in CANONICAL_DIMS for d in dims):
        return False
    if len(set(dims)) != len(dims):
        return False
    return tuple(dims) == canonical_order(dims)
