"""Pydantic configuration schemas for climgrid.

Exports
-------
resolve_config : function
    Single entrypoint for configuration resolution
InternalConfig : class
    Fully validated, authoritative runtime configuration
ParamConfig : class
    Expert defaults (complete)
UserConfig : class
    User-facing configuration (forgiving, minimal)
"""

from climgrid.schemas.resolve import resolve_config
from climgrid.schemas.internal import InternalConfig
from climgrid.schemas.param import ParamConfig
from climgrid.schemas.user import UserConfig

__all__ = [
    'resolve_config',
    'InternalConfig',
    'ParamConfig',
    'UserConfig',
]
