"""InternalConfig: Authoritative runtime configuration.

This is the ONLY config schema that runtime code sees. It is fully validated,
normalized, and immutable.
"""

from typing import Literal, Optional
from pydantic import ConfigDict
from climgrid.schemas.base import ClimgridBaseModel


class InternalRescalerConfig(ClimgridBaseModel):
    """Runtime rescaling configuration."""
    ensemble: bool
    skipna: bool


class InternalLoggingConfig(ClimgridBaseModel):
    """Runtime logging configuration."""
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
    file: Optional[str]


class InternalConfig(ClimgridBaseModel):
    """Authoritative runtime configuration.

    Runtime modules receive InternalConfig and access fields directly:

        def __init__(self, config: InternalConfig):
            self.ensemble = config.rescaler.ensemble  # NOT .get()

    All validation and defaulting happens during config resolution.
    """

    rescaler: InternalRescalerConfig
    logging: InternalLoggingConfig

    model_config = ConfigDict(
        extra='forbid',
        validate_assignment=True,
        use_enum_values=True,
        str_strip_whitespace=True,
        frozen=True,  # Immutable after construction
    )
