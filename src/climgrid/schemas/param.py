"""ParamConfig: Expert defaults for climgrid.

This module defines the complete default configuration. ALL tunable
parameters must have defaults here; runtime code never defines fallbacks.

Runtime code NEVER reads from ParamConfig directly - it only receives InternalConfig.
"""

from typing import Literal, Optional
from pydantic import Field, field_validator
from climgrid.schemas.base import ClimgridBaseModel


class RescalerConfig(ClimgridBaseModel):
    """Monthly-mean rescaling configuration."""
    ensemble: bool = Field(
        False,
        description="Center multimember references on the ensemble mean instead of member by member",
    )
    skipna: bool = Field(True, description="Ignore missing values when computing climatologies")


class LoggingConfig(ClimgridBaseModel):
    """Logging configuration."""
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    file: Optional[str] = None

    @field_validator("level", mode="before")
    @classmethod
    def normalize_level(cls, v):
        """Accept lowercase level names."""
        if isinstance(v, str):
            return v.upper().strip()
        return v


class ParamConfig(ClimgridBaseModel):
    """Complete expert configuration with all defaults.

    Usage
    -----
    This config is NOT used directly by runtime code. It serves as the
    base layer in config resolution:

        internal_cfg = resolve_config(param_cfg, user_cfg)
    """

    rescaler: RescalerConfig = Field(default_factory=RescalerConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
