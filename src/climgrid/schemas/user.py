"""UserConfig: Forgiving, minimal user-facing configuration.

This schema accepts user inputs with aliases for common naming patterns
(e.g., ENSEMBLE → ensemble, LOG_LEVEL → log_level). Users only specify
what they want to override from the expert defaults.
"""

from typing import Literal, Optional
from pydantic import Field, field_validator
from climgrid.schemas.base import ClimgridBaseModel


class UserRescalerConfig(ClimgridBaseModel):
    """User-facing rescaler config."""
    ensemble: Optional[bool] = None
    skipna: Optional[bool] = None


class UserLoggingConfig(ClimgridBaseModel):
    """User-facing logging config."""
    level: Optional[str] = None
    file: Optional[str] = None

    @field_validator("level", mode="before")
    @classmethod
    def normalize_level(cls, v):
        """Normalize level names to uppercase."""
        if isinstance(v, str):
            return v.upper().strip()
        return v


class UserConfig(ClimgridBaseModel):
    """User-facing configuration schema.

    Minimal, forgiving, and uses common aliases.

    Usage
    -----
        user_cfg = UserConfig(ENSEMBLE=True, LOG_LEVEL="debug")
        internal = resolve_config(param_cfg, user_cfg)
    """

    # Flat aliases
    ensemble: Optional[bool] = Field(None, alias="ENSEMBLE")
    skipna: Optional[bool] = Field(None, alias="SKIPNA")
    log_level: Optional[Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]] = Field(None, alias="LOG_LEVEL")
    log_file: Optional[str] = Field(None, alias="LOG_FILE")

    # Nested overrides (advanced users)
    rescaler: Optional[UserRescalerConfig] = None
    logging: Optional[UserLoggingConfig] = None

    model_config = ClimgridBaseModel.model_config.copy()
    # Allow forgiving input dictionaries (ignore unknown legacy keys)
    model_config.update({"populate_by_name": True, "extra": "ignore"})

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v):
        """Normalize level names to uppercase."""
        if isinstance(v, str):
            return v.upper().strip()
        return v

    def to_internal_overrides(self) -> dict:
        """Convert flat UserConfig to nested InternalConfig structure.

        Returns
        -------
        dict
            Nested dictionary matching InternalConfig structure
        """
        overrides = {}

        rescaler = {}
        if self.ensemble is not None:
            rescaler["ensemble"] = self.ensemble
        if self.skipna is not None:
            rescaler["skipna"] = self.skipna
        if self.rescaler is not None:
            rescaler.update(self.rescaler.model_dump(exclude_none=True))
        if rescaler:
            overrides["rescaler"] = rescaler

        logging_cfg = {}
        if self.log_level is not None:
            logging_cfg["level"] = self.log_level
        if self.log_file is not None:
            logging_cfg["file"] = self.log_file
        if self.logging is not None:
            logging_cfg.update(self.logging.model_dump(exclude_none=True))
        if logging_cfg:
            overrides["logging"] = logging_cfg

        return overrides
