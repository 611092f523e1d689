"""Shared pydantic base for climgrid configuration schemas."""

from pydantic import BaseModel, ConfigDict


class ClimgridBaseModel(BaseModel):
    """Strict base model: unknown keys are errors and assignments are revalidated.

    ``UserConfig`` relaxes ``extra`` to accept legacy keys; ``InternalConfig``
    adds ``frozen``.
    """

    model_config = ConfigDict(
        extra='forbid',
        validate_assignment=True,
        use_enum_values=True,
        str_strip_whitespace=True,
    )
