"""Shared Pydantic bases for the JSON wire format.

Fields are snake_case in Python and camelCase on the wire; request bodies
accept both spellings.
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class ApiModel(BaseModel):
    """Base model with camelCase aliases."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class ApiResponse(ApiModel):
    """Response envelope: ``{success, message?, ...data}``."""

    success: bool = True
    message: str | None = None
