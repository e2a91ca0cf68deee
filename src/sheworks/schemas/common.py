# src/sheworks/schemas/common.py
"""Shared schema building blocks."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base schema exchanged with the web client using camelCase keys.

    Fields are declared in snake_case; both spellings are accepted on input
    and responses are rendered with camelCase aliases.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class StatusMessage(CamelModel):
    """Simple acknowledgement payload."""

    message: str
