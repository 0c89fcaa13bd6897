"""Shared Pydantic base models and utilities."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class LunaraBase(BaseModel):
    """Base model for all Lunara wire schemas.

    Fields are snake_case in Python and camelCase on the wire, matching the
    records service and the mobile client.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        from_attributes=True,
        populate_by_name=True,
        str_strip_whitespace=True,
    )
