"""
Shared schema configuration.

WHY: Stored documents and the admin UI use camelCase field names
(squareFeet, createdAt). Python code uses snake_case. Every API schema
derives from CamelModel so JSON is camelCase while model attributes stay
snake_case; snake_case is still accepted on input.
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
        use_enum_values=True,
    )


class MessageResponse(CamelModel):
    """Plain acknowledgement body."""

    message: str
