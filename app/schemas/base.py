"""Shared base for request and response bodies."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Model exchanged with the web client using camelCase keys.

    Bodies are accepted in camelCase or snake_case, and can be built
    directly from table models or projected result rows.
    """
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class Message(BaseModel):
    message: str
