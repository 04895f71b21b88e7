"""Base schemas for the application."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class BaseSchema(BaseModel):
    """Base schema class with common configuration.

    Fields are serialized in camelCase to match the browser client, and
    accepted in either camelCase or snake_case.
    """

    model_config = ConfigDict(
        from_attributes=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class StatusResponse(BaseSchema):
    """Plain acknowledgement response."""

    message: str = "OK"
