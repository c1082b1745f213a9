"""Shared schema base and generic response bodies."""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base for API bodies: snake_case in Python, camelCase on the wire."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class MessageResponse(BaseModel):
    """Plain confirmation message."""

    message: str


class ErrorResponse(BaseModel):
    """Error body for 4xx/5xx responses raised by the security layer and handlers."""

    status: int = Field(..., description="HTTP status code")
    error: str = Field(..., description="HTTP reason phrase, e.g. Unauthorized")
    message: str = Field(..., description="Human-readable explanation")
    path: str = Field(..., description="Request path")
