"""Shared pydantic configuration for camelCase payloads."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Accept and emit camelCase keys while keeping snake_case attributes."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )


class MessageResponse(CamelModel):
    message: str


class Pagination(CamelModel):
    current_page: int
    total_pages: int
    total_items: int


class SummaryRead(CamelModel):
    id: str
    name: str
    profile_picture: str = ""
