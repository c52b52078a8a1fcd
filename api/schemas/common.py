"""Common Pydantic schemas shared across the API."""

from typing import Generic, TypeVar
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


T = TypeVar("T")


class CamelModel(BaseModel):
    """Base model: snake_case in Python, camelCase on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_wire(self) -> dict:
        """JSON-ready dict using wire (camelCase) names."""
        return self.model_dump(mode="json", by_alias=True)


class PaginationParams(CamelModel):
    """Pagination query parameters."""

    page: int = Field(default=1, ge=1, description="Page number (1-indexed)")
    page_size: int = Field(default=10, ge=1, description="Items per page")


class Pagination(CamelModel):
    """Pagination block of a list response."""

    page: int = Field(ge=1, description="Current page number")
    page_size: int = Field(ge=1, description="Items per page")
    total: int = Field(ge=0, description="Size of the filtered set before slicing")


class Page(CamelModel, Generic[T]):
    """Paginated response wrapper: ``{data, pagination}``."""

    data: list[T] = Field(description="Items on this page")
    pagination: Pagination


class SuccessResponse(CamelModel):
    """Acknowledgement for writes that return no entity."""

    success: bool = True
