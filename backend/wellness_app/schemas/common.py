from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from typing import Any, Optional


class CamelModel(BaseModel):
    """Base schema: snake_case attributes, camelCase JSON."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )

    def to_json(self) -> dict:
        return self.model_dump(by_alias=True, mode="json")


class Pagination(CamelModel):
    current_page: int
    total_pages: int
    total_bookings: int
    has_next: bool
    has_prev: bool

    @classmethod
    def build(cls, page: int, limit: int, total: int) -> "Pagination":
        total_pages = (total + limit - 1) // limit if limit else 0
        return cls(
            current_page=page,
            total_pages=total_pages,
            total_bookings=total,
            has_next=page < total_pages,
            has_prev=page > 1,
        )


def envelope(message: Optional[str] = None, data: Any = None, **extra: Any) -> dict:
    """Success body shared by every route: ``{success, message?, data, ...}``."""
    body: dict = {"success": True}
    if message is not None:
        body["message"] = message
    body["data"] = data
    body.update(extra)
    return body
