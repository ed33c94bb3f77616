"""Pagination envelope shared by stores and routers."""

import math
from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class Page(BaseModel, Generic[T]):
    """A slice of records plus the metadata a client needs to page through them.

    Serialised with camelCase keys (``totalElements``, ``hasNext`` ...).
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    content: list[T] = Field(default_factory=list)
    page: int
    size: int
    total_elements: int
    total_pages: int
    has_next: bool
    has_previous: bool

    @classmethod
    def build(cls, content: list[T], page: int, size: int, total: int) -> "Page[T]":
        total_pages = math.ceil(total / size) if size > 0 else 0
        return cls(
            content=content,
            page=page,
            size=size,
            total_elements=total,
            total_pages=total_pages,
            has_next=page < total_pages - 1,
            has_previous=page > 0,
        )


def check_page_request(page: int, size: int) -> None:
    """Raise ``ValueError`` for a negative page index or a non-positive page size."""
    if page < 0:
        raise ValueError(f"page must be >= 0, got {page}")
    if size <= 0:
        raise ValueError(f"size must be > 0, got {size}")


def slice_bounds(page: int, size: int, total: int) -> tuple[int, int]:
    """Return ``[start, end)`` of the requested page, clamped to ``total``."""
    start = page * size
    if start >= total:
        return total, total
    return start, min(start + size, total)
