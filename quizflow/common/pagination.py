"""Pagination helpers for list endpoints."""

from __future__ import annotations

import math
from typing import Generic, TypeVar

from fastapi import Query
from pydantic import BaseModel, Field

T = TypeVar("T")

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100


class PaginationParams(BaseModel):
    page: int = Field(default=1, ge=1)
    limit: int = Field(default=DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE)

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


class PageMeta(BaseModel):
    page: int
    limit: int
    total: int
    total_pages: int


class Page(BaseModel, Generic[T]):
    """Paginated list.

    Format: {data: [...], meta: {page, limit, total, total_pages}}
    """

    data: list[T]
    meta: PageMeta

    @classmethod
    def build(cls, items: list[T], total: int, params: PaginationParams) -> "Page[T]":
        return cls(
            data=items,
            meta=PageMeta(
                page=params.page,
                limit=params.limit,
                total=total,
                total_pages=math.ceil(total / params.limit) if total else 0,
            ),
        )


def pagination_params(
    page: int = Query(1, ge=1, description="Page number (1-based)"),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE, description="Items per page"),
) -> PaginationParams:
    """Dependency for page-based pagination."""
    return PaginationParams(page=page, limit=limit)
