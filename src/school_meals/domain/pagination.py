"""Pagination models shared by list queries."""

import math
from dataclasses import dataclass
from typing import Generic, TypeVar

from school_meals.domain.errors import ValidationError

T = TypeVar("T")


@dataclass(frozen=True)
class Pagination:
    """A 1-based page request."""

    page: int = 1
    limit: int = 10

    def __post_init__(self) -> None:
        if self.page < 1:
            raise ValidationError("page must be at least 1")
        if self.limit < 1:
            raise ValidationError("limit must be at least 1")

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.limit


@dataclass(frozen=True)
class Page(Generic[T]):
    """One page of results with totals."""

    items: list[T]
    total: int
    page: int
    total_pages: int

    @classmethod
    def build(cls, items: list[T], total: int, pagination: Pagination) -> "Page[T]":
        return cls(
            items=items,
            total=total,
            page=pagination.page,
            total_pages=math.ceil(total / pagination.limit),
        )
