"""
Pagination and Filtering
Page slicing and predicate filtering shared by every list operation
"""

from __future__ import annotations

from typing import Any, Callable, Generic, Iterable, List, Optional, TypeVar

from pydantic import BaseModel, Field

from orgaccess.core.config import settings

T = TypeVar("T")

Predicate = Callable[[Any], bool]


class ListParams(BaseModel):
    """Page request"""
    page: int = Field(1, ge=1, description="1-based page number")
    limit: int = Field(default_factory=lambda: settings.DEFAULT_PAGE_LIMIT, ge=1, description="Page size")


class Page(BaseModel, Generic[T]):
    """One page of a filtered collection"""
    items: List[T] = Field(default_factory=list, description="Items of the requested page")
    page: int = Field(..., description="Requested page number")
    limit: int = Field(..., description="Requested page size")
    total: int = Field(..., description="Number of items matching the filters")

    @property
    def has_next(self) -> bool:
        return self.page * self.limit < self.total

    @property
    def has_prev(self) -> bool:
        return self.page > 1

    @classmethod
    def empty(cls, params: ListParams) -> "Page[T]":
        return cls(items=[], page=params.page, limit=params.limit, total=0)


def _field_value(item: Any, field: str) -> Any:
    if isinstance(item, dict):
        return item.get(field)
    return getattr(item, field, None)


def always(_: Any) -> bool:
    return True


def search_predicate(text: Optional[str], *fields: str) -> Optional[Predicate]:
    """
    Case-insensitive substring match on any of ``fields``.

    Returns None when ``text`` is empty so callers can skip the filter.
    """
    if not text:
        return None
    needle = text.lower()

    def matches(item: Any) -> bool:
        for field in fields:
            value = _field_value(item, field)
            if value is not None and needle in str(value).lower():
                return True
        return False

    return matches


def equals_predicate(field: str, value: Any) -> Optional[Predicate]:
    """Exact match on a foreign key such as ``site_id``; None when unset"""
    if value is None:
        return None

    def matches(item: Any) -> bool:
        return _field_value(item, field) == value

    return matches


def all_of(*predicates: Optional[Predicate]) -> Predicate:
    """Conjunction of the given predicates, ignoring None entries"""
    active = [p for p in predicates if p is not None]
    if not active:
        return always

    def matches(item: Any) -> bool:
        return all(p(item) for p in active)

    return matches


def paginate(
    items: Iterable[T],
    params: ListParams,
    predicate: Optional[Predicate] = None,
) -> Page[T]:
    """
    Filter then slice ``items``.

    ``total`` is the filtered count before slicing; a page past the end
    yields no items but keeps the total.
    """
    predicate = predicate or always
    filtered = [item for item in items if predicate(item)]
    start = (params.page - 1) * params.limit
    return Page(
        items=filtered[start:start + params.limit],
        page=params.page,
        limit=params.limit,
        total=len(filtered),
    )
