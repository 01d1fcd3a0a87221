from typing import List, TypeVar, Generic, Sequence
from pydantic import BaseModel

T = TypeVar('T')

class PaginatedResponse(BaseModel, Generic[T]):
    items: List[T]
    total: int
    page: int
    size: int
    has_next: bool
    has_previous: bool
    total_pages: int

    @classmethod
    def build(cls, items: Sequence[T], total: int, page: int, size: int) -> "PaginatedResponse[T]":
        return cls(
            items=list(items),
            total=total,
            page=page,
            size=size,
            has_next=page * size < total,
            has_previous=page > 1,
            total_pages=(total + size - 1) // size,
        )
