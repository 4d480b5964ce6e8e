"""Response envelopes shared by list endpoints."""

from typing import Generic, List, TypeVar

from pydantic import BaseModel

T = TypeVar('T')


class PaginationMetadata(BaseModel):
    """
    Where the returned page sits in the full result set.

    Attributes:
        skip: Offset of the first returned item
        limit: Maximum page size requested
        total: Number of items matching the filters, across all pages
    """

    skip: int
    limit: int
    total: int


class PaginatedResponse(BaseModel, Generic[T]):
    items: List[T]
    pagination: PaginationMetadata
