"""
Query and pagination types shared by the service and repository layers.

This module provides:
- Sort direction enum
- Page request (page index, size, sort field and direction)
- Search result container (one page of items plus the total match count)
- Page (search result plus derived navigation metadata)

Pages are 0-indexed: page 0 is the first page.
"""

from enum import Enum
from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field

DataT = TypeVar("DataT")


class SortOrder(str, Enum):
    """
    Sort direction for list queries.

    Values:
        ASC: Ascending order (A-Z, 0-9, oldest first)
        DESC: Descending order (Z-A, 9-0, newest first)
    """

    ASC = "asc"
    DESC = "desc"


class PageRequest(BaseModel):
    """
    Which slice of a result set to return, and in what order.

    Attributes:
        page: Page index (0-indexed)
        size: Number of items per page
        sort_by: API field name to sort by (e.g. "createdAt")
        sort_order: Sort direction
    """

    page: int = Field(default=0, ge=0)
    size: int = Field(default=10, ge=1)
    sort_by: str = "createdAt"
    sort_order: SortOrder = SortOrder.DESC

    @property
    def offset(self) -> int:
        """
        SQL OFFSET for this page.

        Example:
            >>> PageRequest(page=0, size=20).offset
            0
            >>> PageRequest(page=2, size=20).offset
            40
        """
        return self.page * self.size


class SearchResult(BaseModel, Generic[DataT]):
    """
    Repository search result: the items on one page and the total number
    of rows matching the filters (ignoring pagination).
    """

    items: list[DataT]
    total: int

    model_config = ConfigDict(arbitrary_types_allowed=True)


class Page(BaseModel, Generic[DataT]):
    """
    A bounded slice of a filtered, sorted result set plus its position in
    the whole. All metadata is derived from the filtered total.
    """

    items: list[DataT]
    total: int
    page: int
    size: int

    model_config = ConfigDict(arbitrary_types_allowed=True)

    @staticmethod
    def calculate_total_pages(total: int, size: int) -> int:
        """
        Example:
            >>> Page.calculate_total_pages(3, 2)
            2
            >>> Page.calculate_total_pages(0, 10)
            0
        """
        return (total + size - 1) // size if total > 0 else 0

    @property
    def total_pages(self) -> int:
        return self.calculate_total_pages(self.total, self.size)

    @property
    def has_next(self) -> bool:
        return self.page + 1 < self.total_pages

    @property
    def has_previous(self) -> bool:
        return self.page > 0
