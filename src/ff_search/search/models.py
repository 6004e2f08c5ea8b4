"""
Result models returned by the search orchestrator.

Field aliases match the envelope shape consumed by presentation layers:
``{results: [{column, items, query, performance, resultTotal, pagination?}],
performance, columns}``.
"""

import math
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class Pagination(BaseModel):
    """Paging block for one column's result set."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    total_entries: int = Field(alias="totalEntries", ge=0)
    total_pages: int = Field(alias="totalPages", ge=0)
    current_page: int = Field(alias="currentPage", ge=1)
    limit: int = Field(ge=0)
    offset: int = Field(ge=0)

    @classmethod
    def from_total(cls, total: int, limit: int, offset: int) -> "Pagination":
        """
        Compute paging from a total row count.

        With no limit the whole result set is a single page.
        """
        if limit > 0:
            total_pages = math.ceil(total / limit)
            current_page = offset // limit + 1
        else:
            total_pages = 1
            current_page = 1

        return cls(
            total_entries=total,
            total_pages=total_pages,
            current_page=current_page,
            limit=limit,
            offset=offset,
        )


class ColumnResult(BaseModel):
    """Results of the full-text query against one column."""

    model_config = ConfigDict(populate_by_name=True)

    column: str
    items: List[Dict[str, Any]] = Field(default_factory=list)
    query: str = ""
    performance: Dict[str, Any] = Field(default_factory=dict)
    result_total: int = Field(default=0, alias="resultTotal")
    elapsed: float = 0.0
    pagination: Optional[Pagination] = None

    @property
    def total_entries(self) -> int:
        """Total matching rows, or the page row count when no total is known."""
        if self.pagination is not None:
            return self.pagination.total_entries
        return self.result_total

    def to_dict(self) -> Dict[str, Any]:
        data = self.model_dump(by_alias=True, exclude={"pagination"})
        if self.pagination is not None:
            data["pagination"] = self.pagination.model_dump(by_alias=True)
        return data


class SearchResults(BaseModel):
    """Envelope for one multi-column search."""

    results: List[ColumnResult] = Field(default_factory=list)
    performance: float = 0.0
    columns: List[str] = Field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "results": [result.to_dict() for result in self.results],
            "performance": self.performance,
            "columns": list(self.columns),
        }
