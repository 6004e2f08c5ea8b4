"""
Multi-column full-text search.
"""

from .models import ColumnResult, Pagination, SearchResults
from .orchestrator import Search

__all__ = [
    "Search",
    "SearchResults",
    "ColumnResult",
    "Pagination",
]
