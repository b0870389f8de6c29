# Services package
from .search_service import SearchService
from .suggestion_service import DebouncedSuggester

__all__ = [
    "SearchService",
    "DebouncedSuggester",
]
