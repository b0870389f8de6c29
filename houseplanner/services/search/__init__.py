# Search service package
from .orchestrator import SearchOrchestrator
from .response_builder import ResponseBuilderService
from .state import SearchSnapshot, SearchState

__all__ = [
    "SearchOrchestrator",
    "ResponseBuilderService",
    "SearchSnapshot",
    "SearchState",
]
