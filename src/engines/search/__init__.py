"""
Search Engine - search areas and per-document access decisions.
"""

from src.engines.search.manager import AccessResult, SearchManager
from src.engines.search.base import SearchArea, SearchDocument, content_to_text
from src.engines.search.course import MyCourseSearchArea, AllCoursesSearchArea

search_manager = SearchManager()
search_manager.register_area(MyCourseSearchArea)
search_manager.register_area(AllCoursesSearchArea)

__all__ = [
    "AccessResult",
    "SearchManager",
    "SearchArea",
    "SearchDocument",
    "content_to_text",
    "MyCourseSearchArea",
    "AllCoursesSearchArea",
    "search_manager",
]
