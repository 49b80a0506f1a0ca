"""
Search manager: access results and site-wide search policy.
"""

from enum import IntEnum
from typing import Dict, Type, TYPE_CHECKING

from src.config import get_settings

if TYPE_CHECKING:
    from src.engines.search.base import SearchArea


class AccessResult(IntEnum):
    """Outcome of a search area access check."""
    DENIED = 0
    GRANTED = 1
    DELETED = 2


class SearchManager:
    """
    Registry of search areas plus the global search policy flags.

    Policy flags are read from settings on every call so a change of
    configuration applies to the next check.
    """

    def __init__(self) -> None:
        self._areas: Dict[str, Type["SearchArea"]] = {}

    @staticmethod
    def is_enabled_include_all_courses() -> bool:
        """Whether course documents are visible to everyone, enrolled or not."""
        return get_settings().search_include_all_courses

    def register_area(self, area_cls: Type["SearchArea"]) -> Type["SearchArea"]:
        area_id = area_cls.get_area_id()
        if area_id in self._areas:
            raise ValueError(f"Search area already registered: {area_id}")
        self._areas[area_id] = area_cls
        return area_cls

    def get_area_class(self, area_id: str) -> Type["SearchArea"]:
        """
        Raises:
            KeyError: unknown area id
        """
        return self._areas[area_id]

    @property
    def area_ids(self) -> list[str]:
        return sorted(self._areas)
