"""
Search area base class and the document model areas produce.
"""

import re
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, ClassVar, Dict, List, Optional

from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from src.engines.search.manager import AccessResult
from src.kernel.models.context import ContextLevel
from src.kernel.permissions.access_gate import AccessGate

_TAG_RE = re.compile(r"<[^>]+>")
_SPACE_RE = re.compile(r"\s+")

# owneruserid for documents not owned by a single user
NO_OWNER_ID = 0


def content_to_text(html: Optional[str]) -> str:
    """Strip markup and collapse whitespace."""
    if not html:
        return ""
    return _SPACE_RE.sub(" ", _TAG_RE.sub(" ", html)).strip()


class SearchDocument(BaseModel):
    """A document as handed to the search index."""

    itemid: int
    areaid: str
    title: str
    content: str = ""
    description1: str = ""
    description2: str = ""
    contextid: Optional[int] = None
    courseid: Optional[int] = None
    owneruserid: int = NO_OWNER_ID
    modified: Optional[datetime] = None


class SearchArea(ABC):
    """
    A searchable area of one component.

    Subclasses set ``component``, ``area_name`` and ``levels`` and implement
    document building and per-document access checks.
    """

    component: ClassVar[str]
    area_name: ClassVar[str]
    levels: ClassVar[List[ContextLevel]] = []

    def __init__(self, session: AsyncSession, gate: Optional[AccessGate] = None):
        self.session = session
        self.gate = gate

    @classmethod
    def get_area_id(cls) -> str:
        return f"{cls.component}-{cls.area_name}"

    def get_component_name(self) -> str:
        """Component name without the core_ prefix."""
        return self.component.removeprefix("core_")

    @abstractmethod
    async def get_recordset_by_timestamp(self, modified_from: int = 0) -> List[Any]:
        """Records changed since ``modified_from`` (unix time), oldest first."""

    @abstractmethod
    async def get_document(
        self,
        record: Any,
        options: Optional[Dict[str, Any]] = None,
    ) -> Optional[SearchDocument]:
        """Build the index document for a record; None to skip it."""

    @abstractmethod
    async def check_access(self, id: int) -> AccessResult:
        """Whether the current user may see the document with this item id."""
