"""
Course search areas.

``mycourse`` exposes courses the user can enter; ``allcourses`` exposes every
course to everyone when the include-all-courses policy is on.
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.engines.search.base import NO_OWNER_ID, SearchArea, SearchDocument, content_to_text
from src.engines.search.manager import AccessResult, SearchManager
from src.kernel.models.context import Context, ContextLevel
from src.kernel.models.course import Course
from src.kernel.permissions.access_gate import AccessGate
from src.logging_config import get_logger

logger = get_logger(__name__)


class MyCourseSearchArea(SearchArea):
    """Courses the current user is enrolled in (or administers)."""

    component = "core_course"
    area_name = "mycourse"
    levels = [ContextLevel.COURSE]

    def __init__(
        self,
        session: AsyncSession,
        gate: Optional[AccessGate] = None,
        manager: Optional[SearchManager] = None,
    ):
        super().__init__(session, gate)
        self.manager = manager or SearchManager()

    async def get_recordset_by_timestamp(self, modified_from: int = 0) -> List[Course]:
        since = datetime.fromtimestamp(modified_from, tz=timezone.utc)
        result = await self.session.execute(
            select(Course).where(Course.updated_at >= since).order_by(Course.updated_at)
        )
        return list(result.scalars().all())

    async def get_document(
        self,
        record: Course,
        options: Optional[Dict[str, Any]] = None,
    ) -> Optional[SearchDocument]:
        result = await self.session.execute(
            select(Context.id).where(
                Context.context_level == ContextLevel.COURSE,
                Context.instance_id == record.id,
            )
        )
        context_id = result.scalar_one_or_none()
        if context_id is None:
            logger.debug("Course has no context, skipping", extra={"course_id": record.id})
            return None

        return SearchDocument(
            itemid=record.id,
            areaid=self.get_area_id(),
            title=content_to_text(record.full_name),
            content=content_to_text(record.summary),
            contextid=context_id,
            courseid=record.id,
            owneruserid=NO_OWNER_ID,
            modified=record.updated_at,
        )

    async def _fetch_course(self, id: int) -> Optional[Course]:
        # Always hits the database; the identity map must not answer for a deleted row
        result = await self.session.execute(
            select(Course)
            .where(Course.id == id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def check_access(self, id: int) -> AccessResult:
        course = await self._fetch_course(id)
        if course is None:
            return AccessResult.DELETED

        if self.gate is not None and await self.gate.can_access_course(course):
            return AccessResult.GRANTED

        return AccessResult.DENIED


class AllCoursesSearchArea(MyCourseSearchArea):
    """Every course, visible to everyone when the site policy allows it."""

    area_name = "allcourses"

    async def get_document(
        self,
        record: Course,
        options: Optional[Dict[str, Any]] = None,
    ) -> Optional[SearchDocument]:
        doc = await super().get_document(record, options)
        if doc is None:
            return None

        # Summary is shown as the description, not matched as body text
        doc.description1 = doc.content
        doc.content = ""
        return doc

    async def check_access(self, id: int) -> AccessResult:
        """
        Existence first, then the global policy flag.

        The course row is read on every call. Storage errors propagate.
        """
        course = await self._fetch_course(id)
        if course is None:
            return AccessResult.DELETED

        if self.manager.is_enabled_include_all_courses():
            return AccessResult.GRANTED

        return AccessResult.DENIED
