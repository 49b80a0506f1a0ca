"""
Login predicates for the current request.

Each ``require_*`` method returns silently when access is allowed and raises
an AppError subclass otherwise. The exception terminates the request; callers
must not catch it to carry on.
"""

from typing import Optional

from sqlalchemy import select, and_
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.errors import AuthRequiredError, ForbiddenError, NotFoundError
from src.kernel.models.course import Course, CourseModule, Enrolment
from src.kernel.models.user import User
from src.logging_config import get_logger

logger = get_logger(__name__)


class AccessGate:
    """
    Request-scoped access checks for the (optional) current user.

    Usage:
        gate = AccessGate(db, user)
        await gate.require_course_login(course, cm)
    """

    def __init__(self, session: AsyncSession, user: Optional[User]):
        self.session = session
        self.user = user

    @property
    def is_logged_in(self) -> bool:
        return self.user is not None and self.user.is_active

    @property
    def is_admin(self) -> bool:
        return self.is_logged_in and self.user.is_site_admin

    async def is_enrolled(self, course_id: int) -> bool:
        """Whether the current user has an active enrolment in the course."""
        if not self.is_logged_in:
            return False
        result = await self.session.execute(
            select(Enrolment.id).where(
                and_(
                    Enrolment.user_id == self.user.id,
                    Enrolment.course_id == course_id,
                    Enrolment.active.is_(True),
                )
            )
        )
        return result.first() is not None

    async def can_access_course(self, course: Course) -> bool:
        """Non-raising form of require_course_login for a course."""
        if self.is_admin:
            return True
        if not course.visible:
            return False
        return await self.is_enrolled(course.id)

    def require_login(self) -> None:
        if not self.is_logged_in:
            logger.info("Login required")
            raise AuthRequiredError()

    async def require_course_login(
        self,
        course: Optional[Course],
        cm: Optional[CourseModule] = None,
    ) -> None:
        """
        Require a session scoped to the course and, when given, the module.

        Raises:
            AuthRequiredError: no session
            NotFoundError: the course does not exist
            ForbiddenError: not enrolled, or course/module hidden
        """
        self.require_login()

        if course is None:
            raise NotFoundError()

        if cm is not None and cm.course_id != course.id:
            logger.info(
                "Course module does not belong to course",
                extra={"cm_id": cm.id, "course_id": course.id},
            )
            raise ForbiddenError("Course or activity not accessible")

        if self.is_admin:
            return

        if not await self.can_access_course(course):
            logger.info(
                "Course access denied",
                extra={"course_id": course.id, "user_id": str(self.user.id)},
            )
            raise ForbiddenError("Course or activity not accessible")

        if cm is not None and not cm.visible:
            logger.info("Hidden course module", extra={"cm_id": cm.id})
            raise ForbiddenError("Course or activity not accessible")

    def require_admin(self) -> None:
        self.require_login()
        if not self.is_admin:
            logger.info("Admin access required", extra={"user_id": str(self.user.id)})
            raise ForbiddenError("Admin access required")
