"""
Context resolution: from a context id to the course and course module it
belongs to.
"""

from typing import NamedTuple, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.kernel.models.context import Context, ContextLevel
from src.kernel.models.course import Course, CourseModule


class ContextInfo(NamedTuple):
    """Context plus its owning course and course module, where they exist."""

    context: Optional[Context]
    course: Optional[Course]
    cm: Optional[CourseModule]


async def get_context_info(session: AsyncSession, context_id: int) -> ContextInfo:
    """
    Resolve a context id.

    COURSE contexts yield (context, course, None); MODULE contexts yield
    (context, course, cm); any other level yields (context, None, None).
    An unknown id yields all None.
    """
    context = await session.get(Context, context_id)
    if context is None:
        return ContextInfo(None, None, None)

    if context.context_level == ContextLevel.COURSE:
        course = await session.get(Course, context.instance_id)
        return ContextInfo(context, course, None)

    if context.context_level == ContextLevel.MODULE:
        result = await session.execute(
            select(CourseModule, Course)
            .join(Course, CourseModule.course_id == Course.id)
            .where(CourseModule.id == context.instance_id)
        )
        row = result.one_or_none()
        if row is None:
            return ContextInfo(context, None, None)
        cm, course = row
        return ContextInfo(context, course, cm)

    return ContextInfo(context, None, None)
