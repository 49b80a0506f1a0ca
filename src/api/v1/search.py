"""
Search endpoints: per-document access decisions and document previews.
"""

from fastapi import APIRouter, HTTPException, Query, status

from src.api.deps import DbSession, Gate
from src.engines.search import search_manager
from src.engines.search.base import SearchArea, SearchDocument
from src.kernel.models.course import Course
from src.kernel.permissions.access_gate import AccessGate
from src.schemas.search import AccessCheckResponse

router = APIRouter()

COURSE_AREAS = ("mycourse", "allcourses")


def _course_area(area: str, db, gate: AccessGate) -> SearchArea:
    try:
        area_cls = search_manager.get_area_class(f"core_course-{area}")
    except KeyError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Unknown course search area. Expected one of: {', '.join(COURSE_AREAS)}",
        )
    return area_cls(db, gate, search_manager)


@router.get("/courses/{course_id}/access", response_model=AccessCheckResponse)
async def check_course_access(
    course_id: int,
    db: DbSession,
    gate: Gate,
    area: str = Query("allcourses"),
):
    """Whether the current user may see the indexed course document."""
    search_area = _course_area(area, db, gate)
    result = await search_area.check_access(course_id)
    return AccessCheckResponse.from_result(search_area.get_area_id(), course_id, result)


@router.get("/courses/{course_id}/document", response_model=SearchDocument)
async def get_course_document(
    course_id: int,
    db: DbSession,
    gate: Gate,
    area: str = Query("allcourses"),
):
    """The document the search index holds for a course (admin preview)."""
    gate.require_admin()
    search_area = _course_area(area, db, gate)

    course = await db.get(Course, course_id)
    document = await search_area.get_document(course) if course else None
    if document is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Course not found")
    return document
