"""Unit tests for the course search areas."""

from unittest.mock import AsyncMock

import pytest
from sqlalchemy import delete
from sqlalchemy.exc import OperationalError

from src.core.errors import StorageError
from src.engines.search import search_manager
from src.engines.search.base import NO_OWNER_ID, content_to_text
from src.engines.search.course import AllCoursesSearchArea, MyCourseSearchArea
from src.engines.search.manager import AccessResult, SearchManager
from src.kernel.models.course import Course

COURSE_ID = 5
COURSE_CONTEXT_ID = 50


class TestContentToText:
    def test_strips_tags_and_collapses_whitespace(self):
        assert content_to_text("<p>Forces  and\n<i>motion</i></p>") == "Forces and motion"

    def test_empty(self):
        assert content_to_text(None) == ""
        assert content_to_text("") == ""


class TestSearchManager:
    def test_areas_registered(self):
        assert search_manager.area_ids == ["core_course-allcourses", "core_course-mycourse"]
        assert search_manager.get_area_class("core_course-allcourses") is AllCoursesSearchArea

    def test_unknown_area(self):
        with pytest.raises(KeyError):
            search_manager.get_area_class("core_course-nope")

    def test_duplicate_area_rejected(self):
        manager = SearchManager()
        manager.register_area(MyCourseSearchArea)
        with pytest.raises(ValueError):
            manager.register_area(MyCourseSearchArea)

    def test_include_all_courses_off_by_default(self):
        assert SearchManager.is_enabled_include_all_courses() is False

    def test_include_all_courses_read_from_settings(self, include_all_courses):
        assert SearchManager.is_enabled_include_all_courses() is True


class TestAllCoursesAccess:
    """Access decisions of the allcourses area."""

    @pytest.mark.asyncio
    async def test_existing_course_denied_when_policy_off(self, db_session, test_course):
        area = AllCoursesSearchArea(db_session)
        assert await area.check_access(COURSE_ID) == AccessResult.DENIED

    @pytest.mark.asyncio
    async def test_existing_course_granted_when_policy_on(
        self, db_session, test_course, include_all_courses
    ):
        area = AllCoursesSearchArea(db_session)
        assert await area.check_access(COURSE_ID) == AccessResult.GRANTED

    @pytest.mark.asyncio
    async def test_missing_course_deleted_when_policy_off(self, db_session, test_course):
        area = AllCoursesSearchArea(db_session)
        assert await area.check_access(999) == AccessResult.DELETED

    @pytest.mark.asyncio
    async def test_missing_course_deleted_when_policy_on(
        self, db_session, test_course, include_all_courses
    ):
        area = AllCoursesSearchArea(db_session)
        assert await area.check_access(999) == AccessResult.DELETED

    @pytest.mark.asyncio
    async def test_policy_change_applies_to_next_check(
        self, db_session, test_course, monkeypatch
    ):
        area = AllCoursesSearchArea(db_session)
        assert await area.check_access(COURSE_ID) == AccessResult.DENIED

        monkeypatch.setattr(SearchManager, "is_enabled_include_all_courses", staticmethod(lambda: True))
        assert await area.check_access(COURSE_ID) == AccessResult.GRANTED

    @pytest.mark.asyncio
    async def test_deleted_course_seen_on_next_check(self, db_session, test_course):
        area = AllCoursesSearchArea(db_session)
        assert await area.check_access(COURSE_ID) == AccessResult.DENIED

        await db_session.execute(delete(Course).where(Course.id == COURSE_ID))

        assert await area.check_access(COURSE_ID) == AccessResult.DELETED

    @pytest.mark.asyncio
    async def test_storage_failure_propagates(self, db_session):
        area = AllCoursesSearchArea(db_session)
        area.session = AsyncMock()
        area.session.execute.side_effect = StorageError("database unavailable")

        with pytest.raises(StorageError):
            await area.check_access(COURSE_ID)

    @pytest.mark.asyncio
    async def test_driver_error_not_mapped_to_result(self, db_session):
        area = AllCoursesSearchArea(db_session)
        area.session = AsyncMock()
        area.session.execute.side_effect = OperationalError("SELECT", {}, Exception("gone"))

        with pytest.raises(OperationalError):
            await area.check_access(COURSE_ID)

    @pytest.mark.asyncio
    async def test_check_does_not_depend_on_user(self, db_session, test_course, make_gate, test_user):
        anonymous = AllCoursesSearchArea(db_session, make_gate(None))
        student = AllCoursesSearchArea(db_session, make_gate(test_user))
        assert await anonymous.check_access(COURSE_ID) == await student.check_access(COURSE_ID)


class TestMyCourseAccess:
    @pytest.mark.asyncio
    async def test_enrolled_user_granted(self, db_session, test_course, enrolled_user, make_gate):
        area = MyCourseSearchArea(db_session, make_gate(enrolled_user))
        assert await area.check_access(COURSE_ID) == AccessResult.GRANTED

    @pytest.mark.asyncio
    async def test_not_enrolled_user_denied(self, db_session, test_course, test_user, make_gate):
        area = MyCourseSearchArea(db_session, make_gate(test_user))
        assert await area.check_access(COURSE_ID) == AccessResult.DENIED

    @pytest.mark.asyncio
    async def test_admin_granted(self, db_session, test_course, test_admin, make_gate):
        area = MyCourseSearchArea(db_session, make_gate(test_admin))
        assert await area.check_access(COURSE_ID) == AccessResult.GRANTED

    @pytest.mark.asyncio
    async def test_missing_course_deleted(self, db_session, test_course, enrolled_user, make_gate):
        area = MyCourseSearchArea(db_session, make_gate(enrolled_user))
        assert await area.check_access(999) == AccessResult.DELETED


class TestCourseDocuments:
    @pytest.mark.asyncio
    async def test_mycourse_document(self, db_session, test_course):
        doc = await MyCourseSearchArea(db_session).get_document(test_course)

        assert doc.itemid == COURSE_ID
        assert doc.areaid == "core_course-mycourse"
        assert doc.title == "Introductory Physics"
        assert doc.content == "Forces and motion."
        assert doc.contextid == COURSE_CONTEXT_ID
        assert doc.courseid == COURSE_ID
        assert doc.owneruserid == NO_OWNER_ID

    @pytest.mark.asyncio
    async def test_allcourses_document_uses_summary_as_description(self, db_session, test_course):
        doc = await AllCoursesSearchArea(db_session).get_document(test_course)

        assert doc.areaid == "core_course-allcourses"
        assert doc.content == ""
        assert doc.description1 == "Forces and motion."

    @pytest.mark.asyncio
    async def test_recordset_by_timestamp(self, db_session, test_course):
        records = await AllCoursesSearchArea(db_session).get_recordset_by_timestamp(0)
        assert [c.id for c in records] == [COURSE_ID]

    def test_component_name(self, db_session):
        assert AllCoursesSearchArea(db_session).get_component_name() == "course"
