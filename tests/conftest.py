"""
Pytest fixtures for course content access tests.
"""

import uuid
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool

from src.config import get_settings
from src.engines.files.storage import FileStorage
from src.kernel.models.base import Base
from src.kernel.models.context import Context, ContextLevel
from src.kernel.models.course import Course, CourseCategory, CourseModule, Enrolment
from src.kernel.models.role import Role, RoleAssignment
from src.kernel.models.scheduled_task import ScheduledTask
from src.kernel.models.user import User, UserRole
from src.kernel.identity.password import hash_password
from src.kernel.identity.jwt import JWTManager
from src.kernel.permissions.access_gate import AccessGate


# In-memory SQLite; StaticPool keeps one connection so every session sees the same DB
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

COURSE_ID = 5
COURSE_CONTEXT_ID = 50
FOLDER_CM_ID = 7
FOLDER_CONTEXT_ID = 70


@pytest_asyncio.fixture(scope="function")
async def db_engine():
    """Create a test database engine."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def db_session(db_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session."""
    async_session_maker = async_sessionmaker(
        db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with async_session_maker() as session:
        yield session
        await session.rollback()


async def _make_user(session: AsyncSession, email: str, password: str, role: UserRole) -> User:
    user = User(
        id=uuid.uuid4(),
        email=email,
        password_hash=hash_password(password),
        full_name=email.split("@")[0].title(),
        role=role,
    )
    session.add(user)
    await session.commit()
    await session.refresh(user)
    return user


@pytest_asyncio.fixture
async def test_user(db_session: AsyncSession) -> User:
    """Create a student user (not enrolled anywhere)."""
    return await _make_user(db_session, "student@example.com", "StudentPass123", UserRole.STUDENT)


@pytest_asyncio.fixture
async def test_admin(db_session: AsyncSession) -> User:
    """Create a site administrator."""
    return await _make_user(db_session, "admin@example.com", "AdminPass123", UserRole.ADMIN)


@pytest_asyncio.fixture
async def categories(db_session: AsyncSession) -> dict[str, CourseCategory]:
    """Category tree: Science / Physics, plus a separate Arts category."""
    science = CourseCategory(id=1, name="Science", path="/1", sort_order=1)
    physics = CourseCategory(id=2, name="Physics", parent_id=1, path="/1/2", sort_order=1)
    arts = CourseCategory(id=3, name="Arts", path="/3", sort_order=2)
    db_session.add_all([science, physics, arts])
    await db_session.commit()
    return {"science": science, "physics": physics, "arts": arts}


@pytest_asyncio.fixture
async def test_course(db_session: AsyncSession, categories) -> Course:
    """A visible course with its course context and a folder activity."""
    course = Course(
        id=COURSE_ID,
        category_id=categories["physics"].id,
        short_name="PHY101",
        full_name="Introductory <b>Physics</b>",
        summary="<p>Forces and   motion.</p>",
        visible=True,
    )
    db_session.add(course)
    db_session.add(
        Context(id=COURSE_CONTEXT_ID, context_level=ContextLevel.COURSE, instance_id=COURSE_ID)
    )
    db_session.add(
        CourseModule(id=FOLDER_CM_ID, course_id=COURSE_ID, module_name="folder", name="Handouts")
    )
    db_session.add(
        Context(
            id=FOLDER_CONTEXT_ID,
            context_level=ContextLevel.MODULE,
            instance_id=FOLDER_CM_ID,
            parent_id=COURSE_CONTEXT_ID,
        )
    )
    await db_session.commit()
    await db_session.refresh(course)
    return course


@pytest_asyncio.fixture
async def enrolled_user(db_session: AsyncSession, test_course: Course) -> User:
    """A student enrolled in the test course."""
    user = await _make_user(db_session, "enrolled@example.com", "EnrolledPass123", UserRole.STUDENT)
    db_session.add(Enrolment(user_id=user.id, course_id=test_course.id, active=True))
    await db_session.commit()
    return user


@pytest_asyncio.fixture
async def roles(db_session: AsyncSession) -> dict[str, Role]:
    student = Role(id=5, short_name="student", name="Student", sort_order=5)
    teacher = Role(id=3, short_name="editingteacher", name="Teacher", sort_order=3)
    manager = Role(id=1, short_name="manager", name="", sort_order=1, default_enrol=False)
    db_session.add_all([student, teacher, manager])
    await db_session.commit()
    return {"student": student, "teacher": teacher, "manager": manager}


@pytest_asyncio.fixture
async def role_assignment(db_session: AsyncSession, roles, enrolled_user: User) -> RoleAssignment:
    """The enrolled user holds the student role in the test course."""
    assignment = RoleAssignment(
        role_id=roles["student"].id,
        context_id=COURSE_CONTEXT_ID,
        user_id=enrolled_user.id,
    )
    db_session.add(assignment)
    await db_session.commit()
    return assignment


@pytest_asyncio.fixture
async def scheduled_task(db_session: AsyncSession) -> ScheduledTask:
    task = ScheduledTask(
        classname="\\core\\task\\session_cleanup_task",
        component="moodle",
        minute="*",
        hour="*",
        day="*",
        month="*",
        dayofweek="*",
        faildelay=0,
    )
    db_session.add(task)
    await db_session.commit()
    await db_session.refresh(task)
    return task


@pytest.fixture
def storage(db_session: AsyncSession, tmp_path) -> FileStorage:
    """File storage writing its bytes under a temporary directory."""
    return FileStorage(db_session, root=tmp_path / "filedir")


@pytest.fixture
def make_gate(db_session: AsyncSession):
    """Build an access gate for a given user (None for anonymous)."""
    def _make(user=None) -> AccessGate:
        return AccessGate(db_session, user)
    return _make


@pytest.fixture
def include_all_courses(monkeypatch):
    """Switch the include-all-courses search policy on for one test."""
    monkeypatch.setenv("SEARCH_INCLUDE_ALL_COURSES", "true")
    get_settings.cache_clear()
    yield
    monkeypatch.delenv("SEARCH_INCLUDE_ALL_COURSES", raising=False)
    get_settings.cache_clear()


@pytest.fixture
def jwt_manager() -> JWTManager:
    """Create a JWT manager for tests."""
    return JWTManager(
        secret_key="test-secret-key-for-testing-only",
        algorithm="HS256",
        access_token_expire_minutes=30,
    )
