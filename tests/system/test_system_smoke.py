"""
System smoke test: full API flow in-process with SQLite.
Verifies health, login, plugin file serving, search access decisions, and the
admin task and user filter endpoints.
Uses a temp file DB so all connections share the same database.
"""

import os
import tempfile
import uuid
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.exc import OperationalError

# Use file-based SQLite so all connections share the same DB (in-memory is per-connection)
_tmp = tempfile.NamedTemporaryFile(suffix=".db", delete=False)
_tmp.close()
TEST_DB_PATH = _tmp.name
TEST_FILEDIR = tempfile.mkdtemp(prefix="filedir-")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{TEST_DB_PATH}"
os.environ["FILE_STORAGE_ROOT"] = TEST_FILEDIR
# Force config reload so app uses test DB
from src.config import get_settings
get_settings.cache_clear()

from src.kernel.models import Base
from src.kernel.models.context import Context, ContextLevel
from src.kernel.models.course import Course, CourseCategory, CourseModule, Enrolment
from src.kernel.models.role import Role, RoleAssignment
from src.kernel.models.scheduled_task import ScheduledTask
from src.kernel.models.stored_file import FileAccessLevel
from src.kernel.models.user import User, UserRole
from src.kernel.identity.password import hash_password
from src.engines.files.registry import serving_registry
from src.engines.files.storage import FileStorage
from src.plugins.serving import register_serving_plugins
from src.main import app
from src.database import get_db


TEST_ENGINE = create_async_engine(
    f"sqlite+aiosqlite:///{TEST_DB_PATH}",
    echo=False,
    connect_args={"check_same_thread": False},
)
TEST_SESSION_MAKER = async_sessionmaker(
    TEST_ENGINE,
    class_=AsyncSession,
    expire_on_commit=False,
    autocommit=False,
    autoflush=False,
)

STUDENT_PASSWORD = "StudentPass123"
ADMIN_PASSWORD = "AdminPass123"


async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
    async with TEST_SESSION_MAKER() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


async def _seed() -> dict:
    """Category, course with a folder, an enrolled student, an admin, files and a task."""
    async with TEST_SESSION_MAKER() as session:
        student = User(
            id=uuid.uuid4(),
            email="student@example.com",
            password_hash=hash_password(STUDENT_PASSWORD),
            full_name="Student",
            role=UserRole.STUDENT,
        )
        admin = User(
            id=uuid.uuid4(),
            email="admin@example.com",
            password_hash=hash_password(ADMIN_PASSWORD),
            full_name="Admin",
            role=UserRole.ADMIN,
        )
        session.add_all([student, admin])
        session.add(CourseCategory(id=1, name="Science", path="/1"))
        session.add(Course(id=5, category_id=1, short_name="PHY101", full_name="Physics"))
        session.add(Context(id=50, context_level=ContextLevel.COURSE, instance_id=5))
        session.add(CourseModule(id=7, course_id=5, module_name="folder", name="Handouts"))
        session.add(Context(id=70, context_level=ContextLevel.MODULE, instance_id=7, parent_id=50))
        session.add(Role(id=5, short_name="student", name="Student"))
        await session.flush()
        session.add(Enrolment(user_id=student.id, course_id=5))
        session.add(RoleAssignment(role_id=5, context_id=50, user_id=student.id))
        session.add(ScheduledTask(classname="\\core\\task\\send_new_user_passwords_task", component="moodle"))

        storage = FileStorage(session)
        await storage.create_file_from_bytes(
            50, "course", "summary", 0, "/", "syllabus.txt", b"week 1: forces",
            access_level=FileAccessLevel.COURSE,
        )
        await storage.create_file_from_bytes(
            70, "mod_folder", "content", 0, "/", "notes.txt", b"folder notes",
            access_level=FileAccessLevel.MODULE,
        )
        await session.commit()
        return {"student": student, "admin": admin}


@pytest_asyncio.fixture
async def client():
    """Async client with a freshly seeded test DB."""
    async with TEST_ENGINE.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    await _seed()

    register_serving_plugins(serving_registry)
    app.dependency_overrides[get_db] = override_get_db
    try:
        async with AsyncClient(
            transport=ASGITransport(app=app),
            base_url="http://test",
        ) as ac:
            yield ac
    finally:
        app.dependency_overrides.pop(get_db, None)
        async with TEST_ENGINE.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)


async def _login(client: AsyncClient, email: str, password: str) -> dict:
    r = await client.post("/api/v1/auth/login", json={"email": email, "password": password})
    assert r.status_code == 200, r.text
    return {"Authorization": f"Bearer {r.json()['access_token']}"}


@pytest.mark.asyncio
async def test_health(client: AsyncClient):
    r = await client.get("/health")
    assert r.status_code == 200
    data = r.json()
    assert data["status"] == "ok"
    assert data["serving_strategies"] >= 1
    assert "X-Request-ID" in r.headers


@pytest.mark.asyncio
async def test_login(client: AsyncClient):
    r = await client.post(
        "/api/v1/auth/login",
        json={"email": "student@example.com", "password": "wrong"},
    )
    assert r.status_code == 401

    headers = await _login(client, "student@example.com", STUDENT_PASSWORD)
    r = await client.get("/api/v1/auth/me", headers=headers)
    assert r.status_code == 200
    assert r.json()["email"] == "student@example.com"


@pytest.mark.asyncio
async def test_pluginfile_flow(client: AsyncClient):
    url = "/api/v1/pluginfile/50/course/summary/0/syllabus.txt"

    r = await client.get(url)
    assert r.status_code == 401
    assert r.headers["WWW-Authenticate"] == "Bearer"
    body = r.json()["error"]
    assert body["code"] == "AUTH_REQUIRED"
    assert body["details"]["login_url"] == get_settings().login_url

    headers = await _login(client, "student@example.com", STUDENT_PASSWORD)
    r = await client.get(url, headers=headers)
    assert r.status_code == 200
    assert r.content == b"week 1: forces"
    assert r.headers["content-disposition"].startswith("inline")

    r = await client.get(url, params={"forcedownload": 1}, headers=headers)
    assert r.headers["content-disposition"].startswith("attachment")

    r = await client.get("/api/v1/pluginfile/50/course/summary/0/missing.txt", headers=headers)
    assert r.status_code == 404
    assert r.json()["error"] == {"code": "NOT_FOUND", "message": "File not found"}


@pytest.mark.asyncio
async def test_folder_content_downloaded(client: AsyncClient):
    headers = await _login(client, "student@example.com", STUDENT_PASSWORD)

    r = await client.get("/api/v1/pluginfile/70/mod_folder/content/0/notes.txt", headers=headers)
    assert r.status_code == 200
    assert r.content == b"folder notes"
    assert r.headers["content-disposition"].startswith("attachment")
    assert r.headers["cache-control"] == "no-cache, no-store, must-revalidate"


@pytest.mark.asyncio
async def test_admin_bypasses_enrolment(client: AsyncClient):
    headers = await _login(client, "admin@example.com", ADMIN_PASSWORD)
    r = await client.get("/api/v1/pluginfile/50/course/summary/0/syllabus.txt", headers=headers)
    assert r.status_code == 200


@pytest.mark.asyncio
async def test_search_access(client: AsyncClient):
    r = await client.get("/api/v1/search/courses/5/access", params={"area": "allcourses"})
    assert r.status_code == 200
    assert r.json() == {"area_id": "core_course-allcourses", "item_id": 5, "access": "denied"}

    r = await client.get("/api/v1/search/courses/999/access")
    assert r.json()["access"] == "deleted"

    headers = await _login(client, "student@example.com", STUDENT_PASSWORD)
    r = await client.get(
        "/api/v1/search/courses/5/access", params={"area": "mycourse"}, headers=headers
    )
    assert r.json()["access"] == "granted"

    r = await client.get("/api/v1/search/courses/5/access", params={"area": "forum"})
    assert r.status_code == 400


@pytest.mark.asyncio
async def test_admin_task_schedule(client: AsyncClient):
    student = await _login(client, "student@example.com", STUDENT_PASSWORD)
    r = await client.get("/api/v1/admin/tasks", headers=student)
    assert r.status_code == 403

    admin = await _login(client, "admin@example.com", ADMIN_PASSWORD)
    r = await client.get("/api/v1/admin/tasks", headers=admin)
    assert r.status_code == 200
    task_id = r.json()[0]["id"]

    r = await client.patch(f"/api/v1/admin/tasks/{task_id}", json={"minute": "99"}, headers=admin)
    assert r.status_code == 422

    r = await client.patch(f"/api/v1/admin/tasks/{task_id}", json={"minute": "*/5"}, headers=admin)
    assert r.status_code == 200
    assert r.json()["minute"] == "*/5"
    assert r.json()["customised"] is True

    r = await client.patch("/api/v1/admin/tasks/404", json={"minute": "1"}, headers=admin)
    assert r.status_code == 404


@pytest.mark.asyncio
async def test_admin_user_filter(client: AsyncClient):
    admin = await _login(client, "admin@example.com", ADMIN_PASSWORD)

    r = await client.get("/api/v1/admin/users/filter/form", headers=admin)
    assert r.status_code == 200
    assert r.json()["group"] == "courserole_grp"

    r = await client.post(
        "/api/v1/admin/users/filter",
        json={"form_data": {"courserole_rl": "5", "courserole_ct": "1", "courserole_sct": "1"}},
        headers=admin,
    )
    assert r.status_code == 200
    data = r.json()
    assert data["total"] == 1
    assert [u["email"] for u in data["users"]] == ["student@example.com"]
    assert data["label"] == 'Course role is "Student" in All courses from "Science" (including subcategories)'

    r = await client.post("/api/v1/admin/users/filter", json={"form_data": {}}, headers=admin)
    assert r.json()["total"] == 2
    assert r.json()["label"] is None


class UnavailableSession:
    """Session whose every query fails as if the database went away."""

    def _fail(self):
        raise OperationalError("SELECT", {}, Exception("database is locked"))

    async def execute(self, *args, **kwargs):
        self._fail()

    async def get(self, *args, **kwargs):
        self._fail()

    async def scalar(self, *args, **kwargs):
        self._fail()


async def unavailable_get_db() -> AsyncGenerator[UnavailableSession, None]:
    yield UnavailableSession()


@pytest.mark.asyncio
async def test_database_failure_is_storage_error(client: AsyncClient):
    app.dependency_overrides[get_db] = unavailable_get_db
    try:
        r = await client.get("/api/v1/search/courses/5/access", params={"area": "allcourses"})
        assert r.status_code == 500
        assert r.json() == {"error": {"code": "STORAGE_ERROR", "message": "Storage unavailable"}}
        assert "X-Request-ID" in r.headers

        r = await client.get("/api/v1/pluginfile/50/course/summary/0/syllabus.txt")
        assert r.status_code == 500
        assert r.json()["error"]["code"] == "STORAGE_ERROR"
    finally:
        app.dependency_overrides[get_db] = override_get_db
