"""
Administration endpoints: scheduled tasks and user filtering.
"""

from typing import List

from fastapi import APIRouter, HTTPException, Request, status
from sqlalchemy import func, select

from src.api.deps import AdminUser, DbSession, get_client_ip
from src.engines.tasks.task_service import TaskService
from src.engines.user_filters.base import FilterForm
from src.engines.user_filters.course_role_subcat import CourseRoleSubcatFilter
from src.kernel.models.user import User
from src.schemas.auth import UserResponse
from src.schemas.filters import UserFilterRequest, UserFilterResponse
from src.schemas.tasks import ScheduleUpdate, ScheduledTaskResponse

router = APIRouter()


def course_role_filter() -> CourseRoleSubcatFilter:
    return CourseRoleSubcatFilter("courserole", "Course role", advanced=True)


@router.get("/tasks", response_model=List[ScheduledTaskResponse])
async def list_tasks(admin: AdminUser, db: DbSession):
    """List scheduled tasks."""
    tasks = await TaskService(db).list_tasks()
    return [ScheduledTaskResponse.model_validate(task) for task in tasks]


@router.patch("/tasks/{task_id}", response_model=ScheduledTaskResponse)
async def update_task_schedule(
    request: Request,
    task_id: int,
    data: ScheduleUpdate,
    admin: AdminUser,
    db: DbSession,
):
    """Change a scheduled task's schedule."""
    changes = data.model_dump(exclude_none=True)
    if not changes:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="No schedule fields given",
        )

    task = await TaskService(db).update_schedule(
        task_id,
        changes,
        user_id=admin.id,
        ip_address=get_client_ip(request),
    )
    return ScheduledTaskResponse.model_validate(task)


@router.get("/users/filter/form", response_model=FilterForm)
async def get_user_filter_form(admin: AdminUser, db: DbSession):
    """Form definition of the course role filter."""
    return await course_role_filter().form_definition(db)


@router.post("/users/filter", response_model=UserFilterResponse)
async def filter_users(data: UserFilterRequest, admin: AdminUser, db: DbSession):
    """List users matching the course role filter."""
    user_filter = course_role_filter()
    settings = user_filter.check_data(data.form_data)

    query = select(User)
    count_query = select(func.count(User.id))
    params = {}
    label = None

    if settings is not None:
        condition, params = await user_filter.get_sql_filter(
            db, settings, param_prefix=f"{user_filter.name}0_"
        )
        if condition is not None:
            query = query.where(condition)
            count_query = count_query.where(condition)
        label = await user_filter.get_label(db, settings)

    total = (await db.execute(count_query, params)).scalar() or 0
    result = await db.execute(query.order_by(User.email).limit(data.limit), params)

    return UserFilterResponse(
        label=label,
        total=total,
        users=[UserResponse.model_validate(u) for u in result.scalars().all()],
    )
