"""
User filter: users holding a role in the courses of a category, optionally
including the courses of its sub-categories.
"""

from typing import Any, Dict, List, Mapping, Optional, Tuple

from sqlalchemy import and_, bindparam, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql.elements import ColumnElement

from src.core.errors import NotFoundError
from src.engines.user_filters.base import FilterForm, FormField, UserFilterType
from src.kernel.models.context import Context, ContextLevel
from src.kernel.models.course import Course, CourseCategory
from src.kernel.models.role import Role, RoleAssignment
from src.kernel.models.user import User
from src.logging_config import get_logger

logger = get_logger(__name__)

ANY_ROLE = "Any role"
ANY_CATEGORY = "Any category"


def _is_set(value: Any) -> bool:
    """Form-style truthiness: None, "", "0" and 0 are unset."""
    return value not in (None, "", "0", 0, False)


def _as_int(value: Any) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


class CourseRoleSubcatFilter(UserFilterType):
    """Course role filter scoped to a category tree."""

    @property
    def role_field(self) -> str:
        return f"{self.name}_rl"

    @property
    def category_field(self) -> str:
        return f"{self.name}_ct"

    @property
    def subcats_field(self) -> str:
        return f"{self.name}_sct"

    async def get_roles(self, session: AsyncSession) -> Dict[int, str]:
        """Roles offered on enrolment, after an "any" choice keyed 0."""
        result = await session.execute(
            select(Role).where(Role.default_enrol.is_(True)).order_by(Role.sort_order, Role.id)
        )
        roles = {0: ANY_ROLE}
        roles.update({role.id: role.display_name for role in result.scalars().all()})
        return roles

    async def get_course_categories(self, session: AsyncSession) -> Dict[int, str]:
        """Every category as "Parent / Child", after an "any" choice keyed 0."""
        result = await session.execute(
            select(CourseCategory).order_by(CourseCategory.path, CourseCategory.sort_order)
        )
        categories = list(result.scalars().all())
        names = {category.id: category.name for category in categories}

        choices = {0: ANY_CATEGORY}
        for category in categories:
            ids = [int(p) for p in category.path.split("/") if p] or [category.id]
            choices[category.id] = " / ".join(names[i] for i in ids if i in names)
        return choices

    async def get_category_with_children_ids(
        self,
        session: AsyncSession,
        category_id: int,
    ) -> List[int]:
        """
        The category and all of its descendants.

        Raises:
            NotFoundError: unknown category
        """
        category = await session.get(CourseCategory, category_id)
        if category is None:
            raise NotFoundError(f"Course category {category_id} not found")
        if not category.path:
            # No materialised path: descendants cannot be found by prefix
            logger.warning("Course category has no path", extra={"category_id": category_id})
            return [category_id]

        result = await session.execute(
            select(CourseCategory.id).where(
                or_(
                    CourseCategory.id == category_id,
                    CourseCategory.path.like(f"{category.path}/%"),
                )
            )
        )
        return sorted(result.scalars().all())

    async def form_definition(self, session: AsyncSession) -> FilterForm:
        return FilterForm(
            group=f"{self.name}_grp",
            label=self.label,
            advanced=self.advanced,
            fields=[
                FormField(
                    name=self.role_field,
                    type="select",
                    label="Course role",
                    choices=await self.get_roles(session),
                ),
                FormField(
                    name=self.category_field,
                    type="select",
                    label="Course category",
                    choices=await self.get_course_categories(session),
                ),
                FormField(
                    name=self.subcats_field,
                    type="checkbox",
                    label="Include subcategories",
                    disabled_if=(self.category_field, 0),
                ),
            ],
        )

    def check_data(self, form_data: Mapping[str, Any]) -> Optional[Dict[str, Any]]:
        role = form_data.get(self.role_field)
        category = form_data.get(self.category_field)

        if not _is_set(role) and not _is_set(category):
            return None

        subcats = form_data.get(self.subcats_field)
        return {
            "includesubcats": "" if subcats is None else str(subcats),
            "roleid": _as_int(role),
            "categoryid": _as_int(category),
        }

    async def get_sql_filter(
        self,
        session: AsyncSession,
        data: Dict[str, Any],
        param_prefix: str,
    ) -> Tuple[Optional[ColumnElement], Dict[str, Any]]:
        role_id = data.get("roleid") or 0
        category_id = data.get("categoryid") or 0
        include_subcats = _is_set(data.get("includesubcats"))

        params: Dict[str, Any] = {}
        if not role_id and not category_id:
            return None, params

        conditions = [Context.context_level == ContextLevel.COURSE.value]

        if role_id:
            key = f"{param_prefix}roleid"
            conditions.append(RoleAssignment.role_id == bindparam(key))
            params[key] = role_id

        if category_id:
            if include_subcats:
                key = f"{param_prefix}categoryids"
                conditions.append(Course.category_id.in_(bindparam(key, expanding=True)))
                params[key] = await self.get_category_with_children_ids(session, category_id)
            else:
                key = f"{param_prefix}categoryid"
                conditions.append(Course.category_id == bindparam(key))
                params[key] = category_id

        user_ids = (
            select(RoleAssignment.user_id)
            .join(Context, RoleAssignment.context_id == Context.id)
            .join(Course, Context.instance_id == Course.id)
            .where(and_(*conditions))
        )
        return User.id.in_(user_ids), params

    async def get_label(self, session: AsyncSession, data: Dict[str, Any]) -> str:
        role_id = data.get("roleid") or 0
        category_id = data.get("categoryid") or 0

        role_name = ANY_ROLE
        if role_id:
            role = await session.get(Role, role_id)
            # A stale id still filters, so it must not read as "any"
            role_name = f'"{role.display_name}"' if role is not None else '""'

        category_name = ANY_CATEGORY
        if category_id:
            category = await session.get(CourseCategory, category_id)
            category_name = f'"{category.name}"' if category is not None else '""'
            if _is_set(data.get("includesubcats")):
                category_name += " (including subcategories)"

        return f"{self.label} is {role_name} in All courses from {category_name}"
