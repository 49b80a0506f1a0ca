"""
User Filters - SQL conditions for filtering user lists.
"""

from src.engines.user_filters.base import FilterForm, FormField, UserFilterType
from src.engines.user_filters.course_role_subcat import CourseRoleSubcatFilter

__all__ = [
    "FilterForm",
    "FormField",
    "UserFilterType",
    "CourseRoleSubcatFilter",
]
