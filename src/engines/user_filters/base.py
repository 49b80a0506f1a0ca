"""
Base class for user list filters.

A filter describes its form fields, reads its settings back from submitted
form data, and turns those settings into a SQL condition on ``users.id``.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Mapping, Optional, Tuple

from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql.elements import ColumnElement


class FormField(BaseModel):
    """One form control of a filter."""

    name: str
    type: str  # select, checkbox, text
    label: str
    choices: Optional[Dict[int, str]] = None
    # Disabled while the named field equals the given value
    disabled_if: Optional[Tuple[str, Any]] = None


class FilterForm(BaseModel):
    """Form definition of a filter: a labelled group of fields."""

    group: str
    label: str
    advanced: bool = False
    fields: List[FormField]


class UserFilterType(ABC):
    """
    A user filter instance.

    ``name`` prefixes every form field of the instance, so two instances of
    one filter type can share a form.
    """

    def __init__(self, name: str, label: str, advanced: bool = False):
        self.name = name
        self.label = label
        self.advanced = advanced

    @abstractmethod
    async def form_definition(self, session: AsyncSession) -> FilterForm:
        """Form fields of this filter with their current choices."""

    @abstractmethod
    def check_data(self, form_data: Mapping[str, Any]) -> Optional[Dict[str, Any]]:
        """Filter settings from submitted data, or None when the filter is not set."""

    @abstractmethod
    async def get_sql_filter(
        self,
        session: AsyncSession,
        data: Dict[str, Any],
        param_prefix: str,
    ) -> Tuple[Optional[ColumnElement], Dict[str, Any]]:
        """
        SQL condition and bound parameters for the settings.

        Parameter names start with ``param_prefix``; callers combining
        several filters pass a distinct prefix per filter.
        """

    @abstractmethod
    async def get_label(self, session: AsyncSession, data: Dict[str, Any]) -> str:
        """Human readable description of the active filter."""
