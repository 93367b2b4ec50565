"""today macro: the current date in the project's date format."""
from __future__ import annotations

from datetime import date
from typing import Any

from today_macro.models import Project, User


class TodayMacro:
    """Renders today's date through the project's date formatter."""

    def __init__(
        self,
        parameters: dict[str, Any],
        project: Project,
        current_user: User | None,
    ) -> None:
        # parameters and current_user are accepted but unused
        self._project = project

    def execute(self) -> str:
        return self._project.format_date(date.today())

    @classmethod
    def can_be_cached(cls) -> bool:
        # output changes every day
        return False

    @classmethod
    def supports_project_group(cls) -> bool:
        return False
