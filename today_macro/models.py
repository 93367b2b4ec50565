"""Core types shared by the macro plugin and the host that renders it."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Protocol


class Project(Protocol):
    """Project capability consumed by macros: render a date per project settings."""

    def format_date(self, value: date) -> str:
        ...


@dataclass
class User:
    """Authenticated user a macro is rendered for."""

    login: str
    name: str | None = None


class Macro(Protocol):
    """Macro protocol: built per invocation with (parameters, project, current_user)."""

    def __init__(
        self,
        parameters: dict[str, Any],
        project: Project,
        current_user: User | None,
    ) -> None:
        ...

    def execute(self) -> str:
        """Return the rendered output that replaces the macro markup."""
        ...

    def can_be_cached(self) -> bool:
        ...

    @classmethod
    def supports_project_group(cls) -> bool:
        ...


@dataclass
class MacroCall:
    """One macro markup occurrence found in formatted text."""

    name: str
    raw: str
    start: int
    end: int
    parameters: dict[str, Any] = field(default_factory=dict)
    error: Exception | None = None
