"""Project capability backed by a configured date-format pattern."""
from __future__ import annotations

import calendar
import re
from datetime import date

# Longest tokens first so "MMMM" is not read as "MM" + "MM"
DATE_TOKEN_RE = re.compile(r"YYYY|YY|MMMM|MMM|MM|DD")


class DateFormatError(ValueError):
    """Project date format is missing or cannot render a date."""


def _render_token(token: str, value: date) -> str:
    if token == "YYYY":
        return f"{value.year:04d}"
    if token == "YY":
        return f"{value.year % 100:02d}"
    if token == "MMMM":
        return calendar.month_name[value.month]
    if token == "MMM":
        return calendar.month_abbr[value.month]
    if token == "MM":
        return f"{value.month:02d}"
    return f"{value.day:02d}"


def format_date(value: date, pattern: str) -> str:
    """Render value with a pattern such as 'YYYY-MM-DD' or 'DD MMM YYYY'."""
    if not isinstance(pattern, str) or not pattern.strip():
        raise DateFormatError("date format is not configured")
    if not DATE_TOKEN_RE.search(pattern):
        raise DateFormatError(f"date format {pattern!r} contains no date fields")
    return DATE_TOKEN_RE.sub(lambda m: _render_token(m.group(0), value), pattern)


class ConfiguredProject:
    """A project whose date format comes from config (implements the Project protocol)."""

    def __init__(self, identifier: str, date_format: str | None, name: str | None = None) -> None:
        self.identifier = identifier
        self.date_format = date_format
        self.name = name or identifier

    def format_date(self, value: date) -> str:
        try:
            return format_date(value, self.date_format)
        except DateFormatError as e:
            raise DateFormatError(f"project '{self.identifier}': {e}") from e

    def __repr__(self) -> str:
        return f"<ConfiguredProject {self.identifier!r} date_format={self.date_format!r}>"
