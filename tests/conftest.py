from __future__ import annotations

from datetime import date

import pytest

import today_macro.macros.today as today_module

FIXED_TODAY = date(2024, 3, 7)


class FixedDate(date):
    """date whose today() is pinned to FIXED_TODAY."""

    @classmethod
    def today(cls):
        return cls(FIXED_TODAY.year, FIXED_TODAY.month, FIXED_TODAY.day)


class RecordingProject:
    """Project stub that records the dates it was asked to format."""

    def __init__(self, result: str = "formatted") -> None:
        self.result = result
        self.calls: list[date] = []

    def format_date(self, value: date) -> str:
        self.calls.append(value)
        return self.result


@pytest.fixture
def fixed_today(monkeypatch):
    monkeypatch.setattr(today_module, "date", FixedDate)
    return FIXED_TODAY


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(
        """
projects:
  iso:
    name: ISO
    date_format: "YYYY-MM-DD"
  uk:
    date_format: "DD/MM/YYYY"
users:
  alice:
    name: Alice
""",
        encoding="utf-8",
    )
    return path


@pytest.fixture
def make_project():
    """Factory for RecordingProject stubs: make_project(result="...")."""
    return RecordingProject
