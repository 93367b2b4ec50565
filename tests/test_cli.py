from __future__ import annotations

import io
from types import SimpleNamespace

import pytest

import today_macro.registry as registry_module
from today_macro import cli
from today_macro.macros import register


@pytest.fixture(autouse=True)
def _in_tmp(tmp_path, monkeypatch):
    # cli writes logs/ under the working directory
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("TODAY_MACRO_CONFIG", raising=False)


def test_render_text(config_file, fixed_today, capsys):
    cli.main(["render", "--config", str(config_file), "--project", "uk", "--text", "On {{ today }}"])
    assert capsys.readouterr().out == "On 07/03/2024\n"


def test_render_file(config_file, fixed_today, tmp_path, capsys):
    page = tmp_path / "page.txt"
    page.write_text("Date: {{ today }}\n", encoding="utf-8")

    cli.main(["render", "--config", str(config_file), "--project", "iso", str(page)])

    assert capsys.readouterr().out == "Date: 2024-03-07\n"


def test_render_missing_config_exits(tmp_path):
    with pytest.raises(SystemExit) as exc_info:
        cli.main(["render", "--config", str(tmp_path / "none.yaml"), "--project", "iso", "--text", "x"])
    assert exc_info.value.code == 1


def test_render_unknown_project_exits(config_file):
    with pytest.raises(SystemExit) as exc_info:
        cli.main(["render", "--config", str(config_file), "--project", "nope", "--text", "x"])
    assert exc_info.value.code == 1


def test_list(capsys):
    cli.main(["list"])
    out = capsys.readouterr().out
    assert out.startswith("today\ttoday_macro.macros.today.TodayMacro")
    assert "\tcan_be_cached=False\t" in out
    assert "project_group=False" in out


def test_config_path_from_environment(config_file, fixed_today, monkeypatch, capsys):
    monkeypatch.setenv("TODAY_MACRO_CONFIG", str(config_file))

    cli.main(["render", "--project", "uk", "--text", "{{ today }}"])

    assert capsys.readouterr().out == "07/03/2024\n"


@pytest.mark.parametrize("argv_tail", [[], ["-"]])
def test_render_reads_stdin(config_file, fixed_today, monkeypatch, capsys, argv_tail):
    monkeypatch.setattr("sys.stdin", io.StringIO("From stdin: {{ today }}\n"))

    cli.main(["render", "--config", str(config_file), "--project", "iso", *argv_tail])

    assert capsys.readouterr().out == "From stdin: 2024-03-07\n"


def test_list_with_discover_loads_entry_points(monkeypatch, capsys):
    requested = []

    def fake_entry_points(group):
        requested.append(group)
        return [SimpleNamespace(name="today", load=lambda: register)]

    monkeypatch.setattr(registry_module, "entry_points", fake_entry_points)

    cli.main(["--discover", "list"])

    assert requested == ["today_macro.macros"]
    assert capsys.readouterr().out.startswith("today\t")
