"""Runner: load config, build projects, load macro plugins and render text."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Sequence

import yaml

from today_macro.macros import register as register_builtin_macros
from today_macro.models import User
from today_macro.project import ConfiguredProject
from today_macro.registry import MacroRegistry
from today_macro.renderer import MacroRenderer

logger = logging.getLogger(__name__)


def load_config(path: str | Path) -> dict:
    """Load YAML config from path."""
    with open(path, encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def validate_config(config: dict) -> None:
    """Validate projects and users; raise ValueError on error."""
    if not isinstance(config, dict):
        raise ValueError("config: top level must be a dict")
    projects = config.get("projects") or {}
    users = config.get("users") or {}

    if not projects:
        raise ValueError("config: projects is empty")
    if not isinstance(projects, dict):
        raise ValueError("config: projects must be a dict")
    for pid, proj in projects.items():
        if not isinstance(proj, dict):
            raise ValueError(f"config: projects.{pid} must be a dict")
        date_format = proj.get("date_format")
        if not date_format:
            raise ValueError(f"config: projects.{pid} missing 'date_format'")
        if not isinstance(date_format, str):
            raise ValueError(f"config: projects.{pid}.date_format must be a string")

    if not isinstance(users, dict):
        raise ValueError("config: users must be a dict")
    for login, user in users.items():
        if user is not None and not isinstance(user, dict):
            raise ValueError(f"config: users.{login} must be a dict")


def build_projects(config: dict) -> dict[str, ConfiguredProject]:
    """Return project id -> ConfiguredProject for every configured project."""
    projects = config.get("projects") or {}
    return {
        pid: ConfiguredProject(pid, proj.get("date_format"), name=proj.get("name"))
        for pid, proj in projects.items()
    }


def build_user(config: dict, login: str | None) -> User | None:
    """Return User for login, or None when rendering anonymously."""
    if login is None:
        return None
    users = config.get("users") or {}
    if login not in users:
        raise ValueError(f"user '{login}' not found in config")
    user_cfg = users.get(login) or {}
    return User(login=login, name=user_cfg.get("name"))


def build_registry(discover: bool = False) -> MacroRegistry:
    """Registry with the bundled macros; discover=True also loads installed plugins."""
    registry = MacroRegistry()
    if discover:
        registry.load_plugins()
    if "today" not in registry:
        register_builtin_macros(registry)
    return registry


def render(
    config_path: str | Path,
    project_ids: Sequence[str],
    text: str,
    user_login: str | None = None,
    discover: bool = False,
) -> str:
    """Load config, validate, and render text in the context of project_ids.

    More than one project id renders in a project-group context.
    """
    path = Path(config_path)
    if not path.exists():
        raise FileNotFoundError(f"config not found: {path}")

    config = load_config(path)
    validate_config(config)

    if not project_ids:
        raise ValueError("at least one project id is required")
    projects = build_projects(config)
    missing = [pid for pid in project_ids if pid not in projects]
    if missing:
        raise ValueError(f"project id(s) not found in config: {missing}")

    user = build_user(config, user_login)
    registry = build_registry(discover=discover)
    renderer = MacroRenderer(registry, [projects[pid] for pid in project_ids], user)
    logger.info(
        "Rendering for project(s) %s as %s",
        list(project_ids),
        user.login if user else "anonymous",
    )
    return renderer.render(text)
