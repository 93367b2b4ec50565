"""Host-side rendering: find {{ macro }} markup in text and replace it with macro output."""
from __future__ import annotations

import logging
import re
import textwrap
from typing import Any, Sequence

import yaml

from today_macro.models import MacroCall, Project, User
from today_macro.registry import MacroRegistry

logger = logging.getLogger(__name__)

MACRO_MARKUP_RE = re.compile(r"\{\{(.*?)\}\}", re.DOTALL)
# Macro name, optional ':' then YAML parameters
MACRO_BODY_RE = re.compile(r"^\s*([A-Za-z_][\w-]*)\s*:?(.*)$", re.DOTALL)


class MacroSyntaxError(ValueError):
    """Macro markup could not be parsed into a name and a parameter mapping."""


def parse_parameters(source: str) -> dict[str, Any]:
    """Parse the text after the macro name as a YAML mapping.

    Accepts inline parameters (`{{ name key: value }}`) and the block form,
    where parameters follow the name on indented lines.
    """
    lines = source.splitlines()
    if not lines:
        return {}
    first = lines[0].strip()
    rest = textwrap.dedent("\n".join(lines[1:]))
    text = "\n".join(part for part in (first, rest) if part.strip())
    if not text:
        return {}
    try:
        params = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise MacroSyntaxError(f"invalid macro parameters: {e}") from e
    if params is None:
        return {}
    if not isinstance(params, dict):
        raise MacroSyntaxError("macro parameters must be a mapping of name: value")
    return params


def parse_macros(text: str) -> list[MacroCall]:
    """Return every macro call in text, in order. Calls that fail to parse carry .error."""
    calls = []
    for match in MACRO_MARKUP_RE.finditer(text):
        body = match.group(1)
        name_match = MACRO_BODY_RE.match(body)
        if not name_match:
            calls.append(
                MacroCall(
                    name=body.strip() or "(empty)",
                    raw=match.group(0),
                    start=match.start(),
                    end=match.end(),
                    error=MacroSyntaxError("macro name is missing or invalid"),
                )
            )
            continue
        call = MacroCall(
            name=name_match.group(1),
            raw=match.group(0),
            start=match.start(),
            end=match.end(),
        )
        try:
            call.parameters = parse_parameters(name_match.group(2))
        except MacroSyntaxError as e:
            call.error = e
        calls.append(call)
    return calls


def _error_message(e: Exception) -> str:
    # KeyError str() wraps the message in quotes
    if isinstance(e, KeyError) and e.args:
        return str(e.args[0])
    return str(e)


def error_text(name: str, e: Exception) -> str:
    return f"Error in {name} macro: {_error_message(e)}"


class MacroRenderer:
    """Renders formatted text for one project, or for a project group."""

    def __init__(
        self,
        registry: MacroRegistry,
        projects: Project | Sequence[Project],
        current_user: User | None = None,
    ) -> None:
        if isinstance(projects, (list, tuple)):
            project_list = list(projects)
        else:
            project_list = [projects]
        if not project_list:
            raise ValueError("at least one project is required to render macros")
        self.registry = registry
        self.projects = project_list
        self.current_user = current_user
        self._cache: dict[tuple, str] = {}

    @property
    def is_project_group(self) -> bool:
        return len(self.projects) > 1

    def _cache_key(self, call: MacroCall) -> tuple:
        project_keys = tuple(getattr(p, "identifier", id(p)) for p in self.projects)
        params = yaml.safe_dump(call.parameters, sort_keys=True)
        return (project_keys, call.name, params)

    def execute_call(self, call: MacroCall) -> str:
        """Run one macro call; raises whatever the macro (or lookup) raises."""
        if call.error is not None:
            raise call.error
        macro_cls = self.registry.get(call.name)
        if self.is_project_group and not macro_cls.supports_project_group():
            raise ValueError(f"{call.name} macro is not supported in a project group")

        macro = macro_cls(dict(call.parameters), self.projects[0], self.current_user)
        cacheable = macro.can_be_cached()
        key = self._cache_key(call) if cacheable else None
        if key is not None and key in self._cache:
            logger.debug("macro %s served from cache", call.name)
            return self._cache[key]
        output = macro.execute()
        if key is not None:
            self._cache[key] = output
        return output

    def render(self, text: str) -> str:
        """Replace each macro call in text with its output or an inline error."""
        calls = parse_macros(text)
        if not calls:
            return text
        parts = []
        pos = 0
        for call in calls:
            parts.append(text[pos:call.start])
            try:
                parts.append(str(self.execute_call(call)))
            except Exception as e:
                logger.exception("macro failed name=%s markup=%r: %s", call.name, call.raw, e)
                parts.append(error_text(call.name, e))
            pos = call.end
        parts.append(text[pos:])
        return "".join(parts)
