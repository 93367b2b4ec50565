"""Host-side macro registry: invocation name -> macro class."""
from __future__ import annotations

import logging
from importlib.metadata import entry_points

from today_macro.models import Macro

logger = logging.getLogger(__name__)

PLUGIN_GROUP = "today_macro.macros"


class MacroRegistry:
    """Maps macro invocation names (the word inside {{ }}) to macro classes."""

    def __init__(self) -> None:
        self._macros: dict[str, type[Macro]] = {}

    def register(self, macro_cls: type[Macro], name: str) -> None:
        """Register macro_cls under name; an existing name is overwritten."""
        if not name or not name.strip():
            raise ValueError("macro name must not be empty")
        if name in self._macros:
            logger.warning("overwriting existing macro '%s'", name)
        self._macros[name] = macro_cls
        logger.debug("registered macro '%s' -> %s", name, macro_cls.__name__)

    def get(self, name: str) -> type[Macro]:
        """Return macro class for name; raises KeyError if unknown."""
        if name not in self._macros:
            raise KeyError(f"No such macro: {name}")
        return self._macros[name]

    def names(self) -> list[str]:
        return sorted(self._macros)

    def __contains__(self, name: object) -> bool:
        return name in self._macros

    def load_plugins(self, group: str = PLUGIN_GROUP) -> list[str]:
        """Call the register hook of every installed plugin in the entry point group.

        Returns the entry point names that loaded. A plugin that fails to load
        is logged and skipped.
        """
        loaded = []
        for ep in entry_points(group=group):
            try:
                hook = ep.load()
                hook(self)
            except Exception as e:
                logger.exception("macro plugin %s failed to load: %s", ep.name, e)
                continue
            loaded.append(ep.name)
        logger.info("Loaded %s macro plugin(s): %s; macros: %s", len(loaded), loaded, self.names())
        return loaded

    def __repr__(self) -> str:
        return f"<MacroRegistry macros={self.names()}>"
