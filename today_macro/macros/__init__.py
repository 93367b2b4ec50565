# Macro plugin: name -> class, plus the hook the host calls at load time
from __future__ import annotations

from today_macro.macros.today import TodayMacro

MACROS: dict[str, type] = {
    "today": TodayMacro,
}


def register(registry) -> None:
    """Register every macro in MACROS with the host registry."""
    for name, macro_cls in MACROS.items():
        registry.register(macro_cls, name)


__all__ = ["MACROS", "TodayMacro", "register"]
