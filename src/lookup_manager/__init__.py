"""Convenience access to the lookup manager entry points."""

from __future__ import annotations

from importlib import import_module
from typing import Any

__all__ = [
    "LookupManager",
    "get_lookup_manager",
    "ModelLookupManager",
    "EnumLookupManager",
    "ConfigLookupManager",
    "LookupEnumMixin",
    "LookupValidationError",
    "EntityNotFoundError",
    "EnumNotFoundError",
]

_MODULE_MAP = {
    "LookupManager": ("lookup_manager.manager", "LookupManager"),
    "get_lookup_manager": ("lookup_manager.manager", "get_lookup_manager"),
    "ModelLookupManager": ("lookup_manager.entities.lookup", "ModelLookupManager"),
    "EnumLookupManager": ("lookup_manager.enums.lookup", "EnumLookupManager"),
    "ConfigLookupManager": ("lookup_manager.configs.lookup", "ConfigLookupManager"),
    "LookupEnumMixin": ("lookup_manager.enums.formatting", "LookupEnumMixin"),
    "LookupValidationError": ("lookup_manager.exceptions", "LookupValidationError"),
    "EntityNotFoundError": ("lookup_manager.exceptions", "EntityNotFoundError"),
    "EnumNotFoundError": ("lookup_manager.exceptions", "EnumNotFoundError"),
}


def __getattr__(name: str) -> Any:
    if name not in __all__:
        raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
    module_path, attr = _MODULE_MAP[name]
    module = import_module(module_path)
    value = getattr(module, attr)
    globals()[name] = value
    return value


def __dir__() -> list[str]:
    return sorted(list(globals().keys()) + __all__)
