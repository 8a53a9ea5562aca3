"""Startup discovery of enum classes shipped in each app's enums package."""

from __future__ import annotations

import enum
import inspect
import pkgutil
from dataclasses import dataclass
from importlib import import_module
from types import ModuleType
from typing import Iterable

from django.apps import AppConfig, apps

from lookup_manager import config
from lookup_manager.exceptions import EnumNotFoundError
from lookup_manager.logging import get_logger
from lookup_manager.utils.format_string import camel_to_snake, snake

logger = get_logger("enums.registry")

ENUM_SUFFIX = "_enum"


@dataclass(frozen=True)
class EnumDefinition:
    """An enum class and the request key it is published under."""

    enum_class: type[enum.Enum]
    app_label: str
    key: str

    @property
    def qualified_key(self) -> str:
        return f"{self.app_label}::{self.key}"


def _strip_suffix(value: str) -> str:
    index = value.rfind(ENUM_SUFFIX)
    if index == -1:
        return value
    return value[:index] + value[index + len(ENUM_SUFFIX) :]


def normalize_enum_name(name: str) -> str:
    """Snake-case every dotted segment of a request-supplied enum name."""
    return ".".join(_strip_suffix(snake(part.strip())) for part in name.split(".") if part.strip())


def enum_key(relative_module: str, class_name: str) -> str:
    """
    Derive the request key of an enum class.

    ``relative_module`` is the dotted module path below the enums package
    (empty for the package itself). The snake-cased class name, minus its
    ``_enum`` suffix, is appended unless it repeats the last module segment:
    ``order.StatusEnum`` gives ``order.status`` and ``status.StatusEnum``
    gives ``status``.
    """
    parts = [snake(part) for part in relative_module.split(".") if part]
    class_segment = _strip_suffix(snake(class_name))
    if not parts or parts[-1] != class_segment:
        parts.append(class_segment)
    return ".".join(parts)


def _iter_modules(package: ModuleType) -> Iterable[ModuleType]:
    yield package
    package_path = getattr(package, "__path__", None)
    if package_path is None:
        return
    for module_info in pkgutil.walk_packages(package_path, prefix=f"{package.__name__}."):
        yield import_module(module_info.name)


def _enum_classes(module: ModuleType) -> Iterable[type[enum.Enum]]:
    for _, member in inspect.getmembers(module, inspect.isclass):
        if (
            issubclass(member, enum.Enum)
            and member.__module__ == module.__name__
            and len(member) > 0
        ):
            yield member


class EnumRegistry:
    """In-memory registry of enum classes keyed by ``(app_label, key)``."""

    def __init__(self) -> None:
        self._definitions: dict[tuple[str, str], EnumDefinition] = {}
        self._populated = False

    def register(self, enum_class: type[enum.Enum], app_label: str, key: str) -> EnumDefinition:
        definition = EnumDefinition(enum_class=enum_class, app_label=app_label, key=key)
        self._definitions[(app_label, key)] = definition
        return definition

    def _import_enum_package(self, app_config: AppConfig) -> ModuleType | None:
        package_name = f"{app_config.name}.{config.enum_module()}"
        try:
            return import_module(package_name)
        except ModuleNotFoundError as exc:
            if exc.name == package_name:
                return None
            raise

    def populate(self, app_configs: Iterable[AppConfig] | None = None) -> None:
        """
        Rebuild the registry by importing the enums package of every app.

        Apps outside ``LOOKUP_MANAGER["EXPOSED_APPS"]`` are skipped when that
        setting is present. Import errors inside an existing enums package
        propagate.
        """
        allowed_apps = config.exposed_apps()
        candidates = apps.get_app_configs() if app_configs is None else app_configs
        self._definitions.clear()
        for app_config in candidates:
            if allowed_apps is not None and app_config.label not in allowed_apps:
                continue
            package = self._import_enum_package(app_config)
            if package is None:
                continue
            for module in _iter_modules(package):
                relative = module.__name__[len(package.__name__) :].lstrip(".")
                for enum_class in _enum_classes(module):
                    self.register(
                        enum_class,
                        app_config.label,
                        enum_key(relative, enum_class.__name__),
                    )
        self._populated = True
        logger.debug(
            "enum registry populated",
            context={"count": len(self._definitions)},
        )

    def ensure_populated(self) -> None:
        if not self._populated:
            self.populate()

    def clear(self) -> None:
        self._definitions.clear()
        self._populated = False

    def definitions(self) -> tuple[EnumDefinition, ...]:
        self.ensure_populated()
        return tuple(self._definitions.values())

    def find(self, name: str, module: str | None = None) -> EnumDefinition | None:
        """
        Return the definition for a request-supplied enum name, or None.

        Lookup follows the same module, default app and unique-match order
        as table names.
        """
        self.ensure_populated()
        key = normalize_enum_name(name)
        app_label = camel_to_snake(module.strip()) if module else config.default_app()
        if app_label is not None:
            return self._definitions.get((app_label, key))

        matches = [
            definition
            for (_, candidate), definition in self._definitions.items()
            if candidate == key
        ]
        if len(matches) == 1:
            return matches[0]
        if len(matches) > 1:
            logger.warning(
                "ambiguous enum name",
                context={
                    "name": name,
                    "apps": sorted(match.app_label for match in matches),
                },
            )
        return None

    def resolve(self, name: str, module: str | None = None) -> type[enum.Enum]:
        """
        Return the enum class registered for ``name``.

        Raises:
            EnumNotFoundError: If no registered enum matches.
        """
        definition = self.find(name, module)
        if definition is None:
            raise EnumNotFoundError(name, module)
        return definition.enum_class


enum_registry = EnumRegistry()
