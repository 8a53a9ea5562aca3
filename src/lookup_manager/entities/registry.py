"""Startup registry mapping requested table names to Django models."""

from __future__ import annotations

import inspect
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Callable, Iterable, Mapping

from django.apps import apps
from django.db import models

from lookup_manager import config
from lookup_manager.exceptions import EntityNotFoundError, UnknownScopeError
from lookup_manager.logging import get_logger
from lookup_manager.utils.format_string import (
    camel_to_snake,
    mangle_identifier,
    snake_to_pascal,
)

logger = get_logger("entities.registry")

ScopeFunction = Callable[..., models.QuerySet]

EXCLUDE_ROOT_SCOPE = "exclude_root"


@dataclass(frozen=True)
class LookupOptions:
    """Per-model options declared on an inner ``LookupConfig`` class."""

    label: str | None = None
    name_fields: tuple[str, ...] = ()
    name_source: tuple[str, ...] = ()
    translatable_fields: frozenset[str] = frozenset()
    scopes: Mapping[str, ScopeFunction] = field(default_factory=dict)


def _as_tuple(value: Any) -> tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        return (value,)
    return tuple(str(item) for item in value)


def resolve_lookup_options(model: type[models.Model]) -> LookupOptions:
    """Read the optional inner ``LookupConfig`` class of a model."""
    lookup_config = getattr(model, "LookupConfig", None)
    if lookup_config is None:
        return LookupOptions()
    raw_scopes = getattr(lookup_config, "scopes", None) or {}
    scopes = {
        camel_to_snake(str(name)): function
        for name, function in dict(raw_scopes).items()
        if callable(function)
    }
    return LookupOptions(
        label=getattr(lookup_config, "label", None),
        name_fields=_as_tuple(getattr(lookup_config, "name_fields", None)),
        name_source=_as_tuple(getattr(lookup_config, "name_source", None)),
        translatable_fields=frozenset(
            _as_tuple(getattr(lookup_config, "translatable_fields", None))
        ),
        scopes=scopes,
    )


def _queryset_method_scope(method_name: str) -> ScopeFunction:
    def scope(queryset: models.QuerySet, *args: Any) -> models.QuerySet:
        return getattr(queryset, method_name)(*args)

    scope.__name__ = method_name
    return scope


def _collect_queryset_scopes(model: type[models.Model]) -> dict[str, ScopeFunction]:
    """Expose public methods of a model's custom QuerySet class as scopes."""
    queryset_class = getattr(model._default_manager, "_queryset_class", models.QuerySet)
    scopes: dict[str, ScopeFunction] = {}
    for klass in queryset_class.__mro__:
        if klass is models.QuerySet or klass is object:
            break
        for name, member in vars(klass).items():
            if name.startswith("_") or not inspect.isfunction(member):
                continue
            scopes.setdefault(name, _queryset_method_scope(name))
    return scopes


def _collect_columns(model: type[models.Model]) -> tuple[str, ...]:
    columns: list[str] = []
    for model_field in model._meta.concrete_fields:
        columns.append(model_field.name)
        if model_field.attname != model_field.name:
            columns.append(model_field.attname)
    return tuple(columns)


@dataclass(frozen=True)
class EntityDefinition:
    """Schema and behaviour of one exposed model, captured at startup."""

    model: type[models.Model]
    app_label: str
    identifier: str
    columns: tuple[str, ...]
    primary_key: str
    options: LookupOptions
    scopes: Mapping[str, ScopeFunction]
    translatable_fields: frozenset[str]

    @classmethod
    def from_model(cls, model: type[models.Model]) -> "EntityDefinition":
        options = resolve_lookup_options(model)
        scopes = _collect_queryset_scopes(model)
        scopes.update(options.scopes)
        json_fields = {
            model_field.name
            for model_field in model._meta.concrete_fields
            if isinstance(model_field, models.JSONField)
        }
        return cls(
            model=model,
            app_label=model._meta.app_label,
            identifier=model._meta.model_name,
            columns=_collect_columns(model),
            primary_key=model._meta.pk.attname,
            options=options,
            scopes=MappingProxyType(scopes),
            translatable_fields=frozenset(options.translatable_fields | json_fields),
        )

    @property
    def label(self) -> str:
        return self.model._meta.label

    @property
    def model_name(self) -> str:
        return self.model.__name__

    @property
    def db_table(self) -> str:
        return self.model._meta.db_table

    @property
    def is_root_excluded(self) -> bool:
        return self.label.lower() in config.root_excluded_models()

    def has_column(self, name: str) -> bool:
        return name in self.columns

    def get_scope(self, name: str) -> ScopeFunction:
        try:
            return self.scopes[name]
        except KeyError:
            raise UnknownScopeError(name, self.model_name) from None


@dataclass(frozen=True)
class ResolvedEntity:
    """A definition bound to a fresh queryset for one request item."""

    definition: EntityDefinition
    queryset: models.QuerySet

    @classmethod
    def bind(cls, definition: EntityDefinition) -> "ResolvedEntity":
        return cls(
            definition=definition,
            queryset=definition.model._default_manager.all(),
        )


def _candidate_identifiers(name: str) -> list[str]:
    mangled = mangle_identifier(name).lower()
    verbatim = snake_to_pascal(name.strip().lower()).lower()
    return list(dict.fromkeys(candidate for candidate in (mangled, verbatim) if candidate))


def _normalize_module(module: str) -> str:
    return camel_to_snake(module.strip())


class EntityRegistry:
    """In-memory registry of exposed models keyed by ``(app_label, model_name)``."""

    def __init__(self) -> None:
        self._definitions: dict[tuple[str, str], EntityDefinition] = {}
        self._populated = False

    def register(self, model: type[models.Model]) -> EntityDefinition:
        definition = EntityDefinition.from_model(model)
        self._definitions[(definition.app_label, definition.identifier)] = definition
        return definition

    def populate(self, model_classes: Iterable[type[models.Model]] | None = None) -> None:
        """
        Rebuild the registry from the given models, or every installed model.

        Models of apps outside ``LOOKUP_MANAGER["EXPOSED_APPS"]`` are skipped
        when that setting is present.
        """
        allowed_apps = config.exposed_apps()
        candidates = apps.get_models() if model_classes is None else model_classes
        self._definitions.clear()
        for model in candidates:
            if allowed_apps is not None and model._meta.app_label not in allowed_apps:
                continue
            self.register(model)
        self._populated = True
        logger.debug(
            "entity registry populated",
            context={"count": len(self._definitions)},
        )

    def ensure_populated(self) -> None:
        if not self._populated:
            self.populate()

    def clear(self) -> None:
        self._definitions.clear()
        self._populated = False

    def definitions(self) -> tuple[EntityDefinition, ...]:
        self.ensure_populated()
        return tuple(self._definitions.values())

    def get(self, app_label: str, identifier: str) -> EntityDefinition | None:
        self.ensure_populated()
        return self._definitions.get((app_label, identifier.lower()))

    def find(self, name: str, module: str | None = None) -> EntityDefinition | None:
        """
        Return the definition for a request-supplied table name, or None.

        With a module the name is looked up in that app only; otherwise in
        the configured default app, or across all apps when the match is
        unique.
        """
        self.ensure_populated()
        candidates = _candidate_identifiers(name)
        app_label = _normalize_module(module) if module else config.default_app()

        if app_label is not None:
            for identifier in candidates:
                definition = self._definitions.get((app_label, identifier))
                if definition is not None:
                    return definition
            return None

        for identifier in candidates:
            matches = [
                definition
                for (_, key), definition in self._definitions.items()
                if key == identifier
            ]
            if len(matches) == 1:
                return matches[0]
            if len(matches) > 1:
                logger.warning(
                    "ambiguous table name",
                    context={
                        "name": name,
                        "models": sorted(match.label for match in matches),
                    },
                )
                return None
        return None

    def resolve(self, name: str, module: str | None = None) -> ResolvedEntity:
        """
        Bind the model registered for ``name`` to a fresh queryset.

        Raises:
            EntityNotFoundError: If no registered model matches.
        """
        definition = self.find(name, module)
        if definition is None:
            raise EntityNotFoundError(name, module)
        return ResolvedEntity.bind(definition)


entity_registry = EntityRegistry()
