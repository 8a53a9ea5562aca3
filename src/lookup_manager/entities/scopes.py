"""Scope application and free-text search for model lookups."""

from __future__ import annotations

from typing import Sequence

from django.db import models
from django.db.models import Q

from lookup_manager import config
from lookup_manager.contract import ScopeCall, SearchSpec
from lookup_manager.entities.registry import EXCLUDE_ROOT_SCOPE, EntityDefinition
from lookup_manager.exceptions import UnknownScopeError
from lookup_manager.logging import get_logger

logger = get_logger("entities.scopes")


def apply_root_exclusion(
    definition: EntityDefinition, queryset: models.QuerySet
) -> models.QuerySet:
    """
    Hide root records of models listed in ``ROOT_EXCLUDED_MODELS``.

    Errors raised by the ``exclude_root`` scope propagate so the caller fails
    the whole item instead of returning unfiltered rows.
    """
    if not definition.is_root_excluded:
        return queryset
    try:
        scope = definition.get_scope(EXCLUDE_ROOT_SCOPE)
    except UnknownScopeError:
        logger.warning(
            "root excluded model without exclude_root scope",
            context={"model": definition.label},
        )
        return queryset
    return scope(queryset)


def apply_scopes(
    definition: EntityDefinition,
    queryset: models.QuerySet,
    calls: Sequence[ScopeCall],
) -> models.QuerySet:
    """
    Apply caller-requested scopes in order.

    Unknown scopes and scopes that raise are logged and skipped; the
    queryset from before the failing scope is kept.
    """
    for call in calls:
        try:
            scope = definition.get_scope(call.name)
        except UnknownScopeError as exc:
            logger.info(
                "unknown scope skipped",
                context={"model": definition.label, "scope": call.name, "error": str(exc)},
            )
            continue

        try:
            if call.argument is None:
                scoped = scope(queryset)
            else:
                scoped = scope(queryset, call.argument)
        except Exception as exc:  # noqa: BLE001
            logger.warning(
                "scope failed",
                context={
                    "model": definition.label,
                    "scope": call.name,
                    "error": type(exc).__name__,
                    "message": str(exc),
                },
            )
            continue

        if not isinstance(scoped, models.QuerySet):
            logger.warning(
                "scope returned no queryset",
                context={"model": definition.label, "scope": call.name},
            )
            continue
        queryset = scoped
    return queryset


def _is_searchable(definition: EntityDefinition, field: str) -> bool:
    return definition.has_column(field.split("__")[0])


def build_field_predicate(
    field: str,
    term: str,
    *,
    translatable: bool = False,
    locales: Sequence[str] = (),
) -> Q:
    """
    Return a case-insensitive substring predicate for one field.

    Translatable fields produce one clause per locale, OR-ed together.
    """
    if not translatable:
        return Q(**{f"{field}__icontains": term})
    predicate = Q()
    for locale in locales:
        predicate |= Q(**{f"{field}__{locale}__icontains": term})
    return predicate


def apply_search(
    definition: EntityDefinition,
    queryset: models.QuerySet,
    search: SearchSpec | None,
    selected: Sequence[str],
) -> models.QuerySet:
    """
    Narrow the queryset to rows matching the search term in any field.

    Explicit search fields are limited to known columns (or relation paths
    starting at one); without them the selected fields minus the primary key
    are searched. A blank term or an empty field list leaves the queryset
    untouched.
    """
    if search is None or not search.term:
        return queryset

    if search.fields:
        fields = [field for field in search.fields if _is_searchable(definition, field)]
    else:
        fields = [field for field in selected if field != definition.primary_key]
    if not fields:
        return queryset

    locales = config.search_locales()
    predicate = Q()
    for field in fields:
        predicate |= build_field_predicate(
            field,
            search.term,
            translatable=field in definition.translatable_fields,
            locales=locales,
        )
    return queryset.filter(predicate)
