"""Model listings: resolve tables, shape rows and isolate per-table failures."""

from __future__ import annotations

import time
from typing import Any, Sequence

from django.db import models

from lookup_manager import config
from lookup_manager.contract import TableSpec, parse_specs
from lookup_manager.entities.fields import select_fields
from lookup_manager.entities.registry import (
    EntityRegistry,
    ResolvedEntity,
    entity_registry,
)
from lookup_manager.entities.scopes import apply_root_exclusion, apply_scopes, apply_search
from lookup_manager.entities.transformer import transform_record
from lookup_manager.logging import get_logger
from lookup_manager.metrics import (
    OUTCOME_ERROR,
    UNKNOWN_LABEL,
    get_lookup_metrics_backend,
    outcome_for,
)

logger = get_logger("entities.lookup")

TableResult = list[dict[str, Any]] | dict[str, Any]


def _ordered(queryset: models.QuerySet, primary_key: str) -> models.QuerySet:
    if queryset.ordered:
        return queryset
    return queryset.order_by(primary_key)


def paginate(
    queryset: models.QuerySet,
    primary_key: str,
    page: int | None,
    per_page: int | None,
) -> tuple[list[dict[str, Any]], dict[str, int]]:
    """
    Slice a values queryset into one page and describe it.

    Returns:
        tuple: The rows of the requested page and the ``pageInfo`` mapping.
    """
    page = page or 1
    page_size = min(per_page or config.default_per_page(), config.max_per_page())
    queryset = _ordered(queryset, primary_key)
    total_count = queryset.count()
    offset = (page - 1) * page_size
    rows = list(queryset[offset : offset + page_size])
    page_info = {
        "total_count": total_count,
        "page_size": page_size,
        "current_page": page,
        "total_pages": max(1, (total_count + page_size - 1) // page_size),
    }
    return rows, page_info


class ModelLookupManager:
    """Serve ``tables`` lookups against the entity registry."""

    def __init__(self, registry: EntityRegistry | None = None) -> None:
        self.registry = registry or entity_registry

    def get_models(
        self, tables: Sequence[Any] | None = None
    ) -> dict[str, TableResult] | list[dict[str, Any]]:
        """
        Return shaped rows for every requested table, keyed by table name.

        Passing None returns the catalog of exposed models instead. A table
        that fails at any stage maps to an empty list.

        Raises:
            LookupValidationError: If ``tables`` is not None and not a
                non-empty list of table objects.
        """
        if tables is None:
            return self.get_catalog()

        specs = parse_specs("tables", tables, TableSpec.from_payload)
        metrics = get_lookup_metrics_backend()
        results: dict[str, TableResult] = {}
        for table in specs:
            started = time.perf_counter()
            metric_name = UNKNOWN_LABEL
            try:
                entity = self.registry.resolve(table.name, table.module)
                metric_name = entity.definition.label
                result = self._fetch(table, entity)
            except Exception as exc:  # noqa: BLE001
                logger.warning(
                    "table lookup failed",
                    context={
                        "table": table.name,
                        "module": table.module,
                        "error": type(exc).__name__,
                        "message": str(exc),
                    },
                )
                results[table.name] = []
                metrics.record_item(
                    kind="tables",
                    name=metric_name,
                    outcome=OUTCOME_ERROR,
                    duration=time.perf_counter() - started,
                )
                continue
            results[table.name] = result
            metrics.record_item(
                kind="tables",
                name=metric_name,
                outcome=outcome_for(result),
                duration=time.perf_counter() - started,
            )
        return results

    def get_table(self, table: TableSpec) -> TableResult:
        """
        Run the full pipeline for one table.

        Raises:
            EntityNotFoundError: If the table does not resolve.
        """
        return self._fetch(table, self.registry.resolve(table.name, table.module))

    def _fetch(self, table: TableSpec, entity: ResolvedEntity) -> TableResult:
        definition = entity.definition
        selected = select_fields(table, definition)

        queryset = apply_root_exclusion(definition, entity.queryset)
        queryset = apply_scopes(definition, queryset, table.scopes)
        queryset = apply_search(definition, queryset, table.search, selected)
        rows_queryset = queryset.values(*selected)

        transform_options = {
            "primary_key": definition.primary_key,
            "name_source": definition.options.name_source,
            "translatable_fields": definition.translatable_fields,
            "locales": config.search_locales(),
        }

        if table.paginate:
            rows, page_info = paginate(
                rows_queryset, definition.primary_key, table.page, table.per_page
            )
            return {
                "items": [transform_record(row, selected, **transform_options) for row in rows],
                "pageInfo": page_info,
            }
        return [transform_record(row, selected, **transform_options) for row in rows_queryset]

    def get_catalog(self) -> list[dict[str, Any]]:
        """
        List every exposed model without fetching rows.

        Any failure while building the catalog yields an empty list.
        """
        try:
            return [
                {
                    "name": str(
                        definition.options.label
                        or definition.model._meta.verbose_name_plural
                    ),
                    "model": definition.model_name,
                    "table": definition.db_table,
                }
                for definition in self.registry.definitions()
            ]
        except Exception as exc:  # noqa: BLE001
            logger.error(
                "catalog build failed",
                context={"error": type(exc).__name__, "message": str(exc)},
            )
            return []
