"""Field selection for model lookups."""

from __future__ import annotations

from lookup_manager import config
from lookup_manager.contract import TableSpec
from lookup_manager.entities.registry import EntityDefinition
from lookup_manager.entities.transformer import FIRST_NAME, LAST_NAME

PERSON_NAME_FIELDS: tuple[str, ...] = (FIRST_NAME, LAST_NAME)


def name_fields_for(definition: EntityDefinition) -> list[str]:
    """
    Return the column(s) used to derive a record's display name.

    A model-level override (``name_fields``, else ``name_source``) adds every
    listed column that exists; otherwise the first existing column of the
    configured priority list wins. ``first_name`` and ``last_name`` are
    selected together since the name is built from both.
    """
    override = definition.options.name_fields or definition.options.name_source
    if override:
        return [field for field in override if definition.has_column(field)]
    for field in config.name_fields():
        if not definition.has_column(field):
            continue
        if field in PERSON_NAME_FIELDS:
            return [name for name in PERSON_NAME_FIELDS if definition.has_column(name)]
        return [field]
    return []


def select_fields(table: TableSpec, definition: EntityDefinition) -> list[str]:
    """
    Build the ordered, de-duplicated list of columns to fetch for a table.

    The primary key always comes first. Requested extra fields that the model
    does not have are dropped without error.
    """
    selected = [definition.primary_key]
    selected.extend(field for field in table.extra if definition.has_column(field))
    selected.extend(name_fields_for(definition))
    return list(dict.fromkeys(selected))
