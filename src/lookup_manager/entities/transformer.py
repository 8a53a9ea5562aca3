"""Normalization of fetched rows into ``{id, name, ...extra}`` records."""

from __future__ import annotations

from typing import Any, Collection, Mapping, Sequence

from django.utils import translation

NAME_PRIORITY: tuple[str, ...] = ("name", "title", "display_name", "full_name", "label")
FIRST_NAME = "first_name"
LAST_NAME = "last_name"


def localize_value(value: Any, locales: Sequence[str] = ()) -> Any:
    """
    Reduce a ``{locale: text}`` mapping to a single translation.

    The active language wins, then its primary subtag, then the given
    locales in order. Values that are not keyed by any of these locales are
    returned unchanged.
    """
    if not isinstance(value, Mapping) or not value:
        return value
    active = translation.get_language() or ""
    candidates = [active, active.split("-")[0], *locales]
    for locale in candidates:
        if locale and locale in value:
            return value[locale]
    return value


def _present(value: Any) -> bool:
    return value is not None and value != ""


def resolve_name(
    record: Mapping[str, Any],
    name_source: Sequence[str] = (),
) -> tuple[Any, tuple[str, ...]]:
    """
    Derive the display name of a record.

    Returns:
        tuple: The name (or None) and the fields consumed to build it.
    """
    if name_source:
        parts = [str(record[field]) for field in name_source if _present(record.get(field))]
        if parts:
            return " ".join(parts), tuple(name_source)

    for field in NAME_PRIORITY:
        if record.get(field) is not None:
            return record[field], (field,)

    first_name = record.get(FIRST_NAME)
    last_name = record.get(LAST_NAME)
    if first_name is not None and last_name is not None:
        return f"{first_name} {last_name}", (FIRST_NAME, LAST_NAME)
    return None, ()


def transform_record(
    record: Mapping[str, Any],
    selected: Sequence[str],
    *,
    primary_key: str = "id",
    name_source: Sequence[str] = (),
    translatable_fields: Collection[str] = (),
    locales: Sequence[str] = (),
) -> dict[str, Any]:
    """
    Shape one fetched row into the uniform lookup record.

    Missing fields are skipped rather than raising. Extra fields exclude the
    primary key and whatever was consumed for the name, and are only emitted
    when present and non-null.
    """
    data = {
        field: (
            localize_value(record[field], locales)
            if field in translatable_fields
            else record[field]
        )
        for field in selected
        if field in record
    }
    name, consumed = resolve_name(data, name_source)

    output: dict[str, Any] = {"id": data.get(primary_key), "name": name}
    for field in selected:
        if field == primary_key or field in consumed or field in output:
            continue
        value = data.get(field)
        if value is not None:
            output[field] = value
    return output
