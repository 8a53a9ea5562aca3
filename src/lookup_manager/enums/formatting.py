"""Formatting of enum classes into lookup entries."""

from __future__ import annotations

import enum
from typing import Any, Iterator, Mapping, Protocol

from django.db import models
from django.utils.translation import gettext

from lookup_manager.utils.format_string import snake

ENUM_SUFFIX = "_enum"
TRANSLATION_PREFIX = "enums"


class EnumSource(Protocol):
    """
    What the formatting helpers need from an enum class.

    Iteration yields the members. The optional classmethods ``extra()`` and
    ``icons()`` map a member value to side data, and ``key_name()``
    overrides the translation namespace.
    """

    def __iter__(self) -> Iterator[enum.Enum]: ...


def _is_numeric(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, (int, float)):
        return True
    if isinstance(value, str):
        try:
            float(value)
        except ValueError:
            return False
        return True
    return False


def _strip_last(value: str, suffix: str) -> str:
    index = value.rfind(suffix)
    if index == -1:
        return value
    return value[:index] + value[index + len(suffix) :]


def _hook(enum_cls: Any, name: str) -> Any:
    hook = getattr(enum_cls, name, None)
    if hook is None or isinstance(hook, enum.Enum) or not callable(hook):
        return None
    return hook


def get_label_key(key: str, value: Any) -> str:
    """
    Derive the snake_case key used for translation lookups.

    Numeric values use the member name: upper-case or multi-word names are
    lower-cased, anything else is snake-cased. Other values are snake-cased
    themselves.
    """
    if _is_numeric(value):
        if key.isupper() or len(key.split("_")) > 1:
            return key.lower()
        return snake(key)
    return snake(str(value))


def get_key_name(enum_cls: EnumSource) -> str:
    """Return the translation namespace of an enum class."""
    key_name = _hook(enum_cls, "key_name")
    if key_name is not None:
        return str(key_name())
    return _strip_last(snake(enum_cls.__name__), ENUM_SUFFIX)  # type: ignore[attr-defined]


def get_extra_data(enum_cls: EnumSource, value: Any, extra: Any = None) -> Any:
    if extra is not None:
        return extra
    side_table = _hook(enum_cls, "extra")
    if side_table is None:
        return None
    return (side_table() or {}).get(value)


def get_icon(enum_cls: EnumSource, value: Any) -> Any:
    side_table = _hook(enum_cls, "icons")
    if side_table is None:
        return None
    return (side_table() or {}).get(value)


def _fallback_label(enum_cls: EnumSource, key: str, label_key: str) -> str:
    if isinstance(enum_cls, type) and issubclass(enum_cls, models.Choices):
        label = getattr(enum_cls[key], "label", None)
        if label:
            return str(label)
    return label_key


def format_entry(enum_cls: EnumSource, key: str, value: Any, extra: Any = None) -> dict[str, Any]:
    """
    Build one ``{key, value, label, snake_key, extra, icon}`` entry.

    The label is the translation of ``enums.<key_name>.<snake_key>``. When
    the catalog has no entry, Django ``Choices`` fall back to their declared
    label and other enums to the snake key.
    """
    label_key = get_label_key(key, value)
    message_id = f"{TRANSLATION_PREFIX}.{get_key_name(enum_cls)}.{label_key}"
    translated = gettext(message_id)
    if translated == message_id or translated.startswith(f"{TRANSLATION_PREFIX}."):
        label = _fallback_label(enum_cls, key, label_key)
    else:
        label = translated
    return {
        "key": key,
        "value": value,
        "label": label,
        "snake_key": label_key,
        "extra": get_extra_data(enum_cls, value, extra),
        "icon": get_icon(enum_cls, value),
    }


def get_list(enum_cls: EnumSource) -> list[dict[str, Any]]:
    return [format_entry(enum_cls, member.name, member.value) for member in enum_cls]


def format_with_extra(enum_cls: EnumSource, data: Mapping[Any, Any]) -> list[dict[str, Any]]:
    """Format the members named by the values in ``data``, attaching their extra."""
    return [
        format_entry(enum_cls, enum_cls(value).name, value, extra)  # type: ignore[operator]
        for value, extra in data.items()
    ]


def resolve(enum_cls: EnumSource, value: Any, trans: bool = True) -> Any:
    """
    Match a member value, member name or member to its entry.

    Returns:
        The translated label when ``trans`` is set. Otherwise the snake key
        for a value match and the member value for a name match. Unmatched
        input is returned unchanged.
    """
    if isinstance(value, enum.Enum):
        value = value.value

    entries = get_list(enum_cls)
    matched_by_key = False
    entry = next((item for item in entries if item["value"] == value), None)
    if entry is None:
        matched_by_key = True
        entry = next((item for item in entries if item["key"] == value), None)
        if entry is None:
            return value

    if trans:
        return entry["label"]
    return entry["value"] if matched_by_key else entry["snake_key"]


def values(enum_cls: EnumSource) -> list[Any]:
    return [member.value for member in enum_cls]


def comment_format(enum_cls: EnumSource) -> str:
    """Render ``value => label`` pairs, e.g. for column comments."""
    return ", ".join(f"{entry['value']} => {entry['label']}" for entry in get_list(enum_cls))


RETRIEVAL_FUNCTIONS = {
    "get_list": get_list,
    "values": values,
    "comment_format": comment_format,
}


class LookupEnumMixin:
    """
    Give an enum class the lookup formatting helpers as classmethods.

    Usage::

        class StatusEnum(LookupEnumMixin, IntEnum):
            PENDING = 0
            DONE = 1

        StatusEnum.get_list()
    """

    @classmethod
    def get_label_key(cls, key: str, value: Any) -> str:
        return get_label_key(key, value)

    @classmethod
    def get_key_name(cls) -> str:
        return get_key_name(cls)

    @classmethod
    def format_entry(cls, key: str, value: Any, extra: Any = None) -> dict[str, Any]:
        return format_entry(cls, key, value, extra)

    @classmethod
    def get_list(cls) -> list[dict[str, Any]]:
        return get_list(cls)

    @classmethod
    def format_with_extra(cls, data: Mapping[Any, Any]) -> list[dict[str, Any]]:
        return format_with_extra(cls, data)

    @classmethod
    def resolve(cls, value: Any, trans: bool = True) -> Any:
        return resolve(cls, value, trans)

    @classmethod
    def values(cls) -> list[Any]:
        return values(cls)

    @classmethod
    def comment_format(cls) -> str:
        return comment_format(cls)
