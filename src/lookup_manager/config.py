"""Lookup manager configuration helpers."""

from __future__ import annotations

from typing import Any, Mapping

from django.conf import settings

_SETTINGS_KEY = "LOOKUP_MANAGER"

DEFAULT_NAME_FIELDS: tuple[str, ...] = (
    "display_name",
    "title",
    "label",
    "name",
    "full_name",
    "first_name",
    "last_name",
)
DEFAULT_ENUM_MODULE = "enums"
DEFAULT_PER_PAGE = 15
DEFAULT_MAX_PER_PAGE = 100


def _config(django_settings: Any = settings) -> Mapping[str, Any]:
    value = getattr(django_settings, _SETTINGS_KEY, {})
    if isinstance(value, Mapping):
        return value
    return {}


def _string_tuple(value: Any) -> tuple[str, ...]:
    if isinstance(value, str):
        return (value,) if value else ()
    if isinstance(value, (list, tuple, set, frozenset)):
        return tuple(str(item) for item in value if item)
    return ()


def allowed_configs(django_settings: Any = settings) -> dict[str, frozenset[str]]:
    """
    Return the config allow-list as ``namespace -> permitted keys``.

    An empty key set means every key of the namespace may be exposed.
    Namespaces that are not present are denied.
    """
    raw = _config(django_settings).get("ALLOWED_CONFIGS", {})
    if not isinstance(raw, Mapping):
        return {}
    return {
        str(namespace): frozenset(_string_tuple(keys))
        for namespace, keys in raw.items()
    }


def root_excluded_models(django_settings: Any = settings) -> frozenset[str]:
    """Return lower-cased ``app_label.ModelName`` labels that hide root records."""
    raw = _config(django_settings).get("ROOT_EXCLUDED_MODELS", ())
    return frozenset(label.lower() for label in _string_tuple(raw))


def default_app(django_settings: Any = settings) -> str | None:
    value = _config(django_settings).get("DEFAULT_APP")
    if not value:
        return None
    return str(value)


def exposed_apps(django_settings: Any = settings) -> frozenset[str] | None:
    """Return the app labels whose models and enums are exposed, or None for all."""
    raw = _config(django_settings).get("EXPOSED_APPS")
    if raw is None:
        return None
    return frozenset(_string_tuple(raw))


def enum_module(django_settings: Any = settings) -> str:
    value = _config(django_settings).get("ENUM_MODULE", DEFAULT_ENUM_MODULE)
    return str(value or DEFAULT_ENUM_MODULE)


def name_fields(django_settings: Any = settings) -> tuple[str, ...]:
    raw = _config(django_settings).get("NAME_FIELDS")
    fields = _string_tuple(raw)
    return fields or DEFAULT_NAME_FIELDS


def search_locales(django_settings: Any = settings) -> tuple[str, ...]:
    """
    Return the locales searched inside translatable JSON fields.

    Falls back to the primary subtag of ``LANGUAGE_CODE`` when the lookup
    settings do not list any locale.
    """
    locales = _string_tuple(_config(django_settings).get("SEARCH_LOCALES"))
    if locales:
        return locales
    language_code = str(getattr(django_settings, "LANGUAGE_CODE", "en") or "en")
    return (language_code.split("-")[0].lower(),)


def default_per_page(django_settings: Any = settings) -> int:
    raw = _config(django_settings).get("DEFAULT_PER_PAGE", DEFAULT_PER_PAGE)
    try:
        return max(1, int(raw))
    except (TypeError, ValueError):
        return DEFAULT_PER_PAGE


def max_per_page(django_settings: Any = settings) -> int:
    raw = _config(django_settings).get("MAX_PER_PAGE", DEFAULT_MAX_PER_PAGE)
    try:
        return max(1, int(raw))
    except (TypeError, ValueError):
        return DEFAULT_MAX_PER_PAGE


def metrics_enabled(django_settings: Any = settings) -> bool:
    return bool(_config(django_settings).get("METRICS_ENABLED", False))


def metrics_backend(django_settings: Any = settings) -> str:
    return str(_config(django_settings).get("METRICS_BACKEND", "prometheus"))


def manager_class_path(django_settings: Any = settings) -> str | None:
    value = _config(django_settings).get("MANAGER_CLASS")
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None
