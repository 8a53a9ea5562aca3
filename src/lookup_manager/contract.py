"""Request contract and validation helpers for lookup requests."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Mapping, Sequence, TypeVar

from lookup_manager.exceptions import LookupValidationError
from lookup_manager.utils.format_string import camel_to_snake

REQUEST_KINDS: tuple[str, ...] = ("tables", "enums", "configs")
DEFAULT_ENUM_METHOD = "get_list"

SpecT = TypeVar("SpecT")


def _optional_string(value: Any) -> str | None:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def _required_name(payload: Mapping[str, Any], key: str) -> str:
    name = _optional_string(payload.get("name"))
    if name is None:
        raise LookupValidationError.name_required(key)
    return name


def _string_list(value: Any, error: Callable[[], LookupValidationError]) -> tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        return (value,) if value.strip() else ()
    if not isinstance(value, (list, tuple)):
        raise error()
    if any(not isinstance(item, str) for item in value):
        raise error()
    return tuple(item.strip() for item in value if item.strip())


_TRUE_STRINGS = frozenset({"true", "1", "yes", "on"})
_FALSE_STRINGS = frozenset({"false", "0", "no", "off", ""})


def _boolean(payload: Mapping[str, Any], key: str) -> bool:
    value = payload.get(key)
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        normalized = value.strip().lower()
        if normalized in _TRUE_STRINGS:
            return True
        if normalized in _FALSE_STRINGS:
            return False
    raise LookupValidationError.boolean_required(key)


def _positive_int(payload: Mapping[str, Any], key: str) -> int | None:
    value = payload.get(key)
    if value is None:
        return None
    if isinstance(value, bool):
        raise LookupValidationError.positive_integer_required(key)
    if isinstance(value, str) and value.strip().isdigit():
        value = int(value.strip())
    if not isinstance(value, int) or value < 1:
        raise LookupValidationError.positive_integer_required(key)
    return value


@dataclass(frozen=True, slots=True)
class ScopeCall:
    """One named scope invocation; ``argument`` of None means no arguments."""

    name: str
    argument: Any = None


@dataclass(frozen=True, slots=True)
class SearchSpec:
    """Free-text search over explicit fields or the selected fields."""

    term: str
    fields: tuple[str, ...] = ()

    @classmethod
    def from_payload(cls, payload: Any) -> "SearchSpec | None":
        """
        Build a search spec from a string or ``{term, fields?}`` mapping.

        Returns None when no search is requested or the term is blank, so an
        empty term never narrows the query.
        """
        if payload is None:
            return None
        if isinstance(payload, str):
            term = payload.strip()
            return cls(term=term) if term else None
        if not isinstance(payload, Mapping):
            raise LookupValidationError.search_invalid()
        term_value = payload.get("term")
        if term_value is not None and not isinstance(term_value, str):
            raise LookupValidationError.search_invalid()
        fields = _string_list(
            payload.get("fields"), LookupValidationError.search_fields_invalid
        )
        term = (term_value or "").strip()
        if not term:
            return None
        return cls(term=term, fields=fields)


def _matched_value(values: Any, name: str, index: int) -> Any:
    if isinstance(values, Mapping):
        for key in (name, index, str(index)):
            if key in values:
                return values[key]
        return None
    if isinstance(values, (list, tuple)) and index < len(values):
        return values[index]
    return None


def build_scope_calls(scopes: Any, values: Any = None) -> tuple[ScopeCall, ...]:
    """
    Merge ``scopes`` and the parallel ``values`` payload into scope calls.

    ``scopes`` is either a list of names or a mapping of name to argument.
    When a scope carries no argument of its own, ``values`` is consulted by
    scope name first and by position second.
    """
    if scopes is None:
        return ()
    if values is not None and not isinstance(values, (Mapping, list, tuple)):
        raise LookupValidationError.values_invalid()

    if isinstance(scopes, Mapping):
        items = list(scopes.items())
    elif isinstance(scopes, (list, tuple)):
        items = [(scope, None) for scope in scopes]
    else:
        raise LookupValidationError.scopes_invalid()

    calls: list[ScopeCall] = []
    for index, (name, argument) in enumerate(items):
        if not isinstance(name, str) or not name.strip():
            raise LookupValidationError.scopes_invalid()
        if argument is None:
            argument = _matched_value(values, name.strip(), index)
        calls.append(ScopeCall(name=camel_to_snake(name.strip()), argument=argument))
    return tuple(calls)


@dataclass(frozen=True, slots=True)
class TableSpec:
    """Requested model listing."""

    name: str
    module: str | None = None
    extra: tuple[str, ...] = ()
    scopes: tuple[ScopeCall, ...] = ()
    search: SearchSpec | None = None
    paginate: bool = False
    per_page: int | None = None
    page: int | None = None

    @classmethod
    def from_payload(cls, payload: Any) -> "TableSpec":
        if isinstance(payload, cls):
            return payload
        if not isinstance(payload, Mapping):
            raise LookupValidationError.item_object_required("tables")
        return cls(
            name=_required_name(payload, "tables"),
            module=_optional_string(payload.get("module")),
            extra=_string_list(payload.get("extra"), LookupValidationError.extra_invalid),
            scopes=build_scope_calls(payload.get("scopes"), payload.get("values")),
            search=SearchSpec.from_payload(payload.get("search")),
            paginate=_boolean(payload, "paginate"),
            per_page=_positive_int(payload, "per_page"),
            page=_positive_int(payload, "page"),
        )


@dataclass(frozen=True, slots=True)
class EnumSpec:
    """Requested enum listing."""

    name: str
    module: str | None = None
    method: str = DEFAULT_ENUM_METHOD

    @classmethod
    def from_payload(cls, payload: Any) -> "EnumSpec":
        if isinstance(payload, cls):
            return payload
        if not isinstance(payload, Mapping):
            raise LookupValidationError.item_object_required("enums")
        method = _optional_string(payload.get("method")) or DEFAULT_ENUM_METHOD
        return cls(
            name=_required_name(payload, "enums"),
            module=_optional_string(payload.get("module")),
            method=camel_to_snake(method),
        )


@dataclass(frozen=True, slots=True)
class ConfigSpec:
    """Requested settings namespace; a missing name is skipped by the gate."""

    name: str | None
    keys: tuple[str, ...] | None = None

    @classmethod
    def from_payload(cls, payload: Any) -> "ConfigSpec":
        if isinstance(payload, cls):
            return payload
        if not isinstance(payload, Mapping):
            raise LookupValidationError.item_object_required("configs")
        raw_keys = payload.get("keys")
        keys: tuple[str, ...] | None = None
        if isinstance(raw_keys, (list, tuple)):
            keys = tuple(str(key) for key in raw_keys)
        return cls(name=_optional_string(payload.get("name")), keys=keys)


def parse_specs(
    key: str,
    raw: Any,
    parser: Callable[[Any], SpecT],
) -> tuple[SpecT, ...]:
    """
    Validate the list stored under ``key`` and parse every item.

    Raises:
        LookupValidationError: If ``raw`` is not a non-empty list or an item
            is malformed.
    """
    if raw is None:
        raise LookupValidationError.non_empty_list_required(key)
    if not isinstance(raw, (list, tuple)):
        raise LookupValidationError.list_required(key)
    if not raw:
        raise LookupValidationError.non_empty_list_required(key)
    return tuple(parser(item) for item in raw)


_PARSERS: dict[str, Callable[[Any], Any]] = {
    "tables": TableSpec.from_payload,
    "enums": EnumSpec.from_payload,
    "configs": ConfigSpec.from_payload,
}


@dataclass(frozen=True, slots=True)
class LookupRequest:
    """
    A lookup request targeting exactly one kind of data source.

    ``items`` is None only for ``tables``/``enums`` requests that explicitly
    pass None, which selects the catalog and default-scan modes.
    """

    kind: str
    items: Sequence[Any] | None

    @classmethod
    def from_payload(cls, payload: Any) -> "LookupRequest":
        if not isinstance(payload, Mapping):
            raise LookupValidationError.request_object_required()
        present = [kind for kind in REQUEST_KINDS if kind in payload]
        if not present:
            raise LookupValidationError.request_kind_required()
        if len(present) > 1:
            raise LookupValidationError.request_kind_ambiguous()

        kind = present[0]
        raw = payload[kind]
        if raw is None and kind != "configs":
            return cls(kind=kind, items=None)
        return cls(kind=kind, items=parse_specs(kind, raw, _PARSERS[kind]))
