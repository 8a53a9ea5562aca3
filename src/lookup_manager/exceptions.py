"""Exception types shared across the lookup managers."""

from __future__ import annotations

__all__ = [
    "EntityNotFoundError",
    "EnumNotFoundError",
    "LookupValidationError",
    "UnknownScopeError",
]


class LookupValidationError(ValueError):
    """Raised when a lookup request payload is malformed."""

    _REQUEST_OBJECT_REQUIRED = "Lookup request must be a mapping."
    _REQUEST_KIND_REQUIRED = "Lookup request must contain one of: tables, enums, configs."
    _REQUEST_KIND_AMBIGUOUS = (
        "Lookup request must contain exactly one of: tables, enums, configs."
    )
    _ITEM_OBJECT_REQUIRED = "Each '{key}' item must be an object."
    _NAME_REQUIRED = "Each '{key}' item requires a non-empty 'name' string."
    _EXTRA_INVALID = "'extra' must be a list of field names."
    _SCOPES_INVALID = "'scopes' must be a list of names or a mapping of name to arguments."
    _VALUES_INVALID = "'values' must be a list or a mapping."
    _SEARCH_INVALID = "'search' must be a string or an object with a 'term'."
    _SEARCH_FIELDS_INVALID = "'search.fields' must be a list of field names."

    @classmethod
    def request_object_required(cls) -> "LookupValidationError":
        return cls(cls._REQUEST_OBJECT_REQUIRED)

    @classmethod
    def request_kind_required(cls) -> "LookupValidationError":
        return cls(cls._REQUEST_KIND_REQUIRED)

    @classmethod
    def request_kind_ambiguous(cls) -> "LookupValidationError":
        return cls(cls._REQUEST_KIND_AMBIGUOUS)

    @classmethod
    def list_required(cls, key: str) -> "LookupValidationError":
        return cls(f"The '{key}' key must be a list.")

    @classmethod
    def non_empty_list_required(cls, key: str) -> "LookupValidationError":
        return cls(f"The '{key}' key is required and must be a non-empty list.")

    @classmethod
    def item_object_required(cls, key: str) -> "LookupValidationError":
        return cls(cls._ITEM_OBJECT_REQUIRED.format(key=key))

    @classmethod
    def name_required(cls, key: str) -> "LookupValidationError":
        return cls(cls._NAME_REQUIRED.format(key=key))

    @classmethod
    def extra_invalid(cls) -> "LookupValidationError":
        return cls(cls._EXTRA_INVALID)

    @classmethod
    def scopes_invalid(cls) -> "LookupValidationError":
        return cls(cls._SCOPES_INVALID)

    @classmethod
    def values_invalid(cls) -> "LookupValidationError":
        return cls(cls._VALUES_INVALID)

    @classmethod
    def search_invalid(cls) -> "LookupValidationError":
        return cls(cls._SEARCH_INVALID)

    @classmethod
    def search_fields_invalid(cls) -> "LookupValidationError":
        return cls(cls._SEARCH_FIELDS_INVALID)

    @classmethod
    def positive_integer_required(cls, key: str) -> "LookupValidationError":
        return cls(f"'{key}' must be an integer >= 1.")

    @classmethod
    def boolean_required(cls, key: str) -> "LookupValidationError":
        return cls(f"'{key}' must be a boolean.")


class EntityNotFoundError(LookupError):
    """Raised when a table name does not resolve to a registered model."""

    def __init__(self, name: str, module: str | None = None) -> None:
        self.name = name
        self.module = module
        location = f" in module '{module}'" if module else ""
        super().__init__(f"No model registered for '{name}'{location}.")


class EnumNotFoundError(LookupError):
    """Raised when an enum name does not resolve to a registered enum class."""

    def __init__(self, name: str, module: str | None = None) -> None:
        self.name = name
        self.module = module
        location = f" in module '{module}'" if module else ""
        super().__init__(f"No enum registered for '{name}'{location}.")


class UnknownScopeError(LookupError):
    """Raised when a scope name is not registered for a model."""

    def __init__(self, scope_name: str, model_name: str) -> None:
        self.scope_name = scope_name
        self.model_name = model_name
        super().__init__(f"Scope '{scope_name}' is not defined for {model_name}.")
