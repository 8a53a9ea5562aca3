"""Single entry point dispatching lookup requests to the specialised managers."""

from __future__ import annotations

from typing import Any, Sequence

from django.utils.module_loading import import_string

from lookup_manager import config
from lookup_manager.configs.lookup import ConfigLookupManager
from lookup_manager.contract import LookupRequest
from lookup_manager.entities.lookup import ModelLookupManager
from lookup_manager.enums.lookup import EnumLookupManager
from lookup_manager.logging import get_logger

logger = get_logger("manager")


class LookupManager:
    """
    Façade over the model, enum and config lookup managers.

    Holds no request state, so one instance can serve concurrent requests.
    """

    def __init__(
        self,
        enum_manager: EnumLookupManager | None = None,
        model_manager: ModelLookupManager | None = None,
        config_manager: ConfigLookupManager | None = None,
    ) -> None:
        self.enum_manager = enum_manager or EnumLookupManager()
        self.model_manager = model_manager or ModelLookupManager()
        self.config_manager = config_manager or ConfigLookupManager()

    def get_models(self, tables: Sequence[Any] | None = None) -> Any:
        return self.model_manager.get_models(tables)

    def get_enums(self, enums: Sequence[Any] | None = None) -> dict[str, Any]:
        return self.enum_manager.get_enums(enums)

    def get_configs(self, configs: Sequence[Any] | None) -> dict[str, Any]:
        return self.config_manager.get_configs(configs)

    def lookup(self, request: Any) -> Any:
        """
        Validate a ``{tables|enums|configs: [...]}`` request and dispatch it.

        Raises:
            LookupValidationError: If the request does not name exactly one
                kind or its items are malformed.
        """
        parsed = LookupRequest.from_payload(request)
        logger.debug(
            "dispatching lookup",
            context={
                "kind": parsed.kind,
                "items": None if parsed.items is None else len(parsed.items),
            },
        )
        if parsed.kind == "tables":
            return self.get_models(parsed.items)
        if parsed.kind == "enums":
            return self.get_enums(parsed.items)
        return self.get_configs(parsed.items)


_manager: LookupManager | None = None


def configure_lookup_manager(manager: LookupManager | None) -> None:
    """Set the process-wide manager instance."""
    global _manager
    _manager = manager


def get_lookup_manager() -> LookupManager:
    """
    Return the process-wide manager.

    ``LOOKUP_MANAGER["MANAGER_CLASS"]`` may name a dotted path to a
    ``LookupManager`` subclass to instantiate instead of the default.
    """
    global _manager
    if _manager is not None:
        return _manager
    class_path = config.manager_class_path()
    manager_class = import_string(class_path) if class_path else LookupManager
    _manager = manager_class()
    return _manager
