"""Enum listings for explicit requests and the default full scan."""

from __future__ import annotations

import enum
import time
from collections import Counter
from typing import Any, Sequence

from lookup_manager import config
from lookup_manager.contract import DEFAULT_ENUM_METHOD, EnumSpec, parse_specs
from lookup_manager.enums.formatting import RETRIEVAL_FUNCTIONS
from lookup_manager.enums.registry import EnumRegistry, enum_registry
from lookup_manager.logging import get_logger
from lookup_manager.metrics import OUTCOME_ERROR, get_lookup_metrics_backend, outcome_for

logger = get_logger("enums.lookup")


class _RetrievalFailed(Exception):
    pass


class EnumLookupManager:
    """Serve ``enums`` lookups against the enum registry."""

    def __init__(self, registry: EnumRegistry | None = None) -> None:
        self.registry = registry or enum_registry

    def get_enums(self, enums: Sequence[Any] | None = None) -> dict[str, Any]:
        """
        Return formatted enum entries keyed by the requested name.

        Every requested enum is resolved before any is formatted, so a
        single unknown name fails the whole request. Passing None lists
        every registered enum instead.

        Raises:
            EnumNotFoundError: If a requested enum is not registered.
            LookupValidationError: If the request items are malformed.
        """
        if enums is None:
            return self.get_default_enums()

        specs = parse_specs("enums", enums, EnumSpec.from_payload)
        resolved = [
            (spec, self.registry.resolve(spec.name, spec.module)) for spec in specs
        ]
        return {
            spec.name: self._retrieve(spec.name, enum_class, spec.method)
            for spec, enum_class in resolved
        }

    def get_default_enums(self) -> dict[str, Any]:
        """
        List every registered enum.

        Keys are plain unless another app registers the same key and this
        one is not the default app; those are published as
        ``"<app_label>::<key>"``.
        """
        definitions = self.registry.definitions()
        default_app = config.default_app()
        key_counts = Counter(definition.key for definition in definitions)
        results: dict[str, Any] = {}
        for definition in definitions:
            if definition.app_label == default_app or key_counts[definition.key] == 1:
                key = definition.key
            else:
                key = definition.qualified_key
            results[key] = self._retrieve(key, definition.enum_class, DEFAULT_ENUM_METHOD)
        return results

    def _retrieve(self, name: str, enum_class: type[enum.Enum], method: str) -> Any:
        metrics = get_lookup_metrics_backend()
        metric_name = f"{enum_class.__module__}.{enum_class.__qualname__}"
        started = time.perf_counter()
        try:
            result = self._invoke(enum_class, method)
        except Exception as exc:  # noqa: BLE001
            logger.warning(
                "enum retrieval failed",
                context={
                    "enum": name,
                    "class": enum_class.__qualname__,
                    "method": method,
                    "error": type(exc).__name__,
                    "message": str(exc),
                },
            )
            metrics.record_item(
                kind="enums",
                name=metric_name,
                outcome=OUTCOME_ERROR,
                duration=time.perf_counter() - started,
            )
            return []
        metrics.record_item(
            kind="enums",
            name=metric_name,
            outcome=outcome_for(result),
            duration=time.perf_counter() - started,
        )
        return result

    @staticmethod
    def _invoke(enum_class: type[enum.Enum], method: str) -> Any:
        if method.startswith("_"):
            raise _RetrievalFailed(f"Method '{method}' is not a retrieval method.")
        retrieval = getattr(enum_class, method, None)
        if callable(retrieval) and not isinstance(retrieval, enum.Enum):
            return retrieval()
        function = RETRIEVAL_FUNCTIONS.get(method)
        if function is None:
            raise _RetrievalFailed(
                f"{enum_class.__qualname__} has no retrieval method '{method}'."
            )
        return function(enum_class)
