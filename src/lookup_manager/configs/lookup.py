"""Allow-listed exposure of Django settings namespaces."""

from __future__ import annotations

import copy
import time
from typing import Any, Mapping, Sequence

from django.conf import settings

from lookup_manager import config
from lookup_manager.contract import ConfigSpec, parse_specs
from lookup_manager.logging import get_logger
from lookup_manager.metrics import (
    OUTCOME_ERROR,
    UNKNOWN_LABEL,
    get_lookup_metrics_backend,
    outcome_for,
)

logger = get_logger("configs.lookup")

_MISSING = object()


def resolve_namespace(name: str, django_settings: Any = settings) -> Any:
    """
    Return the settings value addressed by a dotted namespace, or None.

    The first segment names the setting (as written, then upper-cased);
    further segments walk nested mappings.
    """
    head, *rest = name.split(".")
    value = getattr(django_settings, head, _MISSING)
    if value is _MISSING:
        value = getattr(django_settings, head.upper(), _MISSING)
    if value is _MISSING:
        return None
    for part in rest:
        if not isinstance(value, Mapping) or part not in value:
            return None
        value = value[part]
    return value


class ConfigLookupManager:
    """Serve ``configs`` lookups through the ``ALLOWED_CONFIGS`` allow-list."""

    def get_configs(self, configs: Sequence[Any] | None) -> dict[str, Any]:
        """
        Return the permitted part of each requested settings namespace.

        Raises:
            LookupValidationError: If ``configs`` is not a non-empty list of
                objects.
        """
        specs = parse_specs("configs", configs, ConfigSpec.from_payload)
        allow_list = config.allowed_configs()
        metrics = get_lookup_metrics_backend()

        results: dict[str, Any] = {}
        for spec in specs:
            if spec.name is None:
                logger.warning("skipped a config without a name")
                continue
            started = time.perf_counter()
            metric_name = spec.name if spec.name in allow_list else UNKNOWN_LABEL
            try:
                result = self.get_config(spec, allow_list)
            except Exception as exc:  # noqa: BLE001
                logger.error(
                    "config lookup failed",
                    context={
                        "config": spec.name,
                        "error": type(exc).__name__,
                        "message": str(exc),
                    },
                )
                results[spec.name] = {}
                metrics.record_item(
                    kind="configs",
                    name=metric_name,
                    outcome=OUTCOME_ERROR,
                    duration=time.perf_counter() - started,
                )
                continue
            results[spec.name] = result
            metrics.record_item(
                kind="configs",
                name=metric_name,
                outcome=outcome_for(result),
                duration=time.perf_counter() - started,
            )
        return results

    def get_config(
        self, spec: ConfigSpec, allow_list: Mapping[str, frozenset[str]]
    ) -> Any:
        name = spec.name
        if name not in allow_list:
            logger.warning("config is not allow-listed", context={"config": name})
            return {}

        data = resolve_namespace(name)
        if data is None or (isinstance(data, Mapping) and not data):
            logger.warning("config not found or empty", context={"config": name})
            return {}

        permitted = allow_list[name]
        if not permitted:
            return copy.deepcopy(data)

        if not isinstance(data, Mapping):
            logger.warning(
                "config keys requested from a non-mapping value",
                context={"config": name},
            )
            return {}

        if spec.keys is not None:
            requested = [key for key in spec.keys if key in permitted]
            if not requested:
                logger.info(
                    "no permitted keys requested",
                    context={"config": name, "keys": list(spec.keys)},
                )
                return {}
            return {key: copy.deepcopy(data[key]) for key in requested if key in data}

        return {key: copy.deepcopy(value) for key, value in data.items() if key in permitted}
