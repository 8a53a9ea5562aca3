"""Django system checks for the lookup manager settings."""

from __future__ import annotations

from typing import Any

from django.apps import apps
from django.core.checks import Warning

from lookup_manager import config
from lookup_manager.entities.registry import EXCLUDE_ROOT_SCOPE, EntityDefinition

W001 = "lookup_manager.W001"
W002 = "lookup_manager.W002"


def check_root_excluded_models(app_configs: Any = None, **kwargs: Any) -> list[Warning]:
    """Warn about ``ROOT_EXCLUDED_MODELS`` entries that cannot be honoured."""
    warnings: list[Warning] = []
    for label in sorted(config.root_excluded_models()):
        try:
            model = apps.get_model(label)
        except (LookupError, ValueError):
            warnings.append(
                Warning(
                    "Root excluded model not found!",
                    hint=f"'{label}' in LOOKUP_MANAGER['ROOT_EXCLUDED_MODELS'] is not an installed model label.",
                    id=W001,
                )
            )
            continue

        definition = EntityDefinition.from_model(model)
        if EXCLUDE_ROOT_SCOPE not in definition.scopes:
            warnings.append(
                Warning(
                    "Root excluded model has no exclude_root scope!",
                    hint=(
                        f"Define an '{EXCLUDE_ROOT_SCOPE}' QuerySet method or "
                        f"LookupConfig scope on {definition.label}; root records "
                        "are otherwise returned unfiltered."
                    ),
                    obj=model,
                    id=W002,
                )
            )
    return warnings
