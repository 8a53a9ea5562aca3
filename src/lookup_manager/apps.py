from django.apps import AppConfig
from django.core.checks import register

from lookup_manager.logging import get_logger

logger = get_logger("apps")


class LookupManagerConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "lookup_manager"
    label = "lookup_manager"

    def ready(self):
        from lookup_manager.checks import check_root_excluded_models
        from lookup_manager.entities.registry import entity_registry
        from lookup_manager.enums.registry import enum_registry

        logger.debug("building lookup registries...")
        entity_registry.populate()
        enum_registry.populate()
        register(check_root_excluded_models, "lookup_manager")
        logger.debug(
            "lookup registries ready",
            context={
                "models": len(entity_registry.definitions()),
                "enums": len(enum_registry.definitions()),
            },
        )
