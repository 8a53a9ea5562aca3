from django.conf import settings
from django.test import SimpleTestCase

from lookup_manager.entities.registry import (
    EntityDefinition,
    EntityRegistry,
    entity_registry,
    resolve_lookup_options,
)
from lookup_manager.exceptions import EntityNotFoundError, UnknownScopeError
from tests.billing.models import Category as BillingCategory
from tests.billing.models import Invoice
from tests.testapp.models import Category, OrderItem, Product, Role, Warehouse


class EntityRegistryResolutionTests(SimpleTestCase):
    def test_plural_snake_names_resolve_in_default_app(self):
        self.assertIs(entity_registry.find("roles").model, Role)
        self.assertIs(entity_registry.find("order_items").model, OrderItem)
        self.assertIs(entity_registry.find("categories").model, Category)
        self.assertIs(entity_registry.find("Warehouse").model, Warehouse)

    def test_module_selects_app(self):
        self.assertIs(entity_registry.find("categories", module="billing").model, BillingCategory)
        self.assertIsNone(entity_registry.find("roles", module="billing"))

    def test_unknown_names(self):
        self.assertIsNone(entity_registry.find("ghosts"))
        with self.assertRaises(EntityNotFoundError) as ctx:
            entity_registry.resolve("ghosts", "billing")
        self.assertEqual(ctx.exception.name, "ghosts")
        self.assertIn("billing", str(ctx.exception))

    def test_without_default_app_a_unique_match_is_required(self):
        lookup_settings = {**settings.LOOKUP_MANAGER, "DEFAULT_APP": None}
        with self.settings(LOOKUP_MANAGER=lookup_settings):
            self.assertIs(entity_registry.find("warehouses").model, Warehouse)
            self.assertIs(entity_registry.find("invoice").model, Invoice)
            with self.assertLogs("lookup_manager.entities.registry", level="WARNING"):
                self.assertIsNone(entity_registry.find("categories"))

    def test_resolve_binds_a_fresh_queryset(self):
        first = entity_registry.resolve("roles")
        second = entity_registry.resolve("roles")
        self.assertIs(first.definition, second.definition)
        self.assertIsNot(first.queryset, second.queryset)
        self.assertIs(first.queryset.model, Role)

    def test_exposed_apps_limit_registration(self):
        registry = EntityRegistry()
        lookup_settings = {**settings.LOOKUP_MANAGER, "EXPOSED_APPS": ["billing"]}
        with self.settings(LOOKUP_MANAGER=lookup_settings):
            registry.populate()
        self.assertEqual(
            sorted(definition.label for definition in registry.definitions()),
            ["billing.Category", "billing.Invoice"],
        )

    def test_populate_with_explicit_models(self):
        registry = EntityRegistry()
        registry.populate([Role])
        self.assertEqual([d.model for d in registry.definitions()], [Role])
        registry.clear()
        self.assertEqual(registry.get("testapp", "role").model, Role)


class EntityDefinitionTests(SimpleTestCase):
    def test_schema_capture(self):
        definition = EntityDefinition.from_model(Product)
        self.assertEqual(definition.primary_key, "id")
        self.assertEqual(definition.app_label, "testapp")
        self.assertEqual(definition.db_table, "testapp_product")
        self.assertTrue(definition.has_column("category"))
        self.assertTrue(definition.has_column("category_id"))
        self.assertFalse(definition.has_column("password"))

    def test_queryset_methods_become_scopes(self):
        definition = EntityDefinition.from_model(Role)
        self.assertTrue({"exclude_root", "named", "broken"} <= set(definition.scopes))
        self.assertNotIn("filter", definition.scopes)

    def test_lookup_config_scopes_are_snake_cased(self):
        definition = EntityDefinition.from_model(Product)
        self.assertIn("price_above", definition.scopes)
        self.assertIn("active", definition.scopes)
        with self.assertRaises(UnknownScopeError):
            definition.get_scope("priceAbove")

    def test_root_exclusion_follows_settings(self):
        self.assertTrue(EntityDefinition.from_model(Role).is_root_excluded)
        self.assertFalse(EntityDefinition.from_model(Product).is_root_excluded)
        with self.settings(LOOKUP_MANAGER={}):
            self.assertFalse(EntityDefinition.from_model(Role).is_root_excluded)

    def test_lookup_options(self):
        self.assertEqual(resolve_lookup_options(Category).label, "Product categories")
        self.assertEqual(resolve_lookup_options(Warehouse).name_source, ("code", "city"))
        self.assertEqual(resolve_lookup_options(Role).label, None)
