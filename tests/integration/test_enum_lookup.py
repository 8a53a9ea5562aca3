from django.conf import settings
from django.test import SimpleTestCase

from lookup_manager.enums.lookup import EnumLookupManager
from lookup_manager.exceptions import EnumNotFoundError, LookupValidationError


class ExplicitEnumLookupTests(SimpleTestCase):
    def setUp(self):
        self.manager = EnumLookupManager()

    def test_order_status(self):
        self.assertEqual(
            self.manager.get_enums([{"name": "order.status"}]),
            {
                "order.status": [
                    {"key": "PENDING", "value": 0, "label": "pending", "snake_key": "pending", "extra": None, "icon": None},
                    {"key": "DONE", "value": 1, "label": "done", "snake_key": "done", "extra": None, "icon": None},
                ]
            },
        )

    def test_module_selects_other_app(self):
        result = self.manager.get_enums([{"name": "order.status", "module": "billing"}])
        self.assertEqual(
            [(entry["key"], entry["value"], entry["label"]) for entry in result["order.status"]],
            [("PAID", "paid", "paid"), ("REFUNDED", "refunded", "refunded")],
        )

    def test_results_are_keyed_by_requested_name(self):
        result = self.manager.get_enums([{"name": "Order.Status"}, {"name": "priority"}])
        self.assertEqual(list(result), ["Order.Status", "priority"])

    def test_missing_enum_fails_whole_request(self):
        with self.assertRaises(EnumNotFoundError):
            self.manager.get_enums([{"name": "priority"}, {"name": "order.ghost"}])

    def test_malformed_items(self):
        with self.assertRaises(LookupValidationError):
            self.manager.get_enums([{"method": "values"}])

    def test_enum_classmethod_is_preferred(self):
        result = self.manager.get_enums([{"name": "shipping.carrier", "method": "codes"}])
        self.assertEqual(result, {"shipping.carrier": ["DHL", "UPS"]})
        result = self.manager.get_enums([{"name": "order.status", "method": "values"}])
        self.assertEqual(result, {"order.status": [0, 1]})

    def test_helper_functions_serve_plain_enums(self):
        result = self.manager.get_enums(
            [
                {"name": "shipping.carrier", "method": "values"},
                {"name": "priority", "method": "commentFormat"},
            ]
        )
        self.assertEqual(result["shipping.carrier"], ["dhl", "ups"])
        self.assertEqual(result["priority"], "low => Low priority, high => High priority")

    def test_failing_method_yields_empty_entry(self):
        with self.assertLogs("lookup_manager.enums.lookup", level="WARNING") as logs:
            result = self.manager.get_enums(
                [
                    {"name": "shipping.carrier", "method": "explode"},
                    {"name": "priority", "method": "nope"},
                    {"name": "order.status", "method": "_missing_"},
                    {"name": "order.payment_method"},
                ]
            )
        self.assertEqual(result["shipping.carrier"], [])
        self.assertEqual(result["priority"], [])
        self.assertEqual(result["order.status"], [])
        self.assertEqual(len(result["order.payment_method"]), 2)
        self.assertEqual(len(logs.records), 3)


class DefaultEnumLookupTests(SimpleTestCase):
    def setUp(self):
        self.manager = EnumLookupManager()

    def test_lists_every_registered_enum(self):
        result = self.manager.get_enums(None)
        self.assertEqual(
            set(result),
            {
                "order.status",
                "order.payment_method",
                "priority",
                "shipping.carrier",
                "billing::order.status",
            },
        )
        self.assertEqual(result["order.status"][0]["key"], "PENDING")
        self.assertEqual(result["billing::order.status"][0]["key"], "PAID")

    def test_only_none_selects_the_default_scan(self):
        with self.assertRaises(LookupValidationError):
            self.manager.get_enums([])

    def test_without_default_app_colliding_keys_are_qualified(self):
        lookup_settings = {**settings.LOOKUP_MANAGER, "DEFAULT_APP": None}
        with self.settings(LOOKUP_MANAGER=lookup_settings):
            result = self.manager.get_enums(None)
        self.assertIn("testapp::order.status", result)
        self.assertIn("billing::order.status", result)
        self.assertIn("priority", result)
        self.assertNotIn("order.status", result)
