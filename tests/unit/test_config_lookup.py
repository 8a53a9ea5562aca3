from django.conf import settings
from django.test import SimpleTestCase

from lookup_manager.configs import lookup as config_lookup
from lookup_manager.configs.lookup import ConfigLookupManager, resolve_namespace
from lookup_manager.exceptions import LookupValidationError


class ResolveNamespaceTests(SimpleTestCase):
    def test_lower_case_names_map_to_settings(self):
        self.assertEqual(resolve_namespace("site_info")["name"], "Acme")
        self.assertEqual(resolve_namespace("SITE_INFO")["name"], "Acme")

    def test_nested_segments(self):
        self.assertEqual(resolve_namespace("site_info.support.email"), "help@example.com")
        self.assertIsNone(resolve_namespace("site_info.nope"))
        self.assertIsNone(resolve_namespace("site_info.name.first"))

    def test_missing_setting(self):
        self.assertIsNone(resolve_namespace("nope"))


class ConfigLookupManagerTests(SimpleTestCase):
    def setUp(self):
        self.manager = ConfigLookupManager()

    def test_unrestricted_namespace_returns_everything(self):
        result = self.manager.get_configs([{"name": "site_info"}])
        self.assertEqual(result, {"site_info": settings.SITE_INFO})

    def test_result_is_a_copy(self):
        result = self.manager.get_configs([{"name": "site_info"}])
        result["site_info"]["support"]["email"] = "changed@example.com"
        self.assertEqual(settings.SITE_INFO["support"]["email"], "help@example.com")

    def test_restricted_namespace_never_leaks_other_keys(self):
        result = self.manager.get_configs([{"name": "mail"}])
        self.assertEqual(
            result,
            {"mail": {"from_address": "noreply@example.com", "reply_to": "support@example.com"}},
        )

    def test_requested_keys_are_intersected(self):
        result = self.manager.get_configs([{"name": "mail", "keys": ["password", "reply_to"]}])
        self.assertEqual(result, {"mail": {"reply_to": "support@example.com"}})

    def test_no_permitted_keys_requested(self):
        with self.assertLogs("lookup_manager.configs.lookup", level="INFO"):
            result = self.manager.get_configs([{"name": "mail", "keys": ["password"]}])
        self.assertEqual(result, {"mail": {}})
        self.assertEqual(self.manager.get_configs([{"name": "mail", "keys": []}]), {"mail": {}})

    def test_namespace_not_allow_listed(self):
        with self.assertLogs("lookup_manager.configs.lookup", level="WARNING") as logs:
            result = self.manager.get_configs([{"name": "payment_gateway"}])
        self.assertEqual(result, {"payment_gateway": {}})
        self.assertEqual(logs.records[0].context, {"config": "payment_gateway"})

    def test_missing_or_empty_namespaces(self):
        result = self.manager.get_configs(
            [{"name": "empty_section"}, {"name": "missing_section"}]
        )
        self.assertEqual(result, {"empty_section": {}, "missing_section": {}})

    def test_dotted_namespace(self):
        result = self.manager.get_configs([{"name": "site_info.support"}])
        self.assertEqual(
            result,
            {"site_info.support": {"email": "help@example.com", "phone": "+1 555 0100"}},
        )

    def test_scalar_namespace(self):
        self.assertEqual(
            self.manager.get_configs([{"name": "feature_flag"}]), {"feature_flag": True}
        )

    def test_item_without_name_is_skipped(self):
        with self.assertLogs("lookup_manager.configs.lookup", level="WARNING"):
            result = self.manager.get_configs([{"keys": ["name"]}, {"name": "site_info"}])
        self.assertEqual(list(result), ["site_info"])

    def test_request_shape_is_validated(self):
        for payload in (None, [], "mail", ["mail"], {"name": "mail"}):
            with self.subTest(payload=payload):
                with self.assertRaises(LookupValidationError):
                    self.manager.get_configs(payload)


def test_item_failure_yields_empty_result(monkeypatch, caplog):
    def explode(name):
        raise RuntimeError("settings unavailable")

    monkeypatch.setattr(config_lookup, "resolve_namespace", explode)
    result = ConfigLookupManager().get_configs([{"name": "site_info"}, {"name": "payment_gateway"}])
    assert result == {"site_info": {}, "payment_gateway": {}}
    assert "config lookup failed" in caplog.text
