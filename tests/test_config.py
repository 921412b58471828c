"""
Tests for YAML configuration loading.
"""
import os
import shutil
import tempfile
import unittest

from config import CONFIG, FALLBACK_CONFIG, load_config, merge_configs, validate_config


class TestLoadConfig(unittest.TestCase):
    def setUp(self):
        self.temp_dir = tempfile.mkdtemp()
        self.default_file = os.path.join(self.temp_dir, "default.yaml")
        self.user_file = os.path.join(self.temp_dir, "config.yaml")

    def tearDown(self):
        shutil.rmtree(self.temp_dir)

    def write(self, path, text):
        with open(path, "w", encoding="utf-8") as f:
            f.write(text)

    def test_shipped_defaults(self):
        self.assertEqual(CONFIG["links"]["markdown_link_resolution"], "absolute")
        self.assertTrue(CONFIG["links"]["pretty_links"])
        self.assertFalse(CONFIG["links"]["open_links_in_new_tab"])
        self.assertFalse(CONFIG["links"]["lazy_load"])
        self.assertTrue(CONFIG["links"]["external_link_icon"])

    def test_user_file_overrides_default_file(self):
        self.write(self.default_file, "links:\n  markdown_link_resolution: relative\n  lazy_load: false\n")
        self.write(self.user_file, "links:\n  lazy_load: true\n")

        config = load_config(self.default_file, self.user_file)

        self.assertEqual(config["links"]["markdown_link_resolution"], "relative")
        self.assertTrue(config["links"]["lazy_load"])
        # missing keys come from the built-in configuration
        self.assertTrue(config["links"]["external_link_icon"])
        self.assertEqual(config["error_handling"]["fail_strategy"], "log")

    def test_missing_files_use_fallback(self):
        config = load_config(self.default_file, self.user_file)
        self.assertEqual(config, FALLBACK_CONFIG)
        self.assertIsNot(config["links"], FALLBACK_CONFIG["links"])

    def test_invalid_values_reset(self):
        self.write(self.default_file,
                   "links:\n  markdown_link_resolution: fastest\n  pretty_links: maybe\n"
                   "error_handling:\n  fail_strategy: explode\n")

        config = load_config(self.default_file, self.user_file)

        self.assertEqual(config["links"]["markdown_link_resolution"], "absolute")
        self.assertTrue(config["links"]["pretty_links"])
        self.assertEqual(config["error_handling"]["fail_strategy"], "log")

    def test_camel_case_keys_are_renamed(self):
        self.write(self.default_file, "links:\n  markdown_link_resolution: absolute\n  lazy_load: false\n")
        self.write(self.user_file, "links:\n  markdownLinkResolution: shortest\n  lazyLoad: true\n")

        config = load_config(self.default_file, self.user_file)

        self.assertEqual(config["links"]["markdown_link_resolution"], "shortest")
        self.assertTrue(config["links"]["lazy_load"])
        self.assertNotIn("markdownLinkResolution", config["links"])
        self.assertNotIn("lazyLoad", config["links"])

    def test_invalid_camel_case_strategy_reset(self):
        self.write(self.default_file, "links:\n  markdownLinkResolution: bogus\n  prettyLinks: maybe\n")

        config = load_config(self.default_file, self.user_file)

        self.assertEqual(config["links"]["markdown_link_resolution"], "absolute")
        self.assertTrue(config["links"]["pretty_links"])
        self.assertNotIn("markdownLinkResolution", config["links"])

    def test_validate_renames_camel_case_keys(self):
        config = {"links": {"markdownLinkResolution": "bogus", "externalLinkIcon": False}}

        validate_config(config)

        self.assertEqual(config["links"], {
            "markdown_link_resolution": "absolute",
            "external_link_icon": False,
        })


class TestMergeConfigs(unittest.TestCase):
    def test_nested_merge(self):
        base = {"a": {"x": 1, "y": 2}, "b": 1}
        merged = merge_configs(base, {"a": {"y": 3}, "c": 4})
        self.assertEqual(merged, {"a": {"x": 1, "y": 3}, "b": 1, "c": 4})

    def test_non_dict_replaces(self):
        self.assertEqual(merge_configs({"a": {"x": 1}}, {"a": None}), {"a": None})
