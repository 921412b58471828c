"""
Tests for the plugin manager and the link processing plugin.
"""
import copy
import unittest

from config import FALLBACK_CONFIG
from links.crawl_links import LINKS_FIELD, CrawlLinks
from links.document import BuildCtx, Document
from links.errors import MalformedDestinationError
from plugins.link_processing import LinkProcessingPlugin
from utils.plugin_manager import Plugin, PluginManager


class BrokenPlugin(Plugin):
    name = "Broken"

    def on_transform_document(self, document):
        raise RuntimeError("broken plugin")


class TestPluginManager(unittest.TestCase):
    def setUp(self):
        self.config = copy.deepcopy(FALLBACK_CONFIG)
        self.manager = PluginManager(self.config)
        self.manager.discover_plugins()
        self.manager.load_plugins()

    def test_discovers_link_processing(self):
        self.assertIn("link_processing", self.manager.get_available_plugins())
        self.assertIsInstance(self.manager.get_plugin("LinkProcessing"), LinkProcessingPlugin)

    def test_enable_with_mapping(self):
        self.manager.enable_plugins({"link_processing": False})
        self.assertEqual(self.manager.enabled_plugins, [])

        self.manager.enable_plugins({"link_processing": True})
        self.assertEqual([p.name for p in self.manager.enabled_plugins], ["LinkProcessing"])

    def test_hooks_run_transform(self):
        self.manager.enable_plugins(["link_processing"])
        document = Document.from_html('<a href="notes/">Notes</a>', "index")

        self.manager.call_hook("on_build_start", BuildCtx(all_slugs=("index", "notes/index")))
        self.manager.call_hook("on_transform_document", document)
        self.manager.call_hook("on_build_end", [document])

        self.assertEqual(document.data[LINKS_FIELD], ["notes"])
        self.assertEqual(document.tree.find("a")["data-slug"], "notes/index")

    def test_failing_hook_does_not_stop_others(self):
        self.manager.register_plugin(BrokenPlugin(self.config), module_name="broken")
        self.manager.enable_plugins(None)
        document = Document.from_html('<a href="page">page</a>', "index")

        self.manager.call_hook("on_transform_document", document)

        self.assertEqual(document.data[LINKS_FIELD], ["page"])

    def test_cleanup(self):
        self.manager.enable_plugins(None)
        self.manager.cleanup()
        self.assertEqual(self.manager.plugins, [])
        self.assertEqual(self.manager.enabled_plugins, [])

    def test_plugin_with_invalid_options_is_skipped(self):
        config = copy.deepcopy(FALLBACK_CONFIG)
        config["links"] = {"markdownLinkResolution": "bogus"}
        manager = PluginManager(config)
        manager.discover_plugins()

        manager.load_plugins()

        self.assertIsNone(manager.get_plugin("LinkProcessing"))
        self.assertEqual(manager.plugins, [])


class TestLinkProcessingPlugin(unittest.TestCase):
    def test_options_from_config(self):
        config = copy.deepcopy(FALLBACK_CONFIG)
        config["links"]["markdown_link_resolution"] = "relative"
        config["links"]["lazy_load"] = True
        config["error_handling"]["fail_strategy"] = "skip"

        plugin = LinkProcessingPlugin(config)

        self.assertEqual(plugin.crawl_links.options.markdown_link_resolution, "relative")
        self.assertTrue(plugin.crawl_links.options.lazy_load)
        self.assertEqual(plugin.crawl_links.fail_strategy, "skip")

    def test_default_config(self):
        plugin = LinkProcessingPlugin()
        self.assertEqual(plugin.crawl_links.options.markdown_link_resolution, "absolute")

    def test_counts_links(self):
        plugin = LinkProcessingPlugin(copy.deepcopy(FALLBACK_CONFIG))
        plugin.on_build_start(BuildCtx())
        for html in ('<a href="a">a</a><a href="b">b</a>', '<a href="a">a</a>'):
            plugin.on_transform_document(Document.from_html(html, "index"))
        self.assertEqual(plugin.link_count, 3)

    def test_only_new_warnings_are_counted(self):
        def failing_resolver(src, target, opts):
            raise MalformedDestinationError(target, "unresolvable")

        plugin = LinkProcessingPlugin(copy.deepcopy(FALLBACK_CONFIG))
        plugin.crawl_links = CrawlLinks(resolver=failing_resolver)
        plugin.on_build_start(BuildCtx())
        document = Document.from_html('<a href="bad">bad</a>', "index")

        plugin.on_transform_document(document)
        with self.assertLogs(level="WARNING") as logs:
            plugin.on_transform_document(document)

        # one record from the error handler, none repeated by the plugin
        self.assertEqual(len(logs.records), 1)
        self.assertEqual(len(document.warnings), 2)
        self.assertEqual(plugin.warning_count, 2)
