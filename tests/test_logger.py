"""
Tests for logger setup and shutdown.
"""
import contextlib
import io
import logging
import os
import shutil
import sys
import tempfile
import unittest
from logging.handlers import RotatingFileHandler

import logger


class RootHandlersTestCase(unittest.TestCase):
    """Runs each test against its own root handler list."""

    def setUp(self):
        self.root = logging.getLogger()
        self.saved_handlers = self.root.handlers[:]
        self.saved_initialized = logger._initialized
        self.root.handlers = []

    def tearDown(self):
        for handler in self.root.handlers:
            handler.close()
        self.root.handlers = self.saved_handlers
        logger._initialized = self.saved_initialized


class TestCloseAllLoggers(RootHandlersTestCase):
    def test_closed_stream_is_removed_quietly(self):
        stream = io.StringIO()
        self.root.addHandler(logging.StreamHandler(stream))
        stream.close()

        stderr = io.StringIO()
        with contextlib.redirect_stderr(stderr):
            logger.close_all_loggers()

        self.assertEqual(stderr.getvalue(), "")
        self.assertEqual(self.root.handlers, [])
        self.assertFalse(logger._initialized)

    def test_open_handlers_are_flushed_and_closed(self):
        temp_dir = tempfile.mkdtemp()
        self.addCleanup(shutil.rmtree, temp_dir)
        file_handler = RotatingFileHandler(os.path.join(temp_dir, "test.log"), encoding="utf-8")
        stream = io.StringIO()
        self.root.addHandler(file_handler)
        self.root.addHandler(logging.StreamHandler(stream))
        self.root.warning("before shutdown")

        logger.close_all_loggers()

        self.assertEqual(self.root.handlers, [])
        self.assertIsNone(file_handler.stream)
        self.assertIn("before shutdown", stream.getvalue())


class TestSetupLogger(RootHandlersTestCase):
    def test_console_handler_installed(self):
        logger._initialized = False

        named = logger.setup_logger("test.console")

        consoles = [h for h in self.root.handlers if type(h) is logging.StreamHandler]
        self.assertEqual(len(consoles), 1)
        self.assertIs(consoles[0].stream, sys.stdout)
        self.assertEqual(named.name, "test.console")

    def test_configured_once(self):
        logger._initialized = False

        logger.setup_logger("test.first")
        count = len(self.root.handlers)
        logger.setup_logger("test.second")

        self.assertEqual(len(self.root.handlers), count)
