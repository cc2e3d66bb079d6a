"""
Test suite for lib/logging_utils.py
"""

import logging
import os
import sys
import tempfile
import unittest
from logging.handlers import TimedRotatingFileHandler

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "../.."))
from lib.logging_utils import configureLogger, getLogLevelByStr, initLogging  # noqa: E402


class TestLoggingUtils(unittest.TestCase):

    def setUp(self):
        self.rootLogger = logging.getLogger()
        self.savedRootLevel = self.rootLogger.level
        self.savedRootHandlers = self.rootLogger.handlers[:]
        self.testLogger = logging.getLogger("mdpreview.test.logging")
        self.tempDir = tempfile.TemporaryDirectory()

    def tearDown(self):
        for handler in self.testLogger.handlers[:]:
            self.testLogger.removeHandler(handler)
            handler.close()
        self.testLogger.setLevel(logging.NOTSET)
        self.testLogger.propagate = True

        for handler in self.rootLogger.handlers[:]:
            if handler not in self.savedRootHandlers:
                handler.close()
            self.rootLogger.removeHandler(handler)
        for handler in self.savedRootHandlers:
            self.rootLogger.addHandler(handler)
        self.rootLogger.setLevel(self.savedRootLevel)

        self.tempDir.cleanup()

    def test_get_log_level_by_str(self):
        """Test level names in any case"""
        self.assertEqual(getLogLevelByStr("debug"), logging.DEBUG)
        self.assertEqual(getLogLevelByStr("WARNING"), logging.WARNING)
        self.assertEqual(getLogLevelByStr("Error"), logging.ERROR)

    def test_get_log_level_by_str_invalid(self):
        """Test unknown level names return the default"""
        with self.assertLogs("lib.logging_utils", level="ERROR"):
            self.assertIsNone(getLogLevelByStr("loud"))
        with self.assertLogs("lib.logging_utils", level="ERROR"):
            self.assertEqual(getLogLevelByStr("basicConfig", logging.INFO), logging.INFO)

    def test_configure_logger_level_and_propagate(self):
        configureLogger(self.testLogger, {"level": "debug", "propagate": False})
        self.assertEqual(self.testLogger.level, logging.DEBUG)
        self.assertFalse(self.testLogger.propagate)
        self.assertEqual(self.testLogger.handlers, [])

    def test_configure_logger_console(self):
        configureLogger(self.testLogger, {"level": "INFO", "console": True, "console-level": "ERROR"})
        self.assertEqual(len(self.testLogger.handlers), 1)
        handler = self.testLogger.handlers[0]
        self.assertIsInstance(handler, logging.StreamHandler)
        self.assertEqual(handler.level, logging.ERROR)

    def test_configure_logger_replaces_handlers(self):
        configureLogger(self.testLogger, {"console": True})
        configureLogger(self.testLogger, {"console": True})
        self.assertEqual(len(self.testLogger.handlers), 1)

    def test_configure_logger_file(self):
        logFile = os.path.join(self.tempDir.name, "logs", "preview.log")
        configureLogger(self.testLogger, {"level": "INFO", "file": logFile, "format": "%(levelname)s:%(message)s"})

        self.testLogger.info("rendered")
        for handler in self.testLogger.handlers:
            handler.flush()

        with open(logFile, "rt", encoding="utf-8") as f:
            self.assertEqual(f.read().strip(), "INFO:rendered")

    def test_configure_logger_rotating_file(self):
        logFile = os.path.join(self.tempDir.name, "rotating.log")
        configureLogger(self.testLogger, {"file": logFile, "rotate": True, "file-level": "warning"})
        self.assertEqual(len(self.testLogger.handlers), 1)
        self.assertIsInstance(self.testLogger.handlers[0], TimedRotatingFileHandler)
        self.assertEqual(self.testLogger.handlers[0].level, logging.WARNING)

    def test_init_logging_defaults_to_warning(self):
        initLogging({})
        self.assertEqual(self.rootLogger.level, logging.WARNING)

    def test_init_logging_named_loggers(self):
        initLogging({"level": "ERROR", "logger": {"mdpreview.test.logging": {"level": "DEBUG"}}})
        self.assertEqual(self.rootLogger.level, logging.ERROR)
        self.assertEqual(self.testLogger.level, logging.DEBUG)


if __name__ == "__main__":
    unittest.main()
