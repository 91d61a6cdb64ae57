"""Tests for logger naming and logging setup."""

import logging
import unittest

from chromatic_tuner.logger import get_logger
from chromatic_tuner.logging_config import setup_logging


class TestGetLogger(unittest.TestCase):
    def test_package_modules_keep_their_name(self):
        self.assertEqual(
            get_logger("chromatic_tuner.tuner_engine").name, "chromatic_tuner.tuner_engine"
        )
        self.assertEqual(get_logger("chromatic_tuner").name, "chromatic_tuner")

    def test_outside_names_are_nested(self):
        self.assertEqual(get_logger("__main__").name, "chromatic_tuner.__main__")

    def test_loggers_are_cached(self):
        self.assertIs(get_logger("chromatic_tuner.audio"), get_logger("chromatic_tuner.audio"))


class TestSetupLogging(unittest.TestCase):
    def tearDown(self):
        setup_logging()

    def test_level_override(self):
        setup_logging(level="DEBUG")
        self.assertEqual(logging.getLogger("chromatic_tuner.detection").level, logging.DEBUG)
        self.assertEqual(logging.getLogger("aubio").level, logging.ERROR)

    def test_single_handler(self):
        setup_logging()
        setup_logging()
        self.assertEqual(len(logging.getLogger("chromatic_tuner").handlers), 1)
