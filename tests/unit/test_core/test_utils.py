# SPDX-License-Identifier: LGPL-3.0-or-later
import unittest

from fakes.fake_logger import FakeLogger
from hiveswarm.core.exceptions import Fatal
from hiveswarm.core.utils import U


class TestUtils(unittest.TestCase):
    def test_die_logs_and_raises(self):
        logger = FakeLogger()
        with self.assertRaises(Fatal) as cm:
            U.die(logger, "bad config", 2)
        self.assertEqual(cm.exception.code, 2)
        self.assertEqual(logger.messages("error"), ["bad config"])

    def test_json_dump_is_stable(self):
        self.assertEqual(U.json_dump({"b": 1, "a": [1]}), '{\n  "a": [\n    1\n  ],\n  "b": 1\n}')

    def test_json_dump_falls_back_to_str(self):
        self.assertIn("object", U.json_dump({"x": object()}))

    def test_human_bytes(self):
        self.assertEqual(U.human_bytes(None), "unknown")
        self.assertEqual(U.human_bytes(12), "12 B")
        self.assertEqual(U.human_bytes(2048), "2.00 KiB")

    def test_banner(self):
        logger = FakeLogger()
        U.banner(logger, "Convert")
        self.assertEqual(len(logger.messages("info")), 3)


if __name__ == "__main__":
    unittest.main()
