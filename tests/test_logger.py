import os.path as osp
import tempfile
import unittest

from rlturns.utils.logging import logger

from field_sequences import make_buffer


class TestLogger(unittest.TestCase):

    def setUp(self):
        self.tmp_dir = tempfile.TemporaryDirectory()
        self.log_file = osp.join(self.tmp_dir.name, "logs", "debug.log")
        logger.add_text_output(self.log_file)

    def tearDown(self):
        logger.remove_text_output(self.log_file)
        logger.set_log_level("info")
        self.tmp_dir.cleanup()

    def read_log(self):
        with open(self.log_file) as f:
            return f.read()

    def test_prefix_and_text_output(self):
        with logger.prefix("run_0 "):
            logger.log("hello", with_timestamp=False)
        logger.log("bye", with_timestamp=False)
        self.assertEqual(self.read_log(), "run_0 hello\nbye\n")

    def test_debug_level(self):
        logger.debug("hidden", with_timestamp=False)
        logger.set_log_level("debug")
        logger.debug("shown", with_timestamp=False)
        self.assertEqual(self.read_log(), "shown\n")

    def test_buffer_clear_logged_at_debug(self):
        logger.set_log_level("debug")
        make_buffer().clear()
        self.assertIn("Cleared RTSA turn buffer.", self.read_log())

    def test_unknown_level(self):
        with self.assertRaises(ValueError):
            logger.set_log_level("verbose")


if __name__ == "__main__":
    unittest.main()
