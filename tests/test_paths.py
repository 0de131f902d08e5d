import unittest as ut
from storls.exc import ConfigError
from storls.listing.paths import SeparatorStyle, normalize


class TestNormalize(ut.TestCase):

    def test_slash_file(self):
        self.assertEqual(normalize("data/sub/file.txt", False, SeparatorStyle.SLASH), "data/sub/file.txt")

    def test_slash_file_trailing_separator_removed(self):
        self.assertEqual(normalize("data/sub/", False, SeparatorStyle.SLASH), "data/sub")

    def test_slash_dir_gets_one_separator(self):
        self.assertEqual(normalize("data/sub", True, SeparatorStyle.SLASH), "data/sub/")
        self.assertEqual(normalize("data/sub/", True, SeparatorStyle.SLASH), "data/sub/")
        self.assertEqual(normalize("data/sub///", True, SeparatorStyle.SLASH), "data/sub/")

    def test_backslash_file(self):
        self.assertEqual(normalize("data/sub/file.txt", False, SeparatorStyle.BACKSLASH), "data\\sub\\file.txt")

    def test_backslash_dir(self):
        self.assertEqual(normalize("data/sub/", True, SeparatorStyle.BACKSLASH), "data\\sub\\")
        self.assertEqual(normalize("data\\sub\\", True, SeparatorStyle.BACKSLASH), "data\\sub\\")

    def test_backslash_file_trailing_separator_removed(self):
        self.assertEqual(normalize("data/sub/", False, SeparatorStyle.BACKSLASH), "data\\sub")

    def test_root_dir(self):
        self.assertEqual(normalize("/", True, SeparatorStyle.SLASH), "/")
        self.assertEqual(normalize("/", True, SeparatorStyle.BACKSLASH), "\\")

    def test_slash_style_leaves_backslashes(self):
        self.assertEqual(normalize("a\\b", False, SeparatorStyle.SLASH), "a\\b")


class TestSeparatorStyle(ut.TestCase):

    def test_for_platform(self):
        self.assertIs(SeparatorStyle.for_platform("win32"), SeparatorStyle.BACKSLASH)
        self.assertIs(SeparatorStyle.for_platform("cygwin"), SeparatorStyle.BACKSLASH)
        self.assertIs(SeparatorStyle.for_platform("linux"), SeparatorStyle.SLASH)
        self.assertIs(SeparatorStyle.for_platform("darwin"), SeparatorStyle.SLASH)

    def test_from_config(self):
        self.assertIs(SeparatorStyle.from_config("slash"), SeparatorStyle.SLASH)
        self.assertIs(SeparatorStyle.from_config("BackSlash"), SeparatorStyle.BACKSLASH)
        self.assertIs(SeparatorStyle.from_config("auto", "win32"), SeparatorStyle.BACKSLASH)
        self.assertIs(SeparatorStyle.from_config(None, "linux"), SeparatorStyle.SLASH)

    def test_from_config_invalid(self):
        with self.assertRaises(ConfigError):
            SeparatorStyle.from_config("colon")
