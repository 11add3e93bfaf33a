import unittest

from s3_file_manager import paths


class PathTests(unittest.TestCase):
    def test_is_folder_checks_trailing_slash(self):
        self.assertTrue(paths.is_folder("docs/"))
        self.assertFalse(paths.is_folder("docs/a.txt"))
        self.assertFalse(paths.is_folder(""))

    def test_parent_prefix(self):
        self.assertEqual("docs/", paths.parent_prefix("docs/sub/"))
        self.assertEqual("", paths.parent_prefix("docs/"))
        self.assertEqual("", paths.parent_prefix(""))
        self.assertEqual("a/b/", paths.parent_prefix("a/b/c/"))

    def test_parent_prefix_shortens_until_root(self):
        prefix = "a/b/c/d/"
        seen = [prefix]
        while prefix:
            parent = paths.parent_prefix(prefix)
            self.assertLess(len(parent), len(prefix))
            prefix = parent
            seen.append(prefix)
        self.assertEqual(["a/b/c/d/", "a/b/c/", "a/b/", "a/", ""], seen)
        self.assertEqual("", paths.parent_prefix(paths.parent_prefix("")))

    def test_relative_name_strips_prefix(self):
        self.assertEqual("a.txt", paths.relative_name("docs/a.txt", "docs/"))
        self.assertEqual("sub/b.txt", paths.relative_name("docs/sub/b.txt", "docs/"))
        self.assertEqual("docs/a.txt", paths.relative_name("docs/a.txt", ""))

    def test_folder_key_normalizes_trailing_slashes(self):
        self.assertEqual("docs/sub/", paths.folder_key("docs/", "sub"))
        self.assertEqual("docs/sub/", paths.folder_key("docs/", "sub/"))
        self.assertEqual("docs/sub/", paths.folder_key("docs/", "sub//"))
        self.assertEqual("sub/", paths.folder_key("", "sub"))

    def test_child_key_concatenates(self):
        self.assertEqual("docs/report.pdf", paths.child_key("docs/", "report.pdf"))
        self.assertEqual("report.pdf", paths.child_key("", "report.pdf"))

    def test_key_directory(self):
        self.assertEqual("docs/sub/", paths.key_directory("docs/sub/b.txt"))
        self.assertEqual("", paths.key_directory("a.txt"))

    def test_base_name_handles_files_and_folders(self):
        self.assertEqual("a.txt", paths.base_name("docs/a.txt"))
        self.assertEqual("a.txt", paths.base_name("a.txt"))
        self.assertEqual("sub", paths.base_name("docs/sub/"))
        self.assertEqual("docs", paths.base_name("docs/"))

    def test_normalize_prefix(self):
        self.assertEqual("", paths.normalize_prefix(""))
        self.assertEqual("", paths.normalize_prefix(None))
        self.assertEqual("docs/", paths.normalize_prefix("docs"))
        self.assertEqual("docs/", paths.normalize_prefix("docs/"))

    def test_is_within(self):
        self.assertTrue(paths.is_within("docs/sub/x/", "docs/sub/"))
        self.assertFalse(paths.is_within("docs/sub2/", "docs/sub/"))
        self.assertFalse(paths.is_within("anything", ""))


if __name__ == "__main__":
    unittest.main()
