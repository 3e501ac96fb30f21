import io
import os
import tempfile
import unittest
from unittest.mock import Mock, patch

from chatproxy.core.content import (
    load_content,
    message_from_file,
    message_from_files,
    message_to_file,
    normalise_url,
    readable_text,
)
from chatproxy.utils import make_console


class TestContentLoader(unittest.TestCase):
    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmp.cleanup)
        self.dir = self.tmp.name

    def write(self, relative, contents):
        path = os.path.join(self.dir, relative)
        os.makedirs(os.path.dirname(path), exist_ok=True)
        with open(path, "w") as fh:
            fh.write(contents)
        return path

    def test_read_file(self):
        """A file is wrapped in a header naming its path"""
        path = self.write("config.json", '{\n    config: "yes",\n}')

        message, tokens = message_from_file(path)

        self.assertEqual(message, f'--{path}--\n{{\n    config: "yes",\n}}\n\n')
        self.assertEqual(tokens, len(message) // 2)

    def test_read_directory(self):
        """Files are concatenated in lexical order"""
        c2 = self.write("config2.json", "false")
        c1 = self.write("config1.json", "true")

        got = message_from_files(self.dir)

        self.assertEqual(got.text, f"--{c1}--\ntrue\n\n--{c2}--\nfalse\n\n")

    def test_hidden_entries_are_skipped(self):
        """Hidden files and everything under hidden directories are ignored"""
        visible = self.write("a.txt", "visible")
        self.write(".secret", "hidden file")
        self.write(".git/config", "hidden dir")
        nested = self.write("sub/b.txt", "nested")

        got = message_from_files(self.dir)

        self.assertEqual(got.text, f"--{visible}--\nvisible\n\n--{nested}--\nnested\n\n")

    def test_hidden_root_is_still_read(self):
        path = self.write(".project/main.py", "print()")

        got = message_from_files(os.path.join(self.dir, ".project"))

        self.assertIn(f"--{path}--", got.text)

    def test_token_report(self):
        """Per-file and total token estimates are printed to the output"""
        path = self.write("a.txt", "some text")
        buf = io.StringIO()

        got = message_from_files(self.dir, make_console(buf))

        self.assertEqual(
            buf.getvalue(),
            f"Tokens: {got.token_estimate} -> {path}\nEstimated Total Tokens: {got.token_estimate}\n",
        )

    def test_load_local_path(self):
        self.write("a.txt", "alpha")
        self.write("b.txt", "beta")

        got = load_content(self.dir)

        self.assertIn("alpha", got.text)
        self.assertIn("beta", got.text)
        self.assertGreater(got.token_estimate, 0)

    @patch("chatproxy.core.content.requests.get")
    def test_load_url(self, mock_get):
        """Unknown paths are fetched as web pages and reduced to text"""
        mock_get.return_value = Mock(
            text="<html><head><style>p {}</style></head><body>"
            "<nav>Menu</nav><script>var x;</script><p>Hello</p><p>World &amp; all</p></body></html>",
            headers={"Content-Type": "text/html; charset=utf-8"},
        )

        got = load_content("www.example.com")

        self.assertIn("Hello", got.text)
        self.assertIn("World & all", got.text)
        self.assertNotIn("var x", got.text)
        self.assertNotIn("p {}", got.text)
        self.assertEqual(mock_get.call_args.args[0], "https://www.example.com")
        mock_get.return_value.raise_for_status.assert_called_once_with()

    @patch("chatproxy.core.content.requests.get")
    def test_load_plain_text_url(self, mock_get):
        mock_get.return_value = Mock(text="just text <b>", headers={"Content-Type": "text/plain"})

        self.assertEqual(load_content("http://example.com/a.txt").text, "just text <b>")
        self.assertEqual(mock_get.call_args.args[0], "http://example.com/a.txt")

    def test_normalise_url(self):
        self.assertEqual(normalise_url("example.com/page"), "https://example.com/page")
        self.assertEqual(normalise_url("http://example.com"), "http://example.com")

    def test_readable_text_keeps_the_article(self):
        """Page chrome and scripts are dropped; each paragraph becomes one line"""
        page = (
            "<html><head><title>Foxes</title><script>var tracker = 1;</script></head><body>"
            "<div class='sidebar'><a href='/a'>Home</a> <a href='/b'>About us</a></div>"
            "<div id='content'>"
            "<p>The quick brown fox\n      jumps over the lazy dog, again and again, all afternoon long.</p>"
            "<p>Foxes are small omnivorous mammals, and this paragraph is long enough to count.</p>"
            "</div></body></html>"
        )

        lines = readable_text(page).splitlines()

        self.assertIn("The quick brown fox jumps over the lazy dog, again and again, all afternoon long.", lines)
        self.assertIn("Foxes are small omnivorous mammals, and this paragraph is long enough to count.", lines)
        self.assertNotIn("tracker", "\n".join(lines))

    def test_readable_text_of_empty_page(self):
        self.assertEqual(readable_text("  \n"), "")

    def test_write_file(self):
        """Written content always ends with a newline and replaces the old file"""
        path = os.path.join(self.dir, "temp.txt")
        message_to_file("first", path)
        message_to_file("This is some file output.", path)

        with open(path) as fh:
            self.assertEqual(fh.read(), "This is some file output.\n")


if __name__ == "__main__":
    unittest.main()
