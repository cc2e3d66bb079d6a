#!/usr/bin/env python3
"""
Performance tests for the Markdown Preview parser.

This module tests parser performance with large documents,
deep nesting and heavy inline formatting.
"""

import os
import sys
import time
import unittest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "../../.."))

from lib.markdown_preview import MarkdownParser, render_markdown  # noqa: E402

# Mark all tests in this module as slow
try:
    import pytest

    pytestmark = pytest.mark.slow
except ImportError:
    pytestmark = None


class TestLargeDocuments(unittest.TestCase):
    """Test performance with large documents."""

    def setUp(self):
        """Set up test fixtures."""
        self.parser = MarkdownParser({"slow_parse_threshold_ms": 60000})

    def test_mixed_document_10000_lines(self):
        """Render 10,000 lines of mixed block and inline syntax."""
        block = [
            "## Section",
            "Some **bold**, *italic* and `code` with a [link](http://example.com).",
            "* item one",
            "  * nested [ref][r]",
            "1. ordered ~~item~~",
            "> quoted & escaped <text>",
            "```python",
            "print('<hello>')",
            "```",
            "",
        ]
        lines = (block * 1000) + ["[r]: http://ref.example.com"]
        markdown = "\n".join(lines)

        start_time = time.time()
        result = render_markdown(markdown, slow_parse_threshold_ms=60000)
        parse_time = time.time() - start_time

        self.assertLess(parse_time, 5.0, f"Rendering took {parse_time:.2f}s, expected < 5s")
        self.assertEqual(result.stats.total_lines, 10001)
        self.assertEqual(result.html.count("<h2>"), 1000)
        self.assertEqual(result.html.count('href="http://ref.example.com"'), 1000)

    def test_long_paragraph(self):
        """Test one paragraph with many formatted lines."""
        markdown = "\n".join(f"Line {i} has **bold** and _em_ text" for i in range(5000))

        start_time = time.time()
        html = self.parser.parse_to_html(markdown)
        parse_time = time.time() - start_time

        self.assertLess(parse_time, 5.0, f"Rendering took {parse_time:.2f}s, expected < 5s")
        self.assertTrue(html.startswith("<p>"))
        self.assertEqual(html.count("<strong>"), 5000)

    def test_deeply_nested_lists(self):
        """Test lists nested 100 levels deep."""
        markdown = "\n".join("  " * i + f"* level {i}" for i in range(100))

        start_time = time.time()
        html = self.parser.parse_to_html(markdown)
        parse_time = time.time() - start_time

        self.assertLess(parse_time, 1.0)
        self.assertEqual(html.count("<ul>"), 100)
        self.assertEqual(html.count("</ul>"), 100)


class TestLongLines(unittest.TestCase):
    """Single very long lines must render in linear time."""

    def setUp(self):
        """Set up test fixtures."""
        self.parser = MarkdownParser({"slow_parse_threshold_ms": 60000})

    def assertRendersQuickly(self, markdown, expected):
        start_time = time.time()
        html = self.parser.parse_to_html(markdown)
        parse_time = time.time() - start_time

        self.assertLess(parse_time, 0.5, f"Rendering took {parse_time:.2f}s, expected < 0.5s")
        self.assertEqual(html, expected)

    def test_header_with_inner_whitespace(self):
        spaces = " " * 20000
        self.assertRendersQuickly(f"# a{spaces}b", f"<h1>a{spaces}b</h1>")

    def test_paragraph_with_inner_whitespace(self):
        spaces = " " * 20000
        self.assertRendersQuickly(f"a{spaces}b", f"<p>a{spaces}b</p>")

    def test_reference_definition_with_inner_whitespace(self):
        self.assertRendersQuickly("[a]: x" + " " * 20000 + "y", "")

    def test_unclosed_image_openers(self):
        self.assertRendersQuickly("![" * 20000, "<p>" + "![" * 20000 + "</p>")

    def test_unclosed_link_destinations(self):
        self.assertRendersQuickly("[a](" * 20000, "<p>" + "[a](" * 20000 + "</p>")

    def test_unclosed_reference_links(self):
        self.assertRendersQuickly("[a][b" * 20000, "<p>" + "[a][b" * 20000 + "</p>")

    def test_unclosed_emphasis_markers(self):
        self.assertRendersQuickly("*a _b ~~c " * 5000, "<p>" + ("*a _b ~~c " * 5000).strip() + "</p>")


if __name__ == "__main__":
    unittest.main()
