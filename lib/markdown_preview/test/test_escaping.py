"""
Tests for HTML escaping and the generated-tag table.
"""

import os
import sys
import unittest

# Add the project root to the path so we can import the engine
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "..", ".."))

from lib.markdown_preview import (  # noqa: E402
    GeneratedTagTable,
    InlineFormatter,
    InlineToken,
    InlineTokenType,
    escape_attribute,
    escape_text,
    markdown_to_html,
    tokenize_generated,
)
from lib.markdown_preview.escaping import render_tokens, strip_reserved  # noqa: E402


class TestEscapeFunctions(unittest.TestCase):
    """Entity replacement."""

    def test_escape_text(self):
        self.assertEqual(escape_text("<&>\"'"), "&lt;&amp;&gt;&quot;&#x27;")

    def test_escape_text_empty(self):
        self.assertEqual(escape_text(""), "")

    def test_escape_slash(self):
        self.assertEqual(escape_text("a/b"), "a/b")
        self.assertEqual(escape_text("a/b", escape_slash=True), "a&#x2F;b")

    def test_escape_attribute(self):
        self.assertEqual(escape_attribute('x" onclick="y'), "x&quot; onclick=&quot;y")

    def test_existing_entities_are_escaped_again(self):
        self.assertEqual(escape_text("&amp;"), "&amp;amp;")

    def test_strip_reserved(self):
        self.assertEqual(strip_reserved("\ue0000\ue001"), "\ufffd0\ufffd")
        self.assertEqual(strip_reserved("plain"), "plain")


class TestGeneratedTagTable(unittest.TestCase):
    """Out-of-band markup storage and the two-token lexer."""

    def test_protect_and_markup(self):
        table = GeneratedTagTable()
        placeholder = table.protect("<em>x</em>", "*x*")
        self.assertEqual(placeholder, "\ue0000\ue001")
        self.assertEqual(table.markup(0), "<em>x</em>")
        self.assertEqual(len(table), 1)

    def test_restore_source_is_recursive(self):
        table = GeneratedTagTable()
        inner = table.protect("<em>x</em>", "*x*")
        outer = table.protect(f"<strong>{inner}</strong>", f"**{inner}**")
        self.assertEqual(table.restore_source(f"a {outer}"), "a ***x***")

    def test_tokenize(self):
        table = GeneratedTagTable()
        placeholder = table.protect("<em>x</em>", "*x*")
        tokens = list(tokenize_generated(f"a{placeholder}b", table))
        self.assertEqual(
            tokens,
            [
                InlineToken(InlineTokenType.TEXT, "a"),
                InlineToken(InlineTokenType.TAG, "<em>x</em>"),
                InlineToken(InlineTokenType.TEXT, "b"),
            ],
        )

    def test_tokenize_without_table(self):
        tokens = list(tokenize_generated("\ue0003\ue001"))
        self.assertEqual(tokens, [InlineToken(InlineTokenType.TAG, "\ue0003\ue001")])

    def test_render_tokens(self):
        table = GeneratedTagTable()
        placeholder = table.protect("<em>x</em>", "*x*")
        self.assertEqual(render_tokens(f"<i>{placeholder}", table), "&lt;i&gt;<em>x</em>")


class TestTagAwareEscaping(unittest.TestCase):
    """User text never reaches the output unescaped."""

    def test_user_anchor_tags_are_escaped(self):
        self.assertEqual(
            markdown_to_html('<a href="javascript:x">y</a>'),
            "<p>&lt;a href=&quot;javascript:x&quot;&gt;y&lt;/a&gt;</p>",
        )

    def test_user_code_tags_are_escaped(self):
        self.assertEqual(markdown_to_html("<code>x</code>"), "<p>&lt;code&gt;x&lt;/code&gt;</p>")

    def test_event_handler_attributes_are_escaped(self):
        html = markdown_to_html('<img src=x onerror="alert(1)">')
        self.assertNotIn("<img", html)

    def test_forged_placeholders_are_neutralized(self):
        self.assertEqual(markdown_to_html("**a** \ue0000\ue001"), "<p><strong>a</strong> \ufffd0\ufffd</p>")

    def test_forged_placeholder_in_formatter(self):
        self.assertEqual(InlineFormatter().format("\ue0000\ue001"), "\ufffd0\ufffd")

    def test_ampersands_in_all_contexts(self):
        html = markdown_to_html("# A & B\n\n* c & d\n> e & f\n\nx & `y & z`")
        self.assertEqual(
            html,
            "<h1>A &amp; B</h1>\n"
            "<ul>\n<li>c &amp; d</li>\n</ul>\n"
            "<blockquote>\n<p>e &amp; f</p>\n</blockquote>\n"
            "<p>x &amp; <code>y &amp; z</code></p>",
        )


if __name__ == "__main__":
    unittest.main()
