"""
Markdown Preview engine v1.0

A small, dependency-free Markdown to HTML converter that drives the live
preview pane. It renders a restricted dialect line by line and guarantees
that user text never reaches the output unescaped.

This module provides:
- Reference definition collection (first pass)
- Line classification and block dispatch (second pass)
- Fenced code, nested list and nested blockquote handling
- An ordered inline formatting pipeline with tag-aware escaping

Usage:
    from lib.markdown_preview import MarkdownParser, markdown_to_html

    parser = MarkdownParser()
    html = parser.parse_to_html("# Hello World\\n\\nThis is **bold** text.")

    # With statistics
    result = parser.render("* one\\n* two")
    print(result.html, result.stats.parse_time_ms)

    # Convenience function
    html = markdown_to_html("**Bold** and *italic* text", code_class_prefix="lang-")

Supported syntax:
- ATX headers ``#`` to ``######`` with optional closing hashes
- Horizontal rules ``***``, ``---``, ``___`` (spaces allowed)
- Fenced code blocks with an optional language
- Unordered (``*``, ``+``, ``-``) and ordered (``1.``) lists, nested by indentation
- Nested blockquotes ``>``
- Reference definitions ``[label]: url "title"``
- Images, links, reference links, code spans, strong, emphasis,
  strikethrough and hard line breaks
"""

from .block_parser import BlockParser
from .blockquote_tracker import BlockquoteDepthTracker
from .escaping import GeneratedTagTable, InlineToken, InlineTokenType, escape_attribute, escape_text, tokenize_generated
from .fence_handler import FenceHandler
from .inline_parser import InlineFormatter
from .line_classifier import LINE_CLASSIFIERS, ClassifiedLine, LineKind, classify_line
from .list_tracker import ListNestingTracker
from .parser import DEFAULT_OPTIONS, MarkdownParseError, MarkdownParser, RenderResult, markdown_to_html, render_markdown
from .references import collect_references
from .state import ListContext, ListTag, OutputBuffer, ParagraphAccumulator, ParseState, ParseStats, ReferenceDefinition

__version__ = "1.0.0"
__all__ = [
    "MarkdownParser",
    "MarkdownParseError",
    "RenderResult",
    "DEFAULT_OPTIONS",
    "markdown_to_html",
    "render_markdown",
    "collect_references",
    "classify_line",
    "LINE_CLASSIFIERS",
    "LineKind",
    "ClassifiedLine",
    "BlockParser",
    "FenceHandler",
    "ListNestingTracker",
    "BlockquoteDepthTracker",
    "InlineFormatter",
    "GeneratedTagTable",
    "InlineToken",
    "InlineTokenType",
    "escape_text",
    "escape_attribute",
    "tokenize_generated",
    # State
    "ParseState",
    "ParseStats",
    "ListTag",
    "ListContext",
    "ReferenceDefinition",
    "OutputBuffer",
    "ParagraphAccumulator",
]
