"""
Main Markdown Parser for the Markdown Preview engine

This module provides the MarkdownParser class that runs the two passes of
the engine (reference collection, then block rendering) and the convenience
functions built on top of it.
"""

import logging
import time
from typing import Any, Dict, List, NamedTuple, Optional

from .block_parser import BlockParser
from .escaping import escape_text, strip_reserved
from .references import collect_references
from .state import ParseStats

logger = logging.getLogger(__name__)

DEFAULT_OPTIONS: Dict[str, Any] = {
    "strict_mode": False,
    "code_class_prefix": "language-",
    "list_indent_width": 2,
    "slow_parse_threshold_ms": 50.0,
    "escape_slash": False,
}


class RenderResult(NamedTuple):
    """HTML output of a render call with its statistics."""
    html: str
    stats: ParseStats


class MarkdownParseError(Exception):
    """Exception raised when Markdown parsing fails in strict mode."""

    def __init__(self, message: str, line: Optional[int] = None, column: Optional[int] = None):
        """
        Initialize parse error.

        Args:
            message: Error message
            line: Line number where error occurred
            column: Column number where error occurred
        """
        self.message = message
        self.line = line
        self.column = column

        location = ""
        if line is not None:
            location = f" at line {line}"
            if column is not None:
                location += f", column {column}"

        super().__init__(f"{message}{location}")


def split_lines(text: str) -> List[str]:
    """Normalize line endings and split a document into lines."""
    return text.replace("\r\n", "\n").replace("\r", "\n").split("\n")


class MarkdownParser:
    """
    Converts Markdown to sanitized HTML for the preview pane.

    The parser object only holds its options. Every call builds its own
    parse state, so one instance may serve overlapping calls from several
    threads.

    Rendering never fails on malformed input. If an internal error happens
    anyway, the parser logs it and returns the whole input as one escaped
    paragraph, unless ``strict_mode`` is set, in which case
    MarkdownParseError is raised.
    """

    def __init__(self, options: Optional[Dict[str, Any]] = None):
        """
        Initialize the Markdown parser.

        Args:
            options: Optional parser configuration, see DEFAULT_OPTIONS
        """
        self.options = dict(DEFAULT_OPTIONS)
        self.options.update(options or {})

        self.strict_mode = bool(self.options["strict_mode"])
        self.slow_parse_threshold_ms = float(self.options["slow_parse_threshold_ms"])

    def parse_to_html(self, markdown_text: Optional[str]) -> str:
        """
        Parse Markdown text and render to HTML.

        Args:
            markdown_text: The Markdown text to parse; None is treated as empty

        Returns:
            HTML string representation
        """
        return self.render(markdown_text).html

    def render(self, markdown_text: Optional[str]) -> RenderResult:
        """
        Parse Markdown text and return the HTML together with statistics.

        Args:
            markdown_text: The Markdown text to parse; None is treated as empty

        Returns:
            RenderResult with html and stats

        Raises:
            MarkdownParseError: In strict mode, for non-string input or an
                internal failure
        """
        text = self._coerce_input(markdown_text)
        stats = ParseStats()
        if not text:
            return RenderResult("", stats)

        start_time = time.perf_counter()

        # First pass: reference definitions
        lines = split_lines(strip_reserved(text))
        reference_table = collect_references(lines)

        # Second pass: blocks and inline content
        block_parser = BlockParser(lines, reference_table, self.options)
        try:
            html = block_parser.parse()
        except Exception as e:
            line_number = block_parser.state.line_cursor + 1
            logger.error(f"Markdown rendering failed at line {line_number}: {e}")
            if self.strict_mode:
                raise MarkdownParseError(f"Parsing failed: {e}", line=line_number) from e
            html = self._create_error_document(text)

        stats.total_lines = len(lines)
        stats.lines_processed = block_parser.state.line_cursor + 1
        stats.link_references = len(reference_table)
        stats.html_fragments = len(block_parser.output)
        stats.parse_time_ms = (time.perf_counter() - start_time) * 1000

        if stats.parse_time_ms > self.slow_parse_threshold_ms:
            logger.warning(
                f"Markdown parsing took {stats.parse_time_ms:.2f}ms "
                f"(target: <{self.slow_parse_threshold_ms:g}ms) for {stats.total_lines} lines"
            )
        else:
            logger.debug(f"Rendered {stats.total_lines} lines in {stats.parse_time_ms:.2f}ms")

        return RenderResult(html, stats)

    def get_option(self, key: str, default: Any = None) -> Any:
        """
        Get a parser option.

        Args:
            key: Option name
            default: Default value if option not found

        Returns:
            Option value or default
        """
        return self.options.get(key, default)

    def _coerce_input(self, markdown_text: Any) -> str:
        if markdown_text is None:
            return ""
        if isinstance(markdown_text, str):
            return markdown_text
        if self.strict_mode:
            raise MarkdownParseError(f"Input must be a string, got {type(markdown_text).__name__}")
        logger.warning(f"Converting {type(markdown_text).__name__} input to string")
        return str(markdown_text)

    def _create_error_document(self, original_text: str) -> str:
        """Render the original text as one escaped paragraph."""
        content = escape_text(strip_reserved(original_text), bool(self.options.get("escape_slash", False)))
        return f"<p>{content}</p>"


# Convenience functions for quick parsing

def render_markdown(text: Optional[str], **options) -> RenderResult:
    """
    Convert Markdown text to HTML and collect statistics.

    Args:
        text: Markdown text to convert
        **options: Parser options

    Returns:
        RenderResult with html and stats
    """
    parser = MarkdownParser(options)
    return parser.render(text)


def markdown_to_html(text: Optional[str], **options) -> str:
    """
    Convert Markdown text to HTML.

    Args:
        text: Markdown text to convert
        **options: Parser options

    Returns:
        HTML string
    """
    parser = MarkdownParser(options)
    return parser.parse_to_html(text)
