"""
Block dispatcher for the Markdown Preview engine

This module walks the document line by line, classifies each line and hands
it to the matching block handler: fenced code, headers, horizontal rules,
lists, blockquotes, blank lines and paragraph text.
"""

from typing import Any, Callable, Dict, List, Optional

from .blockquote_tracker import BlockquoteDepthTracker
from .fence_handler import FenceHandler
from .inline_parser import InlineFormatter
from .line_classifier import ClassifiedLine, LineKind, classify_line
from .list_tracker import ListNestingTracker
from .state import OutputBuffer, ParagraphAccumulator, ParseState, ReferenceDefinition


class BlockParser:
    """
    Second pass of the engine: turns document lines into HTML fragments.

    A BlockParser is built for one document and discarded afterwards; all of
    its state lives in the instance, so separate calls never share anything.
    """

    def __init__(self, lines: List[str], reference_table: Optional[Dict[str, ReferenceDefinition]] = None,
                 options: Optional[Dict[str, Any]] = None):
        self.lines = lines
        self.options = options or {}

        escape_slash = bool(self.options.get("escape_slash", False))

        self.state = ParseState(reference_table=dict(reference_table or {}))
        self.output = OutputBuffer()
        self.paragraph = ParagraphAccumulator()

        self.inline = InlineFormatter(self.state.reference_table, escape_slash=escape_slash)
        self.fence = FenceHandler(
            self.state,
            self.output,
            code_class_prefix=self.options.get("code_class_prefix", "language-"),
            escape_slash=escape_slash,
        )
        self.lists = ListNestingTracker(self.state, self.output, int(self.options.get("list_indent_width", 2)))
        self.quotes = BlockquoteDepthTracker(self.state, self.output)

        self._handlers: Dict[LineKind, Callable[[ClassifiedLine], None]] = {
            LineKind.FENCE_OPEN: self._handle_fence_open,
            LineKind.REFERENCE_DEFINITION: self._handle_reference_definition,
            LineKind.HEADER: self._handle_header,
            LineKind.HORIZONTAL_RULE: self._handle_horizontal_rule,
            LineKind.LIST_ITEM: self._handle_list_item,
            LineKind.BLOCKQUOTE: self._handle_blockquote,
            LineKind.BLANK: self._handle_blank,
            LineKind.PARAGRAPH: self._handle_paragraph,
        }

    def parse(self) -> str:
        """
        Render all lines.

        Returns:
            HTML fragments joined with newlines
        """
        for index, line in enumerate(self.lines):
            self.state.line_cursor = index
            self.parse_line(line)
        self.finish()
        return self.output.join()

    def parse_line(self, line: str) -> None:
        """Classify one line and dispatch it."""
        if self.fence.handle_line(line):
            return
        classified = classify_line(line)
        self._handlers[classified.kind](classified)

    def finish(self) -> None:
        """Close every construct still open at end of input."""
        self.fence.force_close()
        self.lists.close_all()
        self.quotes.close_all()
        self.paragraph.flush(self.output)

    def _close_blocks(self, keep_lists: bool = False, keep_quotes: bool = False) -> None:
        self.paragraph.flush(self.output)
        if not keep_lists:
            self.lists.close_all()
        if not keep_quotes:
            self.quotes.close_all()

    def _handle_fence_open(self, line: ClassifiedLine) -> None:
        self._close_blocks()
        self.fence.open(line.language)

    def _handle_reference_definition(self, line: ClassifiedLine) -> None:
        # Collected in the first pass
        pass

    def _handle_header(self, line: ClassifiedLine) -> None:
        self._close_blocks()
        self.output.append(f"<h{line.level}>{self.inline.format(line.text)}</h{line.level}>")

    def _handle_horizontal_rule(self, line: ClassifiedLine) -> None:
        self._close_blocks()
        self.output.append("<hr>")

    def _handle_list_item(self, line: ClassifiedLine) -> None:
        self._close_blocks(keep_lists=True)
        self.lists.add_item(line.indent, line.ordered, self.inline.format(line.text))

    def _handle_blockquote(self, line: ClassifiedLine) -> None:
        self._close_blocks(keep_quotes=True)
        self.quotes.add_line(line.level, self.inline.format(line.text))

    def _handle_blank(self, line: ClassifiedLine) -> None:
        self._close_blocks()

    def _handle_paragraph(self, line: ClassifiedLine) -> None:
        if self.state.list_stack or self.state.quote_depth:
            self._close_blocks()
        for fragment in self.inline.format_paragraph_line(line.raw):
            self.paragraph.add(fragment)
