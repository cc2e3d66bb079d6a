"""
List nesting tracker for the Markdown Preview engine
"""

from .state import ListContext, ListTag, OutputBuffer, ParseState


class ListNestingTracker:
    """
    Keeps the stack of open ``<ul>``/``<ol>`` elements in sync with list items.

    The nesting level of an item is its indentation divided by
    ``indent_width``. Before an item is emitted the stack is reconciled so
    that it holds exactly ``level + 1`` lists; a marker type change at the
    deepest level reopens only that level.
    """

    def __init__(self, state: ParseState, output: OutputBuffer, indent_width: int = 2):
        self.state = state
        self.output = output
        self.indent_width = max(1, indent_width)

    def level_for_indent(self, indent: int) -> int:
        return indent // self.indent_width

    def add_item(self, indent: int, ordered: bool, content_html: str) -> None:
        """
        Emit a list item, opening, closing or retyping lists as needed.

        Args:
            indent: Width of the whitespace before the list marker
            ordered: True for ``N.`` markers
            content_html: Inline-formatted item text
        """
        level = self.level_for_indent(indent)
        tag = ListTag.ORDERED if ordered else ListTag.UNORDERED
        stack = self.state.list_stack

        while len(stack) > level + 1:
            self._close_top()

        while len(stack) < level + 1:
            stack.append(ListContext(tag, len(stack)))
            self.output.append(f"<{tag.value}>")

        current = stack[level]
        if current.tag != tag:
            self.output.append(f"</{current.tag.value}>")
            stack[level] = ListContext(tag, level)
            self.output.append(f"<{tag.value}>")

        self.output.append(f"<li>{content_html}</li>")

    def close_all(self) -> None:
        """Close every open list, innermost first."""
        while self.state.list_stack:
            self._close_top()

    def _close_top(self) -> None:
        context = self.state.list_stack.pop()
        self.output.append(f"</{context.tag.value}>")
