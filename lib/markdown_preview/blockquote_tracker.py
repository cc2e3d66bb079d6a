"""
Blockquote depth tracker for the Markdown Preview engine
"""

from .state import OutputBuffer, ParseState


class BlockquoteDepthTracker:
    """Opens and closes ``<blockquote>`` wrappers as the ``>`` depth changes."""

    def __init__(self, state: ParseState, output: OutputBuffer):
        self.state = state
        self.output = output

    def set_depth(self, depth: int) -> None:
        """Adjust the number of open wrappers to ``depth``."""
        depth = max(0, depth)
        while self.state.quote_depth < depth:
            self.output.append("<blockquote>")
            self.state.quote_depth += 1
        while self.state.quote_depth > depth:
            self.output.append("</blockquote>")
            self.state.quote_depth -= 1

    def add_line(self, depth: int, content_html: str) -> None:
        """
        Handle a quoted line.

        Args:
            depth: Number of ``>`` markers on the line
            content_html: Inline-formatted text after the markers, may be empty
        """
        self.set_depth(depth)
        if content_html:
            self.output.append(f"<p>{content_html}</p>")

    def close_all(self) -> None:
        self.set_depth(0)
