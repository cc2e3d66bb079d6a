"""
Fenced code block handling for the Markdown Preview engine
"""

import logging
from typing import List, Optional

from .escaping import escape_attribute, escape_text
from .line_classifier import is_fence_close
from .state import OutputBuffer, ParseState

logger = logging.getLogger(__name__)


class FenceHandler:
    """
    Tracks entry into and exit from fenced code blocks.

    Lines inside a fence are escaped verbatim; no block or inline syntax is
    recognized there. The whole block is emitted as a single fragment once the
    fence closes, or when the document ends with the fence still open.
    """

    def __init__(self, state: ParseState, output: OutputBuffer, code_class_prefix: str = "language-",
                 escape_slash: bool = False):
        self.state = state
        self.output = output
        self.code_class_prefix = code_class_prefix
        self.escape_slash = escape_slash
        self._lines: List[str] = []

    def open(self, language: Optional[str]) -> None:
        """Enter fence mode; the caller has already flushed pending blocks."""
        self.state.in_code_block = True
        self.state.code_language = language or None
        self._lines = []

    def handle_line(self, line: str) -> bool:
        """
        Consume a line while inside a fence.

        Returns:
            True if the line belonged to the fence, False if no fence is open
        """
        if not self.state.in_code_block:
            return False

        if is_fence_close(line):
            self.close()
        else:
            self._lines.append(escape_text(line, self.escape_slash))
        return True

    def close(self) -> None:
        """Emit the collected block and leave fence mode."""
        if not self.state.in_code_block:
            return

        if self.state.code_language:
            class_attr = f' class="{escape_attribute(self.code_class_prefix + self.state.code_language)}"'
        else:
            class_attr = ""
        content = "\n".join(self._lines)
        self.output.append(f"<pre><code{class_attr}>{content}</code></pre>")

        self.state.in_code_block = False
        self.state.code_language = None
        self._lines = []

    def force_close(self) -> None:
        """Close a fence left open at end of input."""
        if self.state.in_code_block:
            logger.debug(f"Unterminated code fence closed at line {self.state.line_cursor + 1}")
            self.close()
