"""
HTML escaping for the Markdown Preview engine

The inline formatter never mixes generated markup with user text directly.
Every tag it produces is stored in a ``GeneratedTagTable`` and only a private
placeholder is left in the working string. After all substitutions ran, the
string is split by a two-token lexer into ``TEXT`` and ``TAG`` tokens: text
tokens are escaped, tag tokens are replaced with the stored markup.

Placeholders are built from Unicode private use characters which are stripped
from the input before parsing, so user text can never forge one.
"""

import html
import re
from enum import Enum
from typing import Iterator, List, NamedTuple, Optional

PLACEHOLDER_START = "\ue000"
PLACEHOLDER_END = "\ue001"

_PLACEHOLDER_PATTERN = re.compile(f"{PLACEHOLDER_START}(\\d+){PLACEHOLDER_END}")
_RESERVED_CHARS = re.compile(f"[{PLACEHOLDER_START}{PLACEHOLDER_END}]")


def escape_text(text: str, escape_slash: bool = False) -> str:
    """
    Escape user text for use between tags.

    Args:
        text: Raw user text
        escape_slash: Also replace ``/`` with ``&#x2F;``

    Returns:
        Text with ``& < > " '`` (and optionally ``/``) replaced by entities
    """
    if not text:
        return ""
    escaped = html.escape(text, quote=True)
    # "/" cannot start markup once "<" is escaped, so it stays readable
    # ("&lt;/script&gt;") unless a consumer asks for the stricter form
    if escape_slash:
        escaped = escaped.replace("/", "&#x2F;")
    return escaped


def escape_attribute(value: str) -> str:
    """Escape a value for a double-quoted HTML attribute."""
    return html.escape(value, quote=True)


def strip_reserved(text: str) -> str:
    """Replace placeholder delimiter characters found in user input."""
    return _RESERVED_CHARS.sub("\ufffd", text)


class InlineTokenType(Enum):
    """Token kinds produced by the generated-tag lexer."""
    TEXT = "text"
    TAG = "tag"


class InlineToken(NamedTuple):
    """Text run or reference to a generated tag."""
    type: InlineTokenType
    content: str


class GeneratedTagTable:
    """
    Out-of-band storage for markup produced by the inline formatter.

    Each entry keeps the generated HTML and the markdown source it replaced;
    the source is needed when a later step (code spans) has to show the
    original characters instead of the markup.
    """

    def __init__(self):
        self._html: List[str] = []
        self._sources: List[str] = []

    def protect(self, markup: str, source: str) -> str:
        """Store markup and return the placeholder that stands for it."""
        self._html.append(markup)
        self._sources.append(source)
        return f"{PLACEHOLDER_START}{len(self._html) - 1}{PLACEHOLDER_END}"

    def markup(self, index: int) -> str:
        return self._html[index]

    def restore_source(self, text: str) -> str:
        """Replace placeholders in text with the markdown they were built from."""
        return _PLACEHOLDER_PATTERN.sub(lambda m: self.restore_source(self._sources[int(m.group(1))]), text)

    def __len__(self) -> int:
        return len(self._html)


def tokenize_generated(text: str, table: Optional[GeneratedTagTable] = None) -> Iterator[InlineToken]:
    """
    Split a working string into text runs and generated tags.

    Args:
        text: String produced by the inline substitution steps
        table: Table the placeholders refer to; tag tokens carry the stored
            markup when given, the bare placeholder otherwise

    Yields:
        InlineToken objects in source order
    """
    pos = 0
    for match in _PLACEHOLDER_PATTERN.finditer(text):
        if match.start() > pos:
            yield InlineToken(InlineTokenType.TEXT, text[pos:match.start()])
        content = table.markup(int(match.group(1))) if table is not None else match.group(0)
        yield InlineToken(InlineTokenType.TAG, content)
        pos = match.end()
    if pos < len(text):
        yield InlineToken(InlineTokenType.TEXT, text[pos:])


def render_tokens(text: str, table: GeneratedTagTable, escape_slash: bool = False) -> str:
    """Escape every text run and splice the generated markup back in."""
    parts = []
    for token in tokenize_generated(text, table):
        if token.type == InlineTokenType.TEXT:
            parts.append(escape_text(token.content, escape_slash))
        else:
            parts.append(token.content)
    return "".join(parts)
