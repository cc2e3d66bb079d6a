"""
Parse state for the Markdown Preview engine

This module defines the per-call state objects the block dispatcher and its
handlers share: the parse state itself, the list context stack entries, the
output fragment buffer, the paragraph accumulator and the statistics record.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, NamedTuple, Optional


class ListTag(Enum):
    """HTML list element kinds."""
    UNORDERED = "ul"
    ORDERED = "ol"


class ListContext(NamedTuple):
    """An open list element on the list stack."""
    tag: ListTag
    level: int


class ReferenceDefinition(NamedTuple):
    """Target of a ``[label]: url "title"`` definition."""
    url: str
    title: Optional[str] = None


@dataclass
class ParseState:
    """
    Mutable state of a single render call.

    Created fresh for every call and never shared, so a parser instance can
    be used from several threads at once.
    """
    in_code_block: bool = False
    code_language: Optional[str] = None
    quote_depth: int = 0
    list_stack: List[ListContext] = field(default_factory=list)
    reference_table: Dict[str, ReferenceDefinition] = field(default_factory=dict)
    line_cursor: int = 0


class OutputBuffer:
    """Append-only sequence of rendered block-level HTML fragments."""

    def __init__(self):
        self._fragments: List[str] = []

    def append(self, fragment: str) -> None:
        self._fragments.append(fragment)

    def join(self) -> str:
        return "\n".join(self._fragments)

    def __len__(self) -> int:
        return len(self._fragments)

    def __iter__(self):
        return iter(self._fragments)


class ParagraphAccumulator:
    """
    Inline-formatted fragments waiting to be wrapped into a ``<p>``.

    Fragments are joined with a single space when flushed.
    """

    def __init__(self):
        self._fragments: List[str] = []

    def add(self, fragment: str) -> None:
        self._fragments.append(fragment)

    def flush(self, output: OutputBuffer) -> None:
        """Emit the pending paragraph, if any, and clear the accumulator."""
        if not self._fragments:
            return
        output.append(f"<p>{' '.join(self._fragments)}</p>")
        self._fragments = []

    def __bool__(self) -> bool:
        return bool(self._fragments)


@dataclass
class ParseStats:
    """Statistics of a finished render call."""
    total_lines: int = 0
    lines_processed: int = 0
    link_references: int = 0
    html_fragments: int = 0
    parse_time_ms: float = 0.0

    def to_dict(self) -> Dict[str, float]:
        return {
            "total_lines": self.total_lines,
            "lines_processed": self.lines_processed,
            "link_references": self.link_references,
            "html_fragments": self.html_fragments,
            "parse_time_ms": self.parse_time_ms,
        }
