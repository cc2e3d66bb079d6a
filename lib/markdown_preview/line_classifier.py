"""
Line classifier for the Markdown Preview engine

Block syntax overlaps (``* * *`` is both a rule and a list item, ``- [a]: b``
looks like a definition), so classification order matters. The order is kept
as data in ``LINE_CLASSIFIERS``: the first classifier that accepts a line
decides its kind.
"""

import re
from enum import Enum
from typing import Callable, List, NamedTuple, Optional, Tuple

from .references import is_reference_definition


class LineKind(Enum):
    """Kinds of lines recognized outside fenced code blocks."""
    FENCE_OPEN = "fence_open"
    REFERENCE_DEFINITION = "reference_definition"
    HEADER = "header"
    HORIZONTAL_RULE = "horizontal_rule"
    LIST_ITEM = "list_item"
    BLOCKQUOTE = "blockquote"
    BLANK = "blank"
    PARAGRAPH = "paragraph"


class ClassifiedLine(NamedTuple):
    """A source line together with what the classifier extracted from it."""
    kind: LineKind
    raw: str
    text: str = ""
    level: int = 0
    indent: int = 0
    ordered: bool = False
    language: Optional[str] = None


FENCE_OPEN_PATTERN = re.compile(r"^```[ \t]*(\w[\w+#.-]*)?.*$")
FENCE_CLOSE_PATTERN = re.compile(r"^```\s*$")
HEADER_PATTERN = re.compile(r"^(#{1,6})\s+(.*)$")
HORIZONTAL_RULE_PATTERN = re.compile(r"^(?:(?:\*[ \t]*){3,}|(?:-[ \t]*){3,}|(?:_[ \t]*){3,})$")
UNORDERED_LIST_PATTERN = re.compile(r"^([ \t]*)[*+-]\s+(\S.*)$")
ORDERED_LIST_PATTERN = re.compile(r"^([ \t]*)\d+\.\s+(\S.*)$")
BLOCKQUOTE_PATTERN = re.compile(r"^[ \t]*((?:>[ \t]*)+)(.*)$")


def _classify_fence_open(line: str, stripped: str) -> Optional[ClassifiedLine]:
    match = FENCE_OPEN_PATTERN.match(stripped)
    if not match:
        return None
    return ClassifiedLine(LineKind.FENCE_OPEN, line, language=match.group(1))


def _classify_reference_definition(line: str, stripped: str) -> Optional[ClassifiedLine]:
    if not is_reference_definition(line):
        return None
    return ClassifiedLine(LineKind.REFERENCE_DEFINITION, line)


def strip_closing_hashes(text: str) -> str:
    """Remove a trailing ``#`` run from header text if whitespace precedes it."""
    without_hashes = text.rstrip("#")
    if without_hashes != text and without_hashes[-1:].isspace():
        return without_hashes.rstrip()
    return text


def _classify_header(line: str, stripped: str) -> Optional[ClassifiedLine]:
    match = HEADER_PATTERN.match(stripped)
    if not match:
        return None
    text = strip_closing_hashes(match.group(2).rstrip())
    return ClassifiedLine(LineKind.HEADER, line, text=text.strip(), level=len(match.group(1)))


def _classify_horizontal_rule(line: str, stripped: str) -> Optional[ClassifiedLine]:
    if not HORIZONTAL_RULE_PATTERN.match(stripped):
        return None
    return ClassifiedLine(LineKind.HORIZONTAL_RULE, line)


def _classify_list_item(line: str, stripped: str) -> Optional[ClassifiedLine]:
    match = UNORDERED_LIST_PATTERN.match(line)
    ordered = False
    if not match:
        match = ORDERED_LIST_PATTERN.match(line)
        ordered = True
    if not match:
        return None
    return ClassifiedLine(
        LineKind.LIST_ITEM,
        line,
        text=match.group(2).strip(),
        indent=len(match.group(1)),
        ordered=ordered,
    )


def _classify_blockquote(line: str, stripped: str) -> Optional[ClassifiedLine]:
    match = BLOCKQUOTE_PATTERN.match(line)
    if not match:
        return None
    return ClassifiedLine(
        LineKind.BLOCKQUOTE,
        line,
        text=match.group(2).strip(),
        level=match.group(1).count(">"),
    )


def _classify_blank(line: str, stripped: str) -> Optional[ClassifiedLine]:
    if stripped:
        return None
    return ClassifiedLine(LineKind.BLANK, line)


def _classify_paragraph(line: str, stripped: str) -> Optional[ClassifiedLine]:
    return ClassifiedLine(LineKind.PARAGRAPH, line, text=stripped)


Classifier = Callable[[str, str], Optional[ClassifiedLine]]

# Precedence of block constructs, first match wins
LINE_CLASSIFIERS: List[Tuple[LineKind, Classifier]] = [
    (LineKind.FENCE_OPEN, _classify_fence_open),
    (LineKind.REFERENCE_DEFINITION, _classify_reference_definition),
    (LineKind.HEADER, _classify_header),
    (LineKind.HORIZONTAL_RULE, _classify_horizontal_rule),
    (LineKind.LIST_ITEM, _classify_list_item),
    (LineKind.BLOCKQUOTE, _classify_blockquote),
    (LineKind.BLANK, _classify_blank),
    (LineKind.PARAGRAPH, _classify_paragraph),
]


def classify_line(line: str) -> ClassifiedLine:
    """
    Classify a line that is not inside a fenced code block.

    Args:
        line: Source line without the trailing newline

    Returns:
        ClassifiedLine of the first matching kind; PARAGRAPH as fallback
    """
    stripped = line.strip()
    for _kind, classifier in LINE_CLASSIFIERS:
        classified = classifier(line, stripped)
        if classified is not None:
            return classified
    return ClassifiedLine(LineKind.PARAGRAPH, line, text=stripped)


def is_fence_close(line: str) -> bool:
    return FENCE_CLOSE_PATTERN.match(line.strip()) is not None
