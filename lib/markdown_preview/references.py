"""
Reference table builder for the Markdown Preview engine

First of the two passes: collects ``[label]: url`` definitions from the whole
document so reference links can point forward to definitions further down.
"""

import re
from typing import Dict, Iterable, Optional

from .state import ReferenceDefinition

# [label]: url "optional title", up to 3 leading spaces
REFERENCE_DEFINITION_PATTERN = re.compile(
    r"^[ ]{0,3}\[([^\]]+)\]:[ \t]*(\S.*)$"
)
_TITLE_PATTERN = re.compile(r"""^(\S+)\s+(?:"([^"]*)"|'([^']*)'|\(([^)]*)\))$""")


def parse_reference_definition(line: str) -> Optional[tuple]:
    """
    Parse a single definition line.

    Returns:
        (label, ReferenceDefinition) or None if the line is not a definition
    """
    match = REFERENCE_DEFINITION_PATTERN.match(line)
    if not match:
        return None

    label = match.group(1).strip().lower()
    if not label:
        return None

    target = match.group(2).rstrip()
    title = None
    title_match = _TITLE_PATTERN.match(target)
    if title_match:
        target = title_match.group(1)
        title = next(group for group in title_match.groups()[1:] if group is not None)

    if target.startswith("<") and target.endswith(">"):
        target = target[1:-1]

    return label, ReferenceDefinition(target, title)


def is_reference_definition(line: str) -> bool:
    return REFERENCE_DEFINITION_PATTERN.match(line) is not None


def collect_references(lines: Iterable[str]) -> Dict[str, ReferenceDefinition]:
    """
    Build the reference table from all document lines.

    Labels are lowercased; a later definition of the same label replaces an
    earlier one. Lines that are not well-formed definitions are ignored.

    Args:
        lines: Document lines

    Returns:
        Mapping of lowercased label to its definition
    """
    table: Dict[str, ReferenceDefinition] = {}
    for line in lines:
        parsed = parse_reference_definition(line)
        if parsed is not None:
            label, definition = parsed
            table[label] = definition
    return table
