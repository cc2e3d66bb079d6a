"""
Inline formatter for the Markdown Preview engine

This module applies the inline substitution pipeline to the text of a block:

1. images ``![alt](src)``
2. inline links ``[text](url)``
3. reference links ``[text][label]``
4. code spans ```code```
5. strong emphasis ``***text***``, ``**text**``, ``__text__``
6. emphasis ``*text*``, ``_text_``
7. strikethrough ``~~text~~``

Each step works on the output of the previous one. Generated markup is kept
out of band (see ``escaping.GeneratedTagTable``) and every construct is
rendered as one protected unit, so tags always nest properly and user text
is escaped exactly once.
"""

import functools
import logging
import re
from typing import Callable, Dict, List, NamedTuple, Optional, Pattern, Tuple

from .escaping import GeneratedTagTable, escape_attribute, escape_text, render_tokens, strip_reserved
from .state import ReferenceDefinition

logger = logging.getLogger(__name__)

IMAGE_PATTERN = re.compile(r"!\[([^\[\]]*)\]\(([^()]+)\)")
INLINE_LINK_PATTERN = re.compile(r"\[([^\[\]]*)\]\(([^()]+)\)")
REFERENCE_LINK_PATTERN = re.compile(r"\[([^\[\]]*)\]\[([^\[\]]*)\]")
CODE_SPAN_PATTERN = re.compile(r"`([^`\n]+)`")
STRONG_EMPHASIS_PATTERN = re.compile(r"\*\*\*(?!\s)((?:(?!\*\*\*).)+?)(?<!\s)\*\*\*")
STRONG_ASTERISK_PATTERN = re.compile(r"\*\*(?!\s)((?:(?!\*\*).)+?)(?<!\s)\*\*")
STRONG_UNDERSCORE_PATTERN = re.compile(r"(?<!\w)__(?!\s)((?:(?!__).)+?)(?<!\s)__(?!\w)")
EMPHASIS_ASTERISK_PATTERN = re.compile(r"\*(?!\s)((?:(?!\*).)+?)(?<!\s)\*")
EMPHASIS_UNDERSCORE_PATTERN = re.compile(r"(?<!\w)_(?!\s)((?:(?!_).)+?)(?<!\s)_(?!\w)")
STRIKETHROUGH_PATTERN = re.compile(r"~~(?!\s)((?:(?!~~).)+?)(?<!\s)~~")
HARD_BREAK_MIN_SPACES = 2

_DESTINATION_PATTERN = re.compile(r"""^<?([^\s<>]*)>?(?:\s+(?:"([^"]*)"|'([^']*)'))?$""")
_UNSAFE_SCHEMES = ("javascript:", "vbscript:", "data:")
_SCHEME_NOISE = re.compile(r"[\x00-\x20]")


class InlineStage(NamedTuple):
    """One substitution step of the pipeline."""
    name: str
    pattern: Pattern[str]
    handler: Callable[..., str]


def split_destination(destination: str) -> Tuple[str, Optional[str]]:
    """Split ``url "title"`` into its parts."""
    destination = destination.strip()
    match = _DESTINATION_PATTERN.match(destination)
    if not match:
        return destination, None
    title = match.group(2) if match.group(2) is not None else match.group(3)
    return match.group(1), title


def sanitize_url(url: str, allow_data_images: bool = False) -> str:
    """Replace script-capable URLs with ``#``."""
    normalized = _SCHEME_NOISE.sub("", url).lower()
    if allow_data_images and normalized.startswith("data:image/"):
        return url
    if normalized.startswith(_UNSAFE_SCHEMES):
        logger.debug(f"Dropped unsafe URL scheme in '{url[:32]}'")
        return "#"
    return url


class InlineFormatter:
    """
    Formatter for inline Markdown elements.

    The reference table is consulted for ``[text][label]`` links; labels that
    are not defined produce ``href="#"``.
    """

    def __init__(self, reference_table: Optional[Dict[str, ReferenceDefinition]] = None,
                 escape_slash: bool = False):
        self.reference_table = reference_table or {}
        self.escape_slash = escape_slash

        self._stages: List[InlineStage] = [
            InlineStage("image", IMAGE_PATTERN, self._replace_image),
            InlineStage("link", INLINE_LINK_PATTERN, self._replace_link),
            InlineStage("reference_link", REFERENCE_LINK_PATTERN, self._replace_reference_link),
            InlineStage("code_span", CODE_SPAN_PATTERN, self._replace_code_span),
            InlineStage("strong_emphasis", STRONG_EMPHASIS_PATTERN, self._replace_strong_emphasis),
            InlineStage("strong_asterisk", STRONG_ASTERISK_PATTERN, self._replace_strong),
            InlineStage("strong_underscore", STRONG_UNDERSCORE_PATTERN, self._replace_strong),
            InlineStage("emphasis_asterisk", EMPHASIS_ASTERISK_PATTERN, self._replace_emphasis),
            InlineStage("emphasis_underscore", EMPHASIS_UNDERSCORE_PATTERN, self._replace_emphasis),
            InlineStage("strikethrough", STRIKETHROUGH_PATTERN, self._replace_strikethrough),
        ]
        # Link text is formatted from code spans onwards
        self._link_text_stage = self.stage_names.index("code_span")

    @property
    def stage_names(self) -> List[str]:
        return [stage.name for stage in self._stages]

    def format(self, text: str) -> str:
        """
        Format inline content and escape the remaining user text.

        Args:
            text: Raw text of a header, list item, quote or paragraph line

        Returns:
            HTML with all user text escaped
        """
        if not text:
            return ""
        return self._render(strip_reserved(text), GeneratedTagTable(), 0)

    def format_paragraph_line(self, line: str) -> List[str]:
        """
        Format a paragraph line, honouring a trailing hard break.

        Returns:
            One fragment, or the formatted text followed by ``<br>`` when the
            line ends in two or more spaces
        """
        content = line.rstrip()
        if len(line) - len(content) >= HARD_BREAK_MIN_SPACES:
            return [self.format(content.strip()), "<br>"]
        return [self.format(content.strip())]

    def _render(self, text: str, table: GeneratedTagTable, start: int) -> str:
        for index in range(start, len(self._stages)):
            stage = self._stages[index]
            replace = functools.partial(stage.handler, table=table, next_stage=index + 1)
            text = stage.pattern.sub(replace, text)
        return render_tokens(text, table, self.escape_slash)

    def _replace_image(self, match: re.Match, table: GeneratedTagTable, next_stage: int) -> str:
        alt = table.restore_source(match.group(1))
        src, title = split_destination(table.restore_source(match.group(2)))
        attrs = [f'src="{escape_attribute(sanitize_url(src, allow_data_images=True))}"',
                 f'alt="{escape_attribute(alt)}"']
        if title:
            attrs.append(f'title="{escape_attribute(title)}"')
        return table.protect(f"<img {' '.join(attrs)}>", match.group(0))

    def _replace_link(self, match: re.Match, table: GeneratedTagTable, next_stage: int) -> str:
        url, title = split_destination(table.restore_source(match.group(2)))
        return self._link(match, table, url, title)

    def _replace_reference_link(self, match: re.Match, table: GeneratedTagTable, next_stage: int) -> str:
        label = table.restore_source(match.group(2) or match.group(1)).strip().lower()
        definition = self.reference_table.get(label)
        if definition is None:
            return self._link(match, table, "#", None)
        return self._link(match, table, definition.url, definition.title)

    def _link(self, match: re.Match, table: GeneratedTagTable, url: str, title: Optional[str]) -> str:
        content = self._render(match.group(1), table, self._link_text_stage)
        attrs = [f'href="{escape_attribute(sanitize_url(url))}"']
        if title:
            attrs.append(f'title="{escape_attribute(title)}"')
        return table.protect(f"<a {' '.join(attrs)}>{content}</a>", match.group(0))

    def _replace_code_span(self, match: re.Match, table: GeneratedTagTable, next_stage: int) -> str:
        code = table.restore_source(match.group(1))
        return table.protect(f"<code>{escape_text(code, self.escape_slash)}</code>", match.group(0))

    def _replace_strong_emphasis(self, match: re.Match, table: GeneratedTagTable, next_stage: int) -> str:
        content = self._render(match.group(1), table, next_stage)
        return table.protect(f"<strong><em>{content}</em></strong>", match.group(0))

    def _replace_strong(self, match: re.Match, table: GeneratedTagTable, next_stage: int) -> str:
        content = self._render(match.group(1), table, next_stage)
        return table.protect(f"<strong>{content}</strong>", match.group(0))

    def _replace_emphasis(self, match: re.Match, table: GeneratedTagTable, next_stage: int) -> str:
        content = self._render(match.group(1), table, next_stage)
        return table.protect(f"<em>{content}</em>", match.group(0))

    def _replace_strikethrough(self, match: re.Match, table: GeneratedTagTable, next_stage: int) -> str:
        content = self._render(match.group(1), table, next_stage)
        return table.protect(f"<del>{content}</del>", match.group(0))
