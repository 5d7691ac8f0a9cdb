"""Marker-based parsing of free-text model responses.

The generation prompts ask the model to label each part of its answer with a
fixed marker such as ``SYNOPSIS:`` or ``IMAGE PROMPT:``. A `MarkerParser` is
built from a small grammar of those markers and pulls out each section.
Nothing here raises on malformed content: a section that cannot be found, or
that is blank, takes its default value and is reported in
`ParseResult.defaulted` instead.
"""

import re
from dataclasses import dataclass, field
from typing import Dict, List, Pattern, Sequence

SCENE_HEADER = re.compile(r"^[ \t]*---[ \t]*SCENE[ \t]*(\d+)[ \t]*---", re.MULTILINE)
SCENE_END = "---END SCENE---"


@dataclass(frozen=True)
class Section:
    """One labelled section of a response."""

    name: str
    marker: str
    default: str = ""
    multiline: bool = True


@dataclass
class ParseResult:
    """Section values plus the names of sections that fell back to defaults."""

    values: Dict[str, str] = field(default_factory=dict)
    defaulted: List[str] = field(default_factory=list)

    def __getitem__(self, name: str) -> str:
        return self.values[name]

    def get(self, name: str, default: str = "") -> str:
        return self.values.get(name, default)

    @property
    def complete(self) -> bool:
        """True when every section was found."""
        return not self.defaulted


class MarkerParser:
    """Extract labelled sections from free text.

    A marker only counts at the start of a line (leading whitespace is
    allowed). A multi-line section runs until the next line that starts with
    any marker of the grammar or one of the ``stops``; a single-line section
    ends with its line.
    """

    def __init__(self, sections: Sequence[Section], stops: Sequence[str] = ()) -> None:
        if not sections:
            raise ValueError("A parser needs at least one section")

        names = [section.name for section in sections]
        if len(set(names)) != len(names):
            raise ValueError(f"Duplicate section names: {names}")

        self._sections = tuple(sections)
        self._patterns = {
            section.name: re.compile(r"^[ \t]*" + re.escape(section.marker), re.MULTILINE)
            for section in self._sections
        }

        # Longest first so that overlapping markers resolve to the most specific one
        boundaries = sorted(
            {section.marker for section in self._sections} | set(stops),
            key=len,
            reverse=True,
        )
        self._boundary = re.compile(
            r"^[ \t]*(?:" + "|".join(re.escape(marker) for marker in boundaries) + ")",
            re.MULTILINE,
        )

    @property
    def sections(self) -> tuple:
        return self._sections

    def parse(self, text: str) -> ParseResult:
        """Parse ``text`` into a `ParseResult`.

        Args:
            text: Raw model output.

        Returns:
            Values for every section of the grammar, defaulted where missing.
        """
        text = (text or "").replace("\r\n", "\n")
        boundaries = [match.start() for match in self._boundary.finditer(text)]

        result = ParseResult()
        for section in self._sections:
            value = self._extract(text, section, boundaries)
            if value:
                result.values[section.name] = value
            else:
                result.values[section.name] = section.default
                result.defaulted.append(section.name)
        return result

    def _extract(self, text: str, section: Section, boundaries: List[int]) -> str:
        match = self._patterns[section.name].search(text)
        if match is None:
            return ""

        start = match.end()
        if not section.multiline:
            end = text.find("\n", start)
            return text[start:end if end != -1 else len(text)].strip()

        end = next((b for b in boundaries if b >= start), len(text))
        return text[start:end].strip()


def split_blocks(
    text: str,
    header: Pattern = SCENE_HEADER,
    end_marker: str = SCENE_END,
) -> List[str]:
    """Split numbered blocks such as ``---SCENE 1--- ... ---END SCENE---``.

    A block missing its end marker runs until the next header or the end of
    the text. Text outside any block is ignored.

    Args:
        text: Raw model output.
        header: Pattern matching the start of a block.
        end_marker: Literal marker closing a block.

    Returns:
        Block bodies in the order they appear.
    """
    text = (text or "").replace("\r\n", "\n")
    headers = list(header.finditer(text))

    blocks: List[str] = []
    for i, match in enumerate(headers):
        limit = headers[i + 1].start() if i + 1 < len(headers) else len(text)
        body = text[match.end():limit]
        end = body.find(end_marker)
        if end != -1:
            body = body[:end]
        blocks.append(body.strip())
    return blocks
