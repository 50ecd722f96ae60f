"""Markdown block model and line classifier.

The classifier walks a list of lines and groups them into blocks. Each call to
``classify`` consumes at least one line, and lines are never shared between
blocks or skipped.
"""

import re
from dataclasses import dataclass
from typing import Iterator, Union


@dataclass(frozen=True)
class Heading:
    level: int
    text: str


@dataclass(frozen=True)
class Paragraph:
    text: str


@dataclass(frozen=True)
class Quote:
    text: str


@dataclass(frozen=True)
class ListItem:
    text: str
    ordered: bool


@dataclass(frozen=True)
class CodeBlock:
    lines: tuple[str, ...] = ()


@dataclass(frozen=True)
class HorizontalRule:
    pass


@dataclass(frozen=True)
class Table:
    rows: tuple[tuple[str, ...], ...] = ()


@dataclass(frozen=True)
class AsciiArtBlock:
    lines: tuple[str, ...] = ()


@dataclass(frozen=True)
class BlankLine:
    pass


Block = Union[
    Heading,
    Paragraph,
    Quote,
    ListItem,
    CodeBlock,
    HorizontalRule,
    Table,
    AsciiArtBlock,
    BlankLine,
]

HEADING_RE = re.compile(r"^(#+)\s*(.*)$")
OUTLINE_PREFIX_RE = re.compile(r"^(?:\d+\.)+\d*\s+")
QUOTE_RE = re.compile(r"^>\s*")
ORDERED_RE = re.compile(r"^\s*\d+\.\s+")
UNORDERED_RE = re.compile(r"^\s*[-*+]\s+")
HR_RE = re.compile(r"^[-*_]{3,}$")
TABLE_SEPARATOR_RE = re.compile(r"^\s*\|[\s\-:]+\|\s*$")

BOX_DRAWING_CHARS = frozenset("─│┌┐└┘├┤┬┴┼═║╔╗╚╝╠╣╦╩╬")
ARROW_CHARS = frozenset("↓→←↑▼►◄▲")

# Plain-ASCII diagram shapes
ASCII_ART_PATTERNS = [
    re.compile(r"\+[-=]{2,}\+"),                       # +---+ box edges
    re.compile(r"^\s*\[[^\]]+\]\s*$"),                 # [Label] on its own
    re.compile(r"\[[^\]]+\]\s*(?:-{2,}|={2,}|<-+|-+>)"),  # [A] --> ...
    re.compile(r"(?:-{2,}|={2,}|<-+|-+>)\s*\[[^\]]+\]"),  # ... --> [B]
    re.compile(r"\|\s*[A-Z][A-Z0-9_]*\s+-"),           # | WORD -
    re.compile(r"-{2,}>|<-{2,}|={2,}>"),               # --> <-- ==>
]


def is_ascii_art_line(line: str) -> bool:
    """Check whether a line looks like part of a text diagram.

    Lines that both start and end with ``|`` belong to tables and never count.
    """
    stripped = line.strip()
    if not stripped:
        return False
    if stripped.startswith("|") and stripped.endswith("|"):
        return False
    if any(ch in BOX_DRAWING_CHARS or ch in ARROW_CHARS for ch in stripped):
        return True
    return any(pattern.search(stripped) for pattern in ASCII_ART_PATTERNS)


def strip_heading_number(text: str) -> str:
    """Remove a leading outline number such as ``1.``, ``2.3`` or ``4.1.2.``."""
    return OUTLINE_PREFIX_RE.sub("", text, count=1)


def split_table_row(line: str) -> tuple[str, ...]:
    """Split a pipe-delimited row into trimmed cell texts.

    Outer pipes are optional; empty inner cells are kept.
    """
    stripped = line.strip()
    if stripped.startswith("|"):
        stripped = stripped[1:]
    if stripped.endswith("|"):
        stripped = stripped[:-1]
    return tuple(cell.strip() for cell in stripped.split("|"))


def _classify_code(lines: list[str], index: int) -> tuple[CodeBlock, int]:
    body = []
    i = index + 1
    while i < len(lines) and not lines[i].strip().startswith("```"):
        body.append(lines[i])
        i += 1
    # Closing fence, if present, belongs to this block too
    end = min(i + 1, len(lines))
    return CodeBlock(tuple(body)), end - index


def _classify_table(lines: list[str], index: int) -> tuple[Table, int]:
    i = index + 1
    while i < len(lines) and "|" in lines[i]:
        i += 1
    rows = tuple(
        split_table_row(line)
        for line in lines[index:i]
        if not TABLE_SEPARATOR_RE.match(line)
    )
    return Table(rows), i - index


def _classify_ascii_art(lines: list[str], index: int) -> tuple[AsciiArtBlock, int]:
    end = index + 1
    i = index + 1
    while i < len(lines):
        if is_ascii_art_line(lines[i]):
            i += 1
            end = i
        elif not lines[i].strip():
            # Blank lines only join the block if a diagram line follows them
            i += 1
        else:
            break
    return AsciiArtBlock(tuple(lines[index:end])), end - index


def classify(lines: list[str], index: int) -> tuple[Block, int]:
    """Classify the block starting at ``lines[index]``.

    Returns:
        Tuple of (block, number of lines consumed); the count is always >= 1
    """
    line = lines[index]
    stripped = line.strip()

    if not stripped:
        return BlankLine(), 1

    if stripped.startswith("```"):
        return _classify_code(lines, index)

    if stripped.startswith("#"):
        match = HEADING_RE.match(stripped)
        level = min(len(match.group(1)), 6)
        text = strip_heading_number(match.group(2).strip())
        return Heading(level, text), 1

    if stripped.startswith(">"):
        return Quote(QUOTE_RE.sub("", stripped, count=1).strip()), 1

    if ORDERED_RE.match(line):
        return ListItem(ORDERED_RE.sub("", line, count=1).strip(), ordered=True), 1

    if UNORDERED_RE.match(line):
        return ListItem(UNORDERED_RE.sub("", line, count=1).strip(), ordered=False), 1

    if HR_RE.match(stripped):
        return HorizontalRule(), 1

    art = is_ascii_art_line(line)
    if "|" in line and not art:
        return _classify_table(lines, index)

    if art:
        return _classify_ascii_art(lines, index)

    return Paragraph(stripped), 1


def split_lines(text: str) -> list[str]:
    """Split Markdown source into lines, dropping CR from CRLF endings."""
    return [line.rstrip("\r") for line in text.split("\n")]


def iter_blocks(lines: list[str]) -> Iterator[tuple[Block, int, int]]:
    """Yield (block, start index, lines consumed) in document order."""
    i = 0
    while i < len(lines):
        block, consumed = classify(lines, i)
        consumed = max(consumed, 1)
        yield block, i, consumed
        i += consumed


def parse_blocks(text: str) -> list[Block]:
    """Parse Markdown text into a list of blocks."""
    return [block for block, _, _ in iter_blocks(split_lines(text))]
