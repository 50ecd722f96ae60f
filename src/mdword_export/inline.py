"""Inline Markdown formatting (bold, italic, code, links) to OOXML runs."""

import re
from dataclasses import dataclass
from typing import Optional

CODE_FONT = "Consolas"
CODE_SIZE_HALF_POINTS = 20  # 10pt
LINK_COLOR = "0563C1"

# Priority order matters: when two patterns start at the same offset the
# earlier entry wins, so ***x*** is never read as **(*x)** or *(**x)*.
INLINE_PATTERNS = [
    ("bold_italic", re.compile(r"\*\*\*(.+?)\*\*\*")),
    ("bold", re.compile(r"\*\*(.+?)\*\*")),
    ("italic", re.compile(r"\*(.+?)\*")),
    ("code", re.compile(r"`(.+?)`")),
    ("link", re.compile(r"\[([^\]]+)\]\(([^)\s]+)\)")),
]


@dataclass(frozen=True)
class InlineRun:
    """A piece of text carrying one consistent format."""

    text: str
    bold: bool = False
    italic: bool = False
    code: bool = False
    link: Optional[str] = None


def escape_xml(text: str) -> str:
    """Escape XML reserved characters."""
    return (
        text.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
        .replace("'", "&apos;")
    )


def run_xml(
    text: str,
    *,
    bold: bool = False,
    italic: bool = False,
    font: Optional[str] = None,
    size: Optional[int] = None,
    color: Optional[str] = None,
    underline: bool = False,
) -> str:
    """Build a single <w:r> element. ``size`` is in half-points."""
    props = []
    if font:
        props.append(f'<w:rFonts w:ascii="{font}" w:hAnsi="{font}" w:cs="{font}"/>')
    if bold:
        props.append("<w:b/><w:bCs/>")
    if italic:
        props.append("<w:i/><w:iCs/>")
    if color:
        props.append(f'<w:color w:val="{color}"/>')
    if size:
        props.append(f'<w:sz w:val="{size}"/><w:szCs w:val="{size}"/>')
    if underline:
        props.append('<w:u w:val="single"/>')

    rpr = f"<w:rPr>{''.join(props)}</w:rPr>" if props else ""
    return f'<w:r>{rpr}<w:t xml:space="preserve">{escape_xml(text)}</w:t></w:r>'


def _next_match(text: str, pos: int):
    """Return (kind, match) for the leftmost pattern match at or after pos."""
    best = None
    for kind, pattern in INLINE_PATTERNS:
        match = pattern.search(text, pos)
        if match and (best is None or match.start() < best[1].start()):
            best = (kind, match)
    return best


def parse_inline(text: str) -> list[InlineRun]:
    """Split a line into styled runs.

    Single pass, no recursion: markers nested inside a captured group are
    kept as literal text.
    """
    runs: list[InlineRun] = []
    pos = 0

    while pos < len(text):
        found = _next_match(text, pos)
        if found is None:
            runs.append(InlineRun(text[pos:]))
            break

        kind, match = found
        if match.start() > pos:
            runs.append(InlineRun(text[pos:match.start()]))

        inner = match.group(1)
        if kind == "bold_italic":
            runs.append(InlineRun(inner, bold=True, italic=True))
        elif kind == "bold":
            runs.append(InlineRun(inner, bold=True))
        elif kind == "italic":
            runs.append(InlineRun(inner, italic=True))
        elif kind == "code":
            runs.append(InlineRun(inner, code=True))
        else:
            runs.append(InlineRun(inner, link=match.group(2)))

        pos = match.end()

    return runs


def _link_xml(run: InlineRun, bold: bool, color: Optional[str]) -> str:
    """Wrap a run in a HYPERLINK simple field.

    A field needs no relationship entry, so document.xml.rels stays untouched.
    """
    target = escape_xml(run.link.replace('"', ""))
    inner = run_xml(
        run.text,
        bold=bold,
        color=color or LINK_COLOR,
        underline=True,
    )
    return f'<w:fldSimple w:instr=" HYPERLINK &quot;{target}&quot; ">{inner}</w:fldSimple>'


def format_inline(text: str, *, bold: bool = False, color: Optional[str] = None) -> str:
    """Convert a line of Markdown text to OOXML runs.

    Args:
        text: Raw line content (no block markers)
        bold: Force bold on every run (table header cells)
        color: Hex color applied to every run

    Returns:
        Concatenated <w:r> fragments
    """
    parts = []
    for run in parse_inline(text):
        if run.link:
            parts.append(_link_xml(run, bold, color))
        elif run.code:
            parts.append(run_xml(
                run.text,
                bold=bold,
                font=CODE_FONT,
                size=CODE_SIZE_HALF_POINTS,
                color=color,
            ))
        else:
            parts.append(run_xml(
                run.text,
                bold=bold or run.bold,
                italic=run.italic,
                color=color,
            ))
    return "".join(parts)
