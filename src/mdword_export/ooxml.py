"""Render Markdown blocks as WordprocessingML fragments."""

from typing import Callable

from .blocks import (
    AsciiArtBlock,
    BlankLine,
    Block,
    CodeBlock,
    Heading,
    HorizontalRule,
    ListItem,
    Paragraph,
    Quote,
    Table,
)
from .inline import CODE_FONT, escape_xml, format_inline, run_xml

# Style and numbering IDs the template must define
HEADING_STYLE = "Heading{level}"
NORMAL_STYLE = "Normal"
QUOTE_STYLE = "Quote"
LIST_NUMBER_STYLE = "ListNumber"
LIST_BULLET_STYLE = "ListBullet"
CODE_STYLE = "Code"
TABLE_STYLE = "TableGrid"
ORDERED_NUM_ID = 1
BULLET_NUM_ID = 2

REQUIRED_STYLES = [HEADING_STYLE.format(level=n) for n in range(1, 7)] + [
    NORMAL_STYLE,
    QUOTE_STYLE,
    LIST_NUMBER_STYLE,
    LIST_BULLET_STYLE,
    CODE_STYLE,
    TABLE_STYLE,
]
REQUIRED_NUMBERING = [str(ORDERED_NUM_ID), str(BULLET_NUM_ID)]

CODE_SIZE = 18  # 9pt
CODE_SHADING = "F5F5F5"
ART_SIZE = 16  # 8pt
ART_SHADING = "F8F8F8"
ARROW_COLOR = "C00000"
ARROWS = "↓→←↑▼►◄▲"
HEADER_FILL = "4472C4"
HEADER_TEXT = "FFFFFF"
BORDER_COLOR = "A6A6A6"


def _shading(fill: str) -> str:
    return f'<w:shd w:val="clear" w:color="auto" w:fill="{fill}"/>'


def paragraph_xml(runs: str, style: str | None = None, extra_ppr: str = "") -> str:
    """Wrap runs in a <w:p>, with optional style and extra paragraph properties."""
    ppr = ""
    if style:
        ppr += f'<w:pStyle w:val="{style}"/>'
    ppr += extra_ppr
    if ppr:
        return f"<w:p><w:pPr>{ppr}</w:pPr>{runs}</w:p>"
    return f"<w:p>{runs}</w:p>"


def render_heading(block: Heading) -> str:
    return paragraph_xml(format_inline(block.text), HEADING_STYLE.format(level=block.level))


def render_paragraph(block: Paragraph) -> str:
    return paragraph_xml(format_inline(block.text), NORMAL_STYLE)


def render_quote(block: Quote) -> str:
    return paragraph_xml(format_inline(block.text), QUOTE_STYLE)


def render_list_item(block: ListItem) -> str:
    style = LIST_NUMBER_STYLE if block.ordered else LIST_BULLET_STYLE
    num_id = ORDERED_NUM_ID if block.ordered else BULLET_NUM_ID
    numbering = f'<w:numPr><w:ilvl w:val="0"/><w:numId w:val="{num_id}"/></w:numPr>'
    return paragraph_xml(format_inline(block.text), style, numbering)


def render_code_block(block: CodeBlock) -> str:
    """Render a fenced block as one shaded monospace paragraph.

    Lines are separated by <w:br/> inside a single run; no inline formatting.
    """
    text_parts = [
        f'<w:t xml:space="preserve">{escape_xml(line)}</w:t>' for line in block.lines
    ] or ['<w:t xml:space="preserve"></w:t>']
    rpr = (
        f'<w:rPr><w:rFonts w:ascii="{CODE_FONT}" w:hAnsi="{CODE_FONT}" w:cs="{CODE_FONT}"/>'
        f'<w:sz w:val="{CODE_SIZE}"/><w:szCs w:val="{CODE_SIZE}"/></w:rPr>'
    )
    run = f"<w:r>{rpr}{'<w:br/>'.join(text_parts)}</w:r>"
    return paragraph_xml(run, CODE_STYLE, _shading(CODE_SHADING))


def render_horizontal_rule(block: HorizontalRule) -> str:
    border = (
        '<w:pBdr><w:bottom w:val="single" w:sz="6" w:space="1" w:color="auto"/></w:pBdr>'
    )
    return paragraph_xml("", extra_ppr=border)


def _table_borders() -> str:
    edges = "".join(
        f'<w:{edge} w:val="single" w:sz="4" w:space="0" w:color="{BORDER_COLOR}"/>'
        for edge in ("top", "left", "bottom", "right", "insideH", "insideV")
    )
    return f"<w:tblBorders>{edges}</w:tblBorders>"


def _table_cell(text: str, width: int, header: bool) -> str:
    tcpr = f'<w:tcW w:w="{width}" w:type="pct"/>'
    if header:
        tcpr += _shading(HEADER_FILL)
        runs = format_inline(text, bold=True, color=HEADER_TEXT)
    else:
        runs = format_inline(text)
    return f"<w:tc><w:tcPr>{tcpr}</w:tcPr>{paragraph_xml(runs)}</w:tc>"


def render_table(block: Table) -> str:
    """Render a pipe table.

    Short rows are padded to the widest row. The first row is the header.
    Returns an empty string when no row has any content.
    """
    rows = [list(row) for row in block.rows]
    if not rows or not any(cell for row in rows for cell in row):
        return ""

    cols = max(len(row) for row in rows)
    for row in rows:
        row.extend([""] * (cols - len(row)))

    # Widths in fiftieths of a percent
    cell_width = 5000 // cols
    tbl_pr = (
        f'<w:tblPr><w:tblStyle w:val="{TABLE_STYLE}"/>'
        '<w:tblW w:w="5000" w:type="pct"/>'
        f"{_table_borders()}"
        '<w:tblLook w:val="04A0" w:firstRow="1" w:lastRow="0" w:firstColumn="1" '
        'w:lastColumn="0" w:noHBand="0" w:noVBand="1"/></w:tblPr>'
    )
    grid = "<w:tblGrid>" + "<w:gridCol/>" * cols + "</w:tblGrid>"

    tr_parts = []
    for idx, row in enumerate(rows):
        header = idx == 0
        trpr = "<w:trPr><w:tblHeader/></w:trPr>" if header else ""
        cells = "".join(_table_cell(text, cell_width, header) for text in row)
        tr_parts.append(f"<w:tr>{trpr}{cells}</w:tr>")

    return f"<w:tbl>{tbl_pr}{grid}{''.join(tr_parts)}</w:tbl>"


def _art_runs(line: str) -> str:
    """Split a diagram line so each arrow glyph gets its own colored run."""
    runs = []
    buffer = ""
    for ch in line:
        if ch in ARROWS:
            if buffer:
                runs.append(run_xml(buffer, font=CODE_FONT, size=ART_SIZE))
                buffer = ""
            runs.append(run_xml(ch, font=CODE_FONT, size=ART_SIZE, color=ARROW_COLOR))
        else:
            buffer += ch
    if buffer or not runs:
        runs.append(run_xml(buffer, font=CODE_FONT, size=ART_SIZE))
    return "".join(runs)


def render_ascii_art(block: AsciiArtBlock) -> str:
    ppr = (
        _shading(ART_SHADING)
        + '<w:wordWrap w:val="0"/>'
        + '<w:spacing w:before="0" w:after="0" w:line="240" w:lineRule="auto"/>'
    )
    return "".join(paragraph_xml(_art_runs(line), extra_ppr=ppr) for line in block.lines)


def render_blank_line(block: BlankLine) -> str:
    return ""


RENDERERS: dict[type, Callable[..., str]] = {
    Heading: render_heading,
    Paragraph: render_paragraph,
    Quote: render_quote,
    ListItem: render_list_item,
    CodeBlock: render_code_block,
    HorizontalRule: render_horizontal_rule,
    Table: render_table,
    AsciiArtBlock: render_ascii_art,
    BlankLine: render_blank_line,
}


def render_block(block: Block) -> str:
    """Render any block to its OOXML fragment."""
    try:
        renderer = RENDERERS[type(block)]
    except KeyError:
        raise TypeError(f"No renderer for block type {type(block).__name__}") from None
    return renderer(block)
