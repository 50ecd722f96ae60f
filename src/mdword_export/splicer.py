"""Insert generated content into a template's document.xml at a section boundary.

Templates usually start with a cover page and a table of contents, each ended
by a section break (``w:sectPr``). The start page picks which boundary the new
content follows, so those pages stay in front of it.
"""

import logging
import re
from dataclasses import dataclass

from .errors import TemplateError

logger = logging.getLogger(__name__)

SECT_PR_RE = re.compile(r"<w:sectPr\b[^>]*?(?:/>|>.*?</w:sectPr>)", re.DOTALL)
BODY_OPEN_RE = re.compile(r"<w:body\b[^>]*>")
BODY_CLOSE = "</w:body>"
PARAGRAPH_OPEN = "<w:p"
PARAGRAPH_CLOSE = "</w:p>"


@dataclass(frozen=True)
class SectionBreak:
    """Location of one <w:sectPr> element in document.xml.

    ``in_paragraph`` is True when the element sits in a paragraph's <w:pPr>
    (a mid-document break) rather than directly under <w:body>.
    """

    start: int
    end: int
    in_paragraph: bool


def _is_paragraph_open(xml: str, pos: int) -> bool:
    """Check that ``<w:p`` at pos opens a paragraph.

    Rejects other elements sharing the prefix (<w:pPr>, <w:proofErr>) and
    empty paragraphs such as ``<w:p w:rsidR="00A1"/>``, which have no </w:p>.
    """
    if xml[pos + 4:pos + 5] not in (">", "/", " ", "\t", "\n", "\r"):
        return False
    tag_end = xml.find(">", pos)
    return tag_end != -1 and xml[tag_end - 1] != "/"


def _last_paragraph_open(xml: str, before: int) -> int:
    pos = xml.rfind(PARAGRAPH_OPEN, 0, before)
    while pos != -1 and not _is_paragraph_open(xml, pos):
        pos = xml.rfind(PARAGRAPH_OPEN, 0, pos)
    return pos


def _paragraph_end(xml: str, p_start: int) -> int:
    """Return the offset just past the </w:p> matching the paragraph at p_start.

    Paragraphs can nest (text boxes), so opening and closing tags are counted.
    """
    depth = 0
    j = p_start
    while j < len(xml):
        if xml.startswith(PARAGRAPH_OPEN, j) and _is_paragraph_open(xml, j):
            depth += 1
            j += len(PARAGRAPH_OPEN)
        elif xml.startswith(PARAGRAPH_CLOSE, j):
            depth -= 1
            j += len(PARAGRAPH_CLOSE)
            if depth == 0:
                return j
        else:
            j += 1
    raise TemplateError("Unterminated <w:p> element in document.xml")


def find_section_breaks(document_xml: str) -> list[SectionBreak]:
    """Find all <w:sectPr> elements in document order."""
    breaks = []
    for match in SECT_PR_RE.finditer(document_xml):
        last_open = _last_paragraph_open(document_xml, match.start())
        last_close = document_xml.rfind(PARAGRAPH_CLOSE, 0, match.start())
        breaks.append(SectionBreak(match.start(), match.end(), last_open > last_close))
    return breaks


def _trailing_body_break(document_xml: str, breaks: list[SectionBreak]) -> SectionBreak | None:
    """Return the final body-level sectPr, which must stay the last child of <w:body>."""
    if not breaks or breaks[-1].in_paragraph:
        return None
    last = breaks[-1]
    body_close = document_xml.find(BODY_CLOSE, last.end)
    if body_close != -1 and not document_xml[last.end:body_close].strip():
        return last
    return None


def _body_start(document_xml: str) -> int:
    match = BODY_OPEN_RE.search(document_xml)
    if not match:
        raise TemplateError("document.xml has no <w:body> element")
    return match.end()


def _body_end(document_xml: str, trailing: SectionBreak | None) -> int:
    if trailing is not None:
        return trailing.start
    pos = document_xml.rfind(BODY_CLOSE)
    if pos == -1:
        raise TemplateError("document.xml has no closing </w:body> tag")
    return pos


def _after_break(document_xml: str, brk: SectionBreak, trailing: SectionBreak | None) -> int:
    if brk.in_paragraph:
        return _paragraph_end(document_xml, _last_paragraph_open(document_xml, brk.start))
    if brk is trailing:
        return brk.start
    return brk.end


def insertion_offset(document_xml: str, start_page: int) -> int:
    """Compute where content for ``start_page`` goes in document_xml."""
    if start_page < 1:
        raise ValueError(f"start_page must be >= 1, got {start_page}")

    body_start = _body_start(document_xml)
    breaks = find_section_breaks(document_xml)
    trailing = _trailing_body_break(document_xml, breaks)
    section_index = start_page - 1
    logger.debug("Template has %d section break(s)", len(breaks))

    if section_index > 0 and len(breaks) >= section_index:
        return _after_break(document_xml, breaks[section_index - 1], trailing)

    if start_page == 1 or not breaks:
        return body_start

    logger.warning(
        "Start page %d needs %d section break(s) but template has %d; "
        "appending content at end of document",
        start_page,
        section_index,
        len(breaks),
    )
    return _body_end(document_xml, trailing)


def splice(document_xml: str, content_xml: str, start_page: int) -> str:
    """Insert content_xml into document_xml for the given start page.

    Args:
        document_xml: The template's word/document.xml text
        content_xml: Body-level OOXML fragments (<w:p>, <w:tbl>)
        start_page: 1-based page; page P follows the (P-1)-th section break

    Returns:
        New document.xml text; the input string is not modified
    """
    offset = insertion_offset(document_xml, start_page)
    return document_xml[:offset] + content_xml + document_xml[offset:]
