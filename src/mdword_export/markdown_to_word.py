"""Convert markdown to WordprocessingML body content."""

import logging
from collections import Counter

from .blocks import classify, split_lines
from .ooxml import render_block

logger = logging.getLogger(__name__)


class MarkdownToWordConverter:
    """Converts markdown text to a string of OOXML body elements.

    The converter walks the document line by line. At each cursor position it
    classifies one block, renders it and moves past the lines that block used.
    Fragments keep the order of the source lines.
    """

    def __init__(self):
        self.block_counts: Counter = Counter()

    def convert(self, md_text: str) -> str:
        """Convert markdown to OOXML paragraphs and tables.

        Args:
            md_text: Markdown source

        Returns:
            Concatenated <w:p>/<w:tbl> fragments ready for insertion in <w:body>
        """
        self.block_counts = Counter()
        lines = split_lines(md_text)
        fragments = []

        i = 0
        while i < len(lines):
            block, consumed = classify(lines, i)
            self.block_counts[type(block).__name__] += 1
            fragment = render_block(block)
            if fragment:
                fragments.append(fragment)
            i += max(consumed, 1)

        logger.debug(
            "Converted %d line(s) into %s",
            len(lines),
            dict(self.block_counts),
        )
        return "".join(fragments)


def markdown_to_ooxml(md_text: str) -> str:
    """Convert markdown to OOXML body content with a fresh converter."""
    return MarkdownToWordConverter().convert(md_text)
