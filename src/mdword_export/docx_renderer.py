"""Markdown to DOCX export into a Word template."""

import logging
from pathlib import Path

from lxml import etree

from .config import ExportConfig
from .errors import RenderError
from .markdown_to_word import MarkdownToWordConverter
from .splicer import splice
from .template import DOCUMENT_PART, TemplateArchive, mark_toc_dirty, validate_template

logger = logging.getLogger(__name__)


def _check_well_formed(document_xml: str) -> None:
    try:
        etree.fromstring(document_xml.encode("utf-8"))
    except etree.XMLSyntaxError as e:
        raise RenderError(f"Generated document.xml is not well-formed: {e}") from e


def render_document(
    markdown: str,
    archive: TemplateArchive,
    config: ExportConfig,
) -> bytes:
    """Splice rendered markdown into a loaded template and return DOCX bytes.

    Only word/document.xml changes; every other part keeps its bytes.
    """
    validate_template(archive, strict=config.strict_styles)

    document_xml = archive.read_text(DOCUMENT_PART)
    content_xml = MarkdownToWordConverter().convert(markdown)
    new_xml = splice(document_xml, content_xml, config.start_page)

    if config.mark_toc_dirty:
        new_xml = mark_toc_dirty(new_xml)

    _check_well_formed(new_xml)
    archive.replace(DOCUMENT_PART, new_xml.encode("utf-8"))
    return archive.to_bytes()


def convert(
    markdown: str,
    output_path: str | Path,
    config: ExportConfig | None = None,
) -> Path:
    """Render markdown into the configured Word template.

    Args:
        markdown: Markdown source text
        output_path: Where the .docx is written
        config: Template and start page settings (defaults to the bundled template)

    Returns:
        The output path

    Raises:
        TemplateNotFoundError: If the template does not exist
        TemplateError: If the template is not a DOCX with word/document.xml
        OSError: If the output cannot be written
    """
    config = config or ExportConfig()
    output_path = Path(output_path)

    # Template problems surface before any rendering happens
    archive = TemplateArchive.load(config.template_path)
    data = render_document(markdown, archive, config)

    # Ensure output directory exists
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_bytes(data)

    logger.info(
        "Exported %s (template %s, start page %d)",
        output_path,
        config.template_path.name,
        config.start_page,
    )
    return output_path


def convert_file(
    input_path: str | Path,
    output_path: str | Path,
    config: ExportConfig | None = None,
) -> Path:
    """Convert a UTF-8 markdown file."""
    markdown = Path(input_path).read_text(encoding="utf-8")
    return convert(markdown, output_path, config)


class WordTemplateExporter:
    """Holds one configuration for a series of exports (e.g. a batch run).

    The exporter keeps no state between calls, so it is safe to share across
    threads as long as output paths differ.
    """

    def __init__(self, config: ExportConfig | None = None):
        self.config = config or ExportConfig()

    def convert(self, markdown: str, output_path: str | Path) -> Path:
        return convert(markdown, output_path, self.config)

    def convert_file(self, input_path: str | Path, output_path: str | Path) -> Path:
        return convert_file(input_path, output_path, self.config)
