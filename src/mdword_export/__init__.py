"""mdword-export: Markdown to DOCX export with Word template support."""

__version__ = "0.1.0"

from .config import ExportConfig
from .docx_renderer import WordTemplateExporter, convert, convert_file
from .errors import (
    ConfigurationError,
    ExportError,
    IncompatibleTemplateError,
    RenderError,
    TemplateError,
    TemplateNotFoundError,
)
from .inline import InlineRun, format_inline, parse_inline
from .markdown_to_word import MarkdownToWordConverter
from .splicer import find_section_breaks, splice
from .template import TemplateArchive, is_docm_file

__all__ = [
    "ExportConfig",
    "WordTemplateExporter",
    "convert",
    "convert_file",
    "ConfigurationError",
    "ExportError",
    "IncompatibleTemplateError",
    "RenderError",
    "TemplateError",
    "TemplateNotFoundError",
    "InlineRun",
    "format_inline",
    "parse_inline",
    "MarkdownToWordConverter",
    "find_section_breaks",
    "splice",
    "TemplateArchive",
    "is_docm_file",
]
