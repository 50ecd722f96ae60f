"""Word template archive handling.

Reads a .docx (or macro-enabled .docm) template into memory, checks that it
defines the styles the renderer uses, and serializes the modified archive.
"""

import logging
import re
import zipfile
from io import BytesIO
from pathlib import Path

from docx.oxml import parse_xml
from docx.oxml.ns import qn
from lxml import etree

from .errors import IncompatibleTemplateError, TemplateError, TemplateNotFoundError
from .ooxml import REQUIRED_NUMBERING, REQUIRED_STYLES

logger = logging.getLogger(__name__)

DOCUMENT_PART = "word/document.xml"
STYLES_PART = "word/styles.xml"
NUMBERING_PART = "word/numbering.xml"
CONTENT_TYPES_PART = "[Content_Types].xml"

# Content types
DOCM_CONTENT_TYPE = "application/vnd.ms-word.document.macroEnabled.main+xml"
DOCX_CONTENT_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document.main+xml"

FLD_CHAR_RE = re.compile(r"<w:fldChar\b([^>]*?)(/?)>")
DIRTY_ATTR_RE = re.compile(r'\s+w:dirty="[^"]*"')


def is_docm_file(path: str | Path) -> bool:
    """Check if a file is a .docm (macro-enabled) Word document."""
    return str(path).lower().endswith(".docm")


class TemplateArchive:
    """In-memory copy of a template zip, keeping member order and compression."""

    def __init__(self, entries: list[tuple[zipfile.ZipInfo, bytes]]):
        self._entries = entries

    @classmethod
    def load(cls, template_path: str | Path) -> "TemplateArchive":
        """Load a template from disk.

        Raises:
            TemplateNotFoundError: If the path does not exist
            TemplateError: If the file is not a zip or lacks word/document.xml
        """
        template_path = Path(template_path)
        if not template_path.exists():
            raise TemplateNotFoundError(f"Template not found: {template_path}")

        data = template_path.read_bytes()
        archive = cls.from_bytes(data, name=str(template_path))

        if is_docm_file(template_path):
            # Output is always .docx; macros stay in the archive but won't run
            content_types = archive.read_text(CONTENT_TYPES_PART)
            archive.replace(
                CONTENT_TYPES_PART,
                content_types.replace(DOCM_CONTENT_TYPE, DOCX_CONTENT_TYPE).encode("utf-8"),
            )
            logger.debug("Converted .docm content type for %s", template_path)

        return archive

    @classmethod
    def from_bytes(cls, data: bytes, name: str = "<bytes>") -> "TemplateArchive":
        try:
            with zipfile.ZipFile(BytesIO(data), "r") as zin:
                entries = [(info, zin.read(info.filename)) for info in zin.infolist()]
        except zipfile.BadZipFile as e:
            raise TemplateError(f"Template is not a valid DOCX archive: {name}") from e

        archive = cls(entries)
        if DOCUMENT_PART not in archive:
            raise TemplateError(f"Template has no {DOCUMENT_PART}: {name}")
        return archive

    def __contains__(self, name: str) -> bool:
        return any(info.filename == name for info, _ in self._entries)

    def names(self) -> list[str]:
        return [info.filename for info, _ in self._entries]

    def read(self, name: str) -> bytes:
        for info, data in self._entries:
            if info.filename == name:
                return data
        raise KeyError(name)

    def read_text(self, name: str) -> str:
        return self.read(name).decode("utf-8")

    def replace(self, name: str, data: bytes) -> None:
        """Swap the bytes of an existing member, keeping its position."""
        for idx, (info, _) in enumerate(self._entries):
            if info.filename == name:
                self._entries[idx] = (info, data)
                return
        raise KeyError(name)

    def to_bytes(self) -> bytes:
        """Serialize the archive with a fresh central directory."""
        buffer = BytesIO()
        with zipfile.ZipFile(buffer, "w", zipfile.ZIP_DEFLATED) as zout:
            for info, data in self._entries:
                zout.writestr(info, data, compress_type=info.compress_type)
        return buffer.getvalue()


def _ids(archive: TemplateArchive, part: str, tag: str, attr: str) -> set[str]:
    if part not in archive:
        return set()
    root = parse_xml(archive.read(part))
    return {el.get(qn(attr)) for el in root.iter(qn(tag))}


def missing_styles(archive: TemplateArchive) -> list[str]:
    """Return the required style IDs that the template does not define."""
    defined = _ids(archive, STYLES_PART, "w:style", "w:styleId")
    return [style for style in REQUIRED_STYLES if style not in defined]


def missing_numbering(archive: TemplateArchive) -> list[str]:
    """Return the required numbering IDs that the template does not define."""
    defined = _ids(archive, NUMBERING_PART, "w:num", "w:numId")
    return [num for num in REQUIRED_NUMBERING if num not in defined]


def validate_template(archive: TemplateArchive, strict: bool = False) -> None:
    """Check the template for the styles and numbering the renderer references.

    Word substitutes default formatting for unknown IDs, so by default a gap
    is only logged. With ``strict`` it raises IncompatibleTemplateError.
    """
    styles = missing_styles(archive)
    numbering = missing_numbering(archive)
    if not styles and not numbering:
        return
    if strict:
        raise IncompatibleTemplateError(styles, numbering)
    logger.warning(
        "Template is missing styles %s and numbering ids %s; Word will use defaults",
        styles,
        numbering,
    )


def _is_toc_sdt(sdt) -> bool:
    """Check if an SDT element is a Table of Contents."""
    for elem in sdt.iter(qn("w:docPartGallery")):
        if elem.get(qn("w:val")) == "Table of Contents":
            return True
    return False


def has_toc(document_xml: str) -> bool:
    """Check if document.xml contains an SDT-wrapped Table of Contents."""
    if "docPartGallery" not in document_xml:
        return False
    root = parse_xml(document_xml.encode("utf-8"))
    return any(_is_toc_sdt(sdt) for sdt in root.iter(qn("w:sdt")))


def _toc_begin_indexes(root) -> tuple[list, list[int]]:
    """Return every fldChar in document order and the positions of TOC begin markers."""
    fld_chars = list(root.iter(qn("w:fldChar")))
    targets = []
    for sdt in root.iter(qn("w:sdt")):
        if not _is_toc_sdt(sdt):
            continue
        for fld_char in sdt.iter(qn("w:fldChar")):
            if fld_char.get(qn("w:fldCharType")) == "begin":
                targets.append(fld_chars.index(fld_char))
                break
    return fld_chars, targets


def mark_toc_dirty(document_xml: str) -> str:
    """Mark TOC fields as dirty so Word offers to update them on open.

    The dirty attribute belongs on the fldChar with fldCharType="begin", not
    on sdtPr. Only those tags are edited; the rest of the text is kept as is.
    Without a TOC the input is returned unchanged.
    """
    if not has_toc(document_xml):
        return document_xml

    root = parse_xml(document_xml.encode("utf-8"))
    fld_chars, targets = _toc_begin_indexes(root)
    matches = list(FLD_CHAR_RE.finditer(document_xml))

    if len(matches) != len(fld_chars):
        # fldChar written with a prefix other than w:
        for idx in targets:
            fld_chars[idx].set(qn("w:dirty"), "true")
        return etree.tostring(
            root, xml_declaration=True, encoding="UTF-8", standalone=True
        ).decode("utf-8")

    parts = []
    last = 0
    for idx in sorted(set(targets)):
        match = matches[idx]
        attrs = DIRTY_ATTR_RE.sub("", match.group(1))
        parts.append(document_xml[last:match.start()])
        parts.append(f'<w:fldChar{attrs} w:dirty="true"{match.group(2)}>')
        last = match.end()
    parts.append(document_xml[last:])

    logger.debug("Marked %d table of contents field(s) dirty", len(targets))
    return "".join(parts)
