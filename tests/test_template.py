"""Tests for template archive handling."""

import zipfile

import pytest

from mdword_export.config import DEFAULT_TEMPLATE
from mdword_export.errors import IncompatibleTemplateError, TemplateError
from mdword_export.template import (
    DOCUMENT_PART,
    TemplateArchive,
    has_toc,
    mark_toc_dirty,
    missing_numbering,
    missing_styles,
    validate_template,
)

TOC_XML = (
    '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'
    '<w:document xmlns:w="http://schemas.openxmlformats.org/wordprocessingml/2006/main"><w:body>'
    '<w:sdt><w:sdtPr><w:docPartObj><w:docPartGallery w:val="Table of Contents"/></w:docPartObj></w:sdtPr>'
    '<w:sdtContent><w:p><w:r><w:fldChar w:fldCharType="begin"/></w:r>'
    '<w:r><w:instrText xml:space="preserve"> TOC \\o "1-3" </w:instrText></w:r>'
    '<w:r><w:fldChar w:fldCharType="separate"/></w:r>'
    '<w:r><w:fldChar w:fldCharType="end"/></w:r></w:p></w:sdtContent></w:sdt>'
    "</w:body></w:document>"
)


def test_bundled_template_is_complete():
    archive = TemplateArchive.load(DEFAULT_TEMPLATE)

    assert missing_styles(archive) == []
    assert missing_numbering(archive) == []
    validate_template(archive, strict=True)
    assert has_toc(archive.read_text(DOCUMENT_PART))


def test_archive_round_trip_keeps_members(tmp_path):
    source = tmp_path / "t.docx"
    with zipfile.ZipFile(source, "w") as zout:
        zout.writestr("[Content_Types].xml", "<Types/>")
        zout.writestr(DOCUMENT_PART, "<w:document/>")
        zout.writestr("word/media/image1.png", b"\x89PNG")

    archive = TemplateArchive.load(source)
    archive.replace(DOCUMENT_PART, b"<w:document><w:body/></w:document>")
    data = archive.to_bytes()

    out = tmp_path / "out.docx"
    out.write_bytes(data)
    with zipfile.ZipFile(out) as zin:
        assert zin.namelist() == ["[Content_Types].xml", DOCUMENT_PART, "word/media/image1.png"]
        assert zin.read("word/media/image1.png") == b"\x89PNG"
        assert zin.read(DOCUMENT_PART) == b"<w:document><w:body/></w:document>"


def test_replace_unknown_member():
    archive = TemplateArchive.load(DEFAULT_TEMPLATE)
    with pytest.raises(KeyError):
        archive.replace("word/missing.xml", b"")


def test_from_bytes_rejects_garbage():
    with pytest.raises(TemplateError):
        TemplateArchive.from_bytes(b"PK not really")


def test_strict_validation_lists_missing_ids(tmp_path):
    source = tmp_path / "bare.docx"
    with zipfile.ZipFile(source, "w") as zout:
        zout.writestr(DOCUMENT_PART, "<w:document/>")

    archive = TemplateArchive.load(source)

    with pytest.raises(IncompatibleTemplateError) as excinfo:
        validate_template(archive, strict=True)
    assert "Heading1" in excinfo.value.missing_styles
    assert excinfo.value.missing_numbering == ["1", "2"]


def test_mark_toc_dirty_sets_flag_on_begin_fldchar():
    result = mark_toc_dirty(TOC_XML)

    assert result.count('w:dirty="true"') == 1
    begin = result.index('w:fldCharType="begin"')
    dirty = result.index('w:dirty="true"')
    assert abs(begin - dirty) < 60


def test_mark_toc_dirty_without_toc_is_identity():
    xml = '<w:document xmlns:w="http://schemas.openxmlformats.org/wordprocessingml/2006/main"><w:body/></w:document>'
    assert mark_toc_dirty(xml) is xml
    assert not has_toc(xml)


def test_mark_toc_dirty_leaves_other_bytes_alone():
    spaced = TOC_XML.replace("<w:body>", "<w:body>\n  ").replace("<w:r>", '<w:r w:rsidR="00AB">', 1)

    result = mark_toc_dirty(spaced)

    assert result.replace(' w:dirty="true"', "", 1) == spaced
    assert '<w:fldChar w:fldCharType="begin" w:dirty="true"/>' in result


def test_mark_toc_dirty_overrides_existing_flag():
    stale = TOC_XML.replace('w:fldCharType="begin"/>', 'w:fldCharType="begin" w:dirty="false"/>')

    result = mark_toc_dirty(stale)

    assert 'w:dirty="false"' not in result
    assert result.count('w:dirty="true"') == 1


def test_mark_toc_dirty_ignores_fields_outside_toc():
    page_field = (
        '<w:p><w:r><w:fldChar w:fldCharType="begin"/></w:r>'
        '<w:r><w:instrText> PAGE </w:instrText></w:r>'
        '<w:r><w:fldChar w:fldCharType="end"/></w:r></w:p>'
    )
    xml = TOC_XML.replace("<w:body>", "<w:body>" + page_field)

    result = mark_toc_dirty(xml)

    assert result.startswith(xml[:xml.index("<w:sdt>")])
    assert result.count('w:dirty="true"') == 1
