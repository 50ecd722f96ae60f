"""Tests for inline formatting."""

from mdword_export.inline import InlineRun, escape_xml, format_inline, parse_inline, run_xml

from conftest import text_content


def test_markers_stripped_and_text_preserved():
    text = "**bold** and *italic* and ***both***"

    runs = parse_inline(text)

    assert "".join(run.text for run in runs) == "bold and italic and both"
    assert text_content(format_inline(text)) == "bold and italic and both"
    assert runs == [
        InlineRun("bold", bold=True),
        InlineRun(" and "),
        InlineRun("italic", italic=True),
        InlineRun(" and "),
        InlineRun("both", bold=True, italic=True),
    ]


def test_plain_text_is_one_escaped_run():
    text = "Tom & Jerry <say> \"hi\" it's"

    xml = format_inline(text)

    assert xml == (
        '<w:r><w:t xml:space="preserve">'
        "Tom &amp; Jerry &lt;say&gt; &quot;hi&quot; it&apos;s"
        "</w:t></w:r>"
    )
    assert text_content(xml) == text


def test_bold_italic_is_single_run():
    runs = parse_inline("***x***")

    assert runs == [InlineRun("x", bold=True, italic=True)]

    xml = format_inline("***x***")
    assert xml.count("<w:r>") == 1
    assert "<w:b/>" in xml and "<w:i/>" in xml


def test_leftmost_match_wins():
    runs = parse_inline("`code` then **bold**")

    assert runs[0] == InlineRun("code", code=True)
    assert runs[-1] == InlineRun("bold", bold=True)


def test_nested_markers_not_reprocessed():
    runs = parse_inline("**a *b* c**")

    assert runs == [InlineRun("a *b* c", bold=True)]


def test_unclosed_marker_stays_literal():
    assert parse_inline("**oops") == [InlineRun("**oops")]


def test_code_run_uses_monospace_font():
    xml = format_inline("run `ls -la` now")

    assert 'w:ascii="Consolas"' in xml
    assert text_content(xml) == "run ls -la now"


def test_link_rendered_as_hyperlink_field():
    runs = parse_inline("See [docs](https://example.com/?a=1&b=2) here")

    assert runs[1] == InlineRun("docs", link="https://example.com/?a=1&b=2")

    xml = format_inline("See [docs](https://example.com/?a=1&b=2) here")
    assert "HYPERLINK &quot;https://example.com/?a=1&amp;b=2&quot;" in xml
    assert '<w:u w:val="single"/>' in xml
    assert text_content(xml) == "See docs here"


def test_base_properties_apply_to_every_run():
    xml = format_inline("plain *it*", bold=True, color="FFFFFF")

    assert xml.count("<w:b/>") == 2
    assert xml.count('<w:color w:val="FFFFFF"/>') == 2


def test_empty_text_gives_no_runs():
    assert parse_inline("") == []
    assert format_inline("") == ""


def test_escape_xml_covers_all_reserved_characters():
    assert escape_xml("&<>\"'") == "&amp;&lt;&gt;&quot;&apos;"


def test_run_xml_property_order():
    xml = run_xml("x", bold=True, italic=True, font="Consolas", size=18, color="C00000")

    # rFonts, b, i, color, sz is the schema order
    positions = [xml.index(tag) for tag in ("<w:rFonts", "<w:b/>", "<w:i/>", "<w:color", "<w:sz ")]
    assert positions == sorted(positions)
