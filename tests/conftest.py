"""Shared fixtures: Word templates built with python-docx."""

import re
import zipfile
from html import unescape
from pathlib import Path

import pytest
from docx import Document
from docx.enum.section import WD_SECTION

from mdword_export.template import DOCM_CONTENT_TYPE, DOCX_CONTENT_TYPE

W_T_RE = re.compile(r"<w:t(?:\s[^>]*)?>(.*?)</w:t>", re.DOTALL)


def text_content(xml: str) -> str:
    """Concatenate the text of every <w:t> in an OOXML fragment."""
    return "".join(unescape(t) for t in W_T_RE.findall(xml))


def build_template(output_path: Path, sections: list[str]) -> Path:
    """Create a template with one labelled paragraph per section.

    Every section but the last ends with a paragraph-level section break;
    python-docx adds the trailing body-level sectPr itself.
    """
    doc = Document()
    for idx, label in enumerate(sections):
        doc.add_paragraph(label)
        if idx < len(sections) - 1:
            doc.add_section(WD_SECTION.NEW_PAGE)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    doc.save(output_path)
    return output_path


def make_docm(docx_path: Path, docm_path: Path) -> Path:
    """Copy a .docx to .docm with the macro-enabled main content type."""
    with zipfile.ZipFile(docx_path, "r") as zin:
        with zipfile.ZipFile(docm_path, "w", zipfile.ZIP_DEFLATED) as zout:
            for item in zin.namelist():
                data = zin.read(item)
                if item == "[Content_Types].xml":
                    data = data.decode("utf-8").replace(
                        DOCX_CONTENT_TYPE, DOCM_CONTENT_TYPE
                    ).encode("utf-8")
                zout.writestr(item, data)
    return docm_path


def read_part(docx_path: Path, name: str = "word/document.xml") -> str:
    with zipfile.ZipFile(docx_path, "r") as zin:
        return zin.read(name).decode("utf-8")


@pytest.fixture
def two_section_template(tmp_path):
    """Cover page + contents page: one paragraph-level break, one body-level."""
    return build_template(tmp_path / "two-sections.docx", ["Cover page", "Contents page"])


@pytest.fixture
def three_section_template(tmp_path):
    """Cover, contents and appendix: two paragraph-level breaks, one body-level."""
    return build_template(
        tmp_path / "three-sections.docx",
        ["Cover page", "Contents page", "Appendix page"],
    )


@pytest.fixture
def sample_markdown():
    return """# Introduction

This is a **test document** with *formatted* content.

## 1.2 Features

- Bullet point one
- Bullet point two
1. First step
2. Second step

## Code Example

Here's some `inline code` and a code block:

```python
def hello():
    print("Hello, World!")
```

## Table

| Column 1 | Column 2 | Column 3 |
|----------|----------|----------|
| A        | B        | C        |
| D        | E        |

> This is a blockquote with important information.

---

┌──────┐     ┌──────┐
│ App  │ ──► │  DB  │
└──────┘     └──────┘

That's all for now! See [the docs](https://example.com/docs?a=1&b=2).
"""
