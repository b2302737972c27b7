import pytest

from doctranslate.conversion.reconstructor import markup_to_blocks
from doctranslate.conversion.word_normalizer import html_to_markup, normalize_html, parse_word
from doctranslate.errors import ExtractionError
from doctranslate.models.markup import BlockKind


def test_headings_paragraphs_and_lists():
    html = "<h1>Title</h1><p>Hello <strong>world</strong></p><ul><li>One</li><li>Two</li></ul>"
    assert normalize_html(html) == "# Title\n\nHello **world**\n\n- One\n\n- Two\n"


def test_heading_text_loses_emphasis():
    assert normalize_html("<h2><strong>Bold</strong> heading</h2>") == "## Bold heading\n"


def test_emphasis_and_line_breaks():
    markup = html_to_markup("<p><em>Slanted</em> and <b>heavy</b><br/>next</p>")
    assert "*Slanted* and **heavy**\nnext" in markup


def test_existing_markers_are_stripped_from_items():
    html = "<ol><li>1. First</li><li>Second</li></ol><ul><li>• Dot</li><li>**Bold** item</li></ul>"
    assert normalize_html(html) == "1. First\n\n2. Second\n\n- Dot\n\n- **Bold** item\n"


def test_nested_lists_keep_their_depth():
    markup = normalize_html("<ul><li>Parent<ul><li>Child</li></ul></li><li>Sibling</li></ul>")
    blocks = markup_to_blocks(markup)
    assert [(block.text, block.depth) for block in blocks] == [
        ("Parent", 0),
        ("Child", 1),
        ("Sibling", 0),
    ]


def test_images_scripts_and_rules():
    html = "<p>Before</p><img src='x.png'/><script>alert(1)</script><hr/><p>After</p>"
    markup = normalize_html(html)
    assert markup == "Before\n\n---\n\nAfter\n"


def test_table_rows_become_paragraphs():
    html = "<table><tr><td>Name</td><td>Role</td></tr><tr><td>Ann</td><td>Chair</td></tr></table>"
    blocks = markup_to_blocks(normalize_html(html))
    assert [block.kind for block in blocks] == [BlockKind.PARAGRAPH, BlockKind.PARAGRAPH]
    assert blocks[1].text.split() == ["Ann", "Chair"]


def test_large_margin_paragraph_gets_extra_spacing():
    markup = html_to_markup('<p style="margin-top: 3em">Spaced</p>')
    assert markup == "\n\n\nSpaced\n\n\n"


def test_underscore_blanks_survive_word_path():
    blocks = markup_to_blocks(normalize_html("<p>Signature: ________</p>"))
    assert blocks[0].text == "Signature: ________"


def test_parse_generated_docx(sample_docx_bytes):
    result = parse_word(sample_docx_bytes)
    assert result.markup.startswith("# Meeting Notes\n")
    assert "Attendance was high." in result.markup
    assert "**Decision**: approved" in result.markup
    assert result.metadata.page_count == 1
    assert not result.metadata.has_headers


def test_parse_rejects_empty_and_corrupt_input():
    with pytest.raises(ExtractionError):
        parse_word(b"")
    with pytest.raises(ExtractionError):
        parse_word(b"this is not a zip archive")
