"""Turn document blocks into a .docx file with python-docx."""

from __future__ import annotations

import io
import logging
from typing import List, Optional

from docx import Document
from docx.enum.text import WD_ALIGN_PARAGRAPH
from docx.oxml import OxmlElement
from docx.oxml.ns import qn
from docx.shared import Inches, Pt

from doctranslate.config import settings
from doctranslate.conversion.reconstructor import markup_to_blocks
from doctranslate.models.markup import BlockKind, DocumentBlock

logger = logging.getLogger(__name__)

PAGE_MARGIN = Inches(1)
PARAGRAPH_SPACING = Pt(10)
LINE_SPACING = 1.5
LIST_INDENT_TWIPS = 720
LIST_HANGING_TWIPS = 360
LIST_LEVELS = 9
BULLET_GLYPH = "•"
RULE_COLOR = "999999"


def _level_element(ilvl: int, ordered: bool):
    lvl = OxmlElement("w:lvl")
    lvl.set(qn("w:ilvl"), str(ilvl))
    for tag, value in (
        ("w:start", "1"),
        ("w:numFmt", "decimal" if ordered else "bullet"),
        ("w:lvlText", f"%{ilvl + 1}." if ordered else BULLET_GLYPH),
        ("w:lvlJc", "left"),
    ):
        node = OxmlElement(tag)
        node.set(qn("w:val"), value)
        lvl.append(node)
    p_pr = OxmlElement("w:pPr")
    ind = OxmlElement("w:ind")
    ind.set(qn("w:left"), str(LIST_INDENT_TWIPS * (ilvl + 1)))
    ind.set(qn("w:hanging"), str(LIST_HANGING_TWIPS))
    p_pr.append(ind)
    lvl.append(p_pr)
    return lvl


class NumberingScheme:
    """Bullet and decimal list definitions added to a document's numbering part."""

    def __init__(self, document) -> None:
        self.numbering = document.part.numbering_part.element
        self.bullet_abstract_id = self._add_abstract(ordered=False)
        self.decimal_abstract_id = self._add_abstract(ordered=True)
        self.bullet_num_id = self.numbering.add_num(self.bullet_abstract_id).numId

    def _next_abstract_id(self) -> int:
        ids = [int(value) for value in self.numbering.xpath("./w:abstractNum/@w:abstractNumId")]
        return max(ids, default=-1) + 1

    def _add_abstract(self, ordered: bool) -> int:
        abstract_id = self._next_abstract_id()
        abstract = OxmlElement("w:abstractNum")
        abstract.set(qn("w:abstractNumId"), str(abstract_id))
        multi_level = OxmlElement("w:multiLevelType")
        multi_level.set(qn("w:val"), "hybridMultilevel")
        abstract.append(multi_level)
        for ilvl in range(LIST_LEVELS):
            abstract.append(_level_element(ilvl, ordered))
        # abstractNum definitions must precede every w:num entry.
        first_num = self.numbering.find(qn("w:num"))
        if first_num is not None:
            first_num.addprevious(abstract)
        else:
            self.numbering.append(abstract)
        return abstract_id

    def new_ordered_list(self) -> int:
        """Register a decimal list that restarts its numbering at 1."""
        num = self.numbering.add_num(self.decimal_abstract_id)
        num.add_lvlOverride(ilvl=0).add_startOverride(1)
        return num.numId


def _apply_numbering(paragraph, num_id: int, ilvl: int) -> None:
    num_pr = paragraph._p.get_or_add_pPr().get_or_add_numPr()
    num_pr.get_or_add_ilvl().val = ilvl
    num_pr.get_or_add_numId().val = num_id


def _add_bottom_border(paragraph) -> None:
    p_pr = paragraph._p.get_or_add_pPr()
    p_bdr = OxmlElement("w:pBdr")
    bottom = OxmlElement("w:bottom")
    bottom.set(qn("w:val"), "single")
    bottom.set(qn("w:sz"), "6")
    bottom.set(qn("w:space"), "1")
    bottom.set(qn("w:color"), RULE_COLOR)
    p_bdr.append(bottom)
    p_pr.append(p_bdr)


def _format_paragraph(paragraph) -> None:
    fmt = paragraph.paragraph_format
    fmt.space_before = PARAGRAPH_SPACING
    fmt.space_after = PARAGRAPH_SPACING
    fmt.line_spacing = LINE_SPACING


def _add_runs(paragraph, block: DocumentBlock) -> None:
    for styled in block.runs:
        if styled.line_break:
            paragraph.add_run().add_break()
            continue
        run = paragraph.add_run(styled.text)
        if styled.bold:
            run.bold = True
        if styled.italic:
            run.italic = True


def _setup_document(title: Optional[str]):
    document = Document()
    normal = document.styles["Normal"]
    normal.font.name = settings.docx_font_name
    normal.font.size = Pt(settings.docx_font_size)
    for section in document.sections:
        section.top_margin = PAGE_MARGIN
        section.bottom_margin = PAGE_MARGIN
        section.left_margin = PAGE_MARGIN
        section.right_margin = PAGE_MARGIN
    core = document.core_properties
    core.title = title or "Translated Document"
    core.author = "doctranslate"
    core.comments = "Converted document"
    return document


def build_document(blocks: List[DocumentBlock], title: Optional[str] = None):
    """Return a python-docx ``Document`` holding ``blocks`` in order."""
    document = _setup_document(title)
    numbering = NumberingScheme(document)
    ordered_num_id: Optional[int] = None
    previous: Optional[DocumentBlock] = None

    for block in blocks:
        if block.kind is BlockKind.HEADING:
            level = min(max(block.level, 1), 9)
            paragraph = document.add_paragraph(style=f"Heading {level}")
            _add_runs(paragraph, block)
        elif block.kind is BlockKind.LIST_ITEM:
            paragraph = document.add_paragraph(style="Normal")
            ilvl = min(block.depth, LIST_LEVELS - 1)
            if block.ordered:
                starts_list = (
                    ordered_num_id is None
                    or previous is None
                    or previous.kind is not BlockKind.LIST_ITEM
                    or (block.depth == 0 and previous.depth == 0 and not previous.ordered)
                )
                if starts_list:
                    ordered_num_id = numbering.new_ordered_list()
                _apply_numbering(paragraph, ordered_num_id, ilvl)
            else:
                _apply_numbering(paragraph, numbering.bullet_num_id, ilvl)
            _add_runs(paragraph, block)
        elif block.kind is BlockKind.RULE:
            paragraph = document.add_paragraph()
            paragraph.add_run().add_break()
            paragraph.alignment = WD_ALIGN_PARAGRAPH.LEFT
            _add_bottom_border(paragraph)
        else:
            paragraph = document.add_paragraph(style="Normal")
            _add_runs(paragraph, block)
        _format_paragraph(paragraph)
        previous = block
    return document


def pack_document(blocks: List[DocumentBlock], title: Optional[str] = None) -> bytes:
    """Serialize ``blocks`` to .docx bytes."""
    document = build_document(blocks, title)
    buffer = io.BytesIO()
    document.save(buffer)
    data = buffer.getvalue()
    logger.info("Packed %s blocks into %s bytes", len(blocks), len(data))
    return data


def markup_to_docx(markup: str, title: Optional[str] = None) -> bytes:
    return pack_document(markup_to_blocks(markup), title)
