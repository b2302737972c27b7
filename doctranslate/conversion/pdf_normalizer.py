"""Infer normalized markup from positioned PDF text.

Headings, lists, emphasis and paragraph breaks are derived purely from font
metrics and coordinates; nothing here looks at PDF structure tags.
"""

from __future__ import annotations

import logging
import re
from typing import Iterable, List, Optional, Tuple

import fitz

from doctranslate.conversion.cleanup import cleanup_markup
from doctranslate.errors import ExtractionError
from doctranslate.models.fragments import (
    ConversionMetadata,
    ConversionResult,
    PdfPage,
    PositionedTextFragment,
)

logger = logging.getLogger(__name__)

SAME_LINE_DELTA = 3.0
PARAGRAPH_DELTA = 12.0
WIDE_PARAGRAPH_DELTA = 24.0
TAB_GAP = 18.0
TAB = "    "
PAGE_BREAK = "\n\n---\n\n"
EDGE_BAND = 0.10

BULLET_PREFIX = re.compile(r"^[•\-*]")
NUMBER_PREFIX = re.compile(r"^\d+\.")
TABLE_EVIDENCE = re.compile(r"\|[^|\n]*\||[\u2500-\u257f]")


def heading_level(font_size: float) -> int:
    if font_size >= 20:
        return 1
    if font_size >= 16:
        return 2
    if font_size >= 14:
        return 3
    return 0


def detect_list_prefix(text: str) -> Tuple[Optional[str], str]:
    """Return the canonical list prefix and the text with its marker removed."""
    if BULLET_PREFIX.match(text):
        return "- ", text[1:].strip()
    match = NUMBER_PREFIX.match(text)
    if match:
        return "1. ", text[match.end():].strip()
    return None, text


def apply_font_style(text: str, font_name: str) -> str:
    font = font_name.lower()
    if "bold" in font:
        if ":" in text:
            label, rest = text.split(":", 1)
            rest = rest.strip()
            text = f"**{label.strip()}**:" + (f" {rest}" if rest else "")
        else:
            text = f"**{text}**"
    if "italic" in font:
        text = f"*{text}*"
    return text


def format_fragment(fragment: PositionedTextFragment) -> str:
    """Render one fragment as markup; empty text renders as an empty string."""
    text = fragment.text.strip()
    if not text:
        return ""
    prefix, body = detect_list_prefix(text)
    if body:
        body = apply_font_style(body, fragment.font_name)
    if prefix:
        return f"{prefix}{body}"
    level = heading_level(fragment.font_size)
    if level:
        return f"{'#' * level} {body}"
    return body


def order_fragments(fragments: List[PositionedTextFragment]) -> List[PositionedTextFragment]:
    """Re-sort a page into lines when the extractor order runs back up the page."""
    backwards = any(
        later.y < earlier.y - SAME_LINE_DELTA
        for earlier, later in zip(fragments, fragments[1:])
    )
    if not backwards:
        return list(fragments)
    lines: List[List[PositionedTextFragment]] = []
    for fragment in sorted(fragments, key=lambda f: (f.y, f.x)):
        if lines and abs(fragment.y - lines[-1][0].y) < SAME_LINE_DELTA:
            lines[-1].append(fragment)
        else:
            lines.append([fragment])
    return [fragment for line in lines for fragment in sorted(line, key=lambda f: f.x)]


def fragment_separator(previous: PositionedTextFragment, current: PositionedTextFragment) -> str:
    delta = current.y - previous.y
    if abs(delta) < SAME_LINE_DELTA:
        if previous.width and current.x - previous.right >= TAB_GAP:
            return TAB
        return " "
    if delta > WIDE_PARAGRAPH_DELTA:
        return "\n\n\n"
    if delta > PARAGRAPH_DELTA:
        return "\n\n"
    return "\n"


def _join(left: str, separator: str, right: str) -> str:
    if separator == " " and (left.endswith((" ", "\n")) or not left):
        return left + right
    return left + separator + right


def render_page(fragments: Iterable[PositionedTextFragment]) -> str:
    """Concatenate one page of fragments into markup text."""
    output = ""
    previous: Optional[PositionedTextFragment] = None
    previous_heading = 0
    for fragment in fragments:
        rendered = format_fragment(fragment)
        if not rendered:
            continue
        is_list = detect_list_prefix(fragment.text.strip())[0] is not None
        level = 0 if is_list else heading_level(fragment.font_size)
        if previous is None:
            output = rendered
        else:
            separator = fragment_separator(previous, fragment)
            same_line = "\n" not in separator
            if same_line and level and level == previous_heading:
                # Same heading split over several spans.
                rendered = rendered[level + 1:]
                separator = " "
            elif same_line and (level or is_list or previous_heading):
                separator = "\n"
            output = _join(output, separator, rendered)
        previous = fragment
        previous_heading = level
    return output


def detect_metadata(pages: List[PdfPage]) -> ConversionMetadata:
    metadata = ConversionMetadata(page_count=len(pages))
    for page in pages:
        metadata.has_images = metadata.has_images or page.has_images
        for fragment in page.fragments:
            if TABLE_EVIDENCE.search(fragment.text):
                metadata.has_tables = True
            if page.number == 1 and fragment.text.strip():
                if fragment.y < page.height * EDGE_BAND:
                    metadata.has_headers = True
                if fragment.y > page.height * (1 - EDGE_BAND):
                    metadata.has_footers = True
    return metadata


def normalize_pages(pages: List[PdfPage]) -> ConversionResult:
    """Build normalized markup and metadata from extracted pages."""
    rendered = [render_page(order_fragments(page.fragments)) for page in pages]
    markup = cleanup_markup(PAGE_BREAK.join(rendered))
    return ConversionResult(markup=markup, metadata=detect_metadata(pages))


def _page_fragments(page: fitz.Page) -> List[PositionedTextFragment]:
    fragments: List[PositionedTextFragment] = []
    content = page.get_text("dict")
    for block in content.get("blocks", []):
        for line in block.get("lines", []) or []:
            for span in line.get("spans", []) or []:
                text = span.get("text", "")
                if not text.strip():
                    continue
                x0, _, x1, _ = span.get("bbox", (0.0, 0.0, 0.0, 0.0))
                origin = span.get("origin", (x0, 0.0))
                fragments.append(
                    PositionedTextFragment(
                        text=text,
                        font_size=float(span.get("size", 0.0)),
                        font_name=str(span.get("font", "")),
                        x=float(origin[0]),
                        y=float(origin[1]),
                        width=float(x1 - x0),
                    )
                )
    return fragments


def extract_pages(data: bytes) -> List[PdfPage]:
    """Read positioned text fragments from PDF bytes with PyMuPDF."""
    try:
        doc = fitz.open(stream=data, filetype="pdf")
    except Exception as exc:
        raise ExtractionError(f"Failed to open PDF: {exc}") from exc
    pages: List[PdfPage] = []
    try:
        for page_index in range(doc.page_count):
            page = doc[page_index]
            pages.append(
                PdfPage(
                    number=page_index + 1,
                    width=float(page.rect.width),
                    height=float(page.rect.height),
                    fragments=_page_fragments(page),
                    has_images=bool(page.get_images()),
                )
            )
    except Exception as exc:
        raise ExtractionError(f"Failed to read PDF page content: {exc}") from exc
    finally:
        doc.close()
    return pages


def parse_pdf(data: bytes) -> ConversionResult:
    """Convert PDF bytes into normalized markup."""
    pages = extract_pages(data)
    if not pages:
        raise ExtractionError("PDF has no pages")
    if not any(page.fragments for page in pages):
        raise ExtractionError("No text could be extracted from the PDF")
    result = normalize_pages(pages)
    logger.info(
        "Parsed PDF: %s pages, %s markup characters", result.metadata.page_count, len(result.markup)
    )
    return result
