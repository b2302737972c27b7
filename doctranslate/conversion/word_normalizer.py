"""Convert Word documents into normalized markup.

mammoth renders the .docx as HTML; the HTML tree is rewritten node by node,
cleaned with the Word rule chain, then canonicalized through the tokenizer so
the result matches the dialect produced for PDFs.
"""

from __future__ import annotations

import io
import logging
import re
from typing import List

import mammoth
from bs4 import BeautifulSoup, Comment, NavigableString, Tag

from doctranslate.conversion.cleanup import WORD_CLEANUP_RULES, apply_rules
from doctranslate.conversion.tokenizer import DEFAULT_PARSER_CONFIG, ParserConfig, render_markup, tokenize
from doctranslate.errors import ExtractionError
from doctranslate.models.fragments import ConversionMetadata, ConversionResult

logger = logging.getLogger(__name__)

_HEADING_LEVEL = {"h1": 1, "h2": 2, "h3": 3, "h4": 4, "h5": 5, "h6": 6}
_SKIP_TAGS = {"script", "style", "img", "head", "title"}
_LIST_TAGS = {"ul", "ol"}
_STRONG_TAGS = {"strong", "b"}
_EM_TAGS = {"em", "i"}
_INLINE_TAGS = _STRONG_TAGS | _EM_TAGS | {"a", "span", "sup", "sub", "u", "s"}

EXISTING_BULLET = re.compile(r"^(?:[-*](?=\s)|•)\s*")
EXISTING_NUMBER = re.compile(r"^\d+\.(?=\s)\s*")
MARGIN_STYLE = re.compile(r"margin-(?:top|bottom)\s*:\s*([\d.]+)\s*(em|pt|px)", re.IGNORECASE)
_LARGE_MARGIN = {"em": 2.0, "pt": 24.0, "px": 32.0}


def _has_large_margin(node: Tag) -> bool:
    style = node.get("style") or ""
    for value, unit in MARGIN_STYLE.findall(style):
        if float(value) >= _LARGE_MARGIN[unit.lower()]:
            return True
    return False


def _wrap(marker: str, content: str) -> str:
    """Wrap ``content`` in an emphasis marker, keeping outer spaces outside."""
    stripped = content.strip()
    if not stripped:
        return content
    leading = content[: len(content) - len(content.lstrip())]
    trailing = content[len(content.rstrip()):]
    return f"{leading}{marker}{stripped}{marker}{trailing}"


def render_inline_node(node) -> str:
    if isinstance(node, Comment):
        return ""
    if isinstance(node, NavigableString):
        return str(node)
    if not isinstance(node, Tag):
        return ""
    name = node.name
    if name in _SKIP_TAGS or name in _LIST_TAGS:
        return ""
    if name == "br":
        return "\n"
    inner = render_inline(node)
    if name in _STRONG_TAGS:
        return _wrap("**", inner)
    if name in _EM_TAGS:
        return _wrap("*", inner)
    return inner


def render_inline(node: Tag) -> str:
    """Render inline children of ``node``; nested lists are excluded."""
    return "".join(render_inline_node(child) for child in node.children)


def _clean_inline(text: str) -> str:
    lines = [re.sub(r"[ \t\u00a0]+", " ", line).strip() for line in text.split("\n")]
    return "\n".join(line for line in lines if line)


def _render_heading(node: Tag) -> str:
    level = _HEADING_LEVEL[node.name]
    text = re.sub(r"[*`]+", "", _clean_inline(render_inline(node))).replace("\n", " ")
    return f"\n\n{'#' * level} {text.strip()}\n\n"


def _render_paragraph(node: Tag) -> str:
    text = _clean_inline(render_inline(node))
    if not text:
        return ""
    spacing = "\n\n\n" if _has_large_margin(node) else "\n\n"
    return f"{spacing}{text}{spacing}"


def _render_list(node: Tag, indent: str = "") -> str:
    ordered = node.name == "ol"
    lines: List[str] = []
    position = 0
    for item in node.find_all("li", recursive=False):
        text = _clean_inline(render_inline(item)).replace("\n", " ")
        text = EXISTING_NUMBER.sub("", EXISTING_BULLET.sub("", text))
        position += 1
        marker = f"{position}. " if ordered else "- "
        if text:
            lines.append(f"{indent}{marker}{text}")
        for nested in item.find_all(_LIST_TAGS, recursive=False):
            nested_text = _render_list(nested, indent + " " * len(marker)).strip("\n")
            if nested_text:
                lines.append(nested_text)
    return "\n\n" + "\n".join(lines) + "\n\n"


def _render_table(node: Tag) -> str:
    rows: List[str] = []
    for row in node.find_all("tr"):
        cells = [_clean_inline(render_inline(cell)).replace("\n", " ") for cell in row.find_all(["td", "th"])]
        cells = [cell for cell in cells if cell]
        if cells:
            rows.append("  ".join(cells))
    return "".join(f"\n\n{row}\n\n" for row in rows)


def render_block(node: Tag) -> str:
    name = node.name
    if name in _SKIP_TAGS:
        return ""
    if name in _HEADING_LEVEL:
        return _render_heading(node)
    if name in _LIST_TAGS:
        return _render_list(node)
    if name == "p":
        return _render_paragraph(node)
    if name == "hr":
        return "\n\n---\n\n"
    if name == "table":
        return _render_table(node)
    if name in _INLINE_TAGS:
        text = _clean_inline(render_inline_node(node))
        return f"\n\n{text}\n\n" if text else ""
    return "".join(_render_children(node))


def _render_children(node: Tag) -> List[str]:
    parts: List[str] = []
    for child in node.children:
        if isinstance(child, Comment):
            continue
        if isinstance(child, Tag):
            parts.append(render_block(child))
        elif isinstance(child, NavigableString) and child.strip():
            parts.append(f"\n\n{child.strip()}\n\n")
    return parts


def html_to_markup(html: str) -> str:
    """Rewrite an HTML tree into raw markup, before cleanup."""
    soup = BeautifulSoup(html, "html.parser")
    return "".join(_render_children(soup))


def canonicalize_markup(markup: str, config: ParserConfig = DEFAULT_PARSER_CONFIG) -> str:
    """Parse and re-emit markup so it follows the normalized dialect."""
    return render_markup(tokenize(markup, config))


def normalize_html(html: str) -> str:
    raw = html_to_markup(html)
    cleaned = apply_rules(raw, WORD_CLEANUP_RULES)
    return canonicalize_markup(cleaned)


def docx_to_html(data: bytes) -> str:
    if not data:
        raise ExtractionError("Word document is empty")
    try:
        result = mammoth.convert_to_html(io.BytesIO(data))
    except Exception as exc:
        raise ExtractionError(f"Failed to read Word document: {exc}") from exc
    for message in result.messages:
        logger.debug("mammoth %s: %s", message.type, message.message)
    if not result.value or not result.value.strip():
        raise ExtractionError("No content was extracted from the Word document")
    logger.debug("mammoth produced %s characters of HTML", len(result.value))
    return result.value


def parse_word(data: bytes) -> ConversionResult:
    """Convert .docx bytes into normalized markup."""
    html = docx_to_html(data)
    markup = normalize_html(html)
    if not markup.strip():
        raise ExtractionError("Word document contains no text")
    metadata = ConversionMetadata(
        page_count=1,
        has_tables="<table" in html,
        has_images="<img" in html,
    )
    logger.info("Parsed Word document: %s markup characters", len(markup))
    return ConversionResult(markup=markup, metadata=metadata)
