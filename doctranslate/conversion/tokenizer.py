"""Parse normalized markup into a flat token sequence and emit it back.

The heavy lifting is done by ``markdown-it-py``; this module maps its tokens
onto the small ``TokenKind`` vocabulary the reconstructor understands and
pairs every open token with its close token by index.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Tuple

from markdown_it import MarkdownIt
from pydantic import BaseModel, ConfigDict

from doctranslate.models.markup import MarkupToken, TokenKind

logger = logging.getLogger(__name__)


class ParserConfig(BaseModel):
    """Immutable markdown-it configuration passed into every tokenize call."""

    model_config = ConfigDict(frozen=True)

    preset: str = "commonmark"
    breaks: bool = True
    html: bool = False
    typographer: bool = False
    # Indented code and setext headings would reinterpret extracted text.
    disabled_rules: Tuple[str, ...] = ("code", "lheading", "html_block", "html_inline")


DEFAULT_PARSER_CONFIG = ParserConfig()

_KIND_BY_TYPE: Dict[str, TokenKind] = {
    "heading_open": TokenKind.OPEN_HEADING,
    "heading_close": TokenKind.CLOSE_HEADING,
    "paragraph_open": TokenKind.OPEN_PARAGRAPH,
    "paragraph_close": TokenKind.CLOSE_PARAGRAPH,
    "bullet_list_open": TokenKind.OPEN_LIST,
    "ordered_list_open": TokenKind.OPEN_LIST,
    "bullet_list_close": TokenKind.CLOSE_LIST,
    "ordered_list_close": TokenKind.CLOSE_LIST,
    "list_item_open": TokenKind.OPEN_LIST_ITEM,
    "list_item_close": TokenKind.CLOSE_LIST_ITEM,
    "inline": TokenKind.TEXT,
    "hr": TokenKind.RULE,
}

_OPEN_FAMILY: Dict[TokenKind, str] = {
    TokenKind.OPEN_HEADING: "heading",
    TokenKind.OPEN_PARAGRAPH: "paragraph",
    TokenKind.OPEN_LIST: "list",
    TokenKind.OPEN_LIST_ITEM: "list_item",
}

_CLOSE_FAMILY: Dict[TokenKind, str] = {
    TokenKind.CLOSE_HEADING: "heading",
    TokenKind.CLOSE_PARAGRAPH: "paragraph",
    TokenKind.CLOSE_LIST: "list",
    TokenKind.CLOSE_LIST_ITEM: "list_item",
}

_VERBATIM_TYPES = {"fence", "code_block", "html_block"}


def build_parser(config: ParserConfig = DEFAULT_PARSER_CONFIG) -> MarkdownIt:
    parser = MarkdownIt(
        config.preset,
        {"breaks": config.breaks, "html": config.html, "typographer": config.typographer},
    )
    if config.disabled_rules:
        parser.disable(list(config.disabled_rules), ignoreInvalid=True)
    return parser


def match_pairs(tokens: List[MarkupToken]) -> Dict[int, int]:
    """Pair open and close tokens of the same family with a stack per family.

    A close token met while its family's stack is empty, and open tokens still
    on a stack at the end of the stream, stay unpaired. The returned mapping
    holds both directions (open -> close and close -> open).
    """
    stacks: Dict[str, List[int]] = {}
    pairs: Dict[int, int] = {}
    for index, token in enumerate(tokens):
        family = _OPEN_FAMILY.get(token.kind)
        if family:
            stacks.setdefault(family, []).append(index)
            continue
        family = _CLOSE_FAMILY.get(token.kind)
        if family:
            stack = stacks.get(family)
            if not stack:
                logger.debug("Unmatched %s at token %s", token.kind.value, index)
                continue
            opener = stack.pop()
            pairs[opener] = index
            pairs[index] = opener
    return pairs


def _convert(raw) -> MarkupToken:
    kind = _KIND_BY_TYPE.get(raw.type, TokenKind.OTHER)
    token = MarkupToken(kind=kind, depth=raw.level, source_type=raw.type)
    if kind in (TokenKind.OPEN_HEADING, TokenKind.CLOSE_HEADING):
        token.level = int(raw.tag[1:]) if raw.tag[1:].isdigit() else 1
    elif raw.type.startswith("ordered_list"):
        token.ordered = True
        start = raw.attrGet("start") if raw.nesting == 1 else None
        token.start = int(start) if start is not None else 1
    if kind is TokenKind.TEXT or raw.type in _VERBATIM_TYPES:
        token.content = raw.content
    return token


def tokenize(markup: str, config: ParserConfig = DEFAULT_PARSER_CONFIG) -> List[MarkupToken]:
    """Tokenize normalized markup into block-level tokens with paired indices."""
    raw_tokens = build_parser(config).parse(markup)
    tokens = [_convert(raw) for raw in raw_tokens]
    for index, partner in match_pairs(tokens).items():
        tokens[index].match = partner
    logger.debug("Tokenized %s characters into %s tokens", len(markup), len(tokens))
    return tokens


class _ListFrame:
    __slots__ = ("ordered", "number", "indent", "marker")

    def __init__(self, ordered: bool, number: int, indent: str) -> None:
        self.ordered = ordered
        self.number = number
        self.indent = indent
        self.marker = ""


def _indent_continuation(text: str, indent: str) -> str:
    return text.replace("\n", "\n" + indent) if indent else text


def render_markup(tokens: List[MarkupToken]) -> str:
    """Emit the normalized markup dialect from a token sequence."""
    blocks: List[str] = []
    lists: List[_ListFrame] = []
    pending_marker: Optional[str] = None
    heading_level = 0

    def content_indent() -> str:
        if not lists:
            return ""
        frame = lists[-1]
        return frame.indent + " " * len(frame.marker)

    for token in tokens:
        kind = token.kind
        if kind is TokenKind.OPEN_LIST:
            indent = content_indent() if lists else ""
            lists.append(_ListFrame(token.ordered, token.start, indent))
        elif kind is TokenKind.CLOSE_LIST:
            if lists:
                lists.pop()
        elif kind is TokenKind.OPEN_LIST_ITEM and lists:
            frame = lists[-1]
            frame.marker = f"{frame.number}. " if frame.ordered else "- "
            pending_marker = frame.indent + frame.marker
        elif kind is TokenKind.CLOSE_LIST_ITEM and lists:
            frame = lists[-1]
            if frame.ordered:
                frame.number += 1
            pending_marker = None
        elif kind is TokenKind.OPEN_HEADING:
            heading_level = token.level
        elif kind is TokenKind.CLOSE_HEADING:
            heading_level = 0
        elif kind is TokenKind.TEXT:
            text = token.content.strip()
            if heading_level:
                prefix = pending_marker if pending_marker is not None else content_indent()
                pending_marker = None
                blocks.append(f"{prefix}{'#' * heading_level} {text}".rstrip())
                continue
            if not text:
                continue
            indent = content_indent()
            if pending_marker is not None:
                blocks.append(pending_marker + _indent_continuation(text, indent))
                pending_marker = None
            else:
                blocks.append(indent + _indent_continuation(text, indent))
        elif kind is TokenKind.RULE:
            blocks.append(content_indent() + "---")
        elif token.source_type in _VERBATIM_TYPES and token.content.strip():
            lines = [line.strip() for line in token.content.strip().splitlines()]
            blocks.append("\n".join(line for line in lines if line))
    return "\n\n".join(blocks) + ("\n" if blocks else "")
