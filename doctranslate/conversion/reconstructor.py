"""Walk markup tokens and emit word-processor blocks in source order."""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Tuple

from doctranslate.config import settings
from doctranslate.conversion.segmenter import segment_text
from doctranslate.conversion.tokenizer import DEFAULT_PARSER_CONFIG, ParserConfig, match_pairs, tokenize
from doctranslate.models.markup import BlockKind, DocumentBlock, MarkupToken, TokenKind

logger = logging.getLogger(__name__)


def _following_text(tokens: List[MarkupToken], index: int) -> Optional[str]:
    if index + 1 < len(tokens) and tokens[index + 1].kind is TokenKind.TEXT:
        return tokens[index + 1].content
    return None


def _text_block(tokens: List[MarkupToken], index: int) -> Optional[DocumentBlock]:
    token = tokens[index]
    content = _following_text(tokens, index)
    if content is None:
        logger.warning("Skipping %s at token %s without text content", token.kind.value, index)
        return None
    if token.kind is TokenKind.OPEN_HEADING:
        return DocumentBlock(kind=BlockKind.HEADING, level=token.level, runs=segment_text(content))
    return DocumentBlock(kind=BlockKind.PARAGRAPH, runs=segment_text(content))


class _BlockBuilder:
    """Single forward pass over one token sequence."""

    def __init__(self, tokens: List[MarkupToken], track_nesting: bool) -> None:
        self.tokens = tokens
        self.pairs: Dict[int, int] = match_pairs(tokens)
        self.track_nesting = track_nesting
        self.blocks: List[DocumentBlock] = []

    def _close_of(self, index: int, limit: int) -> Optional[int]:
        close = self.pairs.get(index)
        if close is None or close <= index or close > limit:
            return None
        return close

    def build(self) -> List[DocumentBlock]:
        tokens = self.tokens
        end = len(tokens)
        index = 0
        # Everything after an unclosed list opener lies inside that list.
        inside_unclosed_list = False
        while index < end:
            token = tokens[index]
            kind = token.kind
            if kind in (TokenKind.OPEN_HEADING, TokenKind.OPEN_PARAGRAPH):
                block = _text_block(tokens, index)
                if block is not None:
                    self.blocks.append(block)
                close = self._close_of(index, end - 1)
                index = close + 1 if close is not None else index + 1
            elif kind is TokenKind.OPEN_LIST:
                close = self._close_of(index, end - 1)
                if close is None:
                    logger.warning("Skipping list opened at token %s without a matching close", index)
                    inside_unclosed_list = True
                elif not inside_unclosed_list:
                    self._walk_list(index, close, depth=0)
                    index = close
                index += 1
            elif kind is TokenKind.RULE:
                self.blocks.append(DocumentBlock(kind=BlockKind.RULE))
                index += 1
            else:
                index += 1
        return self.blocks

    def _walk_list(self, start: int, close: int, depth: int) -> None:
        ordered = self.tokens[start].ordered
        index = start + 1
        while index < close:
            if self.tokens[index].kind is not TokenKind.OPEN_LIST_ITEM:
                index += 1
                continue
            item_close = self._close_of(index, close)
            if item_close is None:
                logger.warning("Skipping list item at token %s without a matching close", index)
                index += 1
                continue
            self._emit_item(index, item_close, ordered, depth)
            index = item_close + 1

    def _emit_item(self, start: int, close: int, ordered: bool, depth: int) -> None:
        text: Optional[str] = None
        nested: List[Tuple[int, int]] = []
        index = start + 1
        while index < close:
            token = self.tokens[index]
            if token.kind in (TokenKind.OPEN_PARAGRAPH, TokenKind.OPEN_HEADING):
                content = _following_text(self.tokens, index)
                if text is None and token.kind is TokenKind.OPEN_PARAGRAPH:
                    text = content
                elif content is not None:
                    logger.debug("Dropping extra item text at token %s", index)
                inner_close = self._close_of(index, close)
                index = inner_close + 1 if inner_close is not None else index + 1
            elif token.kind is TokenKind.OPEN_LIST:
                inner_close = self._close_of(index, close)
                if inner_close is None:
                    index += 1
                    continue
                nested.append((index, inner_close))
                index = inner_close + 1
            else:
                index += 1

        self.blocks.append(
            DocumentBlock(
                kind=BlockKind.LIST_ITEM,
                ordered=ordered,
                depth=depth if self.track_nesting else 0,
                runs=segment_text(text or ""),
            )
        )
        for nested_start, nested_close in nested:
            self._walk_list(nested_start, nested_close, depth + 1)


def build_blocks(tokens: List[MarkupToken], track_nesting: bool = True) -> List[DocumentBlock]:
    """Emit one block per heading, paragraph, list item and rule.

    Malformed structure never raises: lists or items without a matching close
    emit no list-item blocks, and openers without text are skipped. With
    ``track_nesting=False`` every list item sits at depth 0.
    """
    return _BlockBuilder(tokens, track_nesting).build()


def markup_to_blocks(
    markup: str,
    config: ParserConfig = DEFAULT_PARSER_CONFIG,
    track_nesting: Optional[bool] = None,
) -> List[DocumentBlock]:
    if track_nesting is None:
        track_nesting = settings.list_nesting
    blocks = build_blocks(tokenize(markup, config), track_nesting=track_nesting)
    logger.debug("Reconstructed %s blocks", len(blocks))
    return blocks
