"""Token, run and block models used between tokenizer, reconstructor and packer."""

from __future__ import annotations

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field


class TokenKind(str, Enum):
    OPEN_HEADING = "open_heading"
    CLOSE_HEADING = "close_heading"
    OPEN_PARAGRAPH = "open_paragraph"
    CLOSE_PARAGRAPH = "close_paragraph"
    OPEN_LIST = "open_list"
    CLOSE_LIST = "close_list"
    OPEN_LIST_ITEM = "open_list_item"
    CLOSE_LIST_ITEM = "close_list_item"
    TEXT = "text"
    RULE = "rule"
    OTHER = "other"


class MarkupToken(BaseModel):
    """A flat block-level token produced from normalized markup."""

    kind: TokenKind
    level: int = 0
    ordered: bool = False
    start: int = 1
    content: str = ""
    depth: int = 0
    match: Optional[int] = Field(
        default=None, description="Index of the paired open/close token, if any."
    )
    source_type: str = ""


class StyledRun(BaseModel):
    """Contiguous text sharing one bold/italic state."""

    text: str = ""
    bold: bool = False
    italic: bool = False
    line_break: bool = False


class BlockKind(str, Enum):
    HEADING = "heading"
    PARAGRAPH = "paragraph"
    LIST_ITEM = "list_item"
    RULE = "rule"


class DocumentBlock(BaseModel):
    """One structural unit ready for the word-processor packer."""

    kind: BlockKind
    level: int = 0
    ordered: bool = False
    depth: int = 0
    runs: List[StyledRun] = Field(default_factory=list)

    @property
    def text(self) -> str:
        return "".join("\n" if run.line_break else run.text for run in self.runs)
