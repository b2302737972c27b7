"""Typed models shared across the application."""

from .api import DeleteResponse, TranslationResponse
from .document import (
    DocumentCreate,
    DocumentListParams,
    DocumentPage,
    DocumentRecord,
    DocumentStatus,
    DocumentSummary,
    FileType,
)
from .fragments import ConversionMetadata, ConversionResult, PdfPage, PositionedTextFragment
from .markup import BlockKind, DocumentBlock, MarkupToken, StyledRun, TokenKind

__all__ = [
    "BlockKind",
    "ConversionMetadata",
    "ConversionResult",
    "DeleteResponse",
    "DocumentBlock",
    "DocumentCreate",
    "DocumentListParams",
    "DocumentPage",
    "DocumentRecord",
    "DocumentStatus",
    "DocumentSummary",
    "FileType",
    "MarkupToken",
    "PdfPage",
    "PositionedTextFragment",
    "StyledRun",
    "TokenKind",
    "TranslationResponse",
]
