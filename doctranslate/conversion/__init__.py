"""PDF/Word to markup normalization and markup to .docx reconstruction."""

from __future__ import annotations

from doctranslate.errors import UnsupportedFileType
from doctranslate.models.document import FileType
from doctranslate.models.fragments import ConversionResult

from .packer import markup_to_docx, pack_document
from .pdf_normalizer import parse_pdf
from .reconstructor import build_blocks, markup_to_blocks
from .tokenizer import tokenize
from .word_normalizer import parse_word


def extract_markup(data: bytes, file_type: FileType) -> ConversionResult:
    """Dispatch to the normalizer for ``file_type``."""
    if file_type is FileType.PDF:
        return parse_pdf(data)
    if file_type is FileType.DOCX:
        return parse_word(data)
    raise UnsupportedFileType(f"Unsupported file type: {file_type}")


__all__ = [
    "build_blocks",
    "extract_markup",
    "markup_to_blocks",
    "markup_to_docx",
    "pack_document",
    "parse_pdf",
    "parse_word",
    "tokenize",
]
