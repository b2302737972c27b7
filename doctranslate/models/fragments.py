"""Positioned text extracted from PDF pages and the conversion result."""

from __future__ import annotations

from typing import List

from pydantic import BaseModel, Field


class PositionedTextFragment(BaseModel):
    """One span of text as laid out on a PDF page.

    Coordinates follow PyMuPDF: the origin is the top-left corner of the page
    and ``y`` grows downward. ``y`` is the text baseline.
    """

    text: str
    font_size: float
    font_name: str = ""
    x: float
    y: float
    width: float = 0.0

    @property
    def right(self) -> float:
        return self.x + self.width


class PdfPage(BaseModel):
    """Fragments of a single page in extractor order."""

    number: int
    width: float = 612.0
    height: float = 792.0
    fragments: List[PositionedTextFragment] = Field(default_factory=list)
    has_images: bool = False


class ConversionMetadata(BaseModel):
    """Informational flags detected while extracting a document."""

    page_count: int = 1
    has_headers: bool = False
    has_footers: bool = False
    has_tables: bool = False
    has_images: bool = False


class ConversionResult(BaseModel):
    """Normalized markup plus the metadata side-channel."""

    markup: str
    metadata: ConversionMetadata = Field(default_factory=ConversionMetadata)
