"""Document record models exchanged with the persistence layer."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class DocumentStatus(str, Enum):
    PROCESSING = "processing"
    COMPLETED = "completed"
    ERROR = "error"

    @property
    def is_terminal(self) -> bool:
        return self is not DocumentStatus.PROCESSING


class FileType(str, Enum):
    PDF = "pdf"
    DOCX = "docx"


class DocumentCreate(BaseModel):
    """Fields captured when an upload starts a translation job."""

    filename: str
    file_type: FileType
    original_markup: str = ""
    translated_markup: str = ""
    source_language: str
    target_language: str
    preserve_formatting: bool = True
    custom_prompt: Optional[str] = None


class DocumentSummary(BaseModel):
    """Listing view of a stored document."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    filename: str
    file_type: FileType
    file_size: int = 0
    status: DocumentStatus
    source_language: str
    target_language: str
    preserve_formatting: bool = True
    error_message: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class DocumentRecord(DocumentSummary):
    """Full stored document including markup and detected metadata."""

    original_markup: str = ""
    translated_markup: str = ""
    custom_prompt: Optional[str] = None
    page_count: int = 0
    has_headers: bool = False
    has_footers: bool = False
    has_tables: bool = False
    has_images: bool = False


class DocumentListParams(BaseModel):
    """Filtering, sorting and pagination for document listings."""

    page: int = Field(default=1, ge=1)
    limit: int = Field(default=10, ge=1, le=100)
    sort_by: str = "date"
    sort_order: str = Field(default="desc", pattern="^(asc|desc)$")
    status: Optional[DocumentStatus] = None
    file_type: Optional[FileType] = None
    source_language: Optional[str] = None
    target_language: Optional[str] = None
    from_date: Optional[datetime] = None
    to_date: Optional[datetime] = None


class DocumentPage(BaseModel):
    """One page of a document listing."""

    documents: List[DocumentSummary]
    total: int
    current_page: int
    total_pages: int
    has_next_page: bool
    has_previous_page: bool
