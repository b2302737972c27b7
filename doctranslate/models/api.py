"""Request/response models for the public API."""

from __future__ import annotations

from pydantic import BaseModel


class TranslationResponse(BaseModel):
    """Result of a translation job when the file is not streamed directly."""

    document_id: str
    filename: str
    content: str
    document: str


class DeleteResponse(BaseModel):
    id: str
    deleted: bool = True
