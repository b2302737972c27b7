"""Exception hierarchy shared by the conversion pipeline and the API."""

from __future__ import annotations


class DocTranslateError(Exception):
    """Base class for all application errors."""


class ExtractionError(DocTranslateError):
    """The binary parser failed or produced no usable content."""


class UnsupportedFileType(DocTranslateError):
    """The uploaded file is neither a PDF nor a .docx document."""


class TranslationError(DocTranslateError):
    """The language model call failed or returned nothing."""


class DocumentNotFound(DocTranslateError):
    def __init__(self, document_id: str) -> None:
        super().__init__(f"Document {document_id} not found")
        self.document_id = document_id


class InvalidStatusTransition(DocTranslateError):
    """A finished job (completed or error) cannot change status again."""


class PipelineError(DocTranslateError):
    """A translation job failed; ``stage`` names the step that broke."""

    def __init__(self, stage: str, message: str) -> None:
        super().__init__(f"{stage} failed: {message}")
        self.stage = stage
        self.message = message
