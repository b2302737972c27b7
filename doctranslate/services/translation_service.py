"""Translation job pipeline: parse, translate, reconstruct and pack one upload."""

from __future__ import annotations

import logging
from pathlib import PurePath
from typing import Callable, List, Optional, TypeVar

from pydantic import BaseModel

from doctranslate.constants import DOCX_MIME, PDF_MIME, language_name
from doctranslate.conversion import extract_markup, markup_to_blocks, pack_document
from doctranslate.errors import DocTranslateError, PipelineError, UnsupportedFileType
from doctranslate.llm.translator import MarkupTranslator
from doctranslate.models.document import DocumentCreate, DocumentStatus, FileType
from doctranslate.models.markup import DocumentBlock
from doctranslate.storage.document_service import DocumentService

logger = logging.getLogger(__name__)

T = TypeVar("T")

_EXTENSIONS = {".pdf": FileType.PDF, ".docx": FileType.DOCX}
_MIME_TYPES = {PDF_MIME: FileType.PDF, DOCX_MIME: FileType.DOCX}
_STAGE_MESSAGES = {
    "parse": "Failed to parse document",
    "translate": "Translation failed",
    "reconstruct": "Failed to rebuild document structure",
    "pack": "Failed to generate Word document",
    "unexpected": "An unexpected error occurred",
}


class TranslationOptions(BaseModel):
    source_language: str
    target_language: str
    preserve_formatting: bool = True
    custom_prompt: Optional[str] = None


class TranslationOutcome(BaseModel):
    document_id: str
    filename: str
    markup: str
    docx: bytes


def resolve_file_type(filename: str, content_type: Optional[str]) -> FileType:
    """Map an upload to a file type by MIME type, then by extension."""
    mime = (content_type or "").split(";")[0].strip().lower()
    if mime in _MIME_TYPES:
        return _MIME_TYPES[mime]
    suffix = PurePath(filename or "").suffix.lower()
    if suffix in _EXTENSIONS:
        return _EXTENSIONS[suffix]
    raise UnsupportedFileType(
        f"Invalid file type: {content_type or suffix or 'unknown'}. "
        "Only PDF and Word (.docx) files are supported."
    )


def download_filename(filename: str, target_language: str) -> str:
    stem = PurePath(filename or "document").stem or "document"
    return f"{stem} - {language_name(target_language)}.docx"


def _run_stage(stage: str, step: Callable[[], T]) -> T:
    try:
        return step()
    except PipelineError:
        raise
    except Exception as exc:
        raise PipelineError(stage, str(exc) or exc.__class__.__name__) from exc


class TranslationService:
    """Runs translation jobs and records their progress in the document store."""

    def __init__(self, documents: DocumentService, translator: MarkupTranslator | None = None) -> None:
        self.documents = documents
        self.translator = translator or MarkupTranslator()

    def process_document(
        self,
        filename: str,
        content_type: Optional[str],
        data: bytes,
        options: TranslationOptions,
    ) -> TranslationOutcome:
        """Translate one upload end to end.

        The job record is created before any work starts. Whatever fails
        afterwards, the record ends in ``error`` with a readable message and a
        ``PipelineError`` naming the failed stage is raised; no document bytes
        are returned for a failed job.
        """
        file_type = resolve_file_type(filename, content_type)
        record = self.documents.create_document(
            DocumentCreate(
                filename=filename,
                file_type=file_type,
                source_language=options.source_language,
                target_language=options.target_language,
                preserve_formatting=options.preserve_formatting,
                custom_prompt=options.custom_prompt,
            )
        )
        try:
            outcome = self._run(record.id, filename, file_type, data, options)
        except PipelineError as exc:
            logger.error("Document %s failed during %s: %s", record.id, exc.stage, exc.message)
            self._record_failure(record.id, exc.stage, exc.message)
            raise
        except Exception as exc:
            logger.exception("Document %s failed unexpectedly", record.id)
            self._record_failure(record.id, "unexpected", str(exc))
            raise PipelineError("unexpected", str(exc) or exc.__class__.__name__) from exc
        return outcome

    def _run(
        self,
        document_id: str,
        filename: str,
        file_type: FileType,
        data: bytes,
        options: TranslationOptions,
    ) -> TranslationOutcome:
        logger.info("Parsing %s document %s", file_type.value, document_id)
        converted = _run_stage("parse", lambda: extract_markup(data, file_type))
        metadata = converted.metadata
        self.documents.update_document(
            document_id,
            original_markup=converted.markup,
            page_count=metadata.page_count,
            has_headers=metadata.has_headers,
            has_footers=metadata.has_footers,
            has_tables=metadata.has_tables,
            has_images=metadata.has_images,
        )

        logger.info("Translating document %s", document_id)
        translated = _run_stage(
            "translate",
            lambda: self.translator.translate(
                converted.markup,
                options.source_language,
                options.target_language,
                preserve_formatting=options.preserve_formatting,
                custom_prompt=options.custom_prompt,
            ),
        )
        self.documents.update_document(document_id, translated_markup=translated)

        logger.info("Generating Word document for %s", document_id)
        output_name = download_filename(filename, options.target_language)
        blocks: List[DocumentBlock] = _run_stage("reconstruct", lambda: markup_to_blocks(translated))
        docx = _run_stage("pack", lambda: pack_document(blocks, title=PurePath(output_name).stem))

        self.documents.update_status(document_id, DocumentStatus.COMPLETED)
        return TranslationOutcome(document_id=document_id, filename=output_name, markup=translated, docx=docx)

    def _record_failure(self, document_id: str, stage: str, detail: str) -> None:
        message = f"{_STAGE_MESSAGES.get(stage, _STAGE_MESSAGES['unexpected'])}: {detail}"
        try:
            self.documents.update_status(document_id, DocumentStatus.ERROR, message)
        except DocTranslateError as exc:
            logger.error("Could not record failure for document %s: %s", document_id, exc)

    def render_download(self, document_id: str) -> TranslationOutcome:
        """Rebuild the .docx for a completed document from its stored markup."""
        record = self.documents.get_document(document_id)
        if record.status is not DocumentStatus.COMPLETED:
            raise PipelineError("download", "Document is not ready for download")
        output_name = download_filename(record.filename, record.target_language)
        docx = pack_document(markup_to_blocks(record.translated_markup), title=PurePath(output_name).stem)
        return TranslationOutcome(
            document_id=record.id, filename=output_name, markup=record.translated_markup, docx=docx
        )
