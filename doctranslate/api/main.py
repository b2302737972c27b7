"""FastAPI application entry point."""

from __future__ import annotations

import base64
import logging
from datetime import datetime
from functools import lru_cache
from typing import Optional
from urllib.parse import quote

from fastapi import Depends, FastAPI, File, Form, HTTPException, Query, UploadFile
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import Response

from doctranslate.config import settings
from doctranslate.constants import DOCX_MIME
from doctranslate.errors import DocumentNotFound, PipelineError, UnsupportedFileType
from doctranslate.models.api import DeleteResponse, TranslationResponse
from doctranslate.models.document import (
    DocumentListParams,
    DocumentPage,
    DocumentRecord,
    DocumentStatus,
    FileType,
)
from doctranslate.services.translation_service import (
    TranslationOptions,
    TranslationOutcome,
    TranslationService,
)
from doctranslate.storage import DocumentService, init_db, make_engine, make_session_factory

logger = logging.getLogger(__name__)

# Stages whose failures are caused by the upload rather than the server.
CLIENT_STAGES = {"parse", "download"}

app = FastAPI(
    title="DocTranslate",
    description="Translate PDF and Word documents while keeping their structure",
    version="0.1.0",
)


@lru_cache(maxsize=1)
def get_document_service() -> DocumentService:
    engine = make_engine()
    init_db(engine)
    return DocumentService(make_session_factory(engine))


def get_translation_service(
    documents: DocumentService = Depends(get_document_service),
) -> TranslationService:
    return TranslationService(documents)


def _content_disposition(filename: str) -> str:
    fallback = filename.encode("ascii", "ignore").decode("ascii").replace('"', "") or "document.docx"
    return f"attachment; filename=\"{fallback}\"; filename*=UTF-8''{quote(filename)}"


def _docx_response(outcome: TranslationOutcome) -> Response:
    return Response(
        content=outcome.docx,
        media_type=DOCX_MIME,
        headers={"Content-Disposition": _content_disposition(outcome.filename)},
    )


def _pipeline_http_error(exc: PipelineError) -> HTTPException:
    status_code = 400 if exc.stage in CLIENT_STAGES else 500
    return HTTPException(status_code=status_code, detail=str(exc))


@app.get("/health")
def health() -> dict[str, str]:
    """Simple readiness probe."""
    return {"status": "ok"}


@app.post("/translate", response_model=TranslationResponse)
async def translate(
    file: UploadFile = File(...),
    source_language: Optional[str] = Form(None),
    target_language: Optional[str] = Form(None),
    preserve_formatting: bool = Form(True),
    custom_prompt: Optional[str] = Form(None),
    download_directly: bool = Form(False),
    service: TranslationService = Depends(get_translation_service),
):
    """Translate an uploaded PDF or .docx file."""
    if not source_language or not target_language:
        raise HTTPException(status_code=400, detail="Source and target languages are required")
    data = await file.read()
    if not data:
        raise HTTPException(status_code=400, detail="No file provided")
    if len(data) > settings.max_upload_bytes:
        raise HTTPException(status_code=413, detail="Uploaded file is too large")

    options = TranslationOptions(
        source_language=source_language,
        target_language=target_language,
        preserve_formatting=preserve_formatting,
        custom_prompt=custom_prompt or None,
    )
    try:
        outcome = await run_in_threadpool(
            service.process_document, file.filename or "document", file.content_type, data, options
        )
    except UnsupportedFileType as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except PipelineError as exc:
        raise _pipeline_http_error(exc) from exc

    if download_directly:
        return _docx_response(outcome)
    return TranslationResponse(
        document_id=outcome.document_id,
        filename=outcome.filename,
        content=outcome.markup,
        document=base64.b64encode(outcome.docx).decode("ascii"),
    )


@app.get("/documents", response_model=DocumentPage)
def list_documents(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    sort_by: str = "date",
    sort_order: str = Query("desc", pattern="^(asc|desc)$"),
    status: Optional[DocumentStatus] = None,
    file_type: Optional[FileType] = None,
    source_language: Optional[str] = None,
    target_language: Optional[str] = None,
    from_date: Optional[datetime] = None,
    to_date: Optional[datetime] = None,
    documents: DocumentService = Depends(get_document_service),
) -> DocumentPage:
    params = DocumentListParams(
        page=page,
        limit=limit,
        sort_by=sort_by,
        sort_order=sort_order,
        status=status,
        file_type=file_type,
        source_language=source_language,
        target_language=target_language,
        from_date=from_date,
        to_date=to_date,
    )
    return documents.list_documents(params)


@app.get("/documents/{document_id}", response_model=DocumentRecord)
def get_document(
    document_id: str, documents: DocumentService = Depends(get_document_service)
) -> DocumentRecord:
    try:
        return documents.get_document(document_id)
    except DocumentNotFound as exc:
        raise HTTPException(status_code=404, detail="Document not found") from exc


@app.delete("/documents/{document_id}", response_model=DeleteResponse)
def delete_document(
    document_id: str, documents: DocumentService = Depends(get_document_service)
) -> DeleteResponse:
    try:
        documents.delete_document(document_id)
    except DocumentNotFound as exc:
        raise HTTPException(status_code=404, detail="Document not found") from exc
    return DeleteResponse(id=document_id)


@app.get("/documents/{document_id}/download")
def download_document(
    document_id: str, service: TranslationService = Depends(get_translation_service)
) -> Response:
    try:
        outcome = service.render_download(document_id)
    except DocumentNotFound as exc:
        raise HTTPException(status_code=404, detail="Document not found") from exc
    except PipelineError as exc:
        raise _pipeline_http_error(exc) from exc
    except Exception as exc:
        logger.error("Rebuilding document %s failed: %s", document_id, exc)
        raise HTTPException(status_code=500, detail="Failed to download document") from exc
    return _docx_response(outcome)
