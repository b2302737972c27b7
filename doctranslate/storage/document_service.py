"""CRUD and listing operations for stored translation jobs."""

from __future__ import annotations

import logging
from typing import Any, Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session, sessionmaker

from doctranslate.errors import DocumentNotFound, InvalidStatusTransition
from doctranslate.models.document import (
    DocumentCreate,
    DocumentListParams,
    DocumentPage,
    DocumentRecord,
    DocumentStatus,
    DocumentSummary,
)
from doctranslate.storage.orm import DocumentRow
from doctranslate.utils.pagination import calculate_pagination

logger = logging.getLogger(__name__)

SORT_COLUMNS = {
    "date": DocumentRow.created_at,
    "name": DocumentRow.filename,
    "status": DocumentRow.status,
}

_UPDATABLE_FIELDS = {
    "filename",
    "original_markup",
    "translated_markup",
    "custom_prompt",
    "status",
    "error_message",
    "page_count",
    "has_headers",
    "has_footers",
    "has_tables",
    "has_images",
}


def _sort_column(sort_by: str):
    if sort_by in SORT_COLUMNS:
        return SORT_COLUMNS[sort_by]
    column = DocumentRow.__table__.columns.get(sort_by)
    return column if column is not None else DocumentRow.created_at


class DocumentService:
    """Persists documents through a SQLAlchemy session factory."""

    def __init__(self, session_factory: sessionmaker) -> None:
        self.session_factory = session_factory

    def _load(self, session: Session, document_id: str) -> DocumentRow:
        row = session.get(DocumentRow, document_id)
        if row is None:
            raise DocumentNotFound(document_id)
        return row

    def create_document(
        self, data: DocumentCreate, status: DocumentStatus = DocumentStatus.PROCESSING
    ) -> DocumentRecord:
        values = data.model_dump()
        values["file_type"] = data.file_type.value
        row = DocumentRow(
            **values,
            status=status.value,
            file_size=len(data.original_markup.encode("utf-8")),
        )
        with self.session_factory() as session:
            session.add(row)
            session.commit()
            session.refresh(row)
            logger.info("Created document %s (%s)", row.id, row.filename)
            return DocumentRecord.model_validate(row)

    def get_document(self, document_id: str) -> DocumentRecord:
        with self.session_factory() as session:
            return DocumentRecord.model_validate(self._load(session, document_id))

    def update_document(self, document_id: str, **fields: Any) -> DocumentRecord:
        """Update stored fields; a status change follows the terminal-status guard."""
        unknown = set(fields) - _UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Cannot update document fields: {', '.join(sorted(unknown))}")
        with self.session_factory() as session:
            row = self._load(session, document_id)
            if "status" in fields:
                fields["status"] = self._checked_status(row, fields["status"])
            for name, value in fields.items():
                setattr(row, name, value)
            if "original_markup" in fields:
                row.file_size = len((row.original_markup or "").encode("utf-8"))
            session.commit()
            session.refresh(row)
            return DocumentRecord.model_validate(row)

    def update_status(
        self, document_id: str, status: DocumentStatus, error_message: Optional[str] = None
    ) -> DocumentRecord:
        with self.session_factory() as session:
            row = self._load(session, document_id)
            row.status = self._checked_status(row, status)
            row.error_message = error_message
            session.commit()
            session.refresh(row)
            logger.info("Document %s is now %s", document_id, row.status)
            return DocumentRecord.model_validate(row)

    @staticmethod
    def _checked_status(row: DocumentRow, status) -> str:
        new_status = DocumentStatus(status)
        current = DocumentStatus(row.status)
        if current.is_terminal and new_status is not current:
            raise InvalidStatusTransition(
                f"Document {row.id} is {current.value} and cannot become {new_status.value}"
            )
        return new_status.value

    def delete_document(self, document_id: str) -> None:
        with self.session_factory() as session:
            session.delete(self._load(session, document_id))
            session.commit()
            logger.info("Deleted document %s", document_id)

    def list_documents(self, params: DocumentListParams) -> DocumentPage:
        conditions = []
        if params.status:
            conditions.append(DocumentRow.status == params.status.value)
        if params.file_type:
            conditions.append(DocumentRow.file_type == params.file_type.value)
        if params.source_language:
            conditions.append(DocumentRow.source_language == params.source_language)
        if params.target_language:
            conditions.append(DocumentRow.target_language == params.target_language)
        if params.from_date:
            conditions.append(DocumentRow.created_at >= params.from_date)
        if params.to_date:
            conditions.append(DocumentRow.created_at <= params.to_date)

        column = _sort_column(params.sort_by)
        order = column.asc() if params.sort_order == "asc" else column.desc()
        query = (
            select(DocumentRow)
            .where(*conditions)
            .order_by(order, DocumentRow.id)
            .offset((params.page - 1) * params.limit)
            .limit(params.limit)
        )
        with self.session_factory() as session:
            total = session.scalar(select(func.count()).select_from(DocumentRow).where(*conditions)) or 0
            rows = session.scalars(query).all()
            documents = [DocumentSummary.model_validate(row) for row in rows]
        return DocumentPage(documents=documents, total=total, **calculate_pagination(total, params.page, params.limit))
