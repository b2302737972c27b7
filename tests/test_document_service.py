import pytest

from doctranslate.errors import DocumentNotFound, InvalidStatusTransition
from doctranslate.models.document import DocumentCreate, DocumentListParams, DocumentStatus, FileType
from doctranslate.utils.pagination import calculate_pagination, format_file_size


def _create(service, filename="report.pdf", **overrides):
    values = dict(
        filename=filename,
        file_type=FileType.PDF,
        original_markup="# Report",
        source_language="en",
        target_language="es",
    )
    values.update(overrides)
    return service.create_document(DocumentCreate(**values))


def test_create_and_get(document_service):
    created = _create(document_service)
    fetched = document_service.get_document(created.id)
    assert fetched.status is DocumentStatus.PROCESSING
    assert fetched.file_type is FileType.PDF
    assert fetched.file_size == len("# Report")
    assert fetched.translated_markup == ""


def test_update_document_recomputes_size(document_service):
    created = _create(document_service)
    updated = document_service.update_document(created.id, original_markup="ñandú", page_count=2)
    assert updated.file_size == len("ñandú".encode("utf-8"))
    assert updated.page_count == 2


def test_update_rejects_unknown_fields(document_service):
    created = _create(document_service)
    with pytest.raises(ValueError):
        document_service.update_document(created.id, id="other")


def test_terminal_status_cannot_change(document_service):
    created = _create(document_service)
    document_service.update_status(created.id, DocumentStatus.ERROR, "Translation failed: boom")
    with pytest.raises(InvalidStatusTransition):
        document_service.update_status(created.id, DocumentStatus.COMPLETED)
    with pytest.raises(InvalidStatusTransition):
        document_service.update_document(created.id, status=DocumentStatus.PROCESSING)
    record = document_service.get_document(created.id)
    assert record.status is DocumentStatus.ERROR
    assert record.error_message == "Translation failed: boom"


def test_missing_document(document_service):
    with pytest.raises(DocumentNotFound):
        document_service.get_document("missing")
    with pytest.raises(DocumentNotFound):
        document_service.delete_document("missing")


def test_delete(document_service):
    created = _create(document_service)
    document_service.delete_document(created.id)
    with pytest.raises(DocumentNotFound):
        document_service.get_document(created.id)


def test_list_filters_sorts_and_paginates(document_service):
    for name in ("b.pdf", "a.pdf", "c.pdf"):
        _create(document_service, filename=name)
    _create(document_service, filename="d.docx", file_type=FileType.DOCX, target_language="fr")

    page = document_service.list_documents(DocumentListParams(sort_by="name", sort_order="asc", limit=2))
    assert [doc.filename for doc in page.documents] == ["a.pdf", "b.pdf"]
    assert page.total == 4
    assert page.total_pages == 2
    assert page.has_next_page and not page.has_previous_page

    second = document_service.list_documents(DocumentListParams(sort_by="name", sort_order="asc", limit=2, page=2))
    assert [doc.filename for doc in second.documents] == ["c.pdf", "d.docx"]
    assert second.has_previous_page and not second.has_next_page

    french = document_service.list_documents(DocumentListParams(target_language="fr"))
    assert [doc.filename for doc in french.documents] == ["d.docx"]

    pdfs = document_service.list_documents(DocumentListParams(file_type=FileType.PDF))
    assert pdfs.total == 3


def test_list_by_status(document_service):
    done = _create(document_service, filename="done.pdf")
    _create(document_service, filename="pending.pdf")
    document_service.update_status(done.id, DocumentStatus.COMPLETED)
    page = document_service.list_documents(DocumentListParams(status=DocumentStatus.COMPLETED))
    assert [doc.filename for doc in page.documents] == ["done.pdf"]


def test_pagination_helpers():
    assert calculate_pagination(0, 1, 10) == {
        "current_page": 1,
        "total_pages": 0,
        "has_next_page": False,
        "has_previous_page": False,
    }
    assert calculate_pagination(21, 2, 10)["total_pages"] == 3
    assert format_file_size(512) == "512.0 B"
    assert format_file_size(1536) == "1.5 KB"
    assert format_file_size(5 * 1024 ** 3) == "5.0 GB"
