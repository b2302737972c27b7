import base64
import io

import pytest
from docx import Document
from fastapi.testclient import TestClient

from doctranslate.api.main import app, get_document_service, get_translation_service
from doctranslate.constants import DOCX_MIME, PDF_MIME
from doctranslate.errors import TranslationError
from doctranslate.services.translation_service import TranslationService
from test_translation_service import FakeTranslator


@pytest.fixture
def translator():
    return FakeTranslator()


@pytest.fixture
def client(document_service, translator):
    app.dependency_overrides[get_document_service] = lambda: document_service
    app.dependency_overrides[get_translation_service] = lambda: TranslationService(document_service, translator)
    yield TestClient(app)
    app.dependency_overrides.clear()


def _upload(client, data, filename="report.pdf", content_type=PDF_MIME, **form):
    fields = {"source_language": "en", "target_language": "es"}
    fields.update(form)
    return client.post("/translate", files={"file": (filename, data, content_type)}, data=fields)


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_translate_returns_json(client, sample_pdf_bytes):
    response = _upload(client, sample_pdf_bytes)
    assert response.status_code == 200
    body = response.json()
    assert body["filename"] == "report - Spanish.docx"
    assert body["content"].startswith("# Informe")
    document = Document(io.BytesIO(base64.b64decode(body["document"])))
    assert document.paragraphs[0].text == "Informe"

    record = client.get(f"/documents/{body['document_id']}").json()
    assert record["status"] == "completed"
    assert record["target_language"] == "es"


def test_translate_direct_download(client, sample_docx_bytes):
    response = _upload(client, sample_docx_bytes, filename="notes.docx", content_type=DOCX_MIME, download_directly="true")
    assert response.status_code == 200
    assert response.headers["content-type"] == DOCX_MIME
    assert "notes - Spanish.docx" in response.headers["content-disposition"]
    assert Document(io.BytesIO(response.content)).paragraphs


def test_translate_rejects_bad_requests(client, sample_pdf_bytes):
    assert _upload(client, b"hello", filename="notes.txt", content_type="text/plain").status_code == 400
    assert _upload(client, sample_pdf_bytes, target_language="").status_code == 400
    assert _upload(client, b"garbage").status_code == 400


def test_translation_failure_is_server_error(client, translator, sample_pdf_bytes):
    translator.error = TranslationError("quota exceeded")
    response = _upload(client, sample_pdf_bytes)
    assert response.status_code == 500
    assert "translate failed" in response.json()["detail"]


def test_document_listing_and_deletion(client, sample_pdf_bytes):
    document_id = _upload(client, sample_pdf_bytes).json()["document_id"]
    _upload(client, b"garbage", filename="broken.pdf")

    listing = client.get("/documents", params={"sort_by": "name", "sort_order": "asc"}).json()
    assert listing["total"] == 2
    assert [doc["filename"] for doc in listing["documents"]] == ["broken.pdf", "report.pdf"]

    errors = client.get("/documents", params={"status": "error"}).json()
    assert [doc["filename"] for doc in errors["documents"]] == ["broken.pdf"]

    assert client.get("/documents", params={"sort_order": "sideways"}).status_code == 422

    assert client.delete(f"/documents/{document_id}").json() == {"id": document_id, "deleted": True}
    assert client.get(f"/documents/{document_id}").status_code == 404
    assert client.delete(f"/documents/{document_id}").status_code == 404


def test_download_endpoint(client, sample_pdf_bytes):
    document_id = _upload(client, sample_pdf_bytes).json()["document_id"]
    response = client.get(f"/documents/{document_id}/download")
    assert response.status_code == 200
    assert response.headers["content-type"] == DOCX_MIME

    _upload(client, b"garbage", filename="broken.pdf")
    errors = client.get("/documents", params={"status": "error"}).json()
    broken_id = errors["documents"][0]["id"]
    assert client.get(f"/documents/{broken_id}/download").status_code == 400
    assert client.get("/documents/unknown/download").status_code == 404
