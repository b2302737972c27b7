import io

import fitz
import pytest
from docx import Document
from sqlalchemy.pool import StaticPool

from doctranslate.models.fragments import PositionedTextFragment
from doctranslate.storage import DocumentService, init_db, make_engine, make_session_factory


def fragment(text, size=12.0, y=100.0, x=72.0, font="Helvetica", width=0.0):
    return PositionedTextFragment(text=text, font_size=size, font_name=font, x=x, y=y, width=width)


@pytest.fixture
def document_service():
    engine = make_engine("sqlite://", poolclass=StaticPool)
    init_db(engine)
    yield DocumentService(make_session_factory(engine))
    engine.dispose()


@pytest.fixture
def sample_pdf_bytes():
    doc = fitz.open()
    page = doc.new_page()
    page.insert_text((72, 72), "Annual Report", fontsize=24, fontname="hebo")
    page.insert_text((72, 120), "The committee met twice this year.", fontsize=12, fontname="helv")
    page.insert_text((72, 160), "- Budget approved", fontsize=12, fontname="helv")
    data = doc.tobytes()
    doc.close()
    return data


@pytest.fixture
def sample_docx_bytes():
    document = Document()
    document.add_heading("Meeting Notes", level=1)
    document.add_paragraph("Attendance was high.")
    paragraph = document.add_paragraph()
    paragraph.add_run("Decision").bold = True
    paragraph.add_run(": approved")
    buffer = io.BytesIO()
    document.save(buffer)
    return buffer.getvalue()
