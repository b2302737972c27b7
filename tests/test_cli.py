from docx import Document

from doctranslate.cli import main


def test_markup_command_prints_pdf_markup(tmp_path, sample_pdf_bytes, capsys):
    source = tmp_path / "report.pdf"
    source.write_bytes(sample_pdf_bytes)

    assert main(["markup", str(source)]) == 0
    output = capsys.readouterr().out
    assert "Annual Report" in output
    assert "- Budget approved" in output


def test_markup_command_writes_output_file(tmp_path, sample_pdf_bytes):
    source = tmp_path / "report.pdf"
    source.write_bytes(sample_pdf_bytes)
    target = tmp_path / "report.md"

    assert main(["markup", str(source), "-o", str(target)]) == 0
    assert "Annual Report" in target.read_text(encoding="utf-8")


def test_docx_command_packs_markup(tmp_path):
    source = tmp_path / "notes.md"
    source.write_text("# Notes\n\n**Decision**: approved\n", encoding="utf-8")

    assert main(["docx", str(source)]) == 0
    document = Document(str(tmp_path / "notes.docx"))
    texts = [paragraph.text for paragraph in document.paragraphs]
    assert "Notes" in texts
    assert "Decision: approved" in texts


def test_unsupported_input_returns_error_code(tmp_path):
    source = tmp_path / "notes.txt"
    source.write_text("plain", encoding="utf-8")
    assert main(["markup", str(source)]) == 1
