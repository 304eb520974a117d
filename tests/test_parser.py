import pytest

import app.services.parser as parser_module
from app.services.parser import UnsupportedFormatError, extract_text


class _FakePage:
    def __init__(self, text):
        self._text = text

    def extract_text(self):
        return self._text


class _FakePdf:
    def __init__(self, pages):
        self.pages = [_FakePage(text) for text in pages]

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False


def test_plain_text_is_decoded_verbatim():
    content = "Jane Doe\r\nEngineer".encode("utf-8")
    assert extract_text(content, "resume.txt", "text/plain") == "Jane Doe\r\nEngineer"


def test_plain_text_detected_by_content_type_only():
    assert extract_text(b"hello", "upload", "text/markdown") == "hello"


def test_plain_text_replaces_invalid_bytes():
    text = extract_text(b"caf\xe9", "resume.txt")
    assert text.startswith("caf")


def test_pdf_pages_are_joined_and_cid_artifacts_removed(monkeypatch):
    monkeypatch.setattr(
        parser_module.pdfplumber,
        "open",
        lambda _stream: _FakePdf(["Jane (cid:3)Doe", None, "Skills: Go"]),
    )
    text = extract_text(b"%PDF-1.4", "resume.pdf", "application/pdf")
    assert text == "Jane Doe\n\nSkills: Go"


def test_malformed_pdf_raises_value_error():
    with pytest.raises(ValueError, match="Failed to parse PDF file"):
        extract_text(b"not a pdf at all", "resume.pdf")


@pytest.mark.parametrize("filename", ["resume.doc", "resume.DOCX"])
def test_word_documents_are_rejected(filename):
    with pytest.raises(UnsupportedFormatError, match="DOC and DOCX formats are not supported"):
        extract_text(b"PK\x03\x04", filename, "application/octet-stream")


def test_unknown_types_are_rejected():
    with pytest.raises(UnsupportedFormatError, match="Unsupported file type"):
        extract_text(b"\x89PNG", "photo.png", "image/png")
    with pytest.raises(UnsupportedFormatError):
        extract_text(b"data", "no_extension", None)
