import io
import zipfile

import pytest

from resumatch.ai.client import DocumentPart, document_to_parts
from resumatch.core.errors import AnalysisError, UnsupportedDocumentError
from resumatch.utils.documents import DOCX, normalize_mime, read_document_text

_DOC_XML = (
    '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'
    '<w:document xmlns:w="http://schemas.openxmlformats.org/wordprocessingml/2006/main"><w:body>'
    "<w:p><w:r><w:t>Jane Doe</w:t></w:r></w:p>"
    "<w:p><w:r><w:t>Senior </w:t></w:r><w:r><w:t>Engineer</w:t></w:r></w:p>"
    "<w:p></w:p>"
    "</w:body></w:document>"
)


def make_docx(xml=_DOC_XML):
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w") as zf:
        zf.writestr("word/document.xml", xml)
    return buf.getvalue()


def test_normalize_mime():
    assert normalize_mime("Application/PDF; charset=binary") == "application/pdf"
    assert normalize_mime(None) == ""


def test_docx_paragraphs():
    assert read_document_text(make_docx(), DOCX) == "Jane Doe\nSenior Engineer"


def test_plain_text():
    assert read_document_text(b"  hello\r\nworld \n", "text/plain") == "hello\nworld"


@pytest.mark.parametrize("data,mime", [
    (b"not a zip", DOCX),
    (make_docx('<w:document xmlns:w="http://schemas.openxmlformats.org/wordprocessingml/2006/main"/>'), DOCX),
    (b"   ", "text/plain"),
])
def test_unreadable_documents(data, mime):
    with pytest.raises(ValueError):
        read_document_text(data, mime)


def test_unsupported_type():
    with pytest.raises(UnsupportedDocumentError):
        read_document_text(b"x", "application/zip")


def test_images_are_sent_inline():
    (part,) = document_to_parts(DocumentPart(b"\x89PNG", "image/png"))
    assert part["type"] == "image_url"
    assert part["image_url"]["url"].startswith("data:image/png;base64,")


def test_documents_are_sent_as_text():
    (part,) = document_to_parts(DocumentPart(make_docx(), DOCX))
    assert part["type"] == "text"
    assert "Senior Engineer" in part["text"]


def test_unreadable_document_part_fails_the_analysis():
    with pytest.raises(AnalysisError):
        document_to_parts(DocumentPart(b"broken", DOCX))
