import io
import zipfile
from xml.etree import ElementTree

from pypdf import PdfReader
from pypdf.errors import PdfReadError

from resumatch.core.errors import UnsupportedDocumentError


PDF = "application/pdf"
DOCX = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
TEXT_TYPES = {"text/plain", "text/markdown"}
IMAGE_TYPES = {"image/png", "image/jpeg", "image/webp"}

# what the upload form accepts
UPLOAD_TYPES = {PDF, DOCX}
SUPPORTED_TYPES = UPLOAD_TYPES | TEXT_TYPES | IMAGE_TYPES

_W = "{http://schemas.openxmlformats.org/wordprocessingml/2006/main}"


def normalize_mime(mime_type: str | None) -> str:
	return (mime_type or "").split(";")[0].strip().lower()


def extract_pdf_text(file) -> tuple[str, int, int]:
	reader = PdfReader(file)
	pages = len(reader.pages)
	text = []
	for p in reader.pages:
		try:
			t = p.extract_text() or ""
		except (PdfReadError, ValueError, KeyError):
			t = ""
		text.append(t)
	joined = "\n".join(text)
	return joined, pages, len(joined)


def extract_docx_text(file) -> str:
	texts: list[str] = []
	with zipfile.ZipFile(file) as zf:
		with zf.open("word/document.xml") as f:
			tree = ElementTree.parse(f)
			for para in tree.iter(f"{_W}p"):
				parts = [node.text for node in para.iter(f"{_W}t") if node.text]
				if parts:
					texts.append("".join(parts))
	return "\n".join(texts)


def read_document_text(data: bytes, mime_type: str) -> str:
	"""Plain text of a PDF, DOCX or text document; raises ValueError if nothing is readable."""
	mime = normalize_mime(mime_type)
	if mime == PDF:
		try:
			text, _, _ = extract_pdf_text(io.BytesIO(data))
		except PdfReadError as exc:
			raise ValueError(f"Could not read PDF: {exc}") from exc
	elif mime == DOCX:
		try:
			text = extract_docx_text(io.BytesIO(data))
		except (zipfile.BadZipFile, KeyError, ElementTree.ParseError) as exc:
			raise ValueError(f"Could not read DOCX: {exc}") from exc
	elif mime in TEXT_TYPES:
		text = data.decode("utf-8", "ignore")
	else:
		raise UnsupportedDocumentError(f"Unsupported document type: {mime or 'unknown'}")
	text = text.replace("\r", "").strip()
	if not text:
		raise ValueError("Could not extract any text from the document")
	return text
