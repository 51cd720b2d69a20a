"""Extract plain resume text from an uploaded .txt or .pdf file."""
import io
import logging

from pypdf import PdfReader
from pypdf.errors import PdfReadError

logger = logging.getLogger("app.extraction")

PDF_MIME_TYPES = ("application/pdf", "application/x-pdf")


def _looks_like_text(text: str) -> bool:
    printable = sum(1 for c in text if c.isprintable() or c.isspace())
    return len(text) > 0 and printable / len(text) > 0.85


def extract_resume_text(content: bytes, filename: str | None, mime_type: str | None) -> str:
    is_pdf = mime_type in PDF_MIME_TYPES or (filename or "").lower().endswith(".pdf")
    if is_pdf:
        try:
            reader = PdfReader(io.BytesIO(content))
            pages = [page.extract_text() or "" for page in reader.pages]
            return "\n".join(pages).strip()
        except PdfReadError as exc:
            logger.warning("Could not read PDF %s: %s", filename, exc)
            return ""

    text = content.decode("utf-8", errors="ignore")
    if _looks_like_text(text):
        return text.strip()
    return ""
