from __future__ import annotations

import logging
from io import BytesIO

from pypdf import PdfReader
from pypdf.errors import PdfReadError

from resume_api.core.errors import ValidationError

from .models import ParsedDoc

logger = logging.getLogger(__name__)

PDF_MAGIC = b"%PDF"


def _open_reader(content: bytes) -> PdfReader:
    if PDF_MAGIC not in content[:1024]:
        raise ValidationError("File is not a PDF document.")
    try:
        reader = PdfReader(BytesIO(content))
        _ = len(reader.pages)
    except (PdfReadError, ValueError, OSError) as exc:
        raise ValidationError(f"PDF could not be read: {exc}") from exc
    return reader


def inspect_pdf(content: bytes) -> int:
    """Check that ``content`` is a readable PDF and return its page count."""
    reader = _open_reader(content)
    page_count = len(reader.pages)
    if page_count == 0:
        raise ValidationError("PDF has no pages.")
    return page_count


def parse_pdf_bytes(content: bytes) -> ParsedDoc:
    reader = _open_reader(content)
    warnings: list[str] = []
    text_parts: list[str] = []

    for index, page in enumerate(reader.pages, start=1):
        try:
            page_text = (page.extract_text() or "").strip()
        except (PdfReadError, ValueError, KeyError) as exc:
            warnings.append(f"Text extraction failed on page {index}: {exc}")
            logger.warning("pdf_page_extract_failed page=%s: %s", index, exc)
            continue
        if page_text:
            text_parts.append(page_text)

    if not text_parts:
        warnings.append("No extractable text found in PDF.")

    return ParsedDoc(
        page_count=len(reader.pages),
        text="\n".join(text_parts),
        parsing_warnings=warnings,
    )
