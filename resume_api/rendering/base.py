from __future__ import annotations

from typing import Protocol

from resume_api.core.errors import RenderError
from resume_api.schemas.resume import ResumeContent

PDF_MAGIC = b"%PDF"


class PdfRenderer(Protocol):
    name: str

    def render(self, content: ResumeContent, *, title: str | None = None) -> bytes: ...


def ensure_pdf_bytes(data: bytes | bytearray | None) -> bytes:
    if not data:
        raise RenderError("Generated PDF buffer is empty")
    payload = bytes(data)
    if not payload.startswith(PDF_MAGIC):
        raise RenderError("Generated buffer is not a valid PDF")
    return payload
