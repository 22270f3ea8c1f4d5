from __future__ import annotations

from typing import Any

from pydantic import Field

from .records import ApplicationStatus, FidelitySummary, MasterResumeRecord, ResumeChange, TailoredResumeRecord
from .resume import CamelModel


class ErrorResponse(CamelModel):
    success: bool = False
    error: str
    code: str


class UploadData(CamelModel):
    resume_id: str
    file_name: str


class UploadResponse(CamelModel):
    success: bool = True
    message: str
    data: UploadData


class ParseRequest(CamelModel):
    resume_id: str | None = None
    job_description: str | None = Field(default=None, max_length=50_000)
    job_title: str | None = Field(default=None, max_length=300)
    company: str | None = Field(default=None, max_length=300)
    user_id: str | None = None


class ParseData(CamelModel):
    resume_id: str
    content: dict[str, Any]
    tailored: bool
    tailored_resume_id: str | None = None
    validation: FidelitySummary | None = None
    changes: list[ResumeChange] = Field(default_factory=list)


class ParseResponse(CamelModel):
    success: bool = True
    message: str
    data: ParseData


class MasterResumeResponse(CamelModel):
    success: bool = True
    data: MasterResumeRecord


class TailoredResumeResponse(CamelModel):
    success: bool = True
    data: TailoredResumeRecord


class TailoredResumeListResponse(CamelModel):
    success: bool = True
    data: list[TailoredResumeRecord] = Field(default_factory=list)


class StatusUpdateRequest(CamelModel):
    status: ApplicationStatus


class PdfExportRequest(CamelModel):
    content: dict[str, Any] | None = None
    user_id: str | None = None
    job_title: str | None = None
    company: str | None = None
    tailored_resume_id: str | None = None


class PdfExportData(CamelModel):
    download_url: str = Field(alias="downloadURL")
    file_name: str
    buffer_size: int
    pdf_start: str
    generator: str
    sections: list[str] = Field(default_factory=list)
    pdf_base64: str


class PdfExportResponse(CamelModel):
    success: bool = True
    message: str
    data: PdfExportData
