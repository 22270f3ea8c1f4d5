from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import Field

from .resume import CamelModel, ResumeContent

ApplicationStatus = Literal["draft", "applied", "interview", "rejected", "accepted"]


class MasterResumeRecord(CamelModel):
    id: str
    user_id: str
    original_file_name: str
    file_name: str
    file_size: int
    storage_key: str
    pdf_url: str
    uploaded_at: datetime
    updated_at: datetime
    is_parsed: bool = False
    content: ResumeContent | None = None
    parsed_at: datetime | None = None
    section_set: list[str] | None = None


class TailoredResumeRecord(CamelModel):
    id: str
    user_id: str
    master_resume_id: str
    job_description: str
    job_title: str | None = None
    company: str | None = None
    tailored_content: ResumeContent
    created_at: datetime
    status: ApplicationStatus = "draft"
    pdf_url: str | None = None


class ResumeChange(CamelModel):
    section: str
    type: Literal["modified", "added", "reordered"]
    description: str


class FidelitySummary(CamelModel):
    sections: list[str] = Field(default_factory=list)
    dropped: list[str] = Field(default_factory=list)
    missing: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
