from __future__ import annotations

import base64
import logging
import re
import threading
import time
from dataclasses import dataclass
from typing import Any, Callable

from pydantic import ValidationError as PydanticValidationError
from starlette.concurrency import run_in_threadpool

from resume_api.ai.types import AIClient
from resume_api.core.config import settings
from resume_api.core.errors import (
    AIProviderError,
    InvalidResumeStructureError,
    OwnershipError,
    PayloadTooLargeError,
    ResourceNotFoundError,
    ValidationError,
)
from resume_api.parsing.heuristic import extract_resume_from_text
from resume_api.parsing.parse import inspect_pdf, parse_pdf_bytes
from resume_api.rendering.base import PdfRenderer
from resume_api.rendering.placeholder import placeholder_resume
from resume_api.schemas.api import ParseData, PdfExportData, UploadData
from resume_api.schemas.records import ApplicationStatus, MasterResumeRecord, TailoredResumeRecord
from resume_api.schemas.resume import ResumeContent
from resume_api.schemas.sections import SectionSet
from resume_api.services.comparison import summarize_changes
from resume_api.services.pipeline import parse_and_tailor
from resume_api.storage.blobs import LocalBlobStore
from resume_api.storage.documents import DocumentStore

logger = logging.getLogger(__name__)

RESUMES_PREFIX = "resumes"
TAILORED_PDFS_PREFIX = "tailored-pdfs"
PDF_MIME_TYPE = "application/pdf"

_USER_ID_RE = re.compile(r"^[A-Za-z0-9._-]{1,128}$")
_UNSAFE_FILENAME_CHARS = re.compile(r"[^A-Za-z0-9.-]")

_last_ms = 0
_ms_lock = threading.Lock()


def _epoch_ms() -> int:
    """Wall-clock milliseconds, strictly increasing within the process."""
    global _last_ms
    with _ms_lock:
        now = int(time.time() * 1000)
        _last_ms = now if now > _last_ms else _last_ms + 1
        return _last_ms


def _check_user_id(user_id: str) -> str:
    if not _USER_ID_RE.match(user_id):
        raise ValidationError("userId may only contain letters, digits, '.', '_' and '-'")
    return user_id


def stored_file_name(original_name: str, user_id: str, timestamp_ms: int) -> str:
    clean = _UNSAFE_FILENAME_CHARS.sub("_", original_name)
    stem = re.sub(r"\.[^/.]+$", "", clean) or "resume"
    return f"{stem}_{user_id}_{timestamp_ms}.pdf"


def _document_title(resume: ResumeContent, job_title: str | None, company: str | None) -> str | None:
    """PDF title metadata, e.g. "Jane Smith - Backend Engineer at Globex"."""
    target = " at ".join(part.strip() for part in (job_title, company) if part and part.strip())
    if not target:
        return None
    return f"{resume.name or 'Resume'} - {target}"


@dataclass
class ResumeService:
    store: DocumentStore
    blobs: LocalBlobStore
    renderer: PdfRenderer
    ai_client_factory: Callable[[], AIClient]

    def _ai_client(self) -> AIClient:
        try:
            return self.ai_client_factory()
        except (RuntimeError, ValueError) as exc:
            logger.error("ai_client_unavailable: %s", exc)
            raise AIProviderError(f"AI provider is not configured: {exc}") from exc

    # upload

    async def upload(
        self,
        *,
        file_name: str | None,
        content_type: str | None,
        content: bytes,
        user_id: str | None,
    ) -> UploadData:
        original_name = file_name or "resume.pdf"
        if (content_type or "").split(";")[0].strip().lower() != PDF_MIME_TYPE:
            raise ValidationError("Only PDF files are allowed")
        if not content:
            raise ValidationError("Resume file is empty")
        if len(content) > settings.max_upload_bytes:
            raise PayloadTooLargeError(
                f"File size must be less than {settings.max_upload_bytes // (1024 * 1024)}MB"
            )
        page_count = await run_in_threadpool(inspect_pdf, content)

        owner = _check_user_id(user_id) if user_id else f"user_{_epoch_ms()}"
        timestamp = _epoch_ms()
        stored_name = stored_file_name(original_name, owner, timestamp)
        storage_key = f"{RESUMES_PREFIX}/{owner}/{stored_name}"
        pdf_url = await run_in_threadpool(self.blobs.put, storage_key, content, PDF_MIME_TYPE)

        resume_id = f"{owner}_{_epoch_ms()}"
        await run_in_threadpool(
            lambda: self.store.create_master(
                resume_id=resume_id,
                user_id=owner,
                original_file_name=original_name,
                file_name=stored_name,
                file_size=len(content),
                storage_key=storage_key,
                pdf_url=pdf_url,
            )
        )
        logger.info("resume_uploaded resume_id=%s bytes=%s pages=%s", resume_id, len(content), page_count)
        return UploadData(resume_id=resume_id, file_name=original_name)

    # lookups

    async def get_master(self, resume_id: str, *, user_id: str | None = None) -> MasterResumeRecord:
        record = await run_in_threadpool(self.store.get_master, resume_id)
        if record is None:
            raise ResourceNotFoundError("Resume not found")
        if user_id and record.user_id != user_id:
            logger.warning("resume_ownership_denied resume_id=%s", resume_id)
            raise OwnershipError("Unauthorized access to this resume")
        return record

    async def get_tailored(self, tailored_id: str, *, user_id: str | None = None) -> TailoredResumeRecord:
        record = await run_in_threadpool(self.store.get_tailored, tailored_id)
        if record is None:
            raise ResourceNotFoundError("Tailored resume not found")
        if user_id and record.user_id != user_id:
            logger.warning("tailored_ownership_denied tailored_id=%s", tailored_id)
            raise OwnershipError("Unauthorized access to this tailored resume")
        return record

    async def list_tailored(self, resume_id: str, *, user_id: str | None = None) -> list[TailoredResumeRecord]:
        await self.get_master(resume_id, user_id=user_id)
        return await run_in_threadpool(self.store.list_tailored, resume_id)

    async def update_status(
        self,
        tailored_id: str,
        status: ApplicationStatus,
        *,
        user_id: str | None = None,
    ) -> TailoredResumeRecord:
        await self.get_tailored(tailored_id, user_id=user_id)
        record = await run_in_threadpool(self.store.update_status, tailored_id, status)
        if record is None:
            raise ResourceNotFoundError("Tailored resume not found")
        logger.info("tailored_status_updated tailored_id=%s status=%s", tailored_id, status)
        return record

    # parse / tailor

    async def parse(
        self,
        *,
        resume_id: str | None,
        job_description: str | None = None,
        job_title: str | None = None,
        company: str | None = None,
        user_id: str | None = None,
    ) -> ParseData:
        if not resume_id:
            raise ValidationError("Resume ID is required")
        master = await self.get_master(resume_id, user_id=user_id)
        pdf_bytes, _ = await run_in_threadpool(self.blobs.get, master.storage_key)

        if job_description and job_description.strip():
            return await self._tailor(master, pdf_bytes, job_description, job_title=job_title, company=company)
        return await self._parse_master(master, pdf_bytes)

    async def _parse_master(self, master: MasterResumeRecord, pdf_bytes: bytes) -> ParseData:
        parsed = await run_in_threadpool(parse_pdf_bytes, pdf_bytes)
        for warning in parsed.parsing_warnings:
            logger.warning("resume_parse_warning resume_id=%s: %s", master.id, warning)
        content = extract_resume_from_text(parsed.text)
        if not content.has_identity():
            raise InvalidResumeStructureError("Invalid resume structure: missing personalInfo or name")

        await run_in_threadpool(self.store.update_master_content, master.id, content)
        logger.info("resume_parsed resume_id=%s sections=%s", master.id, content.section_keys())
        return ParseData(resume_id=master.id, content=content.to_payload(), tailored=False)

    async def _tailor(
        self,
        master: MasterResumeRecord,
        pdf_bytes: bytes,
        job_description: str,
        *,
        job_title: str | None,
        company: str | None,
    ) -> ParseData:
        cached = SectionSet.from_tokens(master.section_set) if master.section_set else None
        outcome = await parse_and_tailor(
            pdf_bytes,
            job_description,
            self._ai_client(),
            job_title=job_title,
            company=company,
            section_set=cached,
        )
        if outcome.discovered:
            await run_in_threadpool(self.store.set_section_set, master.id, outcome.section_set.to_list())

        report = outcome.report
        tailored_id = f"{master.user_id}_{_epoch_ms()}_tailored"
        await run_in_threadpool(
            lambda: self.store.create_tailored(
                tailored_id=tailored_id,
                user_id=master.user_id,
                master_resume_id=master.id,
                job_description=job_description,
                job_title=job_title,
                company=company,
                content=report.content,
            )
        )
        changes = summarize_changes(master.content, report.content) if master.content is not None else []
        logger.info(
            "resume_tailored resume_id=%s tailored_id=%s sections=%s changes=%s",
            master.id,
            tailored_id,
            list(report.sections),
            len(changes),
        )
        return ParseData(
            resume_id=master.id,
            content=report.payload(),
            tailored=True,
            tailored_resume_id=tailored_id,
            validation=report.summary(),
            changes=changes,
        )

    # export

    async def export_pdf(
        self,
        *,
        content: dict[str, Any] | None,
        user_id: str | None,
        tailored_resume_id: str | None = None,
        job_title: str | None = None,
        company: str | None = None,
    ) -> PdfExportData:
        if not user_id:
            raise ValidationError("userId is required")
        owner = _check_user_id(user_id)
        if tailored_resume_id:
            await self.get_tailored(tailored_resume_id, user_id=owner)

        resume = self._export_content(content)
        title = _document_title(resume, job_title, company)
        pdf_bytes = await run_in_threadpool(self.renderer.render, resume, title=title)

        file_name = f"resume_{_epoch_ms()}.pdf"
        key = f"{TAILORED_PDFS_PREFIX}/{owner}/{file_name}"
        download_url = await run_in_threadpool(self.blobs.put, key, pdf_bytes, PDF_MIME_TYPE)
        if tailored_resume_id:
            await run_in_threadpool(self.store.set_tailored_pdf_url, tailored_resume_id, download_url)

        logger.info("pdf_exported key=%s bytes=%s renderer=%s", key, len(pdf_bytes), self.renderer.name)
        return PdfExportData(
            download_url=download_url,
            file_name=file_name,
            buffer_size=len(pdf_bytes),
            pdf_start=pdf_bytes[:4].decode("latin-1"),
            generator=self.renderer.name,
            sections=resume.section_keys(),
            pdf_base64=base64.b64encode(pdf_bytes).decode("ascii"),
        )

    @staticmethod
    def _export_content(content: dict[str, Any] | None) -> ResumeContent:
        if not content or not content.get("personalInfo"):
            logger.info("pdf_export_placeholder reason=%s", "no_content" if not content else "no_personal_info")
            return placeholder_resume()
        try:
            return ResumeContent.model_validate(content)
        except PydanticValidationError as exc:
            raise ValidationError(f"Invalid resume content: {exc.error_count()} field error(s)") from exc
