from fastapi import APIRouter, Depends, File, Form, Query, Request, UploadFile

from resume_api.core.config import settings
from resume_api.core.deps import get_resume_service
from resume_api.core.errors import PayloadTooLargeError
from resume_api.core.rate_limit import rate_limit
from resume_api.schemas.api import (
    MasterResumeResponse,
    ParseRequest,
    ParseResponse,
    StatusUpdateRequest,
    TailoredResumeListResponse,
    TailoredResumeResponse,
    UploadResponse,
)
from resume_api.services.resume_service import ResumeService

router = APIRouter()

_READ_CHUNK_BYTES = 64 * 1024


async def _read_limited(file: UploadFile, limit: int) -> bytes:
    chunks: list[bytes] = []
    total = 0
    while True:
        chunk = await file.read(_READ_CHUNK_BYTES)
        if not chunk:
            break
        total += len(chunk)
        if total > limit:
            raise PayloadTooLargeError(f"File size must be less than {limit // (1024 * 1024)}MB")
        chunks.append(chunk)
    return b"".join(chunks)


@router.post("/resumes/upload", response_model=UploadResponse)
@rate_limit()
async def upload_resume(
    request: Request,
    resume: UploadFile = File(...),
    user_id: str | None = Form(default=None, alias="userId"),
    service: ResumeService = Depends(get_resume_service),
):
    _ = request
    content = await _read_limited(resume, settings.max_upload_bytes)
    data = await service.upload(
        file_name=resume.filename,
        content_type=resume.content_type,
        content=content,
        user_id=user_id,
    )
    return UploadResponse(message="Resume uploaded successfully", data=data)


@router.post("/resumes/parse", response_model=ParseResponse)
@rate_limit("20/minute")
async def parse_resume(
    request: Request,
    payload: ParseRequest,
    service: ResumeService = Depends(get_resume_service),
):
    _ = request
    data = await service.parse(
        resume_id=payload.resume_id,
        job_description=payload.job_description,
        job_title=payload.job_title,
        company=payload.company,
        user_id=payload.user_id,
    )
    message = "Resume parsed and tailored successfully" if data.tailored else "Resume parsed successfully"
    return ParseResponse(message=message, data=data)


@router.get("/resumes/{resume_id}", response_model=MasterResumeResponse, response_model_exclude_none=True)
@rate_limit()
async def get_resume(
    request: Request,
    resume_id: str,
    user_id: str | None = Query(default=None, alias="userId"),
    service: ResumeService = Depends(get_resume_service),
):
    _ = request
    return MasterResumeResponse(data=await service.get_master(resume_id, user_id=user_id))


@router.get("/resumes/{resume_id}/tailored", response_model=TailoredResumeListResponse, response_model_exclude_none=True)
@rate_limit()
async def list_tailored_resumes(
    request: Request,
    resume_id: str,
    user_id: str | None = Query(default=None, alias="userId"),
    service: ResumeService = Depends(get_resume_service),
):
    _ = request
    return TailoredResumeListResponse(data=await service.list_tailored(resume_id, user_id=user_id))


@router.get("/tailored-resumes/{tailored_id}", response_model=TailoredResumeResponse, response_model_exclude_none=True)
@rate_limit()
async def get_tailored_resume(
    request: Request,
    tailored_id: str,
    user_id: str | None = Query(default=None, alias="userId"),
    service: ResumeService = Depends(get_resume_service),
):
    _ = request
    return TailoredResumeResponse(data=await service.get_tailored(tailored_id, user_id=user_id))


@router.patch("/tailored-resumes/{tailored_id}/status", response_model=TailoredResumeResponse, response_model_exclude_none=True)
@rate_limit()
async def update_tailored_status(
    request: Request,
    tailored_id: str,
    payload: StatusUpdateRequest,
    user_id: str | None = Query(default=None, alias="userId"),
    service: ResumeService = Depends(get_resume_service),
):
    _ = request
    record = await service.update_status(tailored_id, payload.status, user_id=user_id)
    return TailoredResumeResponse(data=record)
