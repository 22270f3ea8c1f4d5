from fastapi import APIRouter, Depends, Request

from resume_api.core.deps import get_resume_service
from resume_api.core.rate_limit import rate_limit
from resume_api.schemas.api import PdfExportRequest, PdfExportResponse
from resume_api.services.resume_service import ResumeService

router = APIRouter()


@router.post("/pdf/generate", response_model=PdfExportResponse)
@rate_limit("20/minute")
async def generate_pdf(
    request: Request,
    payload: PdfExportRequest,
    service: ResumeService = Depends(get_resume_service),
):
    _ = request
    data = await service.export_pdf(
        content=payload.content,
        user_id=payload.user_id,
        tailored_resume_id=payload.tailored_resume_id,
        job_title=payload.job_title,
        company=payload.company,
    )
    return PdfExportResponse(message="PDF generated successfully", data=data)
