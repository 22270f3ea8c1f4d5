import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi import _rate_limit_exceeded_handler
import sentry_sdk

from resume_api.api.v1.health import router as health_router
from resume_api.api.v1.resumes import router as resumes_router
from resume_api.api.v1.pdf import router as pdf_router
from resume_api.api.v1.files import router as files_router
from resume_api.core.cors import cors_allow_origin_regex, cors_allowed_origins
from resume_api.core.errors import ResumeServiceError
from resume_api.core.rate_limit import limiter
from resume_api.schemas.api import ErrorResponse
from resume_api.core.config import settings
from dotenv import load_dotenv
from resume_api.core.lifespan import lifespan

load_dotenv()
logging.basicConfig(level=settings.log_level, format="%(message)s")
if settings.sentry_dsn:
    sentry_sdk.init(dsn=settings.sentry_dsn)

logger = logging.getLogger(__name__)

app = FastAPI(title="Resume Tailor API", version="0.1.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_allowed_origins(),
    allow_origin_regex=cors_allow_origin_regex(),
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
app.add_middleware(SlowAPIMiddleware)


@app.exception_handler(ResumeServiceError)
async def resume_service_error_handler(request: Request, exc: ResumeServiceError):
    if exc.status_code >= 500:
        logger.error("request_failed path=%s code=%s: %s", request.url.path, exc.code, exc)
    else:
        logger.info("request_rejected path=%s code=%s: %s", request.url.path, exc.code, exc)
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(error=str(exc), code=exc.code).model_dump(),
    )


app.include_router(health_router, prefix="/v1", tags=["Health"])
app.include_router(resumes_router, prefix="/v1", tags=["Resumes"])
app.include_router(pdf_router, prefix="/v1", tags=["PDF"])
app.include_router(files_router, prefix="/v1", tags=["Files"])
