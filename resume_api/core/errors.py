from __future__ import annotations

from fastapi import status


class ResumeServiceError(RuntimeError):
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_code: str = "internal_error"

    def __init__(self, message: str, *, code: str | None = None, status_code: int | None = None):
        super().__init__(message)
        self.code = code or self.default_code
        if status_code is not None:
            self.status_code = status_code


class ValidationError(ResumeServiceError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_code = "invalid_input"


class PayloadTooLargeError(ValidationError):
    status_code = 413
    default_code = "payload_too_large"


class ResourceNotFoundError(ResumeServiceError):
    status_code = status.HTTP_404_NOT_FOUND
    default_code = "not_found"


class OwnershipError(ResumeServiceError):
    status_code = status.HTTP_403_FORBIDDEN
    default_code = "forbidden"


class InvalidResumeStructureError(ResumeServiceError):
    status_code = 422
    default_code = "invalid_resume_structure"


class StructureMismatchError(ResumeServiceError):
    status_code = 422
    default_code = "structure_mismatch"

    def __init__(self, message: str, *, missing: list[str] | None = None, **kwargs):
        super().__init__(message, **kwargs)
        self.missing = list(missing or [])


class UpstreamServiceError(ResumeServiceError):
    """An AI or storage call failed; the message carries the upstream error text."""

    status_code = status.HTTP_502_BAD_GATEWAY
    default_code = "upstream_error"


class AIProviderError(UpstreamServiceError):
    default_code = "ai_provider_error"


class StructureExtractionError(UpstreamServiceError):
    default_code = "structure_extraction_failed"


class TailoringGenerationError(UpstreamServiceError):
    default_code = "tailoring_failed"


class StorageError(UpstreamServiceError):
    default_code = "storage_error"


class RenderError(ResumeServiceError):
    default_code = "render_failed"
