from __future__ import annotations

from functools import lru_cache
from typing import Callable

from fastapi import Depends

from resume_api.ai.factory import get_ai_client as build_ai_client
from resume_api.ai.types import AIClient
from resume_api.core.config import settings
from resume_api.rendering.base import PdfRenderer
from resume_api.rendering.reportlab_renderer import ReportLabRenderer
from resume_api.services.resume_service import ResumeService
from resume_api.storage.blobs import LocalBlobStore
from resume_api.storage.documents import DocumentStore


@lru_cache(maxsize=1)
def get_document_store() -> DocumentStore:
    return DocumentStore(settings.document_db_path)


@lru_cache(maxsize=1)
def get_blob_store() -> LocalBlobStore:
    return LocalBlobStore(settings.blob_storage_dir, settings.public_base_url)


@lru_cache(maxsize=1)
def get_renderer() -> PdfRenderer:
    return ReportLabRenderer()


@lru_cache(maxsize=1)
def get_ai_client() -> AIClient:
    return build_ai_client()


def get_ai_client_factory() -> Callable[[], AIClient]:
    # The client is built on first use so routes that never call the model work without API keys.
    return get_ai_client


def get_resume_service(
    store: DocumentStore = Depends(get_document_store),
    blobs: LocalBlobStore = Depends(get_blob_store),
    renderer: PdfRenderer = Depends(get_renderer),
    ai_client_factory: Callable[[], AIClient] = Depends(get_ai_client_factory),
) -> ResumeService:
    return ResumeService(store=store, blobs=blobs, renderer=renderer, ai_client_factory=ai_client_factory)
