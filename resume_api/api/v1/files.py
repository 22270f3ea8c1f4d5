from fastapi import APIRouter, Depends, Request
from fastapi.responses import Response
from starlette.concurrency import run_in_threadpool

from resume_api.core.deps import get_blob_store
from resume_api.core.rate_limit import rate_limit
from resume_api.storage.blobs import LocalBlobStore

router = APIRouter()


@router.get("/files/{key:path}", summary="Download a stored file")
@rate_limit()
async def download_file(request: Request, key: str, blobs: LocalBlobStore = Depends(get_blob_store)):
    _ = request
    data, content_type = await run_in_threadpool(blobs.get, key)
    filename = key.rsplit("/", 1)[-1]
    return Response(
        content=data,
        media_type=content_type,
        headers={"Content-Disposition": f'inline; filename="{filename}"', "Cache-Control": "no-cache"},
    )
