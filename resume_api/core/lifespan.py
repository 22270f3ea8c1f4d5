from contextlib import asynccontextmanager
import logging

from starlette.concurrency import run_in_threadpool

from resume_api.core.deps import get_ai_client, get_blob_store, get_document_store

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app):
    store = get_document_store()
    await run_in_threadpool(store.init)
    await run_in_threadpool(get_blob_store().init)

    yield

    if get_ai_client.cache_info().currsize:
        client = get_ai_client()
        try:
            await client.aclose()
        except Exception as exc:  # pragma: no cover - shutdown guard
            logger.warning("ai_client_close_failed: %s", exc)
        get_ai_client.cache_clear()
    store.close()
