from __future__ import annotations

import json
import logging
from pathlib import Path, PurePosixPath

from resume_api.core.errors import ResourceNotFoundError, StorageError, ValidationError

logger = logging.getLogger(__name__)

_META_SUFFIX = ".meta.json"


class LocalBlobStore:
    """Filesystem blob storage. Objects are addressed by slash-separated keys."""

    def __init__(self, root: str, public_base_url: str):
        self.root = Path(root)
        self.public_base_url = public_base_url.rstrip("/")

    def init(self) -> None:
        self.root.mkdir(parents=True, exist_ok=True)
        logger.info("blob_store_ready root=%s", self.root)

    def _path_for(self, key: str) -> Path:
        parts = PurePosixPath(key).parts
        if not parts or key.startswith("/") or any(part in {"", ".", ".."} for part in parts):
            raise ValidationError(f"Invalid storage key: {key!r}")
        if key.endswith(_META_SUFFIX):
            raise ValidationError(f"Invalid storage key: {key!r}")
        path = self.root.joinpath(*parts).resolve()
        if not path.is_relative_to(self.root.resolve()):
            raise ValidationError(f"Invalid storage key: {key!r}")
        return path

    def url_for(self, key: str) -> str:
        return f"{self.public_base_url}/v1/files/{key}"

    def put(self, key: str, data: bytes, content_type: str) -> str:
        path = self._path_for(key)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(data)
            path.with_name(path.name + _META_SUFFIX).write_text(
                json.dumps({"contentType": content_type}), encoding="utf-8"
            )
        except OSError as exc:
            logger.error("blob_put_failed key=%s: %s", key, exc)
            raise StorageError(f"Failed to store file: {exc}") from exc
        logger.info("blob_put key=%s bytes=%s", key, len(data))
        return self.url_for(key)

    def get(self, key: str) -> tuple[bytes, str]:
        path = self._path_for(key)
        if not path.is_file():
            raise ResourceNotFoundError("File not found")
        meta_path = path.with_name(path.name + _META_SUFFIX)
        try:
            data = path.read_bytes()
            meta = json.loads(meta_path.read_text(encoding="utf-8")) if meta_path.is_file() else {}
        except (OSError, ValueError) as exc:
            logger.error("blob_get_failed key=%s: %s", key, exc)
            raise StorageError(f"Failed to read file: {exc}") from exc
        return data, meta.get("contentType") or "application/octet-stream"
