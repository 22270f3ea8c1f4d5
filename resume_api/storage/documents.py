from __future__ import annotations

import json
import logging
import os
import sqlite3
import threading
from datetime import datetime, timezone
from typing import Any

from resume_api.core.errors import StorageError
from resume_api.schemas.records import ApplicationStatus, MasterResumeRecord, TailoredResumeRecord
from resume_api.schemas.resume import ResumeContent

logger = logging.getLogger(__name__)

_MASTER_COLUMNS = (
    "id, user_id, original_file_name, file_name, file_size, storage_key, pdf_url, "
    "uploaded_at, updated_at, is_parsed, content_json, parsed_at, section_set_json"
)
_TAILORED_COLUMNS = (
    "id, user_id, master_resume_id, job_description, job_title, company, "
    "tailored_content_json, created_at, status, pdf_url"
)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _dump_content(content: ResumeContent | None) -> str | None:
    if content is None:
        return None
    return json.dumps(content.to_payload(), ensure_ascii=False)


def _load_json(raw: str | None) -> Any:
    return json.loads(raw) if raw else None


def _master_from_row(row: tuple) -> MasterResumeRecord:
    content = _load_json(row[10])
    return MasterResumeRecord(
        id=row[0],
        user_id=row[1],
        original_file_name=row[2],
        file_name=row[3],
        file_size=row[4],
        storage_key=row[5],
        pdf_url=row[6],
        uploaded_at=datetime.fromisoformat(row[7]),
        updated_at=datetime.fromisoformat(row[8]),
        is_parsed=bool(row[9]),
        content=ResumeContent.model_validate(content) if content is not None else None,
        parsed_at=datetime.fromisoformat(row[11]) if row[11] else None,
        section_set=_load_json(row[12]),
    )


def _tailored_from_row(row: tuple) -> TailoredResumeRecord:
    return TailoredResumeRecord(
        id=row[0],
        user_id=row[1],
        master_resume_id=row[2],
        job_description=row[3],
        job_title=row[4],
        company=row[5],
        tailored_content=ResumeContent.model_validate(_load_json(row[6]) or {}),
        created_at=datetime.fromisoformat(row[7]),
        status=row[8],
        pdf_url=row[9],
    )


class DocumentStore:
    """
    SQLite-backed store for master and tailored résumé records.

    One connection is shared across threads and guarded by a lock; callers in
    async code should reach it through ``run_in_threadpool``.
    """

    def __init__(self, db_path: str):
        self.db_path = db_path
        self._conn: sqlite3.Connection | None = None
        self._lock = threading.Lock()

    def _connection(self) -> sqlite3.Connection:
        with self._lock:
            if self._conn is not None:
                return self._conn

            directory = os.path.dirname(self.db_path)
            if directory:
                os.makedirs(directory, exist_ok=True)

            conn = sqlite3.connect(
                self.db_path,
                check_same_thread=False,
                timeout=5,
                isolation_level=None,
            )
            conn.execute("PRAGMA journal_mode=WAL;")
            conn.execute("PRAGMA synchronous=NORMAL;")
            conn.execute("PRAGMA busy_timeout=5000;")
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS master_resumes (
                    id TEXT PRIMARY KEY,
                    user_id TEXT NOT NULL,
                    original_file_name TEXT NOT NULL,
                    file_name TEXT NOT NULL,
                    file_size INTEGER NOT NULL,
                    storage_key TEXT NOT NULL,
                    pdf_url TEXT NOT NULL,
                    uploaded_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL,
                    is_parsed INTEGER NOT NULL DEFAULT 0,
                    content_json TEXT,
                    parsed_at TEXT,
                    section_set_json TEXT
                );
                """
            )
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS tailored_resumes (
                    id TEXT PRIMARY KEY,
                    user_id TEXT NOT NULL,
                    master_resume_id TEXT NOT NULL,
                    job_description TEXT NOT NULL,
                    job_title TEXT,
                    company TEXT,
                    tailored_content_json TEXT NOT NULL,
                    created_at TEXT NOT NULL,
                    status TEXT NOT NULL DEFAULT 'draft',
                    pdf_url TEXT
                );
                """
            )
            conn.execute(
                """
                CREATE INDEX IF NOT EXISTS idx_tailored_resumes_master
                ON tailored_resumes (master_resume_id, created_at);
                """
            )
            self._conn = conn
            return conn

    def init(self) -> None:
        try:
            self._connection()
        except sqlite3.Error as exc:
            raise StorageError(f"Document store unavailable: {exc}") from exc
        logger.info("document_store_ready path=%s", self.db_path)

    def close(self) -> None:
        with self._lock:
            if self._conn is not None:
                self._conn.close()
                self._conn = None

    def _execute(self, sql: str, params: tuple = ()) -> sqlite3.Cursor:
        try:
            conn = self._connection()
            with self._lock:
                return conn.execute(sql, params)
        except sqlite3.Error as exc:
            logger.error("document_store_error: %s", exc)
            raise StorageError(f"Document store error: {exc}") from exc

    def _fetchone(self, sql: str, params: tuple = ()) -> tuple | None:
        try:
            conn = self._connection()
            with self._lock:
                return conn.execute(sql, params).fetchone()
        except sqlite3.Error as exc:
            logger.error("document_store_error: %s", exc)
            raise StorageError(f"Document store error: {exc}") from exc

    def _fetchall(self, sql: str, params: tuple = ()) -> list[tuple]:
        try:
            conn = self._connection()
            with self._lock:
                return conn.execute(sql, params).fetchall()
        except sqlite3.Error as exc:
            logger.error("document_store_error: %s", exc)
            raise StorageError(f"Document store error: {exc}") from exc

    # master résumés

    def create_master(
        self,
        *,
        resume_id: str,
        user_id: str,
        original_file_name: str,
        file_name: str,
        file_size: int,
        storage_key: str,
        pdf_url: str,
    ) -> MasterResumeRecord:
        now = _utc_now().isoformat()
        self._execute(
            f"""
            INSERT INTO master_resumes ({_MASTER_COLUMNS})
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, 0, NULL, NULL, NULL)
            """,
            (resume_id, user_id, original_file_name, file_name, file_size, storage_key, pdf_url, now, now),
        )
        record = self.get_master(resume_id)
        if record is None:
            raise StorageError(f"Master resume {resume_id} was not persisted")
        return record

    def get_master(self, resume_id: str) -> MasterResumeRecord | None:
        row = self._fetchone(f"SELECT {_MASTER_COLUMNS} FROM master_resumes WHERE id = ?", (resume_id,))
        return _master_from_row(row) if row else None

    def update_master_content(self, resume_id: str, content: ResumeContent) -> None:
        now = _utc_now().isoformat()
        self._execute(
            """
            UPDATE master_resumes
            SET content_json = ?, is_parsed = 1, parsed_at = ?, updated_at = ?
            WHERE id = ?
            """,
            (_dump_content(content), now, now, resume_id),
        )

    def set_section_set(self, resume_id: str, sections: list[str]) -> None:
        """Cache the discovered section set. An existing set is never overwritten."""
        self._execute(
            """
            UPDATE master_resumes
            SET section_set_json = ?, updated_at = ?
            WHERE id = ? AND section_set_json IS NULL
            """,
            (json.dumps(list(sections)), _utc_now().isoformat(), resume_id),
        )

    # tailored résumés

    def create_tailored(
        self,
        *,
        tailored_id: str,
        user_id: str,
        master_resume_id: str,
        job_description: str,
        job_title: str | None,
        company: str | None,
        content: ResumeContent,
    ) -> TailoredResumeRecord:
        self._execute(
            f"""
            INSERT INTO tailored_resumes ({_TAILORED_COLUMNS})
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, 'draft', NULL)
            """,
            (
                tailored_id,
                user_id,
                master_resume_id,
                job_description,
                job_title,
                company,
                _dump_content(content),
                _utc_now().isoformat(),
            ),
        )
        record = self.get_tailored(tailored_id)
        if record is None:
            raise StorageError(f"Tailored resume {tailored_id} was not persisted")
        return record

    def get_tailored(self, tailored_id: str) -> TailoredResumeRecord | None:
        row = self._fetchone(f"SELECT {_TAILORED_COLUMNS} FROM tailored_resumes WHERE id = ?", (tailored_id,))
        return _tailored_from_row(row) if row else None

    def list_tailored(self, master_resume_id: str) -> list[TailoredResumeRecord]:
        rows = self._fetchall(
            f"""
            SELECT {_TAILORED_COLUMNS} FROM tailored_resumes
            WHERE master_resume_id = ?
            ORDER BY created_at DESC, rowid DESC
            """,
            (master_resume_id,),
        )
        return [_tailored_from_row(row) for row in rows]

    def update_status(self, tailored_id: str, status: ApplicationStatus) -> TailoredResumeRecord | None:
        self._execute("UPDATE tailored_resumes SET status = ? WHERE id = ?", (status, tailored_id))
        return self.get_tailored(tailored_id)

    def set_tailored_pdf_url(self, tailored_id: str, pdf_url: str) -> None:
        self._execute("UPDATE tailored_resumes SET pdf_url = ? WHERE id = ?", (pdf_url, tailored_id))
