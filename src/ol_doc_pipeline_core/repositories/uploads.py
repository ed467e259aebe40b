from __future__ import annotations

from datetime import datetime
from typing import Any
from uuid import UUID

import psycopg
from psycopg.types.json import Jsonb

from ol_doc_pipeline_core.errors import DuplicateDocumentError
from ol_doc_pipeline_core.models import DocumentStatus, DocumentUpload

_COLUMNS = """
  document_id, owner_id, course_id, filename, checksum,
  status, page_count, unique_page_count, failed_pages, error_message,
  file_path, processed_file_path, created_at, processed_at
"""

_UNSET: Any = object()


def _row_to_upload(row: tuple) -> DocumentUpload:
    return DocumentUpload(
        document_id=row[0],
        owner_id=row[1],
        course_id=row[2],
        filename=row[3],
        checksum=row[4],
        status=DocumentStatus(row[5]),
        page_count=row[6],
        unique_page_count=row[7],
        failed_pages=list(row[8]) if row[8] is not None else None,
        error_message=row[9],
        file_path=row[10],
        processed_file_path=row[11],
        created_at=row[12],
        processed_at=row[13],
    )


class UploadRepository:
    def __init__(self, conn: psycopg.Connection):
        self._conn = conn

    def insert_upload(self, upload: DocumentUpload) -> None:
        """Raises `DuplicateDocumentError` when the owner already has a row with this checksum."""
        try:
            self._insert(upload)
        except psycopg.errors.UniqueViolation as e:
            self._conn.rollback()
            existing = self.find_by_checksum(owner_id=upload.owner_id, checksum=upload.checksum)
            if existing is None:
                raise
            raise DuplicateDocumentError(
                owner_id=upload.owner_id,
                checksum=upload.checksum,
                existing_document_id=existing.document_id,
            ) from e

    def _insert(self, upload: DocumentUpload) -> None:
        self._conn.execute(
            """
            insert into document_uploads (
              document_id, owner_id, course_id, filename, checksum,
              status, page_count, file_path
            ) values (
              %s::uuid, %s, %s, %s, %s,
              %s, %s, %s
            )
            """,
            (
                str(upload.document_id),
                upload.owner_id,
                upload.course_id,
                upload.filename,
                upload.checksum,
                upload.status.value,
                upload.page_count,
                upload.file_path,
            ),
        )
        self._conn.commit()

    def get_upload(self, document_id: UUID) -> DocumentUpload | None:
        row = self._conn.execute(
            f"select {_COLUMNS} from document_uploads where document_id=%s::uuid",
            (str(document_id),),
        ).fetchone()
        return _row_to_upload(row) if row else None

    def find_by_checksum(self, *, owner_id: str, checksum: str) -> DocumentUpload | None:
        row = self._conn.execute(
            f"select {_COLUMNS} from document_uploads where owner_id=%s and checksum=%s",
            (owner_id, checksum),
        ).fetchone()
        return _row_to_upload(row) if row else None

    def update_status(
        self,
        document_id: UUID,
        *,
        status: DocumentStatus,
        page_count: int | None = _UNSET,
        unique_page_count: int | None = _UNSET,
        failed_pages: list[int] | None = _UNSET,
        error_message: str | None = _UNSET,
        processed_file_path: str | None = _UNSET,
        processed_at: datetime | None = _UNSET,
    ) -> None:
        """
        Set `status` plus whichever other fields were passed. Omitted fields keep their
        stored value; passing `None` clears them.
        """
        fields: dict[str, Any] = {
            "page_count": page_count,
            "unique_page_count": unique_page_count,
            "failed_pages": failed_pages,
            "error_message": error_message,
            "processed_file_path": processed_file_path,
            "processed_at": processed_at,
        }
        assignments = ["status=%s"]
        params: list[Any] = [status.value]
        for column, value in fields.items():
            if value is _UNSET:
                continue
            assignments.append(f"{column}=%s")
            params.append(Jsonb(value) if column == "failed_pages" and value is not None else value)
        params.append(str(document_id))

        self._conn.execute(
            f"update document_uploads set {', '.join(assignments)} where document_id=%s::uuid",
            params,
        )
        self._conn.commit()

    def delete_upload(self, document_id: UUID) -> None:
        self._conn.execute(
            "delete from document_uploads where document_id=%s::uuid",
            (str(document_id),),
        )
        self._conn.commit()
