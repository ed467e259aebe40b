from __future__ import annotations

from typing import Iterable
from uuid import UUID

import psycopg

from ol_doc_pipeline_core.models import PageChunk


class PageChunkRepository:
    def __init__(self, conn: psycopg.Connection):
        self._conn = conn

    def replace_chunks(self, *, document_id: UUID, chunks: Iterable[PageChunk]) -> None:
        """
        Replace-all semantics for the unique page text of one document.
        """
        with self._conn.transaction():
            self._conn.execute(
                "delete from page_chunks where document_id=%s::uuid",
                (str(document_id),),
            )
            for c in chunks:
                self._conn.execute(
                    """
                    insert into page_chunks (document_id, page_number, content, sha256)
                    values (%s::uuid, %s, %s, %s)
                    """,
                    (str(c.document_id), c.page_number, c.content, c.sha256),
                )
        self._conn.commit()

    def list_chunks(self, document_id: UUID) -> list[PageChunk]:
        rows = self._conn.execute(
            """
            select document_id, page_number, content, sha256
            from page_chunks
            where document_id=%s::uuid
            order by page_number
            """,
            (str(document_id),),
        ).fetchall()
        return [PageChunk(document_id=r[0], page_number=r[1], content=r[2], sha256=r[3]) for r in rows]

    def delete_chunks(self, document_id: UUID) -> None:
        self._conn.execute(
            "delete from page_chunks where document_id=%s::uuid",
            (str(document_id),),
        )
        self._conn.commit()
