from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any
from uuid import UUID

from ol_doc_pipeline_core.embedding import EmbeddingClient
from ol_doc_pipeline_core.models import DocumentUpload, PageChunk, PageResult
from ol_doc_pipeline_core.qdrant import QdrantClient, deterministic_point_id
from ol_doc_pipeline_core.repositories.chunks import PageChunkRepository
from ol_doc_pipeline_core.util import sha256_text

logger = logging.getLogger(__name__)


def prepare_chunks(
    document_id: UUID,
    pages: Sequence[PageResult],
    embeddings: Sequence[list[float]],
) -> list[PageChunk]:
    if len(pages) != len(embeddings):
        raise ValueError(f"Mismatch: {len(pages)} pages but {len(embeddings)} embeddings")
    chunks: list[PageChunk] = []
    for page, embedding in zip(pages, embeddings):
        if page.content is None:
            raise ValueError(f"Page {page.page_number} has no content to index")
        chunks.append(
            PageChunk(
                document_id=document_id,
                page_number=page.page_number,
                content=page.content,
                sha256=sha256_text(page.content),
                embedding=list(embedding),
            )
        )
    return chunks


def _point(upload: DocumentUpload, chunk: PageChunk) -> dict[str, Any]:
    return {
        "id": str(deterministic_point_id(document_id=chunk.document_id, page_number=chunk.page_number)),
        "vector": chunk.embedding,
        "payload": {
            "document_id": str(upload.document_id),
            "course_id": upload.course_id,
            "owner_id": upload.owner_id,
            "title": upload.filename,
            "slide_number": chunk.slide_number,
            "content": chunk.content,
            "sha256": chunk.sha256,
        },
    }


class PageChunkIndexer:
    """
    Makes the unique pages of a document searchable: one embedding point per page in
    Qdrant, plus the page text in `page_chunks`.
    """

    def __init__(
        self,
        *,
        embedder: EmbeddingClient,
        qdrant: QdrantClient,
        collection: str,
        chunks: PageChunkRepository,
    ):
        self._embedder = embedder
        self._qdrant = qdrant
        self._collection = collection
        self._chunks = chunks

    def index_pages(
        self,
        upload: DocumentUpload,
        pages: Sequence[PageResult],
        *,
        api_key: str | None = None,
    ) -> int:
        if not pages:
            return 0
        texts = [p.content or "" for p in pages]
        embeddings = self._embedder.embed_texts(texts, api_key=api_key)
        chunks = prepare_chunks(upload.document_id, pages, embeddings)

        self._qdrant.ensure_collection(name=self._collection, vector_size=len(embeddings[0]))
        self._qdrant.delete_points_for_document(
            collection=self._collection, document_id=upload.document_id
        )
        self._qdrant.upsert_points(
            collection=self._collection,
            points=[_point(upload, c) for c in chunks],
        )
        self._chunks.replace_chunks(document_id=upload.document_id, chunks=chunks)
        logger.info("Indexed %s page chunks for document %s", len(chunks), upload.document_id)
        return len(chunks)

    def delete_document(self, document_id: UUID) -> None:
        self._qdrant.delete_points_for_document(collection=self._collection, document_id=document_id)
        self._chunks.delete_chunks(document_id)
