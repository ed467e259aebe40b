from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Protocol
from uuid import UUID, uuid4

import psycopg

from ol_doc_pipeline_core.config import Settings
from ol_doc_pipeline_core.dedup import SIMILARITY_THRESHOLD, deduplicate_pages
from ol_doc_pipeline_core.embedding import EmbeddingClient
from ol_doc_pipeline_core.errors import DuplicateDocumentError
from ol_doc_pipeline_core.extractor import LlmPageExtractor, PageExtractor
from ol_doc_pipeline_core.indexing import PageChunkIndexer
from ol_doc_pipeline_core.models import DocumentStatus, DocumentUpload, FileVariant, PageResult
from ol_doc_pipeline_core.page_processor import PageProcessingConfig, process_pages
from ol_doc_pipeline_core.pdf import count_pdf_pages, rebuild_pdf_without_pages, split_pdf_into_pages
from ol_doc_pipeline_core.qdrant import QdrantClient
from ol_doc_pipeline_core.repositories import PageChunkRepository, UploadRepository
from ol_doc_pipeline_core.storage import S3Config, S3DocumentStore
from ol_doc_pipeline_core.util import compute_checksum

logger = logging.getLogger(__name__)

ALL_PAGES_FAILED_MESSAGE = "No pages could be extracted"


class UploadStore(Protocol):
    def find_by_checksum(self, *, owner_id: str, checksum: str) -> DocumentUpload | None: ...

    def insert_upload(self, upload: DocumentUpload) -> None: ...

    def get_upload(self, document_id: UUID) -> DocumentUpload | None: ...

    def update_status(self, document_id: UUID, *, status: DocumentStatus, **fields: Any) -> None: ...

    def delete_upload(self, document_id: UUID) -> None: ...


class DocumentStore(Protocol):
    def store_document(
        self, data: bytes, *, owner_id: str, document_id: UUID, variant: FileVariant
    ) -> str: ...

    def read_document(self, *, owner_id: str, document_id: UUID, variant: FileVariant) -> bytes: ...

    def document_exists(self, *, owner_id: str, document_id: UUID, variant: FileVariant) -> bool: ...

    def delete_document(self, *, owner_id: str, document_id: UUID) -> int: ...


class ChunkIndex(Protocol):
    def index_pages(
        self, upload: DocumentUpload, pages: Sequence[PageResult], *, api_key: str | None = None
    ) -> int: ...

    def delete_document(self, document_id: UUID) -> None: ...


@dataclass(frozen=True)
class PipelineConfig:
    page_processing: PageProcessingConfig = PageProcessingConfig()
    similarity_threshold: float = SIMILARITY_THRESHOLD


@dataclass(frozen=True)
class ProcessDocumentRequest:
    upload: DocumentUpload
    pdf_bytes: bytes
    api_key: str


@dataclass(frozen=True)
class PipelineReport:
    document_id: UUID
    status: DocumentStatus
    page_count: int | None = None
    unique_page_count: int | None = None
    duplicate_pages: list[int] = field(default_factory=list)
    failed_pages: list[int] = field(default_factory=list)
    processed_file_path: str | None = None
    error_message: str | None = None


class DocumentPipeline:
    """
    Turns an uploaded PDF into a lean PDF plus indexed page text.

    `register_upload` runs at upload time (checksum dedup, page count, original file);
    `process_document` runs the extraction pipeline and records the outcome on the
    upload row. Per-page extraction failures only end up in `failed_pages`; anything
    structural marks the whole document `failed`.
    """

    def __init__(
        self,
        *,
        uploads: UploadStore,
        storage: DocumentStore,
        extractor: PageExtractor,
        index: ChunkIndex | None = None,
        cfg: PipelineConfig = PipelineConfig(),
    ):
        self._uploads = uploads
        self._storage = storage
        self._extractor = extractor
        self._index = index
        self._cfg = cfg

    @classmethod
    def from_settings(cls, settings: Settings, conn: psycopg.Connection) -> DocumentPipeline:
        storage = S3DocumentStore(
            S3Config(
                endpoint=settings.s3_endpoint,
                bucket=settings.s3_bucket,
                access_key=settings.s3_access_key,
                secret_key=settings.s3_secret_key,
                prefix=settings.s3_prefix,
            )
        )
        index: ChunkIndex | None = None
        if settings.embedding_base_url and settings.qdrant_url:
            index = PageChunkIndexer(
                embedder=EmbeddingClient(
                    base_url=settings.embedding_base_url,
                    api_key=settings.llm_api_key,
                    model=settings.embedding_model,
                ),
                qdrant=QdrantClient(base_url=settings.qdrant_url, api_key=settings.qdrant_api_key),
                collection=settings.qdrant_collection,
                chunks=PageChunkRepository(conn),
            )
        return cls(
            uploads=UploadRepository(conn),
            storage=storage,
            extractor=LlmPageExtractor(
                base_url=settings.llm_base_url,
                model=settings.extraction_model,
                api_key=settings.llm_api_key,
                timeout_s=settings.extraction_timeout_s,
            ),
            index=index,
            cfg=PipelineConfig(
                page_processing=settings.page_processing_config(),
                similarity_threshold=settings.similarity_threshold,
            ),
        )

    def register_upload(
        self,
        *,
        owner_id: str,
        course_id: str,
        filename: str,
        data: bytes,
    ) -> DocumentUpload:
        """
        Reject byte-identical re-uploads, store the original PDF and create the upload row.

        Raises `DuplicateDocumentError` or `ParseError`; nothing is left in storage in either
        case, including when a concurrent identical upload wins the row insert.
        """
        checksum = compute_checksum(data)
        existing = self._uploads.find_by_checksum(owner_id=owner_id, checksum=checksum)
        if existing is not None:
            raise DuplicateDocumentError(
                owner_id=owner_id, checksum=checksum, existing_document_id=existing.document_id
            )

        page_count = count_pdf_pages(data)
        document_id = uuid4()
        file_path = self._storage.store_document(
            data, owner_id=owner_id, document_id=document_id, variant=FileVariant.ORIGINAL
        )
        upload = DocumentUpload(
            document_id=document_id,
            owner_id=owner_id,
            course_id=course_id,
            filename=filename,
            checksum=checksum,
            file_path=file_path,
            status=DocumentStatus.PROCESSING,
            page_count=page_count,
        )
        try:
            self._uploads.insert_upload(upload)
        except Exception:
            self._storage.delete_document(owner_id=owner_id, document_id=document_id)
            raise
        logger.info("Registered upload %s (%s, %s pages)", document_id, filename, page_count)
        return upload

    async def process_document(self, request: ProcessDocumentRequest) -> PipelineReport:
        document_id = request.upload.document_id
        try:
            return await self._run(request)
        except Exception as e:  # noqa: BLE001
            logger.exception("Document %s processing failed", document_id)
            message = str(e) or e.__class__.__name__
            await asyncio.to_thread(
                self._uploads.update_status,
                document_id,
                status=DocumentStatus.FAILED,
                error_message=message,
            )
            return PipelineReport(
                document_id=document_id, status=DocumentStatus.FAILED, error_message=message
            )

    async def _run(self, request: ProcessDocumentRequest) -> PipelineReport:
        upload = request.upload
        document_id = upload.document_id

        pages = split_pdf_into_pages(request.pdf_bytes)
        page_count = len(pages)

        results = await process_pages(
            pages,
            request.api_key,
            extractor=self._extractor,
            cfg=self._cfg.page_processing,
        )
        failed_pages = [r.page_number for r in results if not r.success]

        if len(failed_pages) == page_count:
            logger.error("Document %s: all %s pages failed extraction", document_id, page_count)
            await asyncio.to_thread(
                self._uploads.update_status,
                document_id,
                status=DocumentStatus.FAILED,
                page_count=page_count,
                unique_page_count=0,
                failed_pages=failed_pages,
                error_message=ALL_PAGES_FAILED_MESSAGE,
            )
            return PipelineReport(
                document_id=document_id,
                status=DocumentStatus.FAILED,
                page_count=page_count,
                unique_page_count=0,
                failed_pages=failed_pages,
                error_message=ALL_PAGES_FAILED_MESSAGE,
            )

        dedup = deduplicate_pages(results, threshold=self._cfg.similarity_threshold)
        removed = sorted(set(dedup.duplicate_indices) | set(failed_pages))

        lean_pdf = rebuild_pdf_without_pages(request.pdf_bytes, removed)
        processed_file_path = await asyncio.to_thread(
            self._storage.store_document,
            lean_pdf,
            owner_id=upload.owner_id,
            document_id=document_id,
            variant=FileVariant.PROCESSED,
        )

        if self._index is not None:
            await asyncio.to_thread(
                self._index.index_pages, upload, dedup.unique, api_key=request.api_key or None
            )

        unique_page_count = len(dedup.unique)
        await asyncio.to_thread(
            self._uploads.update_status,
            document_id,
            status=DocumentStatus.COMPLETED,
            page_count=page_count,
            unique_page_count=unique_page_count,
            failed_pages=failed_pages or None,
            error_message=None,
            processed_file_path=processed_file_path,
            processed_at=datetime.now(timezone.utc),
        )
        logger.info(
            "Document %s processed: pages=%s unique=%s duplicates=%s failed=%s",
            document_id,
            page_count,
            unique_page_count,
            len(dedup.duplicate_indices),
            len(failed_pages),
        )
        return PipelineReport(
            document_id=document_id,
            status=DocumentStatus.COMPLETED,
            page_count=page_count,
            unique_page_count=unique_page_count,
            duplicate_pages=list(dedup.duplicate_indices),
            failed_pages=failed_pages,
            processed_file_path=processed_file_path,
        )

    def delete_document(self, upload: DocumentUpload) -> None:
        """Remove stored files, indexed chunks and the upload row."""
        self._storage.delete_document(owner_id=upload.owner_id, document_id=upload.document_id)
        if self._index is not None:
            self._index.delete_document(upload.document_id)
        self._uploads.delete_upload(upload.document_id)
        logger.info("Deleted document %s", upload.document_id)
