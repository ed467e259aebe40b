from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from uuid import UUID


class DocumentStatus(str, Enum):
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"


class FileVariant(str, Enum):
    ORIGINAL = "original"
    PROCESSED = "processed"


@dataclass(frozen=True)
class DocumentUpload:
    document_id: UUID
    owner_id: str
    course_id: str
    filename: str
    checksum: str
    file_path: str
    status: DocumentStatus = DocumentStatus.PROCESSING
    page_count: int | None = None
    unique_page_count: int | None = None
    failed_pages: list[int] | None = None
    error_message: str | None = None
    processed_file_path: str | None = None
    created_at: datetime | None = None
    processed_at: datetime | None = None


@dataclass(frozen=True)
class PageResult:
    page_number: int  # 0-based, assigned at split time
    content: str | None
    success: bool
    error: BaseException | None = None


@dataclass(frozen=True)
class PageChunk:
    document_id: UUID
    page_number: int  # 0-based
    content: str
    sha256: str
    embedding: list[float] | None = None

    @property
    def slide_number(self) -> int:
        return self.page_number + 1
