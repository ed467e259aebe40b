from __future__ import annotations

from uuid import UUID


class DocumentPipelineError(Exception):
    """Base class for document ingestion failures."""


class ParseError(DocumentPipelineError):
    """The source bytes are not a structurally valid PDF."""


class ExtractionError(DocumentPipelineError):
    """A single page could not be turned into text."""


class RebuildError(DocumentPipelineError):
    """The requested page removal does not fit the source document."""


class DuplicateDocumentError(DocumentPipelineError):
    def __init__(self, *, owner_id: str, checksum: str, existing_document_id: UUID):
        self.owner_id = owner_id
        self.checksum = checksum
        self.existing_document_id = existing_document_id
        super().__init__(
            f"Document with checksum {checksum} already uploaded by {owner_id} "
            f"(document_id={existing_document_id})"
        )


class ConfigurationError(DocumentPipelineError):
    """The pipeline is missing something it needs to run at all, such as an API key."""
