from ol_doc_pipeline_core.config import Settings, load_settings
from ol_doc_pipeline_core.dedup import (
    SIMILARITY_THRESHOLD,
    DeduplicationResult,
    deduplicate_pages,
    jaccard_similarity,
)
from ol_doc_pipeline_core.errors import (
    ConfigurationError,
    DocumentPipelineError,
    DuplicateDocumentError,
    ExtractionError,
    ParseError,
    RebuildError,
)
from ol_doc_pipeline_core.extractor import EXTRACTION_PROMPT, LlmPageExtractor, PageExtractor
from ol_doc_pipeline_core.models import DocumentStatus, DocumentUpload, FileVariant, PageResult
from ol_doc_pipeline_core.page_processor import (
    CONCURRENCY_LIMIT,
    MAX_RETRIES,
    PageProcessingConfig,
    process_page_with_retry,
    process_pages,
)
from ol_doc_pipeline_core.pdf import count_pdf_pages, rebuild_pdf_without_pages, split_pdf_into_pages
from ol_doc_pipeline_core.pipeline import (
    DocumentPipeline,
    PipelineConfig,
    PipelineReport,
    ProcessDocumentRequest,
)
from ol_doc_pipeline_core.util import compute_checksum

__all__ = [
    "__version__",
    "CONCURRENCY_LIMIT",
    "EXTRACTION_PROMPT",
    "MAX_RETRIES",
    "SIMILARITY_THRESHOLD",
    "ConfigurationError",
    "DeduplicationResult",
    "DocumentPipeline",
    "DocumentPipelineError",
    "DocumentStatus",
    "DocumentUpload",
    "DuplicateDocumentError",
    "ExtractionError",
    "FileVariant",
    "LlmPageExtractor",
    "PageExtractor",
    "PageProcessingConfig",
    "PageResult",
    "ParseError",
    "PipelineConfig",
    "PipelineReport",
    "ProcessDocumentRequest",
    "RebuildError",
    "Settings",
    "compute_checksum",
    "count_pdf_pages",
    "deduplicate_pages",
    "jaccard_similarity",
    "load_settings",
    "process_page_with_retry",
    "process_pages",
    "rebuild_pdf_without_pages",
    "split_pdf_into_pages",
]

__version__ = "0.0.0"
