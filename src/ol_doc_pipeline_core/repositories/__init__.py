from ol_doc_pipeline_core.repositories.chunks import PageChunkRepository
from ol_doc_pipeline_core.repositories.uploads import UploadRepository

__all__ = [
    "PageChunkRepository",
    "UploadRepository",
]
