from ol_doc_pipeline_core.storage.s3 import S3Config, S3DocumentStore

__all__ = [
    "S3Config",
    "S3DocumentStore",
]
