from __future__ import annotations

from ol_doc_pipeline_core.pdf.rebuild import rebuild_pdf_without_pages
from ol_doc_pipeline_core.pdf.reader import count_pdf_pages, load_pdf
from ol_doc_pipeline_core.pdf.split import split_pdf_into_pages

__all__ = [
    "count_pdf_pages",
    "load_pdf",
    "rebuild_pdf_without_pages",
    "split_pdf_into_pages",
]
