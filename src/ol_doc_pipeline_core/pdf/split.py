from __future__ import annotations

from pypdf import PdfWriter

from ol_doc_pipeline_core.errors import ParseError
from ol_doc_pipeline_core.pdf.reader import load_pdf, write_pdf


def split_pdf_into_pages(data: bytes) -> list[bytes]:
    """
    Split a PDF into standalone single-page PDFs, in source page order.

    The returned list index is the page number used throughout the pipeline.
    Raises `ParseError` for anything pypdf cannot read; no partial result is returned.
    """
    reader = load_pdf(data)
    pages: list[bytes] = []
    for idx, page in enumerate(reader.pages):
        writer = PdfWriter()
        try:
            writer.add_page(page)
            pages.append(write_pdf(writer))
        except Exception as e:  # noqa: BLE001
            raise ParseError(f"Invalid PDF: page {idx} could not be copied: {e}") from e
    return pages
